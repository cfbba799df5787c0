"""Analysis package - binning, trend fits and summary statistics.

Design principle:
  - Ingest produces a validated :class:`~calval_compiler.models.dataset.CompiledDataset`.
  - Analysis consumes plain record tables and produces derived, read-only tables.

Nothing here mutates its input; every result is recomputed from scratch on each run.
"""

from .binning import bin_by_type, bin_columns, bin_measurements, stat_columns
from .trend import TrendFit, fit_linear_trend, summarize_type

__all__ = [
    "bin_by_type",
    "bin_columns",
    "bin_measurements",
    "stat_columns",
    "TrendFit",
    "fit_linear_trend",
    "summarize_type",
]
