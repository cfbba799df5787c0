"""Reporting surface: summary figure, CSV exports and text summaries.

Read-only with respect to the compiled dataset and the binned tables.
"""

from .export import export_binned_csv, export_compiled_csv
from .figures import render_summary_figure, save_figure
from .summary import format_trend, format_type_counts, format_type_summary

__all__ = [
    "export_binned_csv",
    "export_compiled_csv",
    "render_summary_figure",
    "save_figure",
    "format_trend",
    "format_type_counts",
    "format_type_summary",
]
