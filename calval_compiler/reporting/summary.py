"""Plain-text summaries printed at the end of a compile.

Each helper returns a list of lines so the caller decides where they go
(console log, file, notebook).
"""

from __future__ import annotations

from typing import Dict, List

import numpy as np

from calval_compiler.analysis.trend import TrendFit
from calval_compiler.models.config import ReportOptions


def _fmt(x: float, nd: int) -> str:
    return "NA" if not np.isfinite(x) else f"{x:.{nd}f}"


def format_type_counts(stats_by_type: Dict[str, Dict[str, float]]) -> List[str]:
    """Per-type record counts and primary-value ranges (the compile overview)."""
    lines = []
    for marker, s in stats_by_type.items():
        lines.append(f"{marker} measurements: {s['N']}")
    for marker, s in stats_by_type.items():
        lines.append(
            f"{marker} temperature range: {_fmt(s['primary_min'], 1)} to {_fmt(s['primary_max'], 1)}"
        )
    return lines


def format_type_summary(marker: str, stats: Dict[str, float], opts: ReportOptions) -> List[str]:
    """Summary statistics block of one calibration type (variability in display units)."""
    k = float(opts.display_scale)
    unit = opts.display_unit
    return [
        f"{marker} Calibrations:",
        f"  Temperature range: {_fmt(stats['primary_min'], 1)} to {_fmt(stats['primary_max'], 1)}",
        f"  Mean {opts.variability_label}: {_fmt(stats['variability_mean'] * k, 3)} {unit}",
        f"  SD of {opts.variability_label}: {_fmt(stats['variability_sd'] * k, 3)} {unit}",
    ]


def format_trend(marker: str, fit: TrendFit) -> List[str]:
    """Regression summary of the linear fit through one type's binned means."""
    if not fit.ok:
        return [f"{marker} (binned data): not enough bins for a linear fit (n={fit.n})"]
    return [
        f"{marker} (binned data): n={fit.n}",
        f"  intercept = {fit.intercept:.6g} +/- {fit.intercept_stderr:.3g}",
        f"  slope     = {fit.slope:.6g} +/- {fit.slope_stderr:.3g}  (p = {fit.p_value:.3g})",
        f"  R^2       = {fit.r_squared:.4f}",
    ]
