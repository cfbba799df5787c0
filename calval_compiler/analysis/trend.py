from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict

import numpy as np
import pandas as pd
from scipy.stats import linregress

from calval_compiler.analysis.binning import stat_columns


@dataclass(frozen=True)
class TrendFit:
    """Ordinary least-squares line ``y = intercept + slope * x`` through binned means."""

    slope: float
    intercept: float
    r_value: float
    p_value: float
    slope_stderr: float
    intercept_stderr: float
    n: int

    @property
    def r_squared(self) -> float:
        return self.r_value ** 2

    @property
    def ok(self) -> bool:
        return bool(np.isfinite(self.slope) and np.isfinite(self.intercept))

    def predict(self, x: np.ndarray) -> np.ndarray:
        return self.intercept + self.slope * np.asarray(x, dtype=np.float64)

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["r_squared"] = self.r_squared
        return d


def _nan_fit(n: int) -> TrendFit:
    nan = float("nan")
    return TrendFit(nan, nan, nan, nan, nan, nan, int(n))


def fit_linear_trend(binned: pd.DataFrame, axis: str = "primary_value") -> TrendFit:
    """Fit the binned mean of the aggregated value against the bin centre.

    Bins with a non-finite mean are ignored.  Fewer than two usable bins, or
    bins that all share one centre, give an all-NaN fit (``ok`` is False).
    """
    mean_col, _ = stat_columns(axis)
    if binned.empty:
        return _nan_fit(0)
    x = binned["bin_center"].to_numpy(dtype=np.float64)
    y = binned[mean_col].to_numpy(dtype=np.float64)
    keep = np.isfinite(x) & np.isfinite(y)
    x, y = x[keep], y[keep]
    n = int(x.size)
    if n < 2 or np.ptp(x) == 0:
        return _nan_fit(n)
    res = linregress(x, y)
    return TrendFit(
        slope=float(res.slope),
        intercept=float(res.intercept),
        r_value=float(res.rvalue),
        p_value=float(res.pvalue),
        slope_stderr=float(res.stderr),
        intercept_stderr=float(res.intercept_stderr),
        n=n,
    )


def summarize_type(df: pd.DataFrame) -> Dict[str, float]:
    """Count, primary range and variability mean/SD of one calibration type.

    Returns NaN statistics (and ``N == 0``) for an empty frame.
    """
    if len(df) == 0:
        nan = float("nan")
        return {"N": 0, "primary_min": nan, "primary_max": nan,
                "variability_mean": nan, "variability_sd": nan}
    return {
        "N": int(len(df)),
        "primary_min": float(df["primary_value"].min()),
        "primary_max": float(df["primary_value"].max()),
        "variability_mean": float(df["variability_value"].mean()),
        "variability_sd": float(df["variability_value"].std()),
    }
