"""Fixed-width binning of compiled calibration records.

Records are assigned to half-open bins ``[k*w, (k+1)*w)`` along one axis
(``primary_value`` or ``variability_value``) and the *other* value is
summarised per bin (count, mean, sample standard deviation).

Only observed bins are returned; empty bins in between are never synthesised.
A bin holding a single record has an undefined (NaN) standard deviation,
which is kept as NaN so plots and exports can show it as missing.
"""

from __future__ import annotations

from typing import Dict, Tuple, Union

import numpy as np
import pandas as pd

from calval_compiler.models.config import BIN_AXES, CompileConfig
from calval_compiler.models.dataset import CompiledDataset


_STAT_NAME = {"variability_value": "variability", "primary_value": "primary"}


def other_axis(axis: str) -> str:
    if axis not in BIN_AXES:
        raise ValueError(f"axis must be one of {BIN_AXES}, got {axis!r}")
    return "variability_value" if axis == "primary_value" else "primary_value"


def stat_columns(axis: str = "primary_value") -> Tuple[str, str]:
    """(mean, sd) column names produced when binning along *axis*.

    Binning on ``primary_value`` gives ``mean_variability`` / ``sd_variability``;
    binning on ``variability_value`` gives ``mean_primary`` / ``sd_primary``.
    """
    name = _STAT_NAME[other_axis(axis)]
    return f"mean_{name}", f"sd_{name}"


def bin_columns(axis: str = "primary_value") -> Tuple[str, ...]:
    mean_col, sd_col = stat_columns(axis)
    return ("bin_lower_edge", "bin_center", mean_col, sd_col, "count")


def bin_measurements(
    df: pd.DataFrame,
    bin_width: float = 1.0,
    axis: str = "primary_value",
) -> pd.DataFrame:
    """Bin records along *axis* and summarise the other value per bin.

    Parameters
    ----------
    df : DataFrame
        Record table with ``primary_value`` and ``variability_value`` columns.
    bin_width : float
        Positive bin width, in the units of *axis*.
    axis : str
        ``"primary_value"`` or ``"variability_value"``.

    Returns
    -------
    DataFrame
        Columns :func:`bin_columns`, one row per non-empty bin, sorted by
        ``bin_center`` (ascending) with a fresh RangeIndex.
    """
    if not (np.isfinite(bin_width) and bin_width > 0):
        raise ValueError(f"bin_width must be a positive finite number, got {bin_width!r}")
    other = other_axis(axis)
    mean_col, sd_col = stat_columns(axis)
    cols = list(bin_columns(axis))

    x = pd.to_numeric(df[axis], errors="coerce").to_numpy(dtype=np.float64) if len(df) else np.empty(0)
    y = pd.to_numeric(df[other], errors="coerce").to_numpy(dtype=np.float64) if len(df) else np.empty(0)
    keep = np.isfinite(x) & np.isfinite(y)
    if not keep.any():
        out = pd.DataFrame({c: pd.Series(dtype="float64") for c in cols}, columns=cols)
        out["count"] = out["count"].astype(np.int64)
        return out

    lower = np.floor(x[keep] / bin_width) * bin_width
    tmp = pd.DataFrame({"bin_lower_edge": lower, "y": y[keep]})
    stats = tmp.groupby("bin_lower_edge", sort=True)["y"].agg(["mean", "std", "count"])
    out = stats.reset_index().rename(columns={"mean": mean_col, "std": sd_col})
    out["bin_center"] = out["bin_lower_edge"] + bin_width / 2.0
    out["count"] = out["count"].astype(np.int64)
    out = out.sort_values("bin_center", kind="mergesort").reset_index(drop=True)
    return out.loc[:, cols]


def bin_by_type(
    data: Union[CompiledDataset, Dict[str, pd.DataFrame]],
    config: CompileConfig,
) -> Dict[str, pd.DataFrame]:
    """Bin each calibration type independently, in configured marker order."""
    per_type = data.split_by_type() if isinstance(data, CompiledDataset) else data
    return {
        marker: bin_measurements(frame, bin_width=config.bin_width, axis=config.bin_axis)
        for marker, frame in per_type.items()
    }
