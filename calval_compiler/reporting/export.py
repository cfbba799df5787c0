from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Mapping

import pandas as pd

from calval_compiler.models.dataset import CompiledDataset
from calval_compiler.models.records import RECORD_COLUMNS


def records_table(dataset: CompiledDataset) -> pd.DataFrame:
    """Export view of the compiled records: ISO dates, missing dates as empty strings."""
    df = dataset.df.loc[:, list(RECORD_COLUMNS)].copy()
    df["run_date"] = [d.isoformat() if isinstance(d, date) else "" for d in df["run_date"]]
    return df


def binned_table(binned_by_type: Mapping[str, pd.DataFrame]) -> pd.DataFrame:
    """Stack per-type bin tables into one long table with a leading calibration_type column."""
    blocks = []
    for marker, b in binned_by_type.items():
        blk = b.copy()
        blk.insert(0, "calibration_type", marker)
        blocks.append(blk)
    if not blocks:
        return pd.DataFrame(columns=["calibration_type"])
    return pd.concat(blocks, ignore_index=True)


def export_compiled_csv(dataset: CompiledDataset, path: str | Path) -> Path:
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    records_table(dataset).to_csv(out, index=False)
    return out


def export_binned_csv(binned_by_type: Mapping[str, pd.DataFrame], path: str | Path) -> Path:
    # NaN SD values are written as empty fields
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    binned_table(binned_by_type).to_csv(out, index=False)
    return out
