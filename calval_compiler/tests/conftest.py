from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, Sequence, Tuple

import pandas as pd
import pytest

from calval_compiler.ingest.extract import SheetNotFoundError


HEADER = ["Step", "Time", "Bath_T", "Chamber_T", "Rad_counts", "Rad_T", "Chubb Mean", "Chub SD"]


def results_frame(pairs: Iterable[Tuple[object, object]], n_cols: int = 8) -> pd.DataFrame:
    """A results table as the sheet reader returns it: header row consumed, data below."""
    rows = []
    for i, (mean, sd) in enumerate(pairs):
        row = [i + 1, f"12:{i:02d}", 20.0, 25.0, 1000 + i, 19.9]
        row = row + [mean, sd]
        rows.append(row[:n_cols] if n_cols < 8 else row + [None] * (n_cols - 8))
    cols = (HEADER + [f"extra{j}" for j in range(max(0, n_cols - 8))])[:n_cols]
    return pd.DataFrame(rows, columns=cols)


class FakeSheets:
    """
    In-memory stand-in for the spreadsheet decoder.

    Maps file names to a DataFrame (returned as the sheet) or to an exception
    instance (raised when read).  Every call is recorded.
    """

    def __init__(self, sheets: Dict[str, object]):
        self.sheets = dict(sheets)
        self.calls = []

    def __call__(self, path: Path, sheet: str, skip_rows: int) -> pd.DataFrame:
        self.calls.append((Path(path).name, sheet, skip_rows))
        item = self.sheets.get(Path(path).name)
        if item is None:
            raise FileNotFoundError(f"cannot open {path}")
        if isinstance(item, Exception):
            raise item
        if sheet != "results":
            raise SheetNotFoundError(f"sheet '{sheet}' not found")
        return item.copy()


def make_tree(root: Path, layout: Dict[str, Sequence[str]]) -> None:
    """Create empty files: ``{"20230101_calval": ["unit_cal_HRH.xlsm", ...]}``."""
    for folder, files in layout.items():
        d = root / folder
        d.mkdir(parents=True, exist_ok=True)
        for name in files:
            (d / name).write_bytes(b"")


def write_workbook(path: Path, pairs, *, skip_rows: int = 17, sheet: str = "results", n_cols: int = 8) -> Path:
    """Write a real workbook whose header row sits right after *skip_rows* rows."""
    pytest.importorskip("openpyxl")
    df = results_frame(pairs, n_cols=n_cols)
    path.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(path, engine="openpyxl") as xw:
        df.to_excel(xw, sheet_name=sheet, startrow=skip_rows, index=False)
    return path
