from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Dict, Optional, Tuple

import pandas as pd

from calval_compiler.models.records import MeasurementRecord, records_from_frame


@dataclass(frozen=True)
class CompiledDataset:
    """
    Output of a corpus walk: every surviving record of every run folder.

    Notes
    - df rows are in discovery order (folders and files sorted by path).
    - folders lists the accepted run folders, including those that yielded no data.
    - type_markers keeps the configured order so split_by_type() is stable.
    """
    root_dir: Path
    df: pd.DataFrame
    folders: Tuple[Path, ...]
    files_processed: int
    files_with_data: int
    type_markers: Tuple[str, ...] = ("HRH", "HRL")
    warnings: Tuple[str, ...] = ()

    @property
    def n_records(self) -> int:
        return int(len(self.df))

    @property
    def records(self) -> Tuple[MeasurementRecord, ...]:
        return records_from_frame(self.df)

    def by_type(self, marker: str) -> pd.DataFrame:
        sel = self.df["calibration_type"] == marker
        return self.df.loc[sel].reset_index(drop=True)

    def split_by_type(self) -> Dict[str, pd.DataFrame]:
        """One (possibly empty) frame per configured marker, in marker order."""
        return {m: self.by_type(m) for m in self.type_markers}

    def date_range(self) -> Tuple[Optional[date], Optional[date]]:
        """(first, last) run date, ignoring records without a date."""
        dates = [d for d in self.df["run_date"] if isinstance(d, date)]
        if not dates:
            return None, None
        return min(dates), max(dates)
