from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Optional, Tuple

import pandas as pd


#: Column order of the compiled record table (and of the CSV export).
RECORD_COLUMNS = (
    "primary_value",
    "variability_value",
    "source_file_name",
    "source_file_path",
    "run_date",
    "calibration_type",
)

def empty_record_frame() -> pd.DataFrame:
    """Zero-row record table with the canonical columns and dtypes."""
    return pd.DataFrame(
        {
            "primary_value": pd.Series(dtype="float64"),
            "variability_value": pd.Series(dtype="float64"),
            "source_file_name": pd.Series(dtype="object"),
            "source_file_path": pd.Series(dtype="object"),
            "run_date": pd.Series(dtype="object"),
            "calibration_type": pd.Series(dtype="object"),
        },
        columns=list(RECORD_COLUMNS),
    )


@dataclass(frozen=True)
class MeasurementRecord:
    """
    One compiled calibration measurement.

    Notes
    - primary_value / variability_value already carry the configured unit factors.
    - run_date is None when the containing folder name carries no valid date.
    """
    primary_value: float
    variability_value: float
    source_file_name: str
    source_file_path: str
    run_date: Optional[date]
    calibration_type: str


def records_from_frame(df: pd.DataFrame) -> Tuple[MeasurementRecord, ...]:
    out = []
    for row in df.loc[:, list(RECORD_COLUMNS)].itertuples(index=False):
        run_date = row.run_date if isinstance(row.run_date, date) else None
        out.append(
            MeasurementRecord(
                primary_value=float(row.primary_value),
                variability_value=float(row.variability_value),
                source_file_name=str(row.source_file_name),
                source_file_path=str(row.source_file_path),
                run_date=run_date,
                calibration_type=str(row.calibration_type),
            )
        )
    return tuple(out)


@dataclass(frozen=True)
class ExtractionResult:
    """
    Outcome of reading one calibration workbook.

    A file that could not be used is not an error: it yields a result with an
    empty ``df`` and at least one diagnostic in ``warnings``.  ``df`` always has
    exactly :data:`RECORD_COLUMNS`.
    """
    source_path: Path
    df: pd.DataFrame
    warnings: Tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return len(self.df) > 0

    @property
    def n_records(self) -> int:
        return int(len(self.df))

    @property
    def records(self) -> Tuple[MeasurementRecord, ...]:
        return records_from_frame(self.df)

    @classmethod
    def empty(cls, source_path: Path, *warnings: str) -> ExtractionResult:
        return cls(source_path=source_path, df=empty_record_frame(), warnings=tuple(warnings))
