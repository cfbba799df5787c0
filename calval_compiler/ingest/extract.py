from __future__ import annotations

from pathlib import Path
from typing import Callable, List, Optional

import numpy as np
import pandas as pd

from calval_compiler.ingest.classify import calibration_type, parse_folder_date
from calval_compiler.models.config import CompileConfig
from calval_compiler.models.records import RECORD_COLUMNS, ExtractionResult


class SheetNotFoundError(LookupError):
    """The workbook opened fine but has no sheet with the requested name."""


SheetReader = Callable[[Path, str, int], pd.DataFrame]


def read_results_sheet(path: Path, sheet: str, skip_rows: int) -> pd.DataFrame:
    """
    Read one named sheet of a calibration workbook.

    The first row after *skip_rows* is used as header.  The workbook handle is
    closed before returning.
    """
    with pd.ExcelFile(path, engine="openpyxl") as xl:
        if sheet not in xl.sheet_names:
            raise SheetNotFoundError(
                f"sheet '{sheet}' not found (available: {', '.join(map(str, xl.sheet_names))})"
            )
        return xl.parse(sheet_name=sheet, skiprows=skip_rows, header=0)


class RecordExtractor:
    """
    Turns one calibration workbook into validated MeasurementRecord rows.

    Every problem with a single file is recoverable: the result is then empty
    (or shorter) and carries diagnostics, nothing is raised.  The sheet reader
    is injectable so that other decoders (or test doubles) can be used.
    """

    def __init__(self, config: CompileConfig, read_sheet: Optional[SheetReader] = None):
        self.config = config
        self.read_sheet: SheetReader = read_sheet or read_results_sheet

    def _coerce(self, col: pd.Series, factor: float) -> pd.Series:
        vals = pd.to_numeric(col, errors="coerce").astype(np.float64)
        vals = vals.where(np.isfinite(vals))
        return vals * float(factor)

    def extract(self, file_path: str | Path, folder_path: str | Path) -> ExtractionResult:
        cfg = self.config
        p = Path(file_path)
        name = p.name

        cal_type = calibration_type(name, cfg.type_markers)
        if cal_type is None:
            markers = "/".join(cfg.type_markers)
            return ExtractionResult.empty(p, f"{name}: no calibration type marker ({markers}) in file name; skipped.")

        try:
            raw = self.read_sheet(p, cfg.results_sheet, cfg.skip_rows)
        except SheetNotFoundError as exc:
            return ExtractionResult.empty(p, f"{name}: {exc}; skipped.")
        except Exception as exc:
            return ExtractionResult.empty(p, f"Error reading file {name}: {type(exc).__name__}: {exc}")

        if raw.shape[1] < cfg.min_columns:
            return ExtractionResult.empty(
                p, f"File {name} has fewer than {cfg.min_columns} columns ({raw.shape[1]}). Skipping."
            )

        warnings: List[str] = []

        src_primary = raw.iloc[:, cfg.primary_column]
        src_var = raw.iloc[:, cfg.variability_column]
        primary = self._coerce(src_primary, cfg.primary_factor)
        variability = self._coerce(src_var, cfg.unit_factor)

        blank = src_primary.isna() & src_var.isna()
        valid = primary.notna() & variability.notna()
        n_bad = int((~valid & ~blank).sum())
        if n_bad:
            warnings.append(f"{name}: dropped {n_bad} row(s) with non-numeric values.")

        run_date = parse_folder_date(Path(folder_path).name, cfg.folder_suffix)
        if run_date is None:
            warnings.append(f"{name}: folder '{Path(folder_path).name}' carries no valid run date.")

        n = int(valid.sum())
        df = pd.DataFrame(
            {
                "primary_value": primary[valid].to_numpy(dtype=np.float64),
                "variability_value": variability[valid].to_numpy(dtype=np.float64),
                "source_file_name": [name] * n,
                "source_file_path": [str(p)] * n,
                "run_date": pd.Series([run_date] * n, dtype="object"),
                "calibration_type": [cal_type] * n,
            },
            columns=list(RECORD_COLUMNS),
        )
        if n == 0:
            warnings.append(f"{name}: no numeric rows in sheet '{cfg.results_sheet}'.")
        return ExtractionResult(source_path=p, df=df, warnings=tuple(warnings))
