"""Compile configuration -- bundles every parameter that affects the compiled output.

A CompileConfig groups the campaign layout (folder suffix, file markers),
the spreadsheet layout (sheet name, header offset, column positions) and the
binning choices into one frozen dataclass.  It can be:

- Constructed directly with a root directory and keyword overrides
- Overridden field-by-field via ``dataclasses.replace()``
- Serialized to/from a dict (and a JSON file) for provenance
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Tuple


#: Axis selectors accepted by the binning step.
BIN_AXES = ("primary_value", "variability_value")

_INT_FIELDS = ("skip_rows", "min_columns", "primary_column", "variability_column")
_FLOAT_FIELDS = ("bin_width", "unit_factor", "primary_factor")
_STR_FIELDS = ("results_sheet", "bin_axis", "folder_suffix", "file_marker", "file_extension")


def _check_field(name: str, value: Any) -> Any:
    """Type-check one loaded value; JSON integers are accepted for float fields."""
    if name in _INT_FIELDS:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"{name} must be an integer, got {value!r}")
    elif name in _FLOAT_FIELDS:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"{name} must be a number, got {value!r}")
        return float(value)
    elif name in _STR_FIELDS:
        if not isinstance(value, str):
            raise ValueError(f"{name} must be a string, got {value!r}")
    elif name == "type_markers":
        if not isinstance(value, (list, tuple)) or not all(isinstance(m, str) for m in value):
            raise ValueError(f"type_markers must be a list of strings, got {value!r}")
    return value


@dataclass(frozen=True)
class CompileConfig:
    """Frozen configuration for the calibration compile pipeline.

    Required fields
    ---------------
    root_dir : str
        Directory holding the dated ``YYYYMMDD_calval`` run folders
        (searched recursively).

    Optional fields (defaults match the SI-121 calibration workbooks)
    ------------------------------------------------------------------
    results_sheet : str
        Sheet holding the per-step results (case-sensitive).
    skip_rows : int
        Rows skipped before the header row of the results table.  The default
        of 17 makes workbook row 18 the header.
    bin_width : float
        Width of the bins along ``bin_axis`` (deg C for the primary axis).
    bin_axis : str
        ``"primary_value"`` (bin temperature, aggregate the SD) or
        ``"variability_value"`` (bin the SD, aggregate temperature).
    min_columns : int
        Sheets exposing fewer columns are skipped.
    primary_column, variability_column : int
        0-based column positions (G = 6 is the Chubb mean, H = 7 the Chub SD).
    unit_factor : float
        Multiplies every variability value on extraction.
    primary_factor : float
        Multiplies every primary value on extraction.
    folder_suffix : str
        Literal that must follow the 8 date digits of a run folder.
    file_marker, file_extension : str
        Case-insensitive filename substring and extension of calibration files.
    type_markers : tuple of str
        Calibration-type markers in tie-break order (first match wins).
    """

    root_dir: str

    results_sheet: str = "results"
    skip_rows: int = 17
    bin_width: float = 1.0
    bin_axis: str = "primary_value"
    min_columns: int = 8
    primary_column: int = 6
    variability_column: int = 7
    unit_factor: float = 1.0
    primary_factor: float = 1.0

    folder_suffix: str = "_calval"
    file_marker: str = "cal"
    file_extension: str = ".xlsm"
    type_markers: Tuple[str, ...] = ("HRH", "HRL")

    def __post_init__(self) -> None:
        if isinstance(self.type_markers, str):
            raise ValueError(f"type_markers must be a list of strings, got {self.type_markers!r}")
        # Callers may pass a list (e.g. from JSON)
        if not isinstance(self.type_markers, tuple):
            object.__setattr__(self, "type_markers", tuple(self.type_markers))
        object.__setattr__(self, "root_dir", str(self.root_dir))

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate(self) -> "CompileConfig":
        """Raise ValueError on inconsistent settings; return self for chaining."""
        if not (self.bin_width > 0):
            raise ValueError(f"bin_width must be positive, got {self.bin_width!r}")
        if self.bin_axis not in BIN_AXES:
            raise ValueError(f"bin_axis must be one of {BIN_AXES}, got {self.bin_axis!r}")
        if self.skip_rows < 0:
            raise ValueError(f"skip_rows must be >= 0, got {self.skip_rows}")
        for name in ("primary_column", "variability_column"):
            idx = getattr(self, name)
            if idx < 0 or idx >= self.min_columns:
                raise ValueError(
                    f"{name}={idx} must lie inside the first min_columns={self.min_columns} columns"
                )
        if self.primary_column == self.variability_column:
            raise ValueError("primary_column and variability_column must differ")
        if not self.type_markers or any(not str(m).strip() for m in self.type_markers):
            raise ValueError("type_markers must be a non-empty sequence of non-empty strings")
        lowered = [m.lower() for m in self.type_markers]
        if len(set(lowered)) != len(lowered):
            raise ValueError(f"type_markers must be distinct (case-insensitive): {self.type_markers}")
        return self

    @property
    def root_path(self) -> Path:
        return Path(self.root_dir).expanduser()

    @property
    def other_axis(self) -> str:
        """Column aggregated inside each bin (the one not binned on)."""
        return "variability_value" if self.bin_axis == "primary_value" else "primary_value"

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-friendly dict (tuples become lists)."""
        d = asdict(self)
        d["type_markers"] = list(d["type_markers"])
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> CompileConfig:
        """Reconstruct from a dict; unknown keys are rejected."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(d) - known)
        if unknown:
            raise ValueError(f"Unknown configuration keys: {unknown}")
        if d.get("root_dir") in (None, ""):
            raise ValueError("Configuration is missing 'root_dir'")
        return cls(**{k: _check_field(k, v) for k, v in d.items()})


@dataclass(frozen=True)
class ReportOptions:
    """Output settings of the reporting surface (figure, CSV exports).

    display_scale multiplies variability values on plots and in printed
    summaries only (1000 turns deg C into mK); exported tables keep the
    compiled units.
    """

    out_dir: str = "."
    figure_stem: str = "Figure_5_calibration_analysis"
    records_csv: str = "compiled_calibration_data.csv"
    binned_csv: str = "binned_calibration_data.csv"
    display_scale: float = 1000.0
    display_unit: str = "mK"
    primary_label: str = "Water bath temperature (°C)"
    variability_label: str = "Chub SD"
    figsize_in: Tuple[float, float] = (7.0, 10.0)
    dpi: int = 300

    @property
    def out_path(self) -> Path:
        return Path(self.out_dir).expanduser()


def load_config(path: str | Path, **overrides: Any) -> CompileConfig:
    """Load a CompileConfig from a JSON file, applying keyword overrides on top.

    ``None`` overrides are ignored so CLI defaults do not mask file values.
    """
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise ValueError(f"Configuration file {path} must contain a JSON object")
    raw.update({k: v for k, v in overrides.items() if v is not None})
    return CompileConfig.from_dict(raw)
