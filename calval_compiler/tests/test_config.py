"""Tests for CompileConfig and load_config."""

from __future__ import annotations

import dataclasses
import json

import pytest

from calval_compiler.models.config import CompileConfig, ReportOptions, load_config


def test_config_defaults() -> None:
    c = CompileConfig(root_dir="/data")
    assert c.results_sheet == "results"
    assert c.skip_rows == 17
    assert c.bin_width == 1.0
    assert c.bin_axis == "primary_value"
    assert c.min_columns == 8
    assert (c.primary_column, c.variability_column) == (6, 7)
    assert c.unit_factor == 1.0
    assert c.type_markers == ("HRH", "HRL")
    assert c.other_axis == "variability_value"
    assert c.validate() is c


def test_config_frozen() -> None:
    c = CompileConfig(root_dir="/data")
    with pytest.raises(dataclasses.FrozenInstanceError):
        c.bin_width = 2.0  # type: ignore[misc]


def test_config_list_markers_become_tuple() -> None:
    c = CompileConfig(root_dir="/data", type_markers=["HRH", "HRL"])
    assert c.type_markers == ("HRH", "HRL")


@pytest.mark.parametrize(
    "overrides",
    [
        {"bin_width": 0.0},
        {"bin_width": -1.0},
        {"bin_axis": "temperature"},
        {"skip_rows": -1},
        {"primary_column": 8},
        {"variability_column": 6},
        {"type_markers": ()},
        {"type_markers": ("HRH", "hrh")},
    ],
)
def test_config_validation_rejects(overrides) -> None:
    c = dataclasses.replace(CompileConfig(root_dir="/data"), **overrides)
    with pytest.raises(ValueError):
        c.validate()


def test_roundtrip_dict() -> None:
    c = CompileConfig(root_dir="/data", bin_width=0.5, bin_axis="variability_value")
    d = c.to_dict()
    assert d["type_markers"] == ["HRH", "HRL"]
    assert CompileConfig.from_dict(d) == c


def test_from_dict_rejects_unknown_and_missing_root() -> None:
    with pytest.raises(ValueError, match="Unknown"):
        CompileConfig.from_dict({"root_dir": "/data", "binwidth": 2})
    with pytest.raises(ValueError, match="root_dir"):
        CompileConfig.from_dict({"bin_width": 2})


def test_load_config_with_overrides(tmp_path) -> None:
    p = tmp_path / "campaign.json"
    p.write_text(json.dumps({"root_dir": "/data", "bin_width": 0.5, "results_sheet": "Results"}), encoding="utf-8")

    c = load_config(p, bin_width=None, skip_rows=10)
    assert c.root_dir == "/data"
    assert c.bin_width == 0.5  # None override ignored
    assert c.skip_rows == 10
    assert c.results_sheet == "Results"


def test_report_options_defaults() -> None:
    o = ReportOptions()
    assert o.display_scale == 1000.0
    assert o.display_unit == "mK"
    assert o.figure_stem == "Figure_5_calibration_analysis"


@pytest.mark.parametrize(
    "bad",
    [
        {"skip_rows": "17"},
        {"bin_width": "0.5"},
        {"min_columns": 8.0},
        {"primary_column": True},
        {"unit_factor": None},
        {"results_sheet": 3},
        {"type_markers": "HR"},
        {"type_markers": ["HRH", 2]},
    ],
)
def test_from_dict_rejects_wrong_types(bad) -> None:
    with pytest.raises(ValueError):
        CompileConfig.from_dict({"root_dir": "/data", **bad})


def test_from_dict_accepts_json_integers_for_floats() -> None:
    c = CompileConfig.from_dict({"root_dir": "/data", "bin_width": 5, "unit_factor": 1000})
    assert c.bin_width == 5.0 and isinstance(c.bin_width, float)
    assert c.unit_factor == 1000.0


def test_string_type_markers_rejected_on_construction() -> None:
    with pytest.raises(ValueError, match="type_markers"):
        CompileConfig(root_dir="/data", type_markers="HR")  # type: ignore[arg-type]
