from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from calval_compiler.analysis.binning import bin_by_type, bin_columns, bin_measurements, stat_columns
from calval_compiler.models.config import CompileConfig


def _records(primary, variability, cal_type="HRH") -> pd.DataFrame:
    n = len(primary)
    return pd.DataFrame(
        {
            "primary_value": np.asarray(primary, dtype=np.float64),
            "variability_value": np.asarray(variability, dtype=np.float64),
            "source_file_name": ["f.xlsm"] * n,
            "source_file_path": ["/x/f.xlsm"] * n,
            "run_date": [None] * n,
            "calibration_type": [cal_type] * n,
        }
    )


def test_two_records_in_one_bin() -> None:
    out = bin_measurements(_records([20.1, 20.7], [0.01, 0.03]), bin_width=1.0)
    assert list(out.columns) == list(bin_columns("primary_value"))
    assert len(out) == 1
    row = out.iloc[0]
    assert row["bin_lower_edge"] == 20.0
    assert row["bin_center"] == 20.5
    assert row["mean_variability"] == pytest.approx(0.02)
    assert row["sd_variability"] == pytest.approx(0.0141421356, rel=1e-6)
    assert row["count"] == 2


def test_single_member_bin_has_nan_sd_isolated() -> None:
    out = bin_measurements(_records([10.2, 12.5, 12.9], [0.05, 0.01, 0.03]), bin_width=1.0)
    assert out["bin_lower_edge"].tolist() == [10.0, 12.0]
    assert out["count"].tolist() == [1, 2]
    assert np.isnan(out["sd_variability"].iloc[0])
    assert out["mean_variability"].iloc[0] == pytest.approx(0.05)
    assert out["sd_variability"].iloc[1] == pytest.approx(np.std([0.01, 0.03], ddof=1))


def test_half_open_bins_and_negative_values() -> None:
    out = bin_measurements(_records([-0.5, 0.0, 0.99, 1.0, 2.0], [1, 2, 3, 4, 5]), bin_width=1.0)
    assert out["bin_lower_edge"].tolist() == [-1.0, 0.0, 1.0, 2.0]
    assert out["count"].tolist() == [1, 2, 1, 1]


def test_only_observed_bins_sorted_by_center() -> None:
    out = bin_measurements(_records([35.2, 5.1, 20.3, 5.9], [0.1, 0.2, 0.3, 0.4]), bin_width=5.0)
    assert out["bin_center"].tolist() == [7.5, 22.5, 37.5]
    assert out.index.tolist() == [0, 1, 2]


def test_binning_is_deterministic() -> None:
    rng = np.random.default_rng(7)
    df = _records(rng.uniform(0, 40, 200), rng.uniform(0.005, 0.05, 200))
    a = bin_measurements(df, bin_width=0.5)
    b = bin_measurements(df, bin_width=0.5)
    pd.testing.assert_frame_equal(a, b)
    assert int(a["count"].sum()) == 200


def test_bin_on_variability_axis() -> None:
    df = _records([20.0, 22.0, 30.0], [0.011, 0.013, 0.027])
    out = bin_measurements(df, bin_width=0.01, axis="variability_value")
    assert stat_columns("variability_value") == ("mean_primary", "sd_primary")
    assert list(out.columns) == ["bin_lower_edge", "bin_center", "mean_primary", "sd_primary", "count"]
    assert out["count"].tolist() == [2, 1]
    assert out["mean_primary"].iloc[0] == pytest.approx(21.0)
    assert np.isnan(out["sd_primary"].iloc[1])


def test_empty_input_gives_empty_table() -> None:
    out = bin_measurements(_records([], []), bin_width=1.0)
    assert out.empty
    assert list(out.columns) == list(bin_columns())


@pytest.mark.parametrize("width", [0.0, -1.0, float("nan"), float("inf")])
def test_invalid_bin_width(width) -> None:
    with pytest.raises(ValueError):
        bin_measurements(_records([1.0], [0.1]), bin_width=width)


def test_invalid_axis() -> None:
    with pytest.raises(ValueError):
        bin_measurements(_records([1.0], [0.1]), axis="temperature")


def test_bin_by_type_keeps_types_apart() -> None:
    df = pd.concat(
        [_records([20.2, 20.4], [0.01, 0.03], "HRH"), _records([20.3], [0.5], "HRL")],
        ignore_index=True,
    )
    per_type = {m: df[df["calibration_type"] == m] for m in ("HRH", "HRL")}
    out = bin_by_type(per_type, CompileConfig(root_dir="/x"))
    assert list(out) == ["HRH", "HRL"]
    assert out["HRH"]["mean_variability"].iloc[0] == pytest.approx(0.02)
    assert out["HRL"]["count"].tolist() == [1]
    assert np.isnan(out["HRL"]["sd_variability"].iloc[0])
