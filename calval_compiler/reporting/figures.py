"""Multi-panel summary figure of a calibration compile.

One panel per calibration type (raw points, binned means with +/- 1 SD and a
linear fit through the binned means) plus a final panel with the number of
records per bin for every type.

NaN standard deviations (single-record bins) are drawn as missing: no error
bar and a gap in the shaded band.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Mapping, Optional

import numpy as np
import pandas as pd

from calval_compiler.analysis.binning import other_axis, stat_columns
from calval_compiler.analysis.trend import TrendFit
from calval_compiler.models.config import ReportOptions


#: Bar colours of the count panel, by position of the type marker.
TYPE_COLORS = ("#E69F00", "#56B4E9", "#009E73", "#CC79A7")

_PANEL_LETTERS = "abcdefgh"


def _get_pyplot():
    """Import pyplot lazily (the CLI selects a non-interactive backend first)."""
    import matplotlib.pyplot as plt
    return plt


def _scale(col: str, opts: ReportOptions) -> float:
    return float(opts.display_scale) if col == "variability_value" else 1.0


def _label(col: str, opts: ReportOptions) -> str:
    if col == "variability_value":
        return f"{opts.variability_label} ({opts.display_unit})"
    return opts.primary_label


def plot_type_panel(
    ax,
    records: pd.DataFrame,
    binned: pd.DataFrame,
    fit: Optional[TrendFit],
    *,
    axis: str,
    opts: ReportOptions,
    title: str,
    spread: str = "errorbar",
) -> None:
    """Draw one calibration type on *ax*.

    Parameters
    ----------
    ax : matplotlib Axes
    records : DataFrame
        Records of this type (raw points, drawn in grey).
    binned : DataFrame
        Output of :func:`~calval_compiler.analysis.binning.bin_measurements`.
    fit : TrendFit or None
        Line drawn over the bin centres when ``fit.ok``.
    spread : str
        ``"errorbar"`` (vertical +/- SD bars) or ``"band"`` (shaded +/- SD).
    """
    other = other_axis(axis)
    mean_col, sd_col = stat_columns(axis)
    sx, sy = _scale(axis, opts), _scale(other, opts)

    if len(records):
        ax.scatter(records[axis] * sx, records[other] * sy, s=4, alpha=0.3, color="gray", zorder=1)

    if len(binned):
        xc = binned["bin_center"].to_numpy(dtype=np.float64) * sx
        ym = binned[mean_col].to_numpy(dtype=np.float64) * sy
        ysd = binned[sd_col].to_numpy(dtype=np.float64) * sy
        if spread == "band":
            ax.fill_between(xc, ym - ysd, ym + ysd, color="0.7", alpha=0.5, linewidth=0, zorder=2)
            ax.plot(xc, ym, "o", color="black", ms=4, zorder=3)
        else:
            ax.errorbar(xc, ym, yerr=ysd, fmt="o", color="black", ms=4, capsize=3, zorder=3)
        if fit is not None and fit.ok:
            ax.plot(xc, fit.predict(binned["bin_center"].to_numpy()) * sy, "-", color="red", lw=0.8, zorder=4)
    else:
        ax.text(0.5, 0.5, "no data", transform=ax.transAxes, ha="center", va="center", color="0.4")

    ax.set_xlabel(_label(axis, opts))
    ax.set_ylabel(_label(other, opts))
    ax.set_title(title, loc="left")


def plot_count_panel(
    ax,
    binned_by_type: Mapping[str, pd.DataFrame],
    *,
    bin_width: float,
    axis: str,
    opts: ReportOptions,
    title: str,
) -> None:
    """Dodged bar chart of records per bin, one bar colour per type."""
    sx = _scale(axis, opts)
    markers = list(binned_by_type)
    n = max(len(markers), 1)
    bar_w = bin_width * 0.8 / n
    for i, marker in enumerate(markers):
        b = binned_by_type[marker]
        if b.empty:
            continue
        offset = (i - (n - 1) / 2.0) * bar_w
        ax.bar(
            (b["bin_center"].to_numpy(dtype=np.float64) + offset) * sx,
            b["count"].to_numpy(),
            width=bar_w * sx,
            color=TYPE_COLORS[i % len(TYPE_COLORS)],
            label=marker,
        )
    ax.set_xlabel(_label(axis, opts))
    ax.set_ylabel("Number of measurements")
    ax.set_title(title, loc="left")
    if markers:
        ax.legend(title="Calibration Type", loc="upper center", bbox_to_anchor=(0.5, -0.25), ncol=len(markers))


def render_summary_figure(
    records_by_type: Mapping[str, pd.DataFrame],
    binned_by_type: Mapping[str, pd.DataFrame],
    fits: Mapping[str, TrendFit],
    *,
    bin_width: float,
    axis: str = "primary_value",
    opts: Optional[ReportOptions] = None,
):
    """Build the stacked summary figure and return it (not saved, not shown)."""
    opts = opts or ReportOptions()
    plt = _get_pyplot()
    markers = list(binned_by_type)
    n_panels = len(markers) + 1
    fig, axes = plt.subplots(n_panels, 1, figsize=opts.figsize_in, squeeze=False)
    axes = axes[:, 0]

    count_title = "Temperature Bin" if axis == "primary_value" else "Bin"
    for i, marker in enumerate(markers):
        plot_type_panel(
            axes[i],
            records_by_type.get(marker, pd.DataFrame(columns=[axis, other_axis(axis)])),
            binned_by_type[marker],
            fits.get(marker),
            axis=axis,
            opts=opts,
            title=f"({_PANEL_LETTERS[i]}) {marker} Calibrations",
            spread="errorbar" if i % 2 == 0 else "band",
        )
    plot_count_panel(
        axes[-1],
        binned_by_type,
        bin_width=bin_width,
        axis=axis,
        opts=opts,
        title=f"({_PANEL_LETTERS[len(markers)]}) Data Points per {count_title}",
    )
    fig.tight_layout()
    return fig


def save_figure(fig, output_dir, stem: str, dpi: int = 300, formats=("pdf", "png")) -> List[Path]:
    """Save *fig* once per format and close it.

    Returns
    -------
    list of Path
        Written files, in *formats* order.
    """
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    paths: List[Path] = []
    for ext in formats:
        path = out / f"{stem}.{ext}"
        fig.savefig(str(path), bbox_inches="tight", dpi=dpi, facecolor="white")
        paths.append(path)
    _get_pyplot().close(fig)
    return paths
