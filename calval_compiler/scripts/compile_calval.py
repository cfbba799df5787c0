"""Command-line entry point: compile a calibration campaign and write the report.

Example::

    python -m calval_compiler.scripts.compile_calval /data/si121 --out-dir out
    python -m calval_compiler.scripts.compile_calval --config campaign.json --bin-width 0.5
"""

from __future__ import annotations

import dataclasses
from typing import Optional, Sequence

from calval_compiler.analysis.binning import bin_by_type
from calval_compiler.analysis.trend import fit_linear_trend, summarize_type
from calval_compiler.ingest.discovery import CorpusWalker, NoCalibrationDataError
from calval_compiler.log_view import ConsoleLog
from calval_compiler.models.config import BIN_AXES, CompileConfig, ReportOptions, load_config
from calval_compiler.reporting.export import export_binned_csv, export_compiled_csv
from calval_compiler.reporting.figures import render_summary_figure, save_figure
from calval_compiler.reporting.summary import format_trend, format_type_counts, format_type_summary


def _build_parser():
    import argparse
    import textwrap

    p = argparse.ArgumentParser(
        prog="python -m calval_compiler.scripts.compile_calval",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description=textwrap.dedent(
            """\
            Compile radiometer calibration workbooks found under a campaign folder.

            Run folders are named YYYYMMDD_calval; calibration workbooks inside them
            contain 'cal' and one of the type markers (HRH / HRL) in their name.
            Writes the summary figure (PDF + PNG), the compiled record table and the
            binned table as CSV.
            """
        ),
    )
    p.add_argument("root", nargs="?", default=None, help="Campaign root folder (overrides root_dir of --config)")
    p.add_argument("--config", default=None, help="JSON file with CompileConfig fields")
    p.add_argument("--sheet", dest="results_sheet", default=None, help="Results sheet name (default: results)")
    p.add_argument("--skip-rows", type=int, default=None, help="Rows skipped before the header row (default: 17)")
    p.add_argument("--bin-width", type=float, default=None, help="Bin width (default: 1.0)")
    p.add_argument("--axis", dest="bin_axis", choices=BIN_AXES, default=None, help="Value to bin on")
    p.add_argument("--min-columns", type=int, default=None, help="Minimum columns per sheet (default: 8)")
    p.add_argument("--unit-factor", type=float, default=None, help="Factor applied to variability values")
    p.add_argument("--out-dir", default=".", help="Output directory (default: current directory)")
    p.add_argument("--no-figure", action="store_true", help="Skip the summary figure")
    return p


def _make_config(ns) -> CompileConfig:
    overrides = {
        "results_sheet": ns.results_sheet,
        "skip_rows": ns.skip_rows,
        "bin_width": ns.bin_width,
        "bin_axis": ns.bin_axis,
        "min_columns": ns.min_columns,
        "unit_factor": ns.unit_factor,
    }
    if ns.config:
        return load_config(ns.config, root_dir=ns.root, **overrides)
    if ns.root is None:
        raise ValueError("a campaign root folder (or --config with root_dir) is required")
    cfg = CompileConfig(root_dir=ns.root)
    return dataclasses.replace(cfg, **{k: v for k, v in overrides.items() if v is not None})


def main(argv: Optional[Sequence[str]] = None) -> int:
    ns = _build_parser().parse_args(list(argv) if argv is not None else None)
    log = ConsoleLog()

    try:
        cfg = _make_config(ns).validate()
    except (OSError, ValueError) as exc:
        log.error(str(exc))
        return 2

    opts = ReportOptions(out_dir=ns.out_dir)

    log.info("Starting calibration data compilation...")
    log.info(f"Root directory: {cfg.root_dir}")
    try:
        dataset = CorpusWalker(cfg, log=log).compile()
    except (FileNotFoundError, NoCalibrationDataError) as exc:
        log.error(str(exc))
        return 1

    per_type = dataset.split_by_type()
    stats = {m: summarize_type(df) for m, df in per_type.items()}
    for line in format_type_counts(stats):
        log.info(line)

    binned = bin_by_type(per_type, cfg)
    fits = {m: fit_linear_trend(b, cfg.bin_axis) for m, b in binned.items()}

    out_dir = opts.out_path
    if not ns.no_figure:
        import matplotlib

        matplotlib.use("Agg")
        fig = render_summary_figure(per_type, binned, fits, bin_width=cfg.bin_width, axis=cfg.bin_axis, opts=opts)
        for path in save_figure(fig, out_dir, opts.figure_stem, dpi=opts.dpi):
            log.info(f"Figure saved as: {path}")

    rec_path = export_compiled_csv(dataset, out_dir / opts.records_csv)
    bin_path = export_binned_csv(binned, out_dir / opts.binned_csv)
    log.info(f"Compiled data saved as: {rec_path}")
    log.info(f"Binned data saved as: {bin_path}")

    log.info("===== SUMMARY STATISTICS =====")
    for marker in per_type:
        for line in format_type_summary(marker, stats[marker], opts):
            log.info(line)

    log.info("===== LINEAR REGRESSION STATISTICS =====")
    for marker, fit in fits.items():
        for line in format_trend(marker, fit):
            log.info(line)

    if log.count("warning"):
        log.info(f"{log.count('warning')} warning(s) during compilation.")
    log.info("Analysis complete!")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
