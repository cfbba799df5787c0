"""Calval Compiler -- compile radiometer calibration workbooks into a campaign summary.

Built for SI-121 radiometer calibration campaigns where every calibration run
lives in a ``YYYYMMDD_calval`` folder holding one macro workbook per run type
(HRH: high reference temperature, HRL: low reference temperature).

This package provides tools for:
- Discovering run folders and calibration workbooks under a campaign root
- Reading the results sheet of each workbook into validated records
- Binning the compiled records and fitting linear trends per calibration type
- Rendering the multi-panel summary figure and exporting flat CSV tables

Key principles:
- Per-file problems are reported, never fatal
- Deterministic output: enumeration is sorted, bins are sorted
- No silent zeros: undefined dispersion stays NaN

Main subpackages:
- analysis: Binning, linear trends, summary statistics
- ingest: Folder/file classification, workbook reading, corpus walk
- models: Data models (CompileConfig, MeasurementRecord, CompiledDataset)
- reporting: Figure, CSV exports, text summaries
- scripts: Command-line entry point
"""

__all__ = []
