"""Ingest package - run-folder discovery and calibration workbook reading.

This package handles:
- Classifying run folders (``YYYYMMDD_calval``) and calibration workbooks
- Reading the results sheet of each workbook into validated records
- Walking a campaign tree and compiling all records into one table

Key classes:
- RecordExtractor: one workbook -> ExtractionResult (never raises per file)
- CorpusWalker: root directory -> CompiledDataset

Design principle:
- Per-file problems are diagnostics, not exceptions
- Only a missing root or an empty compile aborts the run
- Enumeration order is sorted, so repeated runs give identical tables
"""
from .classify import calibration_type, is_calibration_file, is_calval_folder, parse_folder_date
from .discovery import CorpusWalker, NoCalibrationDataError, compile_calibration_data
from .extract import RecordExtractor, SheetNotFoundError, read_results_sheet

__all__ = [
    "calibration_type",
    "is_calibration_file",
    "is_calval_folder",
    "parse_folder_date",
    "CorpusWalker",
    "NoCalibrationDataError",
    "compile_calibration_data",
    "RecordExtractor",
    "SheetNotFoundError",
    "read_results_sheet",
]
