from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional

import pandas as pd

from calval_compiler.ingest.classify import is_calibration_file, is_calval_folder
from calval_compiler.ingest.extract import RecordExtractor
from calval_compiler.log_view import ConsoleLog
from calval_compiler.models.config import CompileConfig
from calval_compiler.models.dataset import CompiledDataset
from calval_compiler.models.records import RECORD_COLUMNS


class NoCalibrationDataError(RuntimeError):
    """A complete walk found no usable calibration record."""


def find_calval_folders(
    root: Path,
    suffix: str = "_calval",
    onerror: Optional[Callable[[OSError], None]] = None,
) -> List[Path]:
    """
    All directories below *root* (root included) whose base name is a run folder.

    Sorted by path string so the result does not depend on filesystem order.
    Directories that cannot be listed are passed to *onerror* and skipped.
    """
    found: List[Path] = []
    for dirpath, dirnames, _ in os.walk(root, onerror=onerror):
        dirnames.sort()
        p = Path(dirpath)
        if is_calval_folder(p.name, suffix):
            found.append(p)
    return sorted(found, key=str)


def list_calibration_files(folder: Path, marker: str = "cal", extension: str = ".xlsm") -> List[Path]:
    """Calibration workbooks directly inside *folder* (non-recursive), sorted by name."""
    out = [
        p for p in folder.iterdir()
        if p.is_file() and is_calibration_file(p.name, marker, extension)
    ]
    return sorted(out, key=lambda p: p.name)


@dataclass
class CorpusWalker:
    """
    Walk a campaign tree and compile every calibration workbook it holds.

    STRICT POLICY
      - a missing root directory aborts immediately (FileNotFoundError)
      - empty folders, unreadable files and short sheets are only reported
      - zero records after the whole walk aborts (NoCalibrationDataError)
    """
    config: CompileConfig
    extractor: Optional[RecordExtractor] = None
    log: Optional[ConsoleLog] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        self.config.validate()
        if self.extractor is None:
            self.extractor = RecordExtractor(self.config)

    def _info(self, msg: str) -> None:
        if self.log is not None:
            self.log.info(msg)

    def _warn(self, msg: str) -> None:
        if self.log is not None:
            self.log.warning(msg)

    def compile(self) -> CompiledDataset:
        cfg = self.config
        root = cfg.root_path.resolve()
        if not root.exists() or not root.is_dir():
            raise FileNotFoundError(f"Root directory does not exist: {root}")

        blocks: List[pd.DataFrame] = []
        warnings: List[str] = []

        def _walk_error(exc: OSError) -> None:
            msg = f"Cannot list directory {exc.filename}: {exc.strerror or exc}; skipped."
            warnings.append(msg)
            self._warn(msg)

        folders = find_calval_folders(root, cfg.folder_suffix, onerror=_walk_error)
        self._info(f"Found {len(folders)} calval folders")

        files_processed = 0

        for folder in folders:
            files = list_calibration_files(folder, cfg.file_marker, cfg.file_extension)
            if not files:
                continue
            self._info(f"Processing {len(files)} files from {folder.name}")
            for f in files:
                files_processed += 1
                res = self.extractor.extract(f, folder)
                for w in res.warnings:
                    warnings.append(w)
                    self._warn(w)
                if res.ok:
                    blocks.append(res.df)

        if not blocks:
            raise NoCalibrationDataError(
                f"No calibration data found under {root} "
                f"({len(folders)} calval folders, {files_processed} files examined)"
            )

        df = pd.concat(blocks, ignore_index=True)
        df = df.loc[:, list(RECORD_COLUMNS)]

        dataset = CompiledDataset(
            root_dir=root,
            df=df,
            folders=tuple(folders),
            files_processed=files_processed,
            files_with_data=len(blocks),
            type_markers=cfg.type_markers,
            warnings=tuple(warnings),
        )
        first, last = dataset.date_range()
        self._info(f"Successfully compiled data from {dataset.files_with_data} files")
        self._info(f"Total measurements: {dataset.n_records}")
        self._info(f"Date range: {first} to {last}")
        return dataset


def compile_calibration_data(config: CompileConfig, log: Optional[ConsoleLog] = None) -> CompiledDataset:
    """Convenience wrapper: ``CorpusWalker(config, log=log).compile()``."""
    return CorpusWalker(config, log=log).compile()

