from .config import BIN_AXES, CompileConfig, ReportOptions, load_config
from .dataset import CompiledDataset
from .records import RECORD_COLUMNS, ExtractionResult, MeasurementRecord

__all__ = [
    "BIN_AXES",
    "CompileConfig",
    "ReportOptions",
    "load_config",
    "CompiledDataset",
    "RECORD_COLUMNS",
    "ExtractionResult",
    "MeasurementRecord",
]
