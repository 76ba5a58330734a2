"""
Sheet Diff - compare two spreadsheets after sorting them the same way.
"""

__version__ = "1.0.0"

from .core import (
    CellType,
    ComparisonSession,
    Dataset,
    DiffKey,
    DiffRecord,
    InvalidSortSpecificationError,
    Row,
    SortCriterion,
    SortDirection,
    SortSpecification,
    SuppressionStore,
    build_comparator,
    classify,
    datasets_equal,
    diff_datasets,
    sort_rows,
)
from .config.manager import ConfigManager, SessionConfig
from .adapters.file_reader import UniversalFileReader
from .adapters.report_writer import ExcelReportWriter
from .utils.logger import get_logger

__all__ = [
    "CellType",
    "ComparisonSession",
    "Dataset",
    "DiffKey",
    "DiffRecord",
    "InvalidSortSpecificationError",
    "Row",
    "SortCriterion",
    "SortDirection",
    "SortSpecification",
    "SuppressionStore",
    "build_comparator",
    "classify",
    "datasets_equal",
    "diff_datasets",
    "sort_rows",
    "ConfigManager",
    "SessionConfig",
    "UniversalFileReader",
    "ExcelReportWriter",
    "get_logger",
]
