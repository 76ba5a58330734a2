"""Dataset reconciliation engine."""

from .dataset import Row, Dataset, cell_value, unified_headers
from .cell_types import CellType, classify
from .sorting import (
    InvalidSortSpecificationError,
    SortCriterion,
    SortDirection,
    SortSpecification,
    build_comparator,
    sort_dataset,
    sort_rows
)
from .differ import DiffRecord, ComparisonResult, datasets_equal, diff_datasets, rows_equal
from .suppression import CellOutcome, DiffKey, EffectiveDiff, SuppressionStore
from .key_validator import SortKeyValidator, KeyValidationError, KeyValidationResult
from .session import ComparisonSession, parse_diff_key

__all__ = [
    "Row",
    "Dataset",
    "cell_value",
    "unified_headers",
    "CellType",
    "classify",
    "InvalidSortSpecificationError",
    "SortCriterion",
    "SortDirection",
    "SortSpecification",
    "build_comparator",
    "sort_dataset",
    "sort_rows",
    "DiffRecord",
    "ComparisonResult",
    "datasets_equal",
    "diff_datasets",
    "rows_equal",
    "CellOutcome",
    "DiffKey",
    "EffectiveDiff",
    "SuppressionStore",
    "SortKeyValidator",
    "KeyValidationError",
    "KeyValidationResult",
    "ComparisonSession",
    "parse_diff_key",
]
