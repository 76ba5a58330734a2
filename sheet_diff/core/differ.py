"""
Positional dataset comparison.
Single responsibility: pair two sorted datasets row by row and report differences.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..utils.logger import get_logger
from .dataset import cell_value, unified_headers


logger = get_logger()


@dataclass(frozen=True)
class DiffRecord:
    """
    Outcome at one row position.

    When only one side has a row at ``index`` the datasets differ in length
    there; that is a row-presence mismatch, not a value mismatch.
    """

    index: int
    left: Optional[Mapping[str, str]] = None
    right: Optional[Mapping[str, str]] = None

    @property
    def is_row_presence_mismatch(self) -> bool:
        return self.left is None or self.right is None

    @property
    def columns(self) -> List[str]:
        """Union of both rows' columns, left first."""
        return unified_headers(
            list(self.left.keys()) if self.left is not None else [],
            list(self.right.keys()) if self.right is not None else [],
        )

    def differing_columns(self) -> List[str]:
        return [col for col in self.columns
                if cell_value(self.left, col) != cell_value(self.right, col)]


def rows_equal(left: Mapping[str, str], right: Mapping[str, str]) -> bool:
    """Equal when every column of either row holds the same text (absent == "")."""
    for column in unified_headers(list(left.keys()), list(right.keys())):
        if cell_value(left, column) != cell_value(right, column):
            return False
    return True


def datasets_equal(left: Sequence[Mapping[str, str]],
                   right: Sequence[Mapping[str, str]]) -> bool:
    """
    Structural equality of two row sequences, position by position.

    Both sides must already be ordered by the same sort specification.
    """
    if len(left) != len(right):
        return False
    return all(rows_equal(a, b) for a, b in zip(left, right))


def diff_datasets(left: Sequence[Mapping[str, str]],
                  right: Sequence[Mapping[str, str]]) -> List[DiffRecord]:
    """
    Positional diff of two row sequences.

    Positions are visited in ascending order. A position missing on one side
    yields a record with only the present row; a position whose rows differ
    in any column yields a record with both rows. Rows are never re-aligned,
    so duplicate sort keys can pair logically identical rows differently.

    Args:
        left: Sorted left rows
        right: Sorted right rows

    Returns:
        Diff records, empty exactly when ``datasets_equal`` is true
    """
    diffs: List[DiffRecord] = []

    for index in range(max(len(left), len(right))):
        left_row = left[index] if index < len(left) else None
        right_row = right[index] if index < len(right) else None

        if left_row is None or right_row is None:
            diffs.append(DiffRecord(index, left_row, right_row))
            continue

        if not rows_equal(left_row, right_row):
            diffs.append(DiffRecord(index, left_row, right_row))

    logger.debug("differ.completed",
                 left_rows=len(left),
                 right_rows=len(right),
                 differences=len(diffs))
    return diffs


@dataclass
class ComparisonResult:
    """Results from dataset comparison."""

    total_left: int = 0
    total_right: int = 0
    matched_rows: int = 0
    only_in_left: int = 0
    only_in_right: int = 0
    value_differences: int = 0
    effective_differences: int = 0
    suppressed_cells: int = 0
    is_equal: bool = False
    columns_compared: List[str] = field(default_factory=list)
    sort_columns: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_left": self.total_left,
            "total_right": self.total_right,
            "matched_rows": self.matched_rows,
            "only_in_left": self.only_in_left,
            "only_in_right": self.only_in_right,
            "value_differences": self.value_differences,
            "effective_differences": self.effective_differences,
            "suppressed_cells": self.suppressed_cells,
            "is_equal": self.is_equal,
            "columns_compared": list(self.columns_compared),
            "sort_columns": list(self.sort_columns),
        }


def summarize(left: Sequence[Mapping[str, str]],
              right: Sequence[Mapping[str, str]],
              diffs: Sequence[DiffRecord],
              headers: Optional[Sequence[str]] = None,
              sort_columns: Optional[Sequence[str]] = None) -> ComparisonResult:
    """
    Count what a diff found.

    ``matched_rows`` is the number of positions present on both sides with
    equal rows.
    """
    only_left = sum(1 for d in diffs if d.right is None)
    only_right = sum(1 for d in diffs if d.left is None)
    value_diffs = len(diffs) - only_left - only_right

    return ComparisonResult(
        total_left=len(left),
        total_right=len(right),
        matched_rows=min(len(left), len(right)) - value_diffs,
        only_in_left=only_left,
        only_in_right=only_right,
        value_differences=value_diffs,
        effective_differences=len(diffs),
        is_equal=not diffs,
        columns_compared=list(headers or []),
        sort_columns=list(sort_columns or []),
    )
