"""
User-accepted differences.
Single responsibility: remember suppressed cell diffs and filter diffs by significance.
"""

from dataclasses import dataclass
from typing import Iterable, Iterator, List, NamedTuple, Optional, Sequence, Set, Tuple

from ..utils.logger import get_logger
from .cell_types import CellType, classify
from .dataset import cell_value
from .differ import DiffRecord


logger = get_logger()


class DiffKey(NamedTuple):
    """Address of one cell comparison: post-sort row index and column."""

    row_index: int
    column: str


@dataclass(frozen=True)
class CellOutcome:
    """How one column compares within a diff record."""

    column: str
    left_value: str
    right_value: str
    value_differs: bool
    type_mismatch: bool = False
    suppressed: bool = False
    left_type: Optional[CellType] = None
    right_type: Optional[CellType] = None

    @property
    def differs(self) -> bool:
        return self.value_differs or self.type_mismatch

    @property
    def significant(self) -> bool:
        return self.differs and not self.suppressed


@dataclass(frozen=True)
class EffectiveDiff:
    """A diff record together with its per-cell outcomes."""

    record: DiffRecord
    cells: Tuple[CellOutcome, ...]

    @property
    def index(self) -> int:
        return self.record.index

    @property
    def is_row_presence_mismatch(self) -> bool:
        return self.record.is_row_presence_mismatch

    @property
    def significant_columns(self) -> List[str]:
        return [c.column for c in self.cells if c.significant]

    def cell(self, column: str) -> Optional[CellOutcome]:
        for outcome in self.cells:
            if outcome.column == column:
                return outcome
        return None


class SuppressionStore:
    """
    Set of suppressed diff keys.

    Empty when created; changes only through ``toggle`` and ``clear``.
    """

    def __init__(self, keys: Iterable[DiffKey] = ()):
        self._keys: Set[DiffKey] = {DiffKey(*k) for k in keys}

    def toggle(self, key) -> bool:
        """
        Flip suppression of ``key``.

        Returns:
            True if the key is suppressed after the call
        """
        key = DiffKey(*key)
        if key in self._keys:
            self._keys.remove(key)
            suppressed = False
        else:
            self._keys.add(key)
            suppressed = True

        logger.debug("suppression.toggled",
                     row_index=key.row_index,
                     column=key.column,
                     suppressed=suppressed)
        return suppressed

    def is_suppressed(self, key) -> bool:
        return DiffKey(*key) in self._keys

    def clear(self):
        """Drop every suppression at once."""
        count = len(self._keys)
        self._keys = set()
        if count:
            logger.debug("suppression.cleared", dropped=count)

    def keys(self) -> List[DiffKey]:
        return sorted(self._keys)

    def __contains__(self, key) -> bool:
        return self.is_suppressed(key)

    def __len__(self) -> int:
        return len(self._keys)

    def __iter__(self) -> Iterator[DiffKey]:
        return iter(self.keys())

    def cell_outcomes(self, record: DiffRecord, type_check: bool = False) -> Tuple[CellOutcome, ...]:
        """
        Per-column outcomes for one record.

        In a row-presence mismatch every column of the present row is a
        difference and cannot be suppressed.
        """
        outcomes = []
        presence = record.is_row_presence_mismatch

        for column in record.columns:
            left_value = cell_value(record.left, column)
            right_value = cell_value(record.right, column)

            if presence:
                outcomes.append(CellOutcome(column, left_value, right_value,
                                            value_differs=True))
                continue

            left_type = right_type = None
            type_mismatch = False
            if type_check:
                left_type = classify(left_value)
                right_type = classify(right_value)
                type_mismatch = left_type is not right_type

            outcomes.append(CellOutcome(
                column=column,
                left_value=left_value,
                right_value=right_value,
                value_differs=left_value != right_value,
                type_mismatch=type_mismatch,
                suppressed=DiffKey(record.index, column) in self._keys,
                left_type=left_type,
                right_type=right_type,
            ))

        return tuple(outcomes)

    def effective_diffs(self, all_diffs: Sequence[DiffRecord],
                        type_check: bool = False) -> List[EffectiveDiff]:
        """
        Diff records that still have at least one significant cell.

        A cell is significant when its value differs, or type checking is on
        and its classified types differ, and its key is not suppressed.
        Row-presence mismatches are always kept.

        Args:
            all_diffs: Output of ``diff_datasets``
            type_check: Also flag cells whose cell types differ

        Returns:
            Effective diffs in index order
        """
        effective = []
        for record in all_diffs:
            cells = self.cell_outcomes(record, type_check)
            if record.is_row_presence_mismatch or any(c.significant for c in cells):
                effective.append(EffectiveDiff(record, cells))

        logger.debug("suppression.filtered",
                     diffs=len(all_diffs),
                     effective=len(effective),
                     suppressed_keys=len(self._keys),
                     type_check=type_check)
        return effective
