"""
Comparison session.
Single responsibility: own the state of one left/right comparison.

The session holds the two loaded datasets, the active sort specification,
the type-check flag and the suppression store. Sorting, diffing and
filtering are recomputed from those values on demand and cached until one
of the inputs changes.
"""

from typing import Dict, List, Optional, Union

from ..utils.logger import get_logger
from .collation import DEFAULT_LOCALE, get_collator
from .dataset import Dataset, cell_value, unified_headers
from .differ import ComparisonResult, DiffRecord, diff_datasets, summarize
from .key_validator import KeyValidationResult, SortKeyValidator
from .sorting import SortCriterion, SortDirection, SortSpecification, sort_dataset
from .suppression import DiffKey, EffectiveDiff, SuppressionStore


logger = get_logger()


class ComparisonSession:
    """
    Caller-owned state of one comparison.
    """

    def __init__(self, locale: str = DEFAULT_LOCALE, type_check: bool = False):
        """
        Initialize session.

        Args:
            locale: Collation language tag used for sorting
            type_check: Flag cells whose cell types differ

        Raises:
            ValueError: If ``locale`` is not a language tag
        """
        get_collator(locale)
        self.locale = locale
        self.type_check = type_check
        self.left: Optional[Dataset] = None
        self.right: Optional[Dataset] = None
        self.sort_spec = SortSpecification()
        self.suppressions = SuppressionStore()
        self._cache: Dict[str, object] = {}

    # ------------------------------------------------------------------
    # inputs
    # ------------------------------------------------------------------

    def _load(self, side: str, dataset: Dataset):
        setattr(self, side, dataset)
        self.suppressions.clear()
        self._cache.clear()

        if not self.sort_spec and dataset.headers:
            self.sort_spec = SortSpecification([SortCriterion(dataset.headers[0], SortDirection.ASC)])
            logger.info("session.default_sort", column=dataset.headers[0])

        logger.info(f"session.{side}_loaded",
                    dataset=dataset.name,
                    rows=len(dataset),
                    columns=len(dataset.headers))

    def load_left(self, dataset: Dataset):
        """Replace the left dataset; suppressions are reset."""
        self._load("left", dataset)

    def load_right(self, dataset: Dataset):
        """Replace the right dataset; suppressions are reset."""
        self._load("right", dataset)

    def set_sort(self, spec: Union[SortSpecification, list]):
        """
        Replace the sort specification.

        Raises:
            InvalidSortSpecificationError: If ``spec`` is malformed
        """
        if not isinstance(spec, SortSpecification):
            spec = SortSpecification(spec)
        self.sort_spec = spec
        self._cache.clear()
        logger.info("session.sort_changed", criteria=[str(c) for c in spec])

    def set_type_check(self, enabled: bool):
        self.type_check = bool(enabled)
        self._cache.pop("effective", None)

    def toggle(self, key) -> bool:
        """Flip suppression of a cell diff; returns the new state."""
        suppressed = self.suppressions.toggle(key)
        self._cache.pop("effective", None)
        return suppressed

    def reset_suppressions(self):
        self.suppressions.clear()
        self._cache.pop("effective", None)

    # ------------------------------------------------------------------
    # derived values
    # ------------------------------------------------------------------

    @property
    def is_ready(self) -> bool:
        """Both sides loaded and at least one sort criterion chosen."""
        return self.left is not None and self.right is not None and bool(self.sort_spec)

    @property
    def headers(self) -> List[str]:
        """Union of both datasets' headers in first-seen order."""
        return unified_headers(self.left, self.right)

    def sorted_left(self) -> Optional[Dataset]:
        if self.left is None:
            return None
        if "left" not in self._cache:
            self._cache["left"] = sort_dataset(self.left, self.sort_spec, self.locale)
        return self._cache["left"]

    def sorted_right(self) -> Optional[Dataset]:
        if self.right is None:
            return None
        if "right" not in self._cache:
            self._cache["right"] = sort_dataset(self.right, self.sort_spec, self.locale)
        return self._cache["right"]

    def diffs(self) -> List[DiffRecord]:
        """All positional diffs, or [] until the session is ready."""
        if not self.is_ready:
            return []
        if "diffs" not in self._cache:
            self._cache["diffs"] = diff_datasets(self.sorted_left().rows, self.sorted_right().rows)
        return self._cache["diffs"]

    def is_equal(self) -> Optional[bool]:
        """True/False once ready, None while a side or the sort is missing."""
        if not self.is_ready:
            return None
        return not self.diffs()

    def effective_diffs(self) -> List[EffectiveDiff]:
        if not self.is_ready:
            return []
        if "effective" not in self._cache:
            self._cache["effective"] = self.suppressions.effective_diffs(self.diffs(), self.type_check)
        return self._cache["effective"]

    def find_diff(self, row_index: int) -> Optional[DiffRecord]:
        for record in self.diffs():
            if record.index == row_index:
                return record
        return None

    def suppression_problem(self, key: DiffKey) -> Optional[str]:
        """
        Why ``key`` cannot be accepted, or None when it names a differing cell.

        Row-presence mismatches are never suppressible.
        """
        record = self.find_diff(key.row_index)
        if record is None or record.is_row_presence_mismatch:
            return f"Row {key.row_index + 1} has no cell difference that can be accepted"
        if key.column not in record.differing_columns():
            return f"Column '{key.column}' does not differ in row {key.row_index + 1}"
        return None

    def is_cell_significant(self, row_index: int, column: str) -> bool:
        """Whether the cell at (row_index, column) should be highlighted."""
        for diff in self.effective_diffs():
            if diff.index == row_index:
                outcome = diff.cell(column)
                return outcome is not None and outcome.significant
        return False

    def suppressed_cells(self) -> List[Dict[str, object]]:
        """Suppressed keys with both sides' values, for review and export."""
        cells = []
        for key in self.suppressions.keys():
            record = self.find_diff(key.row_index)
            cells.append({
                "row_index": key.row_index,
                "column": key.column,
                "left": cell_value(record.left, key.column) if record else "",
                "right": cell_value(record.right, key.column) if record else "",
            })
        return cells

    def result(self) -> ComparisonResult:
        """Summary counts of the current comparison."""
        left = self.sorted_left()
        right = self.sorted_right()
        result = summarize(
            left.rows if left is not None else [],
            right.rows if right is not None else [],
            self.diffs(),
            headers=self.headers,
            sort_columns=self.sort_spec.columns,
        )
        result.is_equal = bool(self.is_equal())
        result.effective_differences = len(self.effective_diffs())
        result.suppressed_cells = len(self.suppressions)
        return result

    def check_sort_keys(self, validator: Optional[SortKeyValidator] = None) -> Dict[str, KeyValidationResult]:
        """
        Check that the sort columns identify rows uniquely on each loaded side.

        Returns:
            Validation result per side name (``left``/``right``)
        """
        if not self.sort_spec:
            return {}
        validator = validator or SortKeyValidator()
        results = {}
        for side in ("left", "right"):
            dataset = getattr(self, side)
            if dataset is None:
                continue
            results[side] = validator.validate(dataset.rows, self.sort_spec.columns,
                                               dataset_name=dataset.name)
        return results


def parse_diff_key(token: str) -> DiffKey:
    """
    Parse ``ROW:COLUMN`` where ROW is the 1-based row number shown to users.

    Raises:
        ValueError: If the token is malformed
    """
    row, sep, column = token.partition(":")
    if not sep or not column:
        raise ValueError(f"Expected ROW:COLUMN, got {token!r}")
    try:
        number = int(row)
    except ValueError:
        raise ValueError(f"Row must be a number in {token!r}")
    if number < 1:
        raise ValueError(f"Row numbers start at 1 in {token!r}")
    return DiffKey(number - 1, column)
