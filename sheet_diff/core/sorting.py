"""
Multi-key row ordering.
Single responsibility: build composite comparators and sort rows with them.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from ..utils.logger import get_logger
from .collation import DEFAULT_LOCALE, get_collator
from .dataset import Dataset, cell_value


logger = get_logger()

RowComparator = Callable[[Mapping[str, str], Mapping[str, str]], int]


class InvalidSortSpecificationError(ValueError):
    """Raised when a sort specification cannot be used to order rows."""

    def __init__(self, message: str, index: Optional[int] = None, criterion=None):
        super().__init__(message)
        self.index = index
        self.criterion = criterion


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def parse(cls, value: Union[str, "SortDirection"]) -> "SortDirection":
        """
        Parse a direction token.

        Accepts ``asc``/``ascending``/``desc``/``descending`` in any case.

        Raises:
            InvalidSortSpecificationError: For any other token
        """
        if isinstance(value, SortDirection):
            return value
        token = str(value).strip().lower()
        if token in ("asc", "ascending"):
            return cls.ASC
        if token in ("desc", "descending"):
            return cls.DESC
        raise InvalidSortSpecificationError(
            f"[SORT SPEC ERROR] Unknown sort direction '{value}'. "
            f"Suggestion: Use 'asc' or 'desc'."
        )


@dataclass(frozen=True)
class SortCriterion:
    """One (column, direction) ordering rule."""

    column: str
    direction: SortDirection = SortDirection.ASC

    def __str__(self) -> str:
        return f"{self.column}:{self.direction.value}"


class SortSpecification:
    """
    Ordered sort criteria. The first is primary; later ones break ties.

    A column repeated after its first occurrence is dropped.
    """

    def __init__(self, criteria: Iterable[Union[SortCriterion, Tuple[str, str]]] = ()):
        """
        Initialize specification.

        Args:
            criteria: SortCriterion objects or (column, direction) pairs

        Raises:
            InvalidSortSpecificationError: If a criterion names no column or
                has an unknown direction
        """
        kept: List[SortCriterion] = []
        seen = set()

        for index, item in enumerate(criteria):
            criterion = self._coerce(item, index)

            if criterion.column in seen:
                logger.debug("sort_spec.duplicate_dropped",
                             column=criterion.column,
                             index=index)
                continue
            seen.add(criterion.column)
            kept.append(criterion)

        self.criteria: Tuple[SortCriterion, ...] = tuple(kept)

    @staticmethod
    def _coerce(item, index: int) -> SortCriterion:
        if isinstance(item, SortCriterion):
            column, direction = item.column, item.direction
        else:
            try:
                if isinstance(item, str):
                    raise TypeError(item)
                column, direction = item
            except (TypeError, ValueError):
                raise InvalidSortSpecificationError(
                    f"[SORT SPEC ERROR] Criterion {index} is not a (column, direction) pair: {item!r}. "
                    f"Suggestion: Pass pairs such as ('City', 'asc').",
                    index=index, criterion=item
                )

        if not isinstance(column, str) or not column.strip():
            raise InvalidSortSpecificationError(
                f"[SORT SPEC ERROR] Criterion {index} has an empty column name: {item!r}. "
                f"Suggestion: Choose one of the dataset's columns.",
                index=index, criterion=item
            )

        try:
            direction = SortDirection.parse(direction)
        except InvalidSortSpecificationError as e:
            raise InvalidSortSpecificationError(
                f"{e} (criterion {index}: {item!r})", index=index, criterion=item
            )

        return SortCriterion(column, direction)

    @classmethod
    def parse(cls, tokens: Iterable[str]) -> "SortSpecification":
        """
        Build from ``COLUMN[:asc|desc]`` tokens.

        The direction is split off the last colon only when it is a known
        direction word, so column names may contain colons.
        """
        pairs = []
        for token in tokens:
            column, sep, direction = token.rpartition(":")
            if sep and direction.strip().lower() in ("asc", "ascending", "desc", "descending"):
                pairs.append((column, direction))
            else:
                pairs.append((token, SortDirection.ASC))
        return cls(pairs)

    @property
    def columns(self) -> List[str]:
        return [c.column for c in self.criteria]

    def __iter__(self):
        return iter(self.criteria)

    def __len__(self) -> int:
        return len(self.criteria)

    def __bool__(self) -> bool:
        return bool(self.criteria)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SortSpecification):
            return NotImplemented
        return self.criteria == other.criteria

    def __repr__(self) -> str:
        return f"SortSpecification([{', '.join(str(c) for c in self.criteria)}])"


def build_comparator(spec: Union[SortSpecification, Iterable],
                     locale: str = DEFAULT_LOCALE) -> RowComparator:
    """
    Build a composite row comparator.

    Each criterion compares the two rows' cells with locale collation
    (absent cells read as ``""``); the first non-zero result is returned,
    negated for descending criteria. Rows tying on every criterion compare
    equal, so callers must sort stably.

    Args:
        spec: Sort specification (or raw criteria)
        locale: Collation language tag

    Returns:
        Function returning -1, 0 or 1

    Raises:
        InvalidSortSpecificationError: If the specification is malformed
    """
    if not isinstance(spec, SortSpecification):
        spec = SortSpecification(spec)

    collator = get_collator(locale)
    criteria = [(c.column, c.direction is SortDirection.DESC) for c in spec]

    def compare(left: Mapping[str, str], right: Mapping[str, str]) -> int:
        for column, descending in criteria:
            result = collator.compare(cell_value(left, column), cell_value(right, column))
            if result:
                return -result if descending else result
        return 0

    return compare


def sort_rows(rows: Sequence[Mapping[str, str]],
              spec: Union[SortSpecification, Iterable],
              locale: str = DEFAULT_LOCALE) -> List[Mapping[str, str]]:
    """
    Return a stably sorted copy of ``rows``; the input is not mutated.

    An empty specification returns the rows in their original order.
    """
    if not isinstance(spec, SortSpecification):
        spec = SortSpecification(spec)

    if not spec:
        return list(rows)

    collator = get_collator(locale)
    # Stable passes from the last criterion to the first give the order of
    # build_comparator.
    result = list(rows)
    for criterion in reversed(spec.criteria):
        column = criterion.column
        result.sort(key=lambda row: collator.sort_key(cell_value(row, column)),
                    reverse=criterion.direction is SortDirection.DESC)

    logger.debug("sorter.sorted",
                 rows=len(result),
                 criteria=[str(c) for c in spec],
                 locale=locale)
    return result


def sort_dataset(dataset: Dataset, spec: Union[SortSpecification, Iterable],
                 locale: str = DEFAULT_LOCALE) -> Dataset:
    """Sorted copy of a dataset."""
    return dataset.with_rows(sort_rows(dataset.rows, spec, locale))
