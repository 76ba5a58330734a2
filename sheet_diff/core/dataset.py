"""
Tabular data model.
Single responsibility: hold rows of text cells keyed by a declared header list.
"""

from dataclasses import dataclass, field
from collections.abc import Mapping
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from ..utils.normalizers import to_cell_text


class Row(Mapping):
    """
    One record of column -> text cells, bound to a header list.

    A column in the header list that was never supplied is *absent*; a
    column supplied as ``""`` is *blank*. Comparison treats both as ``""``
    through :meth:`value`. Indexing a column outside the header list raises
    ``KeyError`` so a misspelt column never compares as equal blanks.
    """

    __slots__ = ("_headers", "_cells")

    def __init__(self, cells: Mapping[str, Any], headers: Optional[Sequence[str]] = None):
        """
        Initialize row.

        Args:
            cells: Supplied cell values (None becomes blank)
            headers: Declared columns; defaults to the supplied keys

        Raises:
            ValueError: If a supplied column is not a declared header
        """
        if headers is None:
            headers = list(cells.keys())
        self._headers: Tuple[str, ...] = tuple(headers)

        declared = set(self._headers)
        unknown = [col for col in cells if col not in declared]
        if unknown:
            raise ValueError(f"Row has columns outside its headers: {unknown}")

        self._cells: Dict[str, str] = {col: to_cell_text(val) for col, val in cells.items()}

    @property
    def headers(self) -> Tuple[str, ...]:
        return self._headers

    def value(self, column: str) -> str:
        """Cell text for comparison; absent and unknown columns read as ``""``."""
        return self._cells.get(column, "")

    def is_absent(self, column: str) -> bool:
        return column not in self._cells

    def __getitem__(self, column: str) -> str:
        if column not in self._cells:
            if column in self._headers:
                return ""
            raise KeyError(column)
        return self._cells[column]

    def __iter__(self) -> Iterator[str]:
        return iter(self._headers)

    def __len__(self) -> int:
        return len(self._headers)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Row):
            return self._headers == other._headers and self._cells == other._cells
        return Mapping.__eq__(self, other)

    def __hash__(self):
        return hash((self._headers, tuple(sorted(self._cells.items()))))

    def __repr__(self) -> str:
        return f"Row({dict(self.items())!r})"


def cell_value(row: Optional[Mapping[str, Any]], column: str) -> str:
    """
    Comparison value of a cell in any row-like mapping.

    Absent keys, missing rows and None all read as ``""``.
    """
    if row is None:
        return ""
    if isinstance(row, Row):
        return row.value(column)
    return to_cell_text(row.get(column))


def unified_headers(*header_lists: Iterable[str]) -> List[str]:
    """
    Union of header lists, ordered by first appearance.

    Accepts plain header lists or Dataset objects.
    """
    seen = {}
    for headers in header_lists:
        if headers is None:
            continue
        if isinstance(headers, Dataset):
            headers = headers.headers
        for header in headers:
            seen.setdefault(header, None)
    return list(seen)


@dataclass(frozen=True)
class Dataset:
    """Ordered rows plus the header list they were read with."""

    name: str
    headers: Tuple[str, ...]
    rows: Tuple[Row, ...] = field(default_factory=tuple)
    source: Optional[str] = None

    @classmethod
    def from_records(cls, name: str, headers: Sequence[str],
                     records: Iterable[Mapping[str, Any]],
                     source: Optional[str] = None) -> "Dataset":
        """
        Build a dataset from plain mappings.

        Args:
            name: Display name
            headers: Declared column names
            records: One mapping per row
            source: Where the data came from (path or URL)

        Returns:
            Dataset

        Raises:
            ValueError: If a record has a column outside ``headers``
        """
        headers = tuple(headers)
        rows = tuple(Row(record, headers) for record in records)
        return cls(name=name, headers=headers, rows=rows, source=source)

    def with_rows(self, rows: Iterable[Row]) -> "Dataset":
        """Copy of this dataset holding ``rows`` in the given order."""
        return Dataset(name=self.name, headers=self.headers,
                       rows=tuple(rows), source=self.source)

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[Row]:
        return iter(self.rows)

    def __getitem__(self, index: int) -> Row:
        return self.rows[index]
