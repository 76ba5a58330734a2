"""
Cell type classification.
Single responsibility: map one cell's text to a coarse semantic type.
"""

from enum import Enum

from ..utils.converters import normalize_boolean, parse_strict_date, parse_strict_number


class CellType(str, Enum):
    """Closed set of cell types; TEXT is the fallback."""

    NUMBER = "number"
    DATE = "date"
    BOOLEAN = "boolean"
    TEXT = "text"


def classify(value: str) -> CellType:
    """
    Classify cell text. Total: every string maps to exactly one type.

    Rules, first match wins:

    1. ``""`` is TEXT.
    2. ``true``/``false``/``yes``/``no`` in any case is BOOLEAN.
    3. A full match of one of ``converters.DATE_FORMATS``
       (``2024-03-21``, ``2024-03-21T10:00:00``, ``2024-03-21 10:00:00``,
       ``2024-03-21 10:00``, ``2024/03/21``, ``21.03.2024``) that is also a
       real calendar date is DATE.
    4. A plain finite decimal (optional sign, fraction and exponent; no
       thousand separators) is NUMBER.
    5. Anything else is TEXT.

    Surrounding whitespace is ignored for rules 2-4.

    Args:
        value: Cell text

    Returns:
        Cell type
    """
    if value is None or value == "":
        return CellType.TEXT

    if normalize_boolean(value) is not None:
        return CellType.BOOLEAN

    if parse_strict_date(value) is not None:
        return CellType.DATE

    if parse_strict_number(value) is not None:
        return CellType.NUMBER

    return CellType.TEXT
