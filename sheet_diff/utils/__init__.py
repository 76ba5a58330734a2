"""Utility functions and helpers."""

from .logger import get_logger, StructuredLogger
from .normalizers import (
    to_cell_text,
    clean_header,
    clean_headers
)
from .converters import (
    normalize_boolean,
    parse_strict_date,
    parse_strict_number
)

__all__ = [
    "get_logger",
    "StructuredLogger",
    "to_cell_text",
    "clean_header",
    "clean_headers",
    "normalize_boolean",
    "parse_strict_date",
    "parse_strict_number",
]
