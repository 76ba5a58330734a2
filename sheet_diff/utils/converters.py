"""
Strict text parsing utilities.
Single responsibility: decide whether a cell's text is a boolean, date or number.
"""

import math
import re
from datetime import datetime
from typing import Optional


BOOLEAN_TOKENS = {
    "true": True,
    "false": False,
    "yes": True,
    "no": False,
}

# Only formats whose day/month order cannot be misread. Slash dates such as
# 01/02/2024 are deliberately absent.
DATE_FORMATS = (
    "%Y-%m-%d",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y/%m/%d",
    "%d.%m.%Y",
)

_NUMBER_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")

# strptime tolerates single-digit fields and stray padding; require the
# digit layout of the format explicitly.
_DATE_SHAPES = {
    "%Y-%m-%d": re.compile(r"^\d{4}-\d{2}-\d{2}$"),
    "%Y-%m-%dT%H:%M:%S": re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}$"),
    "%Y-%m-%d %H:%M:%S": re.compile(r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}$"),
    "%Y-%m-%d %H:%M": re.compile(r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}$"),
    "%Y/%m/%d": re.compile(r"^\d{4}/\d{2}/\d{2}$"),
    "%d.%m.%Y": re.compile(r"^\d{2}\.\d{2}\.\d{4}$"),
}


def normalize_boolean(val: str) -> Optional[bool]:
    """
    Parse a boolean token.
    
    Args:
        val: Cell text
        
    Returns:
        True/False for a recognised token, None otherwise
        
    Examples:
        >>> normalize_boolean("Yes")
        True
        >>> normalize_boolean("1") is None
        True
    """
    return BOOLEAN_TOKENS.get(val.strip().lower())


def parse_strict_date(val: str) -> Optional[datetime]:
    """
    Parse a date written in one of DATE_FORMATS.
    
    The whole string must match; impossible calendar dates return None.
    
    Args:
        val: Cell text
        
    Returns:
        Parsed datetime or None
    """
    val = val.strip()
    for fmt in DATE_FORMATS:
        if not _DATE_SHAPES[fmt].match(val):
            continue
        try:
            return datetime.strptime(val, fmt)
        except ValueError:
            continue
    return None


def parse_strict_number(val: str) -> Optional[float]:
    """
    Parse a plain decimal number.
    
    Thousand separators, currency symbols and nan/inf spellings are refused.
    
    Args:
        val: Cell text
        
    Returns:
        Float value or None if the text is not a finite number
        
    Examples:
        >>> parse_strict_number("-12.5")
        -12.5
        >>> parse_strict_number("1,234") is None
        True
    """
    val = val.strip()
    if not _NUMBER_RE.match(val):
        return None
    
    try:
        num = float(val)
    except (ValueError, OverflowError):
        return None
    
    if not math.isfinite(num):
        return None
    return num
