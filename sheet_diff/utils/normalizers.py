"""
Cell and header normalization utilities.
Single responsibility: turn provider values into the text the core compares.
"""

import math
import re
from typing import Any, List


_INVISIBLE_RE = re.compile(r"[\u200B-\u200D\u2060\ufeff]")
_UNNAMED_RE = re.compile(r"^Unnamed: (\d+)(_level_\d+)?$")


def to_cell_text(val: Any) -> str:
    """
    Convert a provider value to cell text.
    
    None and NaN become the empty string; everything else goes through str().
    
    Args:
        val: Raw value from a reader
        
    Returns:
        Cell text
    """
    if val is None:
        return ""
    if isinstance(val, float) and math.isnan(val):
        return ""
    if isinstance(val, str):
        return val
    # pandas.NA / NaT compare unequal to themselves and have no truth value
    try:
        if val != val:
            return ""
    except TypeError:
        return ""
    return str(val)


def clean_header(name: Any, position: int) -> str:
    """
    Clean a column header.
    
    Strips invisible characters and surrounding whitespace. Placeholder
    headers pandas invents for empty header cells become ``Column N``.
    
    Args:
        name: Header as read
        position: Zero-based column position
        
    Returns:
        Clean header text
    """
    text = _INVISIBLE_RE.sub("", to_cell_text(name)).strip()
    
    match = _UNNAMED_RE.match(text)
    if match or not text:
        return f"Column {position + 1}"
    return text


def clean_headers(names: List[Any]) -> List[str]:
    """
    Clean a header row and make every name unique.
    
    Duplicates get a ``.N`` suffix the same way pandas mangles them,
    skipping any suffix that names another column of the row.
    
    Args:
        names: Headers as read
        
    Returns:
        Unique clean headers in the original order
    """
    cleaned = [clean_header(name, position) for position, name in enumerate(names)]
    taken = set()
    counters = {}
    headers = []
    for header in cleaned:
        if header in taken:
            base = header
            n = counters.get(base, 0)
            while header in taken or header in cleaned:
                n += 1
                header = f"{base}.{n}"
            counters[base] = n
        taken.add(header)
        headers.append(header)
    return headers
