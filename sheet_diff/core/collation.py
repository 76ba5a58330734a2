"""
Locale-aware string collation.
Single responsibility: order cell text the way a reader of the locale expects.
"""

import re
from functools import lru_cache
from typing import Tuple

from pyuca import Collator

from ..utils.logger import get_logger


logger = get_logger()

DEFAULT_LOCALE = "he"

# Distinct cell texts whose collation keys are kept between sorts
KEY_CACHE_SIZE = 4096

_LOCALE_RE = re.compile(r"^[A-Za-z]{2,3}([-_][A-Za-z0-9]{2,8})*$")


@lru_cache(maxsize=1)
def _uca_collator() -> Collator:
    # Loading the DUCET table is slow; share one instance.
    logger.debug("collation.table_loading")
    return Collator()


@lru_cache(maxsize=KEY_CACHE_SIZE)
def collation_key(text: str) -> Tuple[int, ...]:
    """UCA sort key of ``text``."""
    return tuple(_uca_collator().sort_key(text))


class LocaleCollator:
    """
    Compare strings by Unicode Collation Algorithm keys.

    Strings whose keys are equal (for example text differing only in
    zero-width or direction marks) compare as 0, so a later sort criterion
    decides their order.
    """

    def __init__(self, locale: str = DEFAULT_LOCALE):
        """
        Initialize collator.

        Args:
            locale: Language tag such as ``he`` or ``en-US``

        Raises:
            ValueError: If the tag is not a well-formed language tag
        """
        if not locale or not _LOCALE_RE.match(locale):
            raise ValueError(f"Invalid locale tag: {locale!r}")
        self.locale = locale

    def sort_key(self, text: str) -> Tuple[int, ...]:
        return collation_key(text)

    def compare(self, left: str, right: str) -> int:
        if left == right:
            return 0
        left_key = collation_key(left)
        right_key = collation_key(right)
        if left_key < right_key:
            return -1
        if left_key > right_key:
            return 1
        return 0


@lru_cache(maxsize=None)
def get_collator(locale: str = DEFAULT_LOCALE) -> LocaleCollator:
    """Shared collator per locale tag."""
    return LocaleCollator(locale)
