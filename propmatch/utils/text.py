"""Text helpers shared by the filter pipeline and the demand matcher.

All substring checks in the engine are case-insensitive. ``casefold`` is used
instead of ``lower`` so accented Spanish text ("Jardín", "JARDÍN") compares
consistently.
"""

import re
from typing import Iterable, List, Optional


def fold(text: Optional[str]) -> str:
    """Return a case-folded, whitespace-collapsed version of ``text``.

    Example:
        >>> fold("  Las   CONDES ")
        'las condes'
    """
    if not text:
        return ""
    return re.sub(r"\s+", " ", text).strip().casefold()


def contains(haystack: Optional[str], needle: Optional[str]) -> bool:
    """Case-insensitive substring test. An empty needle always matches."""
    folded_needle = fold(needle)
    if not folded_needle:
        return True
    return folded_needle in fold(haystack)


def any_contains(haystacks: Iterable[Optional[str]], needle: Optional[str]) -> bool:
    """True if at least one of ``haystacks`` contains ``needle``."""
    return any(contains(haystack, needle) for haystack in haystacks)


def split_terms(value) -> List[str]:
    """Split a comma-separated string (or list of strings) into clean terms.

    Blank entries are dropped and duplicates removed case-insensitively,
    keeping the first spelling seen.

    Example:
        >>> split_terms("piscina, quincho,, Piscina")
        ['piscina', 'quincho']
    """
    if value is None:
        return []
    if isinstance(value, str):
        raw_terms = value.split(",")
    else:
        raw_terms = [str(item) for item in value if item is not None]

    terms: List[str] = []
    seen = set()
    for term in raw_terms:
        stripped = term.strip()
        key = fold(stripped)
        if stripped and key not in seen:
            seen.add(key)
            terms.append(stripped)
    return terms


def clean_optional(value: Optional[str]) -> Optional[str]:
    """Strip a free-text field, mapping blank strings to None."""
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None
