"""Defensive numeric parsing and inclusive range checks.

Search forms submit bounds as strings ("", "3", "$150.000.000", "abc").
None of these may crash a search: anything that is not a usable number
becomes ``None``, which the engine treats as "no constraint".
"""

import math
import re
from typing import Any, Optional


def parse_bound(value: Any) -> Optional[float]:
    """Parse a numeric range bound.

    Args:
        value: int, float, numeric string, or anything else

    Returns:
        The bound as float, or None when the value is absent or unparseable

    Example:
        >>> parse_bound(" 3 ")
        3.0
        >>> parse_bound("three") is None
        True
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        cleaned = value.strip()
        if not cleaned:
            return None
        try:
            number = float(cleaned)
        except ValueError:
            return None
    else:
        return None

    if math.isnan(number) or math.isinf(number):
        return None
    return number


def parse_amount(value: Any) -> Optional[float]:
    """Parse a money amount typed into a search form.

    Numbers pass through :func:`parse_bound`. Strings keep only their digits,
    so currency symbols and thousands separators are ignored
    ("$150.000.000" -> 150000000). A string without digits is no bound.

    Example:
        >>> parse_amount("$150.000.000")
        150000000.0
        >>> parse_amount("n/a") is None
        True
    """
    if isinstance(value, str):
        digits = re.sub(r"\D", "", value)
        if not digits:
            return None
        return float(int(digits))
    return parse_bound(value)


def within_bounds(
    value: float, lower: Optional[float] = None, upper: Optional[float] = None
) -> bool:
    """Inclusive range check where a missing bound is unbounded on that side.

    An inverted range (``lower > upper``) matches nothing.
    """
    if lower is not None and value < lower:
        return False
    if upper is not None and value > upper:
        return False
    return True


def format_figure(value: float) -> str:
    """Render a number for people: thousands separators, no exponent.

    Whole numbers drop their decimals; fractions keep up to two places.

    Example:
        >>> format_figure(1500000)
        '1,500,000'
        >>> format_figure(78.5)
        '78.5'
    """
    number = float(value)
    if number.is_integer():
        return f"{int(number):,}"
    return f"{number:,.2f}".rstrip("0").rstrip(".")
