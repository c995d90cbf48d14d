"""
Price Normalization

Stored prices drift between numbers and decimal strings ("19.99", "19,99",
"R$ 1.234,50"). Everything that multiplies by a price goes through
``normalize_price`` once, when the owning record is validated.
"""

from decimal import Decimal
import math
import re
from typing import Any, Optional

# Currency markers and whitespace stripped before parsing
_CURRENCY_MARKERS = re.compile(r"R\$|US\$|[$€£¥]|\s")
_PLAIN_NUMBER = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)$")


def _to_dot_decimal(text: str) -> str:
    """
    Rewrite ``text`` so that ``.`` is the only decimal separator.

    The right-most of ``,``/``.`` is the decimal separator and the other one
    groups thousands. A single comma alone is a decimal comma; several commas
    alone are thousands groups.
    """
    comma = text.rfind(",")
    dot = text.rfind(".")

    if comma == -1:
        return text
    if dot == -1:
        if text.count(",") == 1:
            return text.replace(",", ".")
        return text.replace(",", "")
    if comma > dot:
        return text.replace(".", "").replace(",", ".")
    return text.replace(",", "")


def normalize_price(value: Any) -> Optional[float]:
    """
    Coerce a stored price to a non-negative float.

    Returns None for anything that is not a finite, non-negative number
    (None, booleans, garbage strings, negatives, NaN/inf). Callers treat
    None as zero and exclude the affected line from money totals.

    Examples:
        >>> normalize_price("19,99")
        19.99
        >>> normalize_price("abc") is None
        True
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float, Decimal)):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        text = _to_dot_decimal(_CURRENCY_MARKERS.sub("", value))
        if not _PLAIN_NUMBER.match(text):
            return None
        number = float(text)
    else:
        return None

    if not math.isfinite(number) or number < 0:
        return None
    return number


def line_total(amount: int, price: float) -> float:
    """Monetary value of ``amount`` units at ``price``"""
    return amount * price


def round_money(value: float, digits: int = 2) -> float:
    """Round a money value for display"""
    return round(value, digits)
