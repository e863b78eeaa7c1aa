"""Numeric normalization for scraped text.

Handles formats like '$1,299.00', '12.3K sold', '1.2M followers', '4.8 (203)'.
"""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation

# First number in the text, with thousands separators, and an optional
# magnitude suffix glued to it. A suffix followed by more letters only counts
# when those letters are a known unit ("12.3Ksold", "1.2Mfollowers");
# otherwise it is the start of a word ("3Months" is 3, not 3 million).
_UNIT_WORDS = r"sold|sales|followers?|reviews?|ratings?|products?|likes|views"
_NUMBER_RE = re.compile(
    r"(\d[\d,]*(?:\.\d+)?|\.\d+)"
    rf"([KkMm](?![A-Za-z])|[KkMm](?=(?i:{_UNIT_WORDS})\b))?"
)

_MAGNITUDES = {
    "k": Decimal(1_000),
    "m": Decimal(1_000_000),
}


def parse_number(text: str | None) -> float | None:
    """Extract the first number from ``text``, applying a K/M suffix.

    Returns None when no digits are found, so that "no price shown" stays
    distinguishable from a price of 0.

    >>> parse_number("12.3K sold")
    12300.0
    >>> parse_number("n/a") is None
    True
    """
    if not text:
        return None

    match = _NUMBER_RE.search(text)
    if not match:
        return None

    digits = match.group(1).replace(",", "")
    try:
        value = Decimal(digits)
    except InvalidOperation:
        return None

    suffix = match.group(2)
    if suffix:
        value *= _MAGNITUDES[suffix.lower()]
    return float(value)


def parse_count(text: str | None) -> int | None:
    """Like :func:`parse_number` but rounded to a whole count."""
    value = parse_number(text)
    if value is None:
        return None
    return int(round(value))
