"""Indonesian/English shorthand amount parsing.

Handles the forms people actually type into a chat: ``15rb``, ``25 ribu``,
``2.5k``, ``1,5jt``, ``Rp 15.000`` and ``12.50``. Rupiah uses ``.`` for
thousands and ``,`` for decimals, English input the other way round; the
rules below are applied in a fixed order and the first that applies wins.
"""
import re
from decimal import Decimal, InvalidOperation
from typing import Optional

CURRENCY_MARKERS = re.compile(r"rupiah|idr|rp\.?")
WHITESPACE = re.compile(r"\s+")
LEADING_NUMBER = re.compile(r"\d+(?:[.,]\d+)?")
THOUSANDS_GROUPED = re.compile(r"^\d+(?:\.\d{3})+$")
NON_NUMERIC = re.compile(r"[^\d.,]")

# (suffix pattern, multiplier); thousands are checked before millions.
SHORTHAND_SUFFIXES = (
    (re.compile(r"rb|ribu"), Decimal(1000)),
    (re.compile(r"jt|juta"), Decimal(1000000)),
)


def _shorthand_prefix(text: str) -> Optional[Decimal]:
    """Numeric prefix of a shorthand amount; ``2,5`` reads as ``2.5``."""
    match = LEADING_NUMBER.search(text)
    if not match:
        return None
    return _to_decimal(match.group(0).replace(",", "."))


def _to_decimal(text: str) -> Optional[Decimal]:
    try:
        return Decimal(text)
    except InvalidOperation:
        return None


def parse_amount(text: str) -> Optional[Decimal]:
    """
    Parse a fragment suspected to hold a monetary quantity.

    Args:
        text: Fragment such as ``"15rb"``, ``"Rp 15.000"`` or ``"2.5k"``

    Returns:
        The amount, or None when the fragment holds no digits
    """
    if not text or not isinstance(text, str):
        return None

    cleaned = text.lower()
    cleaned = CURRENCY_MARKERS.sub("", cleaned)
    cleaned = WHITESPACE.sub("", cleaned)

    for suffix, multiplier in SHORTHAND_SUFFIXES:
        if suffix.search(cleaned):
            number = _shorthand_prefix(suffix.sub("", cleaned))
            return None if number is None else number * multiplier

    if cleaned.endswith("k"):
        number = _shorthand_prefix(cleaned[:-1])
        return None if number is None else number * 1000

    digits = NON_NUMERIC.sub("", cleaned)
    if not re.search(r"\d", digits):
        return None

    if "," not in digits and THOUSANDS_GROUPED.match(digits):
        return _to_decimal(digits.replace(".", ""))

    if "," in digits:
        # Dots before a decimal comma are thousands separators
        digits = digits.replace(".", "").replace(",", ".", 1)

    match = re.match(r"\d*\.?\d+", digits)
    if not match:
        return None
    return _to_decimal(match.group(0))
