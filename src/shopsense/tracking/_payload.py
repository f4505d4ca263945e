"""Shared helpers for shaping tracking payloads."""

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

_SLUG_STRIP = re.compile(r"[^a-z0-9]+")


def is_empty(value: object) -> bool:
    """Return True for None, blank strings and empty collections."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple, set, dict)):
        return len(value) == 0
    return False


def compact(data: dict) -> dict:
    """Drop blank keys and keys whose value is empty.

    Zero and False are kept: they are meaningful values, not absent ones.
    """
    return {key: value for key, value in data.items() if key != "" and not is_empty(value)}


def to_decimal(amount: object) -> Decimal | None:
    """Parse a monetary amount, returning None for blank or malformed input."""
    if amount is None or amount == "":
        return None
    try:
        return Decimal(str(amount))
    except (InvalidOperation, ValueError):
        return None


def to_cents(amount: object) -> int:
    """Convert an amount to minor currency units, rounding half away from zero.

    ``19.999`` becomes ``2000`` and ``19.994`` becomes ``1999``. Malformed
    amounts count as zero.
    """
    value = to_decimal(amount)
    if value is None:
        return 0
    return int((value * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_price(amount: object) -> str | None:
    """Render a price for the wire without float artefacts."""
    value = to_decimal(amount)
    if value is None:
        return None
    return format(value, "f")


def slugify(text: str) -> str:
    """Lowercase ``text`` and collapse anything non-alphanumeric to dashes."""
    return _SLUG_STRIP.sub("-", text.lower()).strip("-")
