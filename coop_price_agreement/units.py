"""
units.py — Conversion between human currency strings and ledger minor units.

The ledger stores amounts as u64 minor units ("octas"), 10^8 per major unit.
Everything here is integer string arithmetic; a float never touches an
amount because it cannot represent every minor-unit value exactly.

Fractional digits beyond the 8th are truncated, not rounded and not
rejected: "0.000000001" converts to 0.
"""

from __future__ import annotations

import re

from .exceptions import InvalidAmount

DECIMALS = 8
MINOR_UNITS_PER_MAJOR = 10 ** DECIMALS
U64_LIMIT = 2 ** 64

_DIGITS_RE = re.compile(r"[0-9]*")


def to_minor_units(value: str) -> int:
    """
    Convert a decimal string such as "1.25" into minor units (125000000).

    Raises:
        InvalidAmount: empty input, a sign, stray characters, or more than
            one decimal point.
    """
    text = str(value).strip()
    if not text or text == ".":
        raise InvalidAmount(f"'{value}' is not an amount")

    whole, _, frac = text.partition(".")
    if not _DIGITS_RE.fullmatch(whole) or not _DIGITS_RE.fullmatch(frac):
        raise InvalidAmount(f"'{value}' is not an amount")

    frac_padded = (frac + "0" * DECIMALS)[:DECIMALS]
    return int(whole or "0") * MINOR_UNITS_PER_MAJOR + int(frac_padded)


def from_minor_units(amount: int) -> str:
    """Render minor units as a major-unit decimal string, trailing zeros dropped."""
    if amount < 0:
        raise InvalidAmount(f"negative amount {amount}")
    whole, frac = divmod(int(amount), MINOR_UNITS_PER_MAJOR)
    if not frac:
        return str(whole)
    return f"{whole}.{frac:0{DECIMALS}d}".rstrip("0")


def parse_quantity(value: str) -> int:
    """Parse a whole-number quantity ("4" -> 4)."""
    text = str(value).strip()
    if not text or not _DIGITS_RE.fullmatch(text):
        raise InvalidAmount(f"quantity must be a whole number, got '{value}'")
    return int(text)
