"""Conversion between integer minor units (grosze) and PLN decimal strings.

Minor units are the only representation used for storage, comparison and
arithmetic; decimal strings exist purely for input parsing and display.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from numbers import Integral
from typing import Optional

from piggybank.modules.common.exceptions import AmountFormatError, AmountRangeError, AmountTypeError

DECIMAL_PLACES = 2
MINOR_UNITS_PER_MAJOR = 10**DECIMAL_PLACES
MAX_SAFE_MINOR_UNITS = 2**53 - 1

AMOUNT_PATTERN = re.compile(r"[0-9]+(?:\.[0-9]{1,2})?")


@dataclass(slots=True, frozen=True)
class CurrencyDualFormat:
    minor_units: int
    display: str


def parse_amount_to_minor_units(value: str) -> int:
    """Parse ``"123.45"`` into ``12345``.

    Accepts one or more digits optionally followed by a dot and one or two
    digits, after trimming surrounding whitespace. No sign, separators or
    currency symbols.
    """
    if not isinstance(value, str):
        raise AmountTypeError("PLN amount must be provided as a string")

    normalized = value.strip()
    if AMOUNT_PATTERN.fullmatch(normalized) is None:
        raise AmountFormatError(
            "PLN amount must be a non-negative value with up to two decimal places"
        )

    units_part, _, fraction_part = normalized.partition(".")
    cents = int((fraction_part + "00")[:DECIMAL_PLACES])
    total = int(units_part) * MINOR_UNITS_PER_MAJOR + cents

    if total > MAX_SAFE_MINOR_UNITS:
        raise AmountRangeError("PLN amount exceeds supported range")
    return total


def parse_optional_amount(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    return parse_amount_to_minor_units(value)


def _ensure_safe_integer(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, (Integral, float)):
        raise AmountTypeError("Grosze value must be a finite number")
    if isinstance(value, float):
        if not math.isfinite(value):
            raise AmountTypeError("Grosze value must be a finite number")
        if not value.is_integer():
            raise AmountRangeError("Grosze value must be a safe integer")
    number = int(value)
    if abs(number) > MAX_SAFE_MINOR_UNITS:
        raise AmountRangeError("Grosze value must be a safe integer")
    return number


def _to_decimal_string(number: int) -> str:
    units, cents = divmod(abs(number), MINOR_UNITS_PER_MAJOR)
    sign = "-" if number < 0 else ""
    return f"{sign}{units}.{cents:0{DECIMAL_PLACES}d}"


def format_minor_units(value: int) -> str:
    """Format ``12345`` as ``"123.45"``; negative values are rejected."""
    number = _ensure_safe_integer(value)
    if number < 0:
        raise AmountRangeError("Grosze value cannot be negative")
    return _to_decimal_string(number)


def format_signed_minor_units(value: int) -> str:
    """Like :func:`format_minor_units` but allows negative values (deltas)."""
    return _to_decimal_string(_ensure_safe_integer(value))


def format_optional_minor_units(value: Optional[int]) -> Optional[str]:
    if value is None:
        return None
    return format_minor_units(value)


def to_dual_format(value: int) -> CurrencyDualFormat:
    return CurrencyDualFormat(minor_units=int(value), display=format_minor_units(value))


def to_optional_dual_format(value: Optional[int]) -> Optional[CurrencyDualFormat]:
    if value is None:
        return None
    return to_dual_format(value)


__all__ = [
    "AMOUNT_PATTERN",
    "CurrencyDualFormat",
    "MAX_SAFE_MINOR_UNITS",
    "format_minor_units",
    "format_optional_minor_units",
    "format_signed_minor_units",
    "parse_amount_to_minor_units",
    "parse_optional_amount",
    "to_dual_format",
    "to_optional_dual_format",
]
