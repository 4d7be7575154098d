"""Currency conversion exports"""

from .conversion import (
    AMOUNT_PATTERN,
    MAX_SAFE_MINOR_UNITS,
    CurrencyDualFormat,
    format_minor_units,
    format_optional_minor_units,
    format_signed_minor_units,
    parse_amount_to_minor_units,
    parse_optional_amount,
    to_dual_format,
    to_optional_dual_format,
)

__all__ = [
    "AMOUNT_PATTERN",
    "MAX_SAFE_MINOR_UNITS",
    "CurrencyDualFormat",
    "format_minor_units",
    "format_optional_minor_units",
    "format_signed_minor_units",
    "parse_amount_to_minor_units",
    "parse_optional_amount",
    "to_dual_format",
    "to_optional_dual_format",
]
