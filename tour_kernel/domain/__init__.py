"""
Pure domain layer.

Decimal money helpers with NO dependencies on I/O, clocks or storage.
"""

from tour_kernel.domain.values import (
    format_currency,
    is_valid_amount,
    non_signaling,
    parse_amount,
    parse_code,
    percent_of,
    round_whole,
    safe_add,
    safe_multiply,
    safe_subtract,
    to_decimal,
)

__all__ = [
    "format_currency",
    "is_valid_amount",
    "non_signaling",
    "parse_amount",
    "parse_code",
    "percent_of",
    "round_whole",
    "safe_add",
    "safe_multiply",
    "safe_subtract",
    "to_decimal",
]
