"""Locale-tolerant parsing of numeric strings coming from spreadsheet exports."""

from __future__ import annotations

import math
import re
from typing import Optional, Union

from goalpath.core.errors import NumericParseError

# longest leading decimal literal, the same prefix a spreadsheet-style parseFloat accepts
_LEADING_NUMBER = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

Numeric = Union[str, int, float, None]


def parse_numeric(value: Numeric) -> float:
    """Parse ``value`` into a finite float.

    Commas are read as decimal separators and any whitespace (including
    thousand separators such as ``"1 234,56"``) is dropped before parsing.
    Raises ``NumericParseError`` for missing, empty or non-numeric input.
    """
    if value is None or isinstance(value, bool):
        raise NumericParseError(value)
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        normalized = re.sub(r"\s", "", str(value).strip().replace(",", "."))
        match = _LEADING_NUMBER.match(normalized)
        if match is None:
            raise NumericParseError(value)
        number = float(match.group(0))

    if not math.isfinite(number):
        raise NumericParseError(value)
    return number


def try_parse_numeric(value: Numeric) -> Optional[float]:
    """Like ``parse_numeric`` but returns ``None`` instead of raising."""
    try:
        return parse_numeric(value)
    except NumericParseError:
        return None


__all__ = ["Numeric", "parse_numeric", "try_parse_numeric"]
