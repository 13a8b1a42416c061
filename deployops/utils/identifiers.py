"""
Validation of Telegram chat/topic identifiers read from the environment.

Identifiers are converted the way JavaScript's ``Number()`` converts strings,
so values that the deploy pipeline's other tooling accepts are accepted here
too: surrounding whitespace is ignored, an empty string is zero, and
``0x``/``0o``/``0b`` literals are numbers. Anything else non-numeric is NaN.
"""

from __future__ import annotations

import math
import re
from typing import Optional

_DECIMAL_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$", re.ASCII)
_PREFIXED_RE = re.compile(r"^0([xob])([0-9a-f]+)$", re.IGNORECASE | re.ASCII)
_INFINITY_RE = re.compile(r"^([+-]?)Infinity$")
_BASES = {"x": 16, "o": 8, "b": 2}


def to_number(value: Optional[str]) -> float:
    """Convert ``value`` to a float, returning NaN when it is not numeric."""
    if value is None:
        return math.nan
    text = value.strip()
    if not text:
        return 0.0
    if _DECIMAL_RE.match(text):
        return float(text)
    prefixed = _PREFIXED_RE.match(text)
    if prefixed:
        try:
            return float(int(prefixed.group(2), _BASES[prefixed.group(1).lower()]))
        except ValueError:
            return math.nan
    infinity = _INFINITY_RE.match(text)
    if infinity:
        return -math.inf if infinity.group(1) == "-" else math.inf
    return math.nan


def is_valid_id(value: Optional[str]) -> bool:
    """True when ``value`` is a finite, non-zero number."""
    number = to_number(value)
    return math.isfinite(number) and number != 0


def has_valid_ids(chat_id: Optional[str], topic_id: Optional[str]) -> bool:
    """True when both configured identifiers are usable as-is."""
    return is_valid_id(chat_id) and is_valid_id(topic_id)


def parse_id(value: Optional[str]) -> int:
    """
    Integer form of a valid identifier.

    Raises ValueError for invalid or fractional values; Telegram ids are
    whole numbers, so ``"12.7"`` is rejected rather than truncated.
    """
    if not is_valid_id(value):
        raise ValueError(f"Invalid Telegram identifier: {value!r}")
    number = to_number(value)
    if not number.is_integer():
        raise ValueError(f"Telegram identifier is not a whole number: {value!r}")
    return int(number)
