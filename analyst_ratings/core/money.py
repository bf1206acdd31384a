"""Currency-flexible monetary amounts.

Upstream rating feeds quote price targets either as bare numbers or as
decorated strings such as ``"$1,250.00"``. Amounts are held as plain floats;
the helpers here convert between that form, the wire form and whatever the
database driver hands back.
"""

from __future__ import annotations

import math
from typing import Annotated, Any

from pydantic import BeforeValidator, PlainSerializer

_STRIPPED_CHARACTERS = ("$", ",")


class MoneyParseError(ValueError):
    """Raised when an inbound amount cannot be read as a number."""

    def __init__(self, raw: Any) -> None:
        super().__init__(f"invalid money value {raw!r}")
        self.raw = raw


class MoneyConversionError(ValueError):
    """Raised when a stored amount has an unexpected representation."""

    def __init__(self, raw: Any, reason: str) -> None:
        super().__init__(f"cannot convert stored money value {raw!r}: {reason}")
        self.raw = raw


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def parse_money(value: Any) -> float:
    """Parse a wire amount into a finite float.

    ``None`` and strings that are empty once ``$`` and ``,`` are removed
    yield ``0.0``. Infinities, NaN and integers too large for a float are
    rejected with :class:`MoneyParseError`.
    """

    if value is None:
        return 0.0
    if not isinstance(value, str) and not _is_number(value):
        raise MoneyParseError(value)

    cleaned = value
    if isinstance(value, str):
        cleaned = value.strip()
        for char in _STRIPPED_CHARACTERS:
            cleaned = cleaned.replace(char, "")
        if not cleaned:
            return 0.0
    try:
        amount = float(cleaned)
    except (ValueError, OverflowError) as exc:
        raise MoneyParseError(value) from exc
    if not math.isfinite(amount):
        raise MoneyParseError(value)
    return amount


def format_money(value: float) -> float:
    """Return the outbound wire form, always a bare number."""

    return float(value)


def money_from_storage(raw: Any) -> float:
    """Convert a driver-provided column value into a float."""

    if raw is None:
        return 0.0
    if _is_number(raw):
        return float(raw)
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = bytes(raw).decode("ascii")
        except UnicodeDecodeError as exc:
            raise MoneyConversionError(raw, "not an ASCII numeric string") from exc
    if isinstance(raw, str):
        try:
            return float(raw)
        except ValueError as exc:
            raise MoneyConversionError(raw, "malformed numeric string") from exc
    raise MoneyConversionError(raw, f"unexpected type {type(raw).__name__}")


def money_to_storage(value: Any) -> float:
    """Return the native numeric value bound to the database column."""

    return float(value)


Money = Annotated[
    float,
    BeforeValidator(parse_money),
    PlainSerializer(format_money, return_type=float),
]


__all__ = [
    "Money",
    "MoneyConversionError",
    "MoneyParseError",
    "format_money",
    "money_from_storage",
    "money_to_storage",
    "parse_money",
]
