"""Text encodings for attribute values.

Every attribute kind stores its current and default value as text.  An
adapter converts between that text and the Python value, and is the single
owner of the list delimiter for its kind so that decoding and encoding can
never disagree.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Protocol, TypeVar

from .errors import AttributeParseError

V_co = TypeVar("V_co", covariant=True)

POSSIBLE_VALUES_DELIMITER = ";"
ENUMERATION_VALUES_DELIMITER = ":"

I32_MIN = -(2**31)
I32_MAX = 2**31 - 1
USIZE_MAX = 2**64 - 1

_SIGNED_RE = re.compile(r"[+-]?[0-9]+")
_UNSIGNED_RE = re.compile(r"\+?[0-9]+")


def _parse_bounded(
    raw: str, pattern: re.Pattern[str], low: int, high: int, expected: str, path: Path | None
) -> int:
    if not pattern.fullmatch(raw):
        raise AttributeParseError(path, raw, expected)
    value = int(raw)
    if not low <= value <= high:
        raise AttributeParseError(path, raw, expected)
    return value


def parse_i32(raw: str, path: Path | None = None) -> int:
    """Parse *raw* as a signed 32-bit integer."""

    return _parse_bounded(raw, _SIGNED_RE, I32_MIN, I32_MAX, "32-bit integer", path)


def parse_usize(raw: str, path: Path | None = None) -> int:
    """Parse *raw* as an unsigned integer."""

    return _parse_bounded(raw, _UNSIGNED_RE, 0, USIZE_MAX, "unsigned integer", path)


def split_values(raw: str, delimiter: str = POSSIBLE_VALUES_DELIMITER) -> list[str]:
    """Split *raw* on *delimiter*, keeping empty segments."""

    return raw.split(delimiter)


class ValueAdapter(Protocol[V_co]):
    """Adapter between stored text and a Python value."""

    def parse(self, raw: str, path: Path | None = None) -> V_co:
        """Parse *raw* text into a Python value."""

    def serialize(self, value: Any) -> str:
        """Serialise *value* into text for storage."""


class TextAdapter:
    """Adapter for plain string values."""

    def parse(self, raw: str, path: Path | None = None) -> str:
        return raw

    def serialize(self, value: Any) -> str:
        if not isinstance(value, str):
            raise TypeError("expected str")
        return value


class IntegerAdapter:
    """Adapter for signed 32-bit integer values.

    Only the storage type is checked on write; the attribute's own
    ``min_value``/``max_value`` are left to the caller.
    """

    def parse(self, raw: str, path: Path | None = None) -> int:
        return parse_i32(raw, path)

    def serialize(self, value: Any) -> str:
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError("expected int")
        if not I32_MIN <= value <= I32_MAX:
            raise ValueError(f"value {value} does not fit in a 32-bit signed integer")
        return str(value)


class ListAdapter:
    """Adapter for ordered lists of strings joined by a fixed delimiter."""

    def __init__(self, delimiter: str) -> None:
        self.delimiter = delimiter

    def parse(self, raw: str, path: Path | None = None) -> list[str]:
        return split_values(raw, self.delimiter)

    def serialize(self, value: Any) -> str:
        if isinstance(value, str) or not all(isinstance(p, str) for p in value):
            raise TypeError("expected list[str]")
        return self.delimiter.join(value)

    def __repr__(self) -> str:  # pragma: no cover - debugging aid
        return f"ListAdapter({self.delimiter!r})"


TEXT = TextAdapter()
INTEGER = IntegerAdapter()
SEMICOLON_LIST = ListAdapter(POSSIBLE_VALUES_DELIMITER)
COLON_LIST = ListAdapter(ENUMERATION_VALUES_DELIMITER)
