"""Typed firmware attributes.

An attribute directory is classified once, from its ``type`` property and the
type override table, into one of five kinds.  Each kind parses its own
metadata and reads/writes ``current_value`` through a fixed value adapter.
Current values are cached per attribute; every write clears the cache.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, ClassVar, Generic, TypeVar, Union

from .cache import ValueCache
from .config import DEFAULT_TYPE_OVERRIDES, TypeOverride
from .errors import MissingDirectoryError, UnsupportedAttributeTypeError
from .io_props import (
    PROPERTY_CURRENT_VALUE,
    PROPERTY_DEFAULT_VALUE,
    PROPERTY_DISPLAY_NAME,
    PROPERTY_DISPLAY_NAME_LANGUAGE_CODE,
    PROPERTY_POSSIBLE_VALUES,
    PROPERTY_TYPE,
    read_property,
    try_read_property,
    write_property,
)
from .root import entry_name
from .values import (
    COLON_LIST,
    I32_MAX,
    INTEGER,
    SEMICOLON_LIST,
    TEXT,
    ValueAdapter,
    parse_i32,
    parse_usize,
    split_values,
)

logger = logging.getLogger("pyfwattr.attributes")

TYPE_ENUMERATION = "enumeration"
TYPE_INTEGER = "integer"
TYPE_STRING = "string"
TYPE_ORDERED_LIST = "ordered-list"
TYPE_ENUMERATION_LIST = "enumeration-list"

DEFAULT_INTEGER_MIN_VALUE = 0
DEFAULT_INTEGER_MAX_VALUE = I32_MAX
DEFAULT_INTEGER_SCALAR_INCREMENT = 1

DEFAULT_MIN_STRING_LENGTH = 0
DEFAULT_MAX_STRING_LENGTH = 128

PROPERTY_ELEMENTS = "elements"

V = TypeVar("V")
N = TypeVar("N")


def _optional_number(
    path: Path, name: str, parse: Callable[[str, Path], N], default: N
) -> N:
    raw = try_read_property(path, name)
    return default if raw is None else parse(raw, path / name)


def _optional_list(path: Path, *names: str) -> list[str]:
    """Return the first present property of *names* split on ``;``."""
    for name in names:
        raw = try_read_property(path, name)
        if raw is not None:
            return split_values(raw)
    return []


@dataclass
class CommonAttribute(Generic[V]):
    """Metadata shared by every attribute kind."""

    path: Path
    name: str
    default_value: V | None = None
    display_name: str | None = None
    display_name_language_code: str | None = None
    _cache: ValueCache[V] = field(
        default_factory=ValueCache, init=False, repr=False, compare=False
    )

    @classmethod
    def load(cls, path: Path, adapter: ValueAdapter[V]) -> CommonAttribute[V]:
        path = Path(path)
        name = entry_name(path)
        raw_default = try_read_property(path, PROPERTY_DEFAULT_VALUE)
        default_value = (
            None
            if raw_default is None
            else adapter.parse(raw_default, path / PROPERTY_DEFAULT_VALUE)
        )
        return cls(
            path=path,
            name=name,
            default_value=default_value,
            display_name=try_read_property(path, PROPERTY_DISPLAY_NAME),
            display_name_language_code=try_read_property(
                path, PROPERTY_DISPLAY_NAME_LANGUAGE_CODE
            ),
        )

    @property
    def label(self) -> str:
        """Human readable name, falling back to :attr:`name`."""
        return self.name if self.display_name is None else self.display_name

    def cached(self, compute: Callable[[], V]) -> V:
        return self._cache.get_or_compute(compute)

    def invalidate_cache(self) -> None:
        self._cache.invalidate()


class Attribute(ABC, Generic[V]):
    """Base class of the five attribute kinds.

    Subclasses set :attr:`kind` and :attr:`adapter`; the adapter owns the
    text encoding of both ``current_value`` and ``default_value``.
    """

    kind: ClassVar[str]
    adapter: ClassVar[ValueAdapter[Any]]

    common: CommonAttribute[V]

    @classmethod
    @abstractmethod
    def load(cls, path: Path) -> Attribute[V]:
        """Build the attribute from its directory, reading metadata once."""

    @property
    def name(self) -> str:
        return self.common.name

    @property
    def path(self) -> Path:
        return self.common.path

    @property
    def label(self) -> str:
        return self.common.label

    @property
    def default_value(self) -> V | None:
        return self.common.default_value

    @property
    def choices(self) -> list[str] | None:
        """Candidate values for kinds that have a candidate set."""
        return None

    def _read_current_value(self) -> V:
        raw = read_property(self.path, PROPERTY_CURRENT_VALUE)
        return self.adapter.parse(raw, self.path / PROPERTY_CURRENT_VALUE)

    def current_value(self) -> V:
        """Return the current value, reading storage only on a cache miss."""
        return self.common.cached(self._read_current_value)

    def write_current_value(self, value: V) -> None:
        """Persist *value* as the new current value.

        The value is not checked against the attribute's range or candidate
        set.  The cache is cleared whether or not the write succeeds.
        """
        raw = self.adapter.serialize(value)
        try:
            write_property(self.path, PROPERTY_CURRENT_VALUE, raw)
        finally:
            self.common.invalidate_cache()

    def invalidate_cache(self) -> None:
        self.common.invalidate_cache()


@dataclass
class EnumerationAttribute(Attribute[str]):
    common: CommonAttribute[str]
    possible_values: list[str] = field(default_factory=list)

    kind = TYPE_ENUMERATION
    adapter = TEXT

    @classmethod
    def load(cls, path: Path) -> EnumerationAttribute:
        path = Path(path)
        common = CommonAttribute.load(path, cls.adapter)
        return cls(common, _optional_list(path, PROPERTY_POSSIBLE_VALUES))

    @property
    def choices(self) -> list[str]:
        return list(self.possible_values)


@dataclass
class IntegerAttribute(Attribute[int]):
    common: CommonAttribute[int]
    min_value: int = DEFAULT_INTEGER_MIN_VALUE
    max_value: int = DEFAULT_INTEGER_MAX_VALUE
    scalar_increment: int = DEFAULT_INTEGER_SCALAR_INCREMENT

    kind = TYPE_INTEGER
    adapter = INTEGER

    @classmethod
    def load(cls, path: Path) -> IntegerAttribute:
        path = Path(path)
        common = CommonAttribute.load(path, cls.adapter)
        return cls(
            common,
            min_value=_optional_number(
                path, "min_value", parse_i32, DEFAULT_INTEGER_MIN_VALUE
            ),
            max_value=_optional_number(
                path, "max_value", parse_i32, DEFAULT_INTEGER_MAX_VALUE
            ),
            scalar_increment=_optional_number(
                path, "scalar_increment", parse_i32, DEFAULT_INTEGER_SCALAR_INCREMENT
            ),
        )


@dataclass
class StringAttribute(Attribute[str]):
    common: CommonAttribute[str]
    min_length: int = DEFAULT_MIN_STRING_LENGTH
    max_length: int = DEFAULT_MAX_STRING_LENGTH
    # freeform guidance text, not a list of choices
    hint: str | None = None

    kind = TYPE_STRING
    adapter = TEXT

    @classmethod
    def load(cls, path: Path) -> StringAttribute:
        path = Path(path)
        common = CommonAttribute.load(path, cls.adapter)
        return cls(
            common,
            min_length=_optional_number(
                path, "min_length", parse_usize, DEFAULT_MIN_STRING_LENGTH
            ),
            max_length=_optional_number(
                path, "max_length", parse_usize, DEFAULT_MAX_STRING_LENGTH
            ),
            hint=try_read_property(path, PROPERTY_POSSIBLE_VALUES),
        )


@dataclass
class OrderedListAttribute(Attribute[list[str]]):
    common: CommonAttribute[list[str]]
    elements: list[str] = field(default_factory=list)

    kind = TYPE_ORDERED_LIST
    adapter = SEMICOLON_LIST

    @classmethod
    def load(cls, path: Path) -> OrderedListAttribute:
        path = Path(path)
        common = CommonAttribute.load(path, cls.adapter)
        return cls(
            common, _optional_list(path, PROPERTY_ELEMENTS, PROPERTY_POSSIBLE_VALUES)
        )

    @property
    def choices(self) -> list[str]:
        return list(self.elements)


@dataclass
class EnumerationListAttribute(Attribute[list[str]]):
    common: CommonAttribute[list[str]]
    possible_values: list[str] = field(default_factory=list)

    kind = TYPE_ENUMERATION_LIST
    # current/default values are ':'-joined, possible_values stay ';'-joined
    adapter = COLON_LIST

    @classmethod
    def load(cls, path: Path) -> EnumerationListAttribute:
        path = Path(path)
        common = CommonAttribute.load(path, cls.adapter)
        return cls(common, _optional_list(path, PROPERTY_POSSIBLE_VALUES))

    @property
    def choices(self) -> list[str]:
        return list(self.possible_values)


AnyAttribute = Union[
    EnumerationAttribute,
    IntegerAttribute,
    StringAttribute,
    OrderedListAttribute,
    EnumerationListAttribute,
]

ATTRIBUTE_TYPES: dict[str, type[AnyAttribute]] = {
    cls.kind: cls
    for cls in (
        EnumerationAttribute,
        IntegerAttribute,
        StringAttribute,
        OrderedListAttribute,
        EnumerationListAttribute,
    )
}


def attribute_type(
    path: Path, overrides: Iterable[TypeOverride] = DEFAULT_TYPE_OVERRIDES
) -> str:
    """Return the attribute kind of *path* after applying *overrides*."""
    path = Path(path)
    name = entry_name(path)
    reported = read_property(path, PROPERTY_TYPE)
    for override in overrides:
        if override.name == name and override.reported == reported:
            logger.debug(
                "attribute %s reports type %r, treating it as %r",
                name,
                reported,
                override.actual,
            )
            return override.actual
    return reported


def attribute_from_path(
    path: Path, overrides: Iterable[TypeOverride] = DEFAULT_TYPE_OVERRIDES
) -> AnyAttribute:
    """Classify and load the attribute directory at *path*."""
    path = Path(path)
    if not path.is_dir():
        raise MissingDirectoryError(path)
    kind = attribute_type(path, overrides)
    try:
        cls = ATTRIBUTE_TYPES[kind]
    except KeyError:
        raise UnsupportedAttributeTypeError(kind) from None
    return cls.load(path)
