from __future__ import annotations

from collections.abc import Sequence

from .attributes import (
    AnyAttribute,
    EnumerationListAttribute,
    IntegerAttribute,
    OrderedListAttribute,
)
from .values import parse_i32


def parse_attribute_value(attribute: AnyAttribute, tokens: Sequence[str]) -> object:
    """Turn command line *tokens* into a value for *attribute*.

    List kinds take one token per element; the other kinds take exactly one
    token.  Integers accept surrounding whitespace and must fit in 32 bits;
    the attribute's own range and candidate sets are not checked here.
    """
    if isinstance(attribute, (OrderedListAttribute, EnumerationListAttribute)):
        return list(tokens)
    if len(tokens) != 1:
        raise ValueError(f"{attribute.name} expects a single value, got {len(tokens)}")
    text = tokens[0]
    if isinstance(attribute, IntegerAttribute):
        try:
            return parse_i32(text.strip())
        except ValueError:
            raise ValueError(f"invalid integer for {attribute.name}: {text!r}") from None
    return text
