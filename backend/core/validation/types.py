"""Type Tags for JSON Request Bodies

A closed set of tags describing decoded JSON values. `array` and `integer`
are refinements with their own predicates; every other tag is compared
against `type_tag_of(value)` directly.
"""
from __future__ import annotations

import math
from enum import Enum
from typing import Any


class TypeTag(str, Enum):
    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    OBJECT = "object"
    ARRAY = "array"

    def __str__(self) -> str:
        return self.value


def type_tag_of(value: Any) -> str:
    """Runtime type tag of a decoded JSON value.

    bool is tested before int because bool subclasses int in Python. JSON
    null reports as "null" so it never satisfies "object".
    """
    match value:
        case None:
            return "null"
        case bool():
            return "boolean"
        case int() | float():
            return "number"
        case str():
            return "string"
        case list() | tuple():
            return "array"
        case dict():
            return "object"
        case _:
            return type(value).__name__


def is_array(value: Any) -> bool:
    return type_tag_of(value) == "array"


def is_integer(value: Any) -> bool:
    """Numeric with zero fractional part. 3.0 counts, True and NaN do not."""
    if type_tag_of(value) != "number":
        return False
    if isinstance(value, int):
        return True
    return math.isfinite(value) and value.is_integer()


def matches(tag: TypeTag, value: Any) -> bool:
    match tag:
        case TypeTag.ARRAY:
            return is_array(value)
        case TypeTag.INTEGER:
            return is_integer(value)
        case _:
            return type_tag_of(value) == tag.value
