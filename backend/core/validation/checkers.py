"""Request Shape Checkers

Each checker is a frozen descriptor built once at route registration and
reused for every request. Checkers share one signature:

    await checker.run(ctx) -> Ok(attachments) | Err(AppError)

Field checkers are synchronous and pure; `run` simply wraps `check`. Every
checker aggregates all violations it finds into a single error.
"""
from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping, Sequence

from core.errors import (
    AppError,
    Ok,
    Result,
    invalid_email,
    invalid_format,
    invalid_types,
    not_one_of,
    not_positive_integer,
    required_fields,
)
from .context import RequestContext
from .sanitize import is_valid_email
from .types import TypeTag, is_integer, matches, type_tag_of

Attachments = Mapping[str, Any]
Outcome = Result[Attachments, AppError]

PASS: Outcome = Ok(MappingProxyType({}))

_MISSING = object()
_POSITIVE_INT = re.compile(r"[0-9]+")


def resolve_path(data: Any, path: str) -> Any:
    """Walk a dotted path through nested mappings.

    Returns a sentinel (see `is_blank`) as soon as a level is missing or is
    not a mapping; never raises.
    """
    value = data
    for key in path.split("."):
        if not isinstance(value, Mapping) or key not in value:
            return _MISSING
        value = value[key]
    return value


def is_blank(value: Any) -> bool:
    """Missing, null or the empty string."""
    return value is _MISSING or value is None or value == ""


def parse_positive_int(value: Any) -> int | None:
    """Strictly positive integer from a JSON number or a digit string.

    Whole-valued floats such as 1.0 count, matching the `integer` type tag.
    """
    if is_integer(value):
        number = int(value)
        return number if number > 0 else None
    if isinstance(value, str) and _POSITIVE_INT.fullmatch(value):
        number = int(value)
        return number if number > 0 else None
    return None


class Checker(ABC):
    """Base class for every unit in a validation chain."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Short name used in logs."""

    @abstractmethod
    async def run(self, ctx: RequestContext) -> Outcome:
        """Validate the context. Ok carries entities to attach."""


class FieldChecker(Checker):
    """Checker with no external dependency; runs in one synchronous pass."""

    @abstractmethod
    def check(self, ctx: RequestContext) -> Outcome: ...

    async def run(self, ctx: RequestContext) -> Outcome:
        return self.check(ctx)


# ============================================================================
# Presence, type, enum and numeric checks
# ============================================================================

@dataclass(frozen=True, slots=True)
class RequiredFields(FieldChecker):
    """Every dotted path must resolve to a non-null, non-empty value."""
    fields: Sequence[str]

    def __post_init__(self):
        object.__setattr__(self, "fields", tuple(self.fields))

    @property
    def name(self) -> str:
        return "required_fields"

    def check(self, ctx: RequestContext) -> Outcome:
        missing = [path for path in self.fields if is_blank(resolve_path(ctx.body, path))]
        if missing:
            return required_fields(missing, origin=self.name)
        return PASS


@dataclass(frozen=True, slots=True)
class TypeMap(FieldChecker):
    """Type-check fields that are present in the body; absent ones are skipped."""
    types: Mapping[str, TypeTag | str]

    def __post_init__(self):
        object.__setattr__(
            self, "types", MappingProxyType({k: TypeTag(v) for k, v in self.types.items()})
        )

    @property
    def name(self) -> str:
        return "type_map"

    def check(self, ctx: RequestContext) -> Outcome:
        problems = []
        for field, tag in self.types.items():
            if field not in ctx.body:
                continue
            value = ctx.body[field]
            if matches(tag, value):
                continue
            match tag:
                case TypeTag.ARRAY:
                    problems.append(f"{field} must be an array")
                case TypeTag.INTEGER:
                    problems.append(f"{field} must be an integer")
                case _:
                    problems.append(f"{field} must be a {tag.value}, got {type_tag_of(value)}")
        if problems:
            return invalid_types(problems, origin=self.name)
        return PASS


@dataclass(frozen=True, slots=True)
class EnumConstraint(FieldChecker):
    """Field value, from the body or else the query string, must be one of `allowed`.

    Absent from both sources passes: enum constraints are opt-in, not
    presence checks.
    """
    field: str
    allowed: Sequence[Any]

    def __post_init__(self):
        object.__setattr__(self, "allowed", tuple(self.allowed))

    @property
    def name(self) -> str:
        return f"enum[{self.field}]"

    def check(self, ctx: RequestContext) -> Outcome:
        value = ctx.body.get(self.field)
        if is_blank(value):
            value = ctx.query.get(self.field)
        if is_blank(value):
            return PASS
        # Equality plus type match, so True never stands in for 1
        if any(value == option and type(value) is type(option) for option in self.allowed):
            return PASS
        return not_one_of(self.field, self.allowed, origin=self.name)


@dataclass(frozen=True, slots=True)
class NumericParams(FieldChecker):
    """Named path params, when present, must be strictly positive integers."""
    params: Sequence[str]

    def __post_init__(self):
        object.__setattr__(self, "params", tuple(self.params))

    @property
    def name(self) -> str:
        return "numeric_params"

    def check(self, ctx: RequestContext) -> Outcome:
        bad = [
            param for param in self.params
            if param in ctx.params and parse_positive_int(ctx.params[param]) is None
        ]
        if bad:
            return not_positive_integer(bad, origin=self.name)
        return PASS


# ============================================================================
# Format checks
# ============================================================================

_MONTH = re.compile(r"(?!0000)[0-9]{4}-(0[1-9]|1[0-2])")


@dataclass(frozen=True, slots=True)
class MonthFormat(FieldChecker):
    """Query parameter in YYYY-MM form, e.g. the ticket list month filter."""
    param: str = "month"

    @property
    def name(self) -> str:
        return f"month_format[{self.param}]"

    def check(self, ctx: RequestContext) -> Outcome:
        value = ctx.query.get(self.param)
        if value is None or _MONTH.fullmatch(value):
            return PASS
        return invalid_format(f"{self.param} must be in YYYY-MM format", field=self.param, origin=self.name)


@dataclass(frozen=True, slots=True)
class EmailFormat(FieldChecker):
    field: str = "email"

    @property
    def name(self) -> str:
        return f"email_format[{self.field}]"

    def check(self, ctx: RequestContext) -> Outcome:
        value = ctx.body.get(self.field)
        if is_blank(value) or (isinstance(value, str) and is_valid_email(value)):
            return PASS
        return invalid_email(self.field, origin=self.name)
