"""Error Builders

Ergonomic constructors for the errors the request validation layer and the
database layer produce. Each builder returns an `Err` wrapping an AppError.
"""
from typing import Any, Iterable

from .types import AppError, ErrorCode, ErrorContext, Err


# =============================================================================
# Validation Errors (E2xxx)
# =============================================================================

def validation_error(
    message: str,
    *,
    code: ErrorCode = ErrorCode.E2000_VALIDATION_GENERIC,
    field: str | None = None,
    origin: str = "",
    **metadata,
) -> Err[AppError]:
    """Create validation error."""
    meta = {"field": field, **metadata}
    return Err(AppError(
        code=code,
        message=message,
        context=ErrorContext(origin=origin),
        metadata={k: v for k, v in meta.items() if v is not None},
    ))


def required_fields(fields: Iterable[str], origin: str = "") -> Err[AppError]:
    missing = list(fields)
    return validation_error(
        f"Missing required fields: {', '.join(missing)}",
        code=ErrorCode.E2001_REQUIRED_FIELD_MISSING,
        origin=origin,
        fields=missing,
    )


def required_field(field: str, origin: str = "") -> Err[AppError]:
    return validation_error(
        f"{field} is required",
        code=ErrorCode.E2001_REQUIRED_FIELD_MISSING,
        field=field,
        origin=origin,
    )


def invalid_types(problems: list[str], origin: str = "") -> Err[AppError]:
    return validation_error(
        "; ".join(problems),
        code=ErrorCode.E2004_INVALID_TYPE,
        origin=origin,
        error_count=len(problems),
    )


def invalid_format(message: str, field: str | None = None, origin: str = "") -> Err[AppError]:
    return validation_error(
        message,
        code=ErrorCode.E2002_INVALID_FORMAT,
        field=field,
        origin=origin,
    )


def not_positive_integer(names: list[str], origin: str = "") -> Err[AppError]:
    return invalid_format(
        "; ".join(f"{name} must be a positive integer" for name in names),
        field=names[0] if len(names) == 1 else None,
        origin=origin,
    )


def not_one_of(field: str, allowed: Iterable[Any], origin: str = "") -> Err[AppError]:
    options = ", ".join(str(v) for v in allowed)
    return validation_error(
        f"{field} must be one of: {options}",
        code=ErrorCode.E2005_CONSTRAINT_VIOLATION,
        field=field,
        origin=origin,
    )


def constraint_violation(message: str, origin: str = "", **metadata) -> Err[AppError]:
    return validation_error(
        message,
        code=ErrorCode.E2005_CONSTRAINT_VIOLATION,
        origin=origin,
        **metadata,
    )


def invalid_email(field: str, origin: str = "") -> Err[AppError]:
    return validation_error(
        f"{field} must be a valid email address",
        code=ErrorCode.E2010_INVALID_EMAIL,
        field=field,
        origin=origin,
    )


def invalid_json(message: str, origin: str = "") -> Err[AppError]:
    return validation_error(
        f"Invalid JSON: {message}",
        code=ErrorCode.E2021_INVALID_JSON,
        origin=origin,
    )


# =============================================================================
# Database Errors (E4xxx)
# =============================================================================

def not_found(entity: str, id: Any, origin: str = "") -> Err[AppError]:
    return Err(AppError(
        code=ErrorCode.E4010_NOT_FOUND,
        message=f"{entity} with ID {id} not found",
        context=ErrorContext(origin=origin),
        metadata={"entity": entity, "id": id},
    ))


# =============================================================================
# Internal Errors (E9xxx)
# =============================================================================

def internal_error(
    message: str = "An unexpected error occurred",
    *,
    origin: str = "",
    cause: Exception | None = None,
) -> Err[AppError]:
    return Err(AppError(
        code=ErrorCode.E9001_UNEXPECTED_ERROR,
        message=message,
        context=ErrorContext(origin=origin),
        cause=cause,
    ))
