"""Monadic Error Handling

- Result[T, E]: Ok / Err container for success or failure
- AppError: error with code, message, metadata and tracing context
- ErrorCode: numbered taxonomy mapped to HTTP status and envelope name
- Builders: ergonomic error construction
- Handlers: FastAPI integration

Usage:
    from core.errors import Ok, Result, AppError, not_found

    async def find_ticket(lookup, ticket_id: int) -> Result[Ticket, AppError]:
        ticket = await lookup.find_by_id(ticket_id)
        if ticket is None:
            return not_found("Ticket", ticket_id, origin="tickets")
        return Ok(ticket)
"""
from .types import (
    Result,
    Ok,
    Err,
    AppError,
    ErrorCode,
    ErrorContext,
)

from .builders import (
    validation_error,
    required_fields,
    required_field,
    invalid_types,
    invalid_format,
    not_positive_integer,
    not_one_of,
    constraint_violation,
    invalid_email,
    invalid_json,
    not_found,
    internal_error,
)

from .handlers import (
    AppErrorException,
    register_error_handlers,
    result_to_response,
    raise_result,
)

__all__ = [
    # Core types
    "Result",
    "Ok",
    "Err",
    "AppError",
    "ErrorCode",
    "ErrorContext",
    # Validation (E2xxx)
    "validation_error",
    "required_fields",
    "required_field",
    "invalid_types",
    "invalid_format",
    "not_positive_integer",
    "not_one_of",
    "constraint_violation",
    "invalid_email",
    "invalid_json",
    # Database (E4xxx)
    "not_found",
    # Internal (E9xxx)
    "internal_error",
    # Handlers
    "AppErrorException",
    "register_error_handlers",
    "result_to_response",
    "raise_result",
]
