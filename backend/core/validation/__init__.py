"""Request Shape Validation

Composable checkers for incoming requests: required fields, types, enums,
numeric path parameters, formats and entity existence. Checkers are frozen
descriptors; a `ValidationChain` runs them in order over an immutable
`RequestContext` and returns `Ok(context)` or the first `Err(AppError)`.

Usage:
    from core.validation import (
        ValidationChain, RequiredFields, TypeMap, EnumConstraint,
        NumericParams, ticket_exists,
    )

    update_ticket = ValidationChain(
        NumericParams(["id"]),
        TypeMap({"state": "string", "notes": "string"}),
        EnumConstraint("state", ["open", "closed"]),
        ticket_exists(),
    )
"""
from .context import EntityKind, EntityLookup, RequestContext
from .types import TypeTag, type_tag_of, is_array, is_integer
from .checkers import (
    Checker,
    FieldChecker,
    Outcome,
    RequiredFields,
    TypeMap,
    EnumConstraint,
    NumericParams,
    MonthFormat,
    EmailFormat,
    resolve_path,
    parse_positive_int,
)
from .entities import (
    EntityExists,
    ContactBelongsToClient,
    client_exists,
    contact_exists,
    ticket_exists,
)
from .chain import ValidationChain
from .sanitize import sanitize_string, is_valid_email

__all__ = [
    # Context
    "EntityKind",
    "EntityLookup",
    "RequestContext",
    # Type tags
    "TypeTag",
    "type_tag_of",
    "is_array",
    "is_integer",
    # Checkers
    "Checker",
    "FieldChecker",
    "Outcome",
    "RequiredFields",
    "TypeMap",
    "EnumConstraint",
    "NumericParams",
    "MonthFormat",
    "EmailFormat",
    "resolve_path",
    "parse_positive_int",
    # Entity checks
    "EntityExists",
    "ContactBelongsToClient",
    "client_exists",
    "contact_exists",
    "ticket_exists",
    # Composition
    "ValidationChain",
    # Sanitizing
    "sanitize_string",
    "is_valid_email",
]
