"""FastAPI glue for validation chains.

`validated(chain)` turns a ValidationChain into a route dependency: it builds
a RequestContext from the incoming request, runs the chain and either returns
the validated context (with attached entities) or raises, letting the error
handlers render the 400/404 envelope.
"""
import json
from typing import Any, Awaitable, Callable

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import SqlAlchemyLookup, get_db
from core.errors import AppError, Ok, Result, invalid_json, raise_result, validation_error
from core.validation import EntityKind, EntityLookup, RequestContext, ValidationChain
from models import Client, Contact, Ticket


def build_lookups(db: AsyncSession) -> dict[EntityKind, EntityLookup]:
    return {
        EntityKind.CLIENT: SqlAlchemyLookup(db, Client),
        EntityKind.CONTACT: SqlAlchemyLookup(db, Contact, Contact.deleted_at.is_(None)),
        EntityKind.TICKET: SqlAlchemyLookup(db, Ticket),
    }


async def read_json_body(request: Request) -> Result[dict[str, Any], AppError]:
    """Decoded JSON object body; an empty body reads as {}."""
    raw = await request.body()
    if not raw.strip():
        return Ok({})
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        return invalid_json(str(e), origin="api.read_json_body")
    if not isinstance(data, dict):
        return validation_error("Request body must be a JSON object", origin="api.read_json_body")
    return Ok(data)


async def build_context(request: Request, db: AsyncSession) -> RequestContext:
    body = await read_json_body(request)
    raise_result(body)
    return RequestContext(
        body=body.unwrap(),
        query=dict(request.query_params),
        params=dict(request.path_params),
        lookups=build_lookups(db),
    )


def validated(chain: ValidationChain) -> Callable[..., Awaitable[RequestContext]]:
    """Route dependency running `chain` against the current request."""

    async def dependency(request: Request, db: AsyncSession = Depends(get_db)) -> RequestContext:
        ctx = await build_context(request, db)
        result = await chain.run(ctx)
        raise_result(result)
        return result.unwrap()

    return dependency
