"""Entity-Existence Checkers

Resolve an id from the request (body field first, then path parameter),
fetch the entity through the context's lookup collaborator and attach it
under `EntityKind.attach_key` for the route handler.

Business failures become `Err`: a missing or malformed id is a
ValidationError, an unknown id is NotFound. Exceptions raised by the lookup
are infrastructure failures and are not caught here.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from core.errors import (
    Ok,
    constraint_violation,
    not_found,
    not_positive_integer,
    required_field,
)
from .checkers import Checker, Outcome, is_blank, parse_positive_int
from .context import EntityKind, RequestContext


def resolve_id(
    ctx: RequestContext, body_field: str, param: str | None
) -> tuple[str, Any] | None:
    """(source name, raw value) using body-then-path precedence, or None."""
    value = ctx.body.get(body_field)
    if not is_blank(value):
        return body_field, value
    if param is not None:
        value = ctx.params.get(param)
        if not is_blank(value):
            return param, value
    return None


@dataclass(frozen=True, slots=True)
class EntityExists(Checker):
    """Entity referenced by the request must exist.

    `id_field` defaults to the kind's body field (`clientId`, `contactId`,
    `ticketId`); `param` names the path parameter consulted when the body has
    no id.
    """
    kind: EntityKind
    id_field: str | None = None
    param: str | None = "id"

    @property
    def name(self) -> str:
        return f"{self.kind.value}_exists"

    @property
    def body_field(self) -> str:
        return self.id_field or self.kind.id_field

    async def run(self, ctx: RequestContext) -> Outcome:
        resolved = resolve_id(ctx, self.body_field, self.param)
        if resolved is None:
            return required_field(self.body_field, origin=self.name)

        source, raw = resolved
        entity_id = parse_positive_int(raw)
        if entity_id is None:
            return not_positive_integer([source], origin=self.name)

        entity = await ctx.lookup(self.kind).find_by_id(entity_id)
        if entity is None:
            return not_found(self.kind.label, entity_id, origin=self.name)
        return Ok({self.kind.attach_key: entity})


@dataclass(frozen=True, slots=True)
class ContactBelongsToClient(Checker):
    """Contact must exist and, when a client id is supplied, belong to that client.

    The client id is optional: without one this behaves like a contact
    existence check.
    """
    contact_field: str = "contactId"
    client_field: str = "clientId"
    contact_param: str | None = None
    client_param: str | None = None

    @property
    def name(self) -> str:
        return "contact_belongs_to_client"

    async def run(self, ctx: RequestContext) -> Outcome:
        resolved = resolve_id(ctx, self.contact_field, self.contact_param)
        if resolved is None:
            return required_field(self.contact_field, origin=self.name)

        source, raw = resolved
        contact_id = parse_positive_int(raw)
        if contact_id is None:
            return not_positive_integer([source], origin=self.name)

        client_ref = resolve_id(ctx, self.client_field, self.client_param)
        client_id = None
        if client_ref is not None:
            client_id = parse_positive_int(client_ref[1])
            if client_id is None:
                return not_positive_integer([client_ref[0]], origin=self.name)

        contact = await ctx.lookup(EntityKind.CONTACT).find_by_id(contact_id)
        if contact is None:
            return not_found(EntityKind.CONTACT.label, contact_id, origin=self.name)

        if client_id is not None and contact.client_id != client_id:
            return constraint_violation(
                "Contact does not belong to specified client",
                origin=self.name,
                contact_id=contact_id,
                client_id=client_id,
            )
        return Ok({EntityKind.CONTACT.attach_key: contact})


def client_exists(param: str | None = "id") -> EntityExists:
    return EntityExists(EntityKind.CLIENT, param=param)


def contact_exists(param: str | None = "id") -> EntityExists:
    return EntityExists(EntityKind.CONTACT, param=param)


def ticket_exists(param: str | None = "id") -> EntityExists:
    return EntityExists(EntityKind.TICKET, param=param)
