"""Request Context threaded through a validation chain.

The context is immutable. Checkers read it and report entities to attach;
the chain builds the next context with `with_entities`, so no checker ever
mutates state another request (or another checker) can observe.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Protocol, TypeVar, runtime_checkable

T = TypeVar("T", covariant=True)


class EntityKind(str, Enum):
    CLIENT = "client"
    CONTACT = "contact"
    TICKET = "ticket"

    @property
    def label(self) -> str:
        """Display name used in NotFound messages."""
        return self.value.capitalize()

    @property
    def id_field(self) -> str:
        """Body field carrying this entity's id, e.g. `contactId`."""
        return f"{self.value}Id"

    @property
    def attach_key(self) -> str:
        """Key the validated entity is attached under, e.g. `validated_contact`."""
        return f"validated_{self.value}"


@runtime_checkable
class EntityLookup(Protocol[T]):
    """Data-access collaborator for entity-existence checks.

    Returns None when the entity does not exist. Any exception raised is an
    infrastructure failure and is left to propagate.
    """

    async def find_by_id(self, id: int) -> T | None: ...


def _frozen(mapping: Mapping | None) -> Mapping:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True, slots=True)
class RequestContext:
    """What a checker may look at: body, query, path params, lookups, attached entities."""
    body: Mapping[str, Any] = field(default_factory=dict)
    query: Mapping[str, str] = field(default_factory=dict)
    params: Mapping[str, str] = field(default_factory=dict)
    lookups: Mapping[EntityKind, EntityLookup] = field(default_factory=dict)
    entities: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        for name in ("query", "params", "lookups", "entities"):
            object.__setattr__(self, name, _frozen(getattr(self, name)))

    def with_entities(self, entities: Mapping[str, Any]) -> RequestContext:
        return replace(self, entities={**self.entities, **entities})

    def lookup(self, kind: EntityKind) -> EntityLookup:
        try:
            return self.lookups[kind]
        except KeyError:
            raise LookupError(f"No lookup registered for {kind.value}") from None

    def entity(self, kind: EntityKind) -> Any:
        """Entity attached by an existence check, or None if none ran."""
        return self.entities.get(kind.attach_key)

    @property
    def validated_client(self) -> Any:
        return self.entity(EntityKind.CLIENT)

    @property
    def validated_contact(self) -> Any:
        return self.entity(EntityKind.CONTACT)

    @property
    def validated_ticket(self) -> Any:
        return self.entity(EntityKind.TICKET)
