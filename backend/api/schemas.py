"""Response models. Serialized with camelCase keys to match the frontend."""
from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)


class ClientResponse(CamelModel):
    id: int
    company_name: str
    created_at: datetime | None = None


class ContactResponse(CamelModel):
    id: int
    client_id: int
    name: str
    email: str | None = None
    created_at: datetime | None = None


class TicketResponse(CamelModel):
    id: int
    client_id: int
    contact_id: int
    description: str
    notes: str | None = None
    state: str
    closed_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
