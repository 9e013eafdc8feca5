"""Contact API

Contacts are created under an existing client. Soft-deleted contacts are
invisible to every route here because the contact lookup filters them out.
"""
from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import validated
from api.schemas import ContactResponse, TicketResponse
from core.database import get_db
from core.logging import api_logger
from core.validation import (
    EmailFormat,
    NumericParams,
    RequestContext,
    RequiredFields,
    TypeMap,
    ValidationChain,
    client_exists,
    contact_exists,
    sanitize_string,
)
from models import Contact, Ticket

router = APIRouter()
log = api_logger()

create_contact_chain = ValidationChain(
    RequiredFields(["clientId", "name"]),
    TypeMap({"clientId": "integer", "name": "string", "email": "string"}),
    EmailFormat("email"),
    client_exists(param=None),
    label="contacts.create",
)

get_contact_chain = ValidationChain(
    NumericParams(["id"]),
    contact_exists(),
    label="contacts.get",
)


@router.post("", response_model=ContactResponse, status_code=201)
async def create_contact(
    ctx: RequestContext = Depends(validated(create_contact_chain)),
    db: AsyncSession = Depends(get_db),
):
    """Create a contact for an existing client."""
    contact = Contact(
        client_id=ctx.validated_client.id,
        name=sanitize_string(ctx.body["name"]),
        email=sanitize_string(ctx.body.get("email")) or None,
    )
    db.add(contact)
    await db.commit()
    await db.refresh(contact)
    log.info("contact_created", contact_id=contact.id, client_id=contact.client_id)
    return contact


@router.get("/{id}", response_model=ContactResponse)
async def get_contact(ctx: RequestContext = Depends(validated(get_contact_chain))):
    return ctx.validated_contact


@router.get("/{id}/open-tickets", response_model=list[TicketResponse])
async def get_open_tickets(
    ctx: RequestContext = Depends(validated(get_contact_chain)),
    db: AsyncSession = Depends(get_db),
):
    """Open tickets for a contact, most recently updated first."""
    result = await db.execute(
        select(Ticket)
        .where(Ticket.contact_id == ctx.validated_contact.id, Ticket.state == "open")
        .order_by(Ticket.updated_at.desc(), Ticket.id.desc())
    )
    return result.scalars().all()
