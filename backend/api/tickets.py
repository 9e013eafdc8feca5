"""Ticket API

Every route validates its request through a ValidationChain before the
handler runs; handlers read ids from the attached entities rather than from
the raw body.
"""
from datetime import MAXYEAR, datetime

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import validated
from api.schemas import TicketResponse
from core.database import get_db
from core.logging import api_logger
from core.validation import (
    ContactBelongsToClient,
    EnumConstraint,
    MonthFormat,
    NumericParams,
    RequestContext,
    RequiredFields,
    TypeMap,
    ValidationChain,
    client_exists,
    sanitize_string,
    ticket_exists,
)
from models import TICKET_STATES, Ticket

router = APIRouter()
log = api_logger()


def month_bounds(month: str) -> tuple[datetime, datetime]:
    """Half-open [start, end) datetime range covering a YYYY-MM month."""
    year, mon = (int(part) for part in month.split("-"))
    start = datetime(year, mon, 1)
    if mon < 12:
        return start, start.replace(month=mon + 1)
    if year < MAXYEAR:
        return start, start.replace(year=year + 1, month=1)
    return start, datetime.max


state_enum = EnumConstraint("state", TICKET_STATES)

list_tickets_chain = ValidationChain(state_enum, MonthFormat("month"), label="tickets.list")

get_ticket_chain = ValidationChain(
    NumericParams(["id"]),
    ticket_exists(),
    label="tickets.get",
)

create_ticket_chain = ValidationChain(
    RequiredFields(["clientId", "contactId", "description"]),
    TypeMap({
        "clientId": "integer",
        "contactId": "integer",
        "description": "string",
        "notes": "string",
        "state": "string",
    }),
    state_enum,
    client_exists(param=None),
    ContactBelongsToClient(),
    label="tickets.create",
)

update_ticket_chain = ValidationChain(
    NumericParams(["id"]),
    TypeMap({"description": "string", "notes": "string", "state": "string"}),
    state_enum,
    ticket_exists(),
    label="tickets.update",
)


@router.get("", response_model=list[TicketResponse])
async def list_tickets(
    ctx: RequestContext = Depends(validated(list_tickets_chain)),
    db: AsyncSession = Depends(get_db),
):
    """Tickets, most recently updated first, optionally filtered by state and
    by the YYYY-MM month they were last updated in."""
    query = select(Ticket).order_by(Ticket.updated_at.desc(), Ticket.id.desc())
    if state := ctx.query.get("state"):
        query = query.where(Ticket.state == state)
    if month := ctx.query.get("month"):
        start, end = month_bounds(month)
        query = query.where(Ticket.updated_at >= start, Ticket.updated_at < end)
    result = await db.execute(query)
    return result.scalars().all()


@router.get("/{id}", response_model=TicketResponse)
async def get_ticket(ctx: RequestContext = Depends(validated(get_ticket_chain))):
    return ctx.validated_ticket


@router.post("", response_model=TicketResponse, status_code=201)
async def create_ticket(
    ctx: RequestContext = Depends(validated(create_ticket_chain)),
    db: AsyncSession = Depends(get_db),
):
    """Create a ticket for a contact of the given client."""
    state = ctx.body.get("state") or "open"
    ticket = Ticket(
        client_id=ctx.validated_client.id,
        contact_id=ctx.validated_contact.id,
        description=sanitize_string(ctx.body["description"], max_length=5000),
        notes=sanitize_string(ctx.body.get("notes"), max_length=10000) or None,
        state=state,
        closed_at=datetime.utcnow() if state == "closed" else None,
    )
    db.add(ticket)
    await db.commit()
    await db.refresh(ticket)
    log.info("ticket_created", ticket_id=ticket.id, client_id=ticket.client_id, contact_id=ticket.contact_id)
    return ticket


@router.patch("/{id}", response_model=TicketResponse)
async def update_ticket(
    ctx: RequestContext = Depends(validated(update_ticket_chain)),
    db: AsyncSession = Depends(get_db),
):
    """Update description, notes or state. Closing stamps closed_at; reopening clears it."""
    ticket = ctx.validated_ticket
    body = ctx.body

    if "description" in body:
        ticket.description = sanitize_string(body["description"], max_length=5000)
    if "notes" in body:
        ticket.notes = sanitize_string(body["notes"], max_length=10000) or None
    if (state := body.get("state")) and state != ticket.state:
        ticket.state = state
        ticket.closed_at = datetime.utcnow() if state == "closed" else None

    await db.commit()
    await db.refresh(ticket)
    log.info("ticket_updated", ticket_id=ticket.id, state=ticket.state)
    return ticket
