from models.tickets import Client, Contact, Ticket, TICKET_STATES

__all__ = [
    "Client", "Contact", "Ticket",
    "TICKET_STATES",
]
