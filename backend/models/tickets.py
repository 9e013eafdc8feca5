from datetime import datetime
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text

from core.database import Base

TICKET_STATES = ("open", "closed")


class Client(Base):
    """Customer organisation that tickets and contacts belong to"""
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, autoincrement=True)
    company_name = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)


class Contact(Base):
    """Person at a client; soft-deleted contacts keep their tickets"""
    __tablename__ = "contacts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    client_id = Column(Integer, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(255), nullable=False)
    email = Column(String(255))
    deleted_at = Column(DateTime)  # Set instead of deleting the row
    created_at = Column(DateTime, default=datetime.utcnow)


class Ticket(Base):
    __tablename__ = "tickets"

    id = Column(Integer, primary_key=True, autoincrement=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False)
    contact_id = Column(Integer, ForeignKey("contacts.id"), nullable=False)
    description = Column(Text, nullable=False)
    notes = Column(Text)
    state = Column(String(20), nullable=False, default="open")  # One of TICKET_STATES
    closed_at = Column(DateTime)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
