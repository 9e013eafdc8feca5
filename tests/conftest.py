import os
import tempfile
from dataclasses import dataclass
from datetime import datetime

# Settings and the engine are built at import time, so point them at a
# throwaway SQLite file before anything from the backend is imported.
_DB_DIR = tempfile.mkdtemp(prefix="ticketdesk-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_DB_DIR, 'test.db')}"
os.environ.setdefault("LOG_LEVEL", "WARNING")

import httpx
import pytest

from core.validation import EntityKind, RequestContext


@dataclass
class Row:
    """Stand-in for an ORM entity."""
    id: int
    client_id: int | None = None
    name: str = ""


class FakeLookup:
    """In-memory find_by_id collaborator that records the ids it was asked for."""

    def __init__(self, *entities: Row, error: Exception | None = None):
        self.entities = {e.id: e for e in entities}
        self.error = error
        self.calls: list[int] = []

    async def find_by_id(self, id: int):
        self.calls.append(id)
        if self.error is not None:
            raise self.error
        return self.entities.get(id)


@pytest.fixture
def make_ctx():
    def _make(body=None, query=None, params=None, **lookups: FakeLookup) -> RequestContext:
        return RequestContext(
            body=body or {},
            query=query or {},
            params=params or {},
            lookups={EntityKind(kind): lookup for kind, lookup in lookups.items()},
        )
    return _make


@pytest.fixture
async def db_session():
    from core.database import AsyncSessionLocal, Base, engine
    import models  # noqa: F401  (registers tables on Base.metadata)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as session:
        yield session

    await engine.dispose()


@pytest.fixture
async def seeded(db_session):
    """Two clients, three contacts (one soft-deleted) and three tickets."""
    from models import Client, Contact, Ticket

    acme = Client(id=1, company_name="Acme Pty Ltd")
    globex = Client(id=2, company_name="Globex")
    db_session.add_all([acme, globex])
    await db_session.flush()

    db_session.add_all([
        Contact(id=1, client_id=1, name="Alice", email="alice@acme.test"),
        Contact(id=2, client_id=2, name="Bob", email="bob@globex.test"),
        Contact(id=3, client_id=1, name="Carol", deleted_at=datetime(2025, 1, 1)),
    ])
    await db_session.flush()

    db_session.add_all([
        Ticket(id=1, client_id=1, contact_id=1, description="Printer setup",
               state="open", updated_at=datetime(2025, 10, 10, 9, 0)),
        Ticket(id=2, client_id=1, contact_id=1, description="Password reset",
               state="closed", closed_at=datetime(2025, 10, 11), updated_at=datetime(2025, 10, 11, 15, 30)),
        Ticket(id=3, client_id=1, contact_id=1, description="Email configuration",
               state="open", updated_at=datetime(2025, 10, 12, 10, 0)),
    ])
    await db_session.commit()
    return db_session


@pytest.fixture
async def client(seeded):
    from main import app

    transport = httpx.ASGITransport(app=app, raise_app_exceptions=False)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
