"""Database Module

Async engine and session management, plus the SQLAlchemy-backed lookup
collaborator used by the entity-existence checks.

Lookups do not catch SQLAlchemy errors: an unreachable database
is an infrastructure failure and must reach the global error handler instead
of being reported as a missing entity.
"""
from typing import Any, AsyncIterator, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base

from core.config import settings
from core.logging import db_logger

T = TypeVar("T")

log = db_logger()

engine_kwargs = {
    "echo": settings.LOG_SQL,
}

if "sqlite" not in settings.DATABASE_URL:
    engine_kwargs.update({
        "pool_pre_ping": True,
        "pool_size": 5,
        "max_overflow": 10,
    })

engine = create_async_engine(
    settings.DATABASE_URL,
    **engine_kwargs
)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)

Base = declarative_base()


async def get_db() -> AsyncIterator[AsyncSession]:
    """Dependency that yields database session."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()



class SqlAlchemyLookup(Generic[T]):
    """find_by_id over one mapped model, bound to a request's session.

    Extra `criteria` narrow what counts as existing, e.g. excluding
    soft-deleted rows.
    """

    __slots__ = ("session", "model", "criteria")

    def __init__(self, session: AsyncSession, model: type[T], *criteria: Any):
        self.session, self.model, self.criteria = session, model, criteria

    async def find_by_id(self, id: int) -> T | None:
        query = select(self.model).where(self.model.id == id, *self.criteria)
        result = await self.session.execute(query)
        entity = result.scalar_one_or_none()
        log.debug("lookup", model=self.model.__name__, id=id, found=entity is not None)
        return entity

    def __repr__(self) -> str:
        return f"SqlAlchemyLookup({self.model.__name__})"
