"""Validation Chain

An explicit, ordered list of checkers for one route. `run` awaits them in
order, threads attached entities into a fresh context and stops at the first
failure, so later checkers never see a request an earlier one rejected.

Usage:
    create_ticket = ValidationChain(
        RequiredFields(["clientId", "contactId", "description"]),
        TypeMap({"clientId": "integer", "contactId": "integer"}),
        client_exists(param=None),
    )
    result = await create_ticket.run(ctx)
"""
from __future__ import annotations

from typing import Iterator

from core.errors import AppError, Err, Ok, Result
from core.logging import validation_logger
from .checkers import Checker
from .context import RequestContext

log = validation_logger()


class ValidationChain:
    """Immutable sequence of checkers; safe to share across requests."""

    __slots__ = ("checkers", "label")

    def __init__(self, *checkers: Checker, label: str = ""):
        self.checkers: tuple[Checker, ...] = checkers
        self.label = label

    def then(self, *checkers: Checker, label: str | None = None) -> ValidationChain:
        """New chain with `checkers` appended; this chain is left unchanged."""
        return ValidationChain(
            *self.checkers, *checkers, label=self.label if label is None else label
        )

    async def run(self, ctx: RequestContext) -> Result[RequestContext, AppError]:
        for checker in self.checkers:
            match await checker.run(ctx):
                case Ok(attachments):
                    if attachments:
                        ctx = ctx.with_entities(attachments)
                case Err(error):
                    log.info(
                        "validation_failed",
                        chain=self.label or None,
                        checker=checker.name,
                        error_code=error.code.name,
                        message=error.message,
                    )
                    return Err(error)
        log.debug("validation_passed", chain=self.label or None, checks=len(self.checkers))
        return Ok(ctx)

    def __iter__(self) -> Iterator[Checker]:
        return iter(self.checkers)

    def __len__(self) -> int:
        return len(self.checkers)

    def __repr__(self) -> str:
        names = ", ".join(c.name for c in self.checkers)
        return f"ValidationChain({self.label or 'anonymous'}: {names})"
