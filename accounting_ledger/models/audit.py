"""
Audit stamping and soft delete.

Accounts, journal entries and journal lines all record who
created, changed and deleted them. Nothing is ever removed
from the database: deletion sets is_deleted plus the deleted
stamps, and every query that enumerates rows for balance or
cascade logic filters through exclude_deleted().
"""

from datetime import datetime
from typing import Iterable, TypeVar

from sqlalchemy import String, Boolean, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from accounting_ledger.exceptions import MissingActorError


class AuditMixin:
    """Audit columns shared by every ledger table."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
    created_by: Mapped[str] = mapped_column(String(100), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
    updated_by: Mapped[str] = mapped_column(String(100), nullable=False)
    is_deleted: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, index=True
    )
    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime, nullable=True, default=None
    )
    deleted_by: Mapped[str | None] = mapped_column(
        String(100), nullable=True, default=None
    )

    def stamp_created(self, actor: str, now: datetime) -> None:
        self.created_at = now
        self.created_by = actor
        self.stamp_updated(actor, now)

    def stamp_updated(self, actor: str, now: datetime) -> None:
        self.updated_at = now
        self.updated_by = actor

    def mark_deleted(self, actor: str, now: datetime) -> None:
        """Soft-delete the row; the update stamps move with it."""
        self.is_deleted = True
        self.deleted_at = now
        self.deleted_by = actor
        self.stamp_updated(actor, now)


T = TypeVar("T")


def exclude_deleted(rows: Iterable[T]) -> list[T]:
    """
    Drop soft-deleted rows.

    Rows without an is_deleted attribute (request payloads that
    were never persisted) are always kept.
    """
    return [row for row in rows if not getattr(row, "is_deleted", False)]


def require_actor(actor: str | None) -> str:
    """Return the audit actor, refusing blank identities."""
    if actor is None or not actor.strip():
        raise MissingActorError()
    return actor.strip()
