"""
Journal entry and journal entry line models.

An entry is a draft until it is posted. Posting is one-way:
a posted entry is never edited or deleted again. Drafts can be
soft-deleted, and so can individual lines, as long as the live
lines still balance.

A line is stored as a side (entry_type) plus a strictly
positive amount, so a line with both a debit and a credit, or
with neither, cannot be persisted.
"""

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    String, Date, DateTime, Boolean, Integer, Numeric, ForeignKey,
    CheckConstraint, Enum as SAEnum,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from accounting_ledger.models.audit import AuditMixin, exclude_deleted
from accounting_ledger.models.base import Base
from accounting_ledger.models.enums import EntryType


class JournalEntry(AuditMixin, Base):
    """
    Header of a double-entry transaction.

    The version column is SQLAlchemy's optimistic lock: every
    flush of a changed entry bumps it, and a flush against a
    stale version fails instead of overwriting a concurrent
    update.
    """

    __tablename__ = "journal_entries"

    id: Mapped[int] = mapped_column(primary_key=True)
    entry_number: Mapped[str] = mapped_column(
        String(20), unique=True, nullable=False, index=True
    )
    transaction_date: Mapped[date] = mapped_column(Date, nullable=False)
    description: Mapped[str] = mapped_column(String(255), nullable=False)
    reference: Mapped[str | None] = mapped_column(
        String(100), nullable=True
    )
    total_amount: Mapped[Decimal] = mapped_column(
        Numeric(19, 4), nullable=False, default=Decimal("0")
    )
    is_posted: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    posted_at: Mapped[datetime | None] = mapped_column(
        DateTime, nullable=True, default=None
    )
    posted_by: Mapped[str | None] = mapped_column(
        String(100), nullable=True, default=None
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    # Includes soft-deleted lines; use live_lines for anything
    # that sums or counts.
    lines: Mapped[list["JournalEntryLine"]] = relationship(
        back_populates="journal_entry",
        order_by="JournalEntryLine.id",
        cascade="all, delete-orphan",
    )

    __mapper_args__ = {"version_id_col": version}

    @property
    def live_lines(self) -> list["JournalEntryLine"]:
        return exclude_deleted(self.lines)

    def __repr__(self) -> str:
        state = "POSTED" if self.is_posted else "DRAFT"
        return f"<JournalEntry {self.entry_number} ({state})>"


class JournalEntryLine(AuditMixin, Base):
    """One debit or credit against a single account."""

    __tablename__ = "journal_entry_lines"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_journal_line_amount_positive"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    journal_entry_id: Mapped[int] = mapped_column(
        ForeignKey("journal_entries.id"), nullable=False, index=True
    )
    account_id: Mapped[int] = mapped_column(
        ForeignKey("accounts.id"), nullable=False, index=True
    )
    entry_type: Mapped[EntryType] = mapped_column(
        SAEnum(EntryType, name="entry_type_enum", create_constraint=True),
        nullable=False,
    )
    amount: Mapped[Decimal] = mapped_column(
        Numeric(19, 4), nullable=False
    )
    description: Mapped[str] = mapped_column(
        String(255), nullable=False, default=""
    )

    journal_entry: Mapped["JournalEntry"] = relationship(
        back_populates="lines"
    )
    account: Mapped["Account"] = relationship(
        back_populates="journal_lines"
    )

    @property
    def debit_amount(self) -> Decimal:
        return self.amount if self.entry_type == EntryType.DEBIT else Decimal("0")

    @property
    def credit_amount(self) -> Decimal:
        return self.amount if self.entry_type == EntryType.CREDIT else Decimal("0")

    def __repr__(self) -> str:
        return (
            f"<JournalEntryLine {self.entry_type.value} "
            f"{self.amount} @ account {self.account_id}>"
        )
