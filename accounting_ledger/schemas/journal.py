"""
Pydantic schemas for journal entry operations.

Line requests carry the familiar debit_amount / credit_amount
pair. Whether exactly one of them is set is a business rule
checked by the balance validator, not a schema error, so that
callers get the same INVALID_LINE_SHAPE rejection whether they
come through HTTP or call the service directly.
"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from accounting_ledger.models.enums import EntryType


# --- Request Schemas ---

class JournalEntryLineCreate(BaseModel):
    """A single line as submitted by the caller."""
    account_id: int
    debit_amount: Decimal = Field(default=Decimal("0"), ge=0, decimal_places=4)
    credit_amount: Decimal = Field(default=Decimal("0"), ge=0, decimal_places=4)
    description: str = Field(default="", max_length=255)


class JournalEntryCreate(BaseModel):
    """A new draft entry with its complete set of lines."""
    transaction_date: date
    description: str = Field(min_length=1, max_length=255)
    reference: str | None = Field(default=None, max_length=100)
    lines: list[JournalEntryLineCreate] = Field(min_length=2)


class JournalEntryUpdate(JournalEntryCreate):
    """
    Full replacement of a draft entry.

    The submitted lines replace every live line; this is not a
    patch.
    """


# --- Response Schemas ---

class JournalEntryLineResponse(BaseModel):
    id: int
    account_id: int
    account_code: str
    account_name: str
    entry_type: EntryType
    amount: Decimal
    debit_amount: Decimal
    credit_amount: Decimal
    description: str

    @classmethod
    def from_line(cls, line) -> "JournalEntryLineResponse":
        return cls(
            id=line.id,
            account_id=line.account_id,
            account_code=line.account.code,
            account_name=line.account.name,
            entry_type=line.entry_type,
            amount=line.amount,
            debit_amount=line.debit_amount,
            credit_amount=line.credit_amount,
            description=line.description,
        )


class JournalEntryResponse(BaseModel):
    id: int
    entry_number: str
    transaction_date: date
    description: str
    reference: str | None
    total_amount: Decimal
    is_posted: bool
    posted_at: datetime | None
    posted_by: str | None
    created_at: datetime
    created_by: str
    updated_at: datetime
    updated_by: str
    lines: list[JournalEntryLineResponse]

    @classmethod
    def from_entry(cls, entry) -> "JournalEntryResponse":
        """Build the response from an entry, listing only live lines."""
        return cls(
            id=entry.id,
            entry_number=entry.entry_number,
            transaction_date=entry.transaction_date,
            description=entry.description,
            reference=entry.reference,
            total_amount=entry.total_amount,
            is_posted=entry.is_posted,
            posted_at=entry.posted_at,
            posted_by=entry.posted_by,
            created_at=entry.created_at,
            created_by=entry.created_by,
            updated_at=entry.updated_at,
            updated_by=entry.updated_by,
            lines=[
                JournalEntryLineResponse.from_line(line)
                for line in entry.live_lines
            ],
        )
