"""
Database models package.

All models must be imported here so that Alembic can discover
them through Base.metadata when generating migrations.
"""

from accounting_ledger.models.base import Base
from accounting_ledger.models.enums import AccountType, EntryType
from accounting_ledger.models.account import Account
from accounting_ledger.models.entry_number import EntryNumberCounter
from accounting_ledger.models.journal_entry import (
    JournalEntry,
    JournalEntryLine,
)

__all__ = [
    "Base",
    "AccountType",
    "EntryType",
    "Account",
    "EntryNumberCounter",
    "JournalEntry",
    "JournalEntryLine",
]
