"""Business logic services."""

from accounting_ledger.services.account_service import AccountService
from accounting_ledger.services.entry_numbers import EntryNumberService
from accounting_ledger.services.journal_service import JournalEntryService

__all__ = ["AccountService", "EntryNumberService", "JournalEntryService"]
