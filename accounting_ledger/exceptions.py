"""
Typed exceptions for the ledger.

Every business-rule rejection has its own class and a stable
`code`, so callers catch by type instead of parsing messages.
All of them are raised before anything is written, so a rejected
command leaves the session with no pending changes.

    LedgerError
    |
    +-- JournalEntryError
    |   +-- EntryNotFoundError
    |   +-- LineNotFoundError
    |   +-- EntryPostedError
    |   +-- AlreadyPostedError
    |   +-- InvalidLineShapeError
    |   +-- UnbalancedEntryError
    |   +-- UnknownOrDeletedAccountsError
    |   +-- LastLineError
    |   +-- WouldUnbalanceError
    |
    +-- AccountError
    |   +-- AccountNotFoundError
    |   +-- DuplicateAccountCodeError
    |   +-- InvalidParentAccountError
    |   +-- AccountInUseError
    |
    +-- ConcurrencyConflictError
    +-- MissingActorError
"""

from decimal import Decimal


def format_currency(amount: Decimal) -> str:
    """Render an amount the way operators read it: $1,000.00."""
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


class LedgerError(Exception):
    """Base exception for all ledger errors."""

    code: str = "LEDGER_ERROR"


# --- Journal entry errors ---


class JournalEntryError(LedgerError):
    """Base exception for journal entry errors."""

    code: str = "JOURNAL_ENTRY_ERROR"


class EntryNotFoundError(JournalEntryError):
    """Entry does not exist or has been soft-deleted."""

    code: str = "ENTRY_NOT_FOUND"

    def __init__(self, entry_id: int):
        self.entry_id = entry_id
        super().__init__(
            f"Journal entry {entry_id} not found or has been deleted."
        )


class LineNotFoundError(JournalEntryError):
    """Line does not exist or has been soft-deleted."""

    code: str = "LINE_NOT_FOUND"

    def __init__(self, line_id: int):
        self.line_id = line_id
        super().__init__(
            f"Journal entry line {line_id} not found or has been deleted."
        )


class EntryPostedError(JournalEntryError):
    """Mutation attempted against a posted entry."""

    code: str = "ENTRY_POSTED"

    def __init__(self, entry_id: int, action: str):
        self.entry_id = entry_id
        self.action = action
        super().__init__(
            f"Cannot {action} posted journal entry {entry_id}. "
            "Posted entries are immutable for audit purposes."
        )


class AlreadyPostedError(JournalEntryError):
    """Post attempted on an entry that is already posted."""

    code: str = "ALREADY_POSTED"

    def __init__(self, entry_id: int):
        self.entry_id = entry_id
        super().__init__(f"Journal entry {entry_id} is already posted.")


class InvalidLineShapeError(JournalEntryError):
    """A line carries both a debit and a credit, or neither."""

    code: str = "INVALID_LINE_SHAPE"

    def __init__(self, line_index: int, debit: Decimal, credit: Decimal):
        self.line_index = line_index
        self.debit = debit
        self.credit = credit
        super().__init__(
            f"Line {line_index + 1}: each journal entry line must have "
            "either a debit amount or a credit amount (but not both or "
            f"neither). Debit: {format_currency(debit)}, "
            f"Credit: {format_currency(credit)}"
        )


class UnbalancedEntryError(JournalEntryError):
    """Total debits differ from total credits beyond the tolerance."""

    code: str = "UNBALANCED_ENTRY"

    def __init__(self, total_debit: Decimal, total_credit: Decimal):
        self.total_debit = total_debit
        self.total_credit = total_credit
        super().__init__(
            "Journal entry is not balanced. "
            f"Debits: {format_currency(total_debit)}, "
            f"Credits: {format_currency(total_credit)}"
        )


class UnknownOrDeletedAccountsError(JournalEntryError):
    """One or more referenced accounts are missing or soft-deleted."""

    code: str = "UNKNOWN_OR_DELETED_ACCOUNTS"

    def __init__(self, account_ids: list[int]):
        self.account_ids = sorted(account_ids)
        super().__init__(
            "Invalid account IDs: "
            + ", ".join(str(i) for i in self.account_ids)
        )


class LastLineError(JournalEntryError):
    """Deleting the line would leave the entry with no lines."""

    code: str = "LAST_LINE"

    def __init__(self, line_id: int, entry_id: int):
        self.line_id = line_id
        self.entry_id = entry_id
        super().__init__(
            f"Cannot delete line {line_id}: it is the last remaining line "
            f"of journal entry {entry_id}. Delete the entire journal entry "
            "instead."
        )


class WouldUnbalanceError(JournalEntryError):
    """Deleting the line would leave the remaining lines unbalanced."""

    code: str = "WOULD_UNBALANCE"

    def __init__(
        self, line_id: int, remaining_debit: Decimal, remaining_credit: Decimal
    ):
        self.line_id = line_id
        self.remaining_debit = remaining_debit
        self.remaining_credit = remaining_credit
        super().__init__(
            f"Cannot delete line {line_id}: it would leave the journal entry "
            "unbalanced. "
            f"Debits: {format_currency(remaining_debit)}, "
            f"Credits: {format_currency(remaining_credit)}"
        )


# --- Account errors ---


class AccountError(LedgerError):
    """Base exception for chart-of-accounts errors."""

    code: str = "ACCOUNT_ERROR"


class AccountNotFoundError(AccountError):
    code: str = "ACCOUNT_NOT_FOUND"

    def __init__(self, account_id: int):
        self.account_id = account_id
        super().__init__(f"Account {account_id} not found")


class DuplicateAccountCodeError(AccountError):
    code: str = "DUPLICATE_ACCOUNT_CODE"

    def __init__(self, account_code: str):
        self.account_code = account_code
        super().__init__(f"Account with code '{account_code}' already exists")


class InvalidParentAccountError(AccountError):
    code: str = "INVALID_PARENT_ACCOUNT"

    def __init__(self, parent_id: int):
        self.parent_id = parent_id
        super().__init__(f"Parent account {parent_id} does not exist")


class AccountInUseError(AccountError):
    """Account still has sub-accounts, journal lines or a balance."""

    code: str = "ACCOUNT_IN_USE"

    def __init__(self, account_id: int, reason: str):
        self.account_id = account_id
        self.reason = reason
        super().__init__(f"Cannot delete account {account_id}: {reason}")


# --- Infrastructure-level rejections ---


class ConcurrencyConflictError(LedgerError):
    """Row was modified by another transaction since it was read."""

    code: str = "CONCURRENCY_CONFLICT"

    def __init__(self, entity_type: str, entity_id: int | str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(
            f"{entity_type} {entity_id} was modified by another "
            "transaction. Reload and retry."
        )


class MissingActorError(LedgerError):
    code: str = "ACTOR_REQUIRED"

    def __init__(self):
        super().__init__("An acting user is required for audit stamping")
