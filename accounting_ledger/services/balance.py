"""
Balance validation for journal entries.

Pure functions with no database access. Every ledger command
runs its lines through here before touching the session:

1. validate_line_shape: each line is a debit or a credit, never
   both and never neither
2. compute_balance: total debits and credits over live lines
3. is_balanced: the two totals agree within one cent

Lines are duck-typed: anything with debit_amount and
credit_amount works, whether it is a request payload or a
persisted JournalEntryLine. Soft-deleted lines are ignored.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from accounting_ledger.exceptions import InvalidLineShapeError, UnbalancedEntryError
from accounting_ledger.models.audit import exclude_deleted
from accounting_ledger.models.enums import AccountType, EntryType

# Absolute, not relative: $0.005 off passes, $0.50 off does not,
# regardless of the size of the entry.
BALANCE_TOLERANCE = Decimal("0.01")

ZERO = Decimal("0")


@dataclass(frozen=True)
class LineAmount:
    """A line's amount as exactly one side: Debit(x) or Credit(x)."""
    entry_type: EntryType
    amount: Decimal

    def __post_init__(self):
        if self.amount <= 0:
            raise ValueError("line amount must be positive")

    @classmethod
    def debit(cls, amount: Decimal) -> "LineAmount":
        return cls(EntryType.DEBIT, amount)

    @classmethod
    def credit(cls, amount: Decimal) -> "LineAmount":
        return cls(EntryType.CREDIT, amount)

    @property
    def debit_amount(self) -> Decimal:
        return self.amount if self.entry_type == EntryType.DEBIT else ZERO

    @property
    def credit_amount(self) -> Decimal:
        return self.amount if self.entry_type == EntryType.CREDIT else ZERO


def validate_line_shape(lines: Iterable) -> list[LineAmount]:
    """
    Check that every line has exactly one positive side.

    Returns the tagged amounts in input order. Raises
    InvalidLineShapeError for the first line with both a debit
    and a credit, or with neither.
    """
    amounts = []
    for index, line in enumerate(lines):
        debit = Decimal(line.debit_amount)
        credit = Decimal(line.credit_amount)

        if debit > 0 and credit == 0:
            amounts.append(LineAmount.debit(debit))
        elif credit > 0 and debit == 0:
            amounts.append(LineAmount.credit(credit))
        else:
            raise InvalidLineShapeError(index, debit, credit)

    return amounts


def compute_balance(lines: Iterable) -> tuple[Decimal, Decimal]:
    """Return (total_debit, total_credit) over non-deleted lines."""
    live = exclude_deleted(lines)
    total_debit = sum((Decimal(l.debit_amount) for l in live), ZERO)
    total_credit = sum((Decimal(l.credit_amount) for l in live), ZERO)
    return total_debit, total_credit


def is_balanced(total_debit: Decimal, total_credit: Decimal) -> bool:
    return abs(total_debit - total_credit) <= BALANCE_TOLERANCE


def ensure_balanced(lines: Iterable) -> tuple[Decimal, Decimal]:
    """
    Compute the totals and raise UnbalancedEntryError if they
    disagree by more than the tolerance.
    """
    total_debit, total_credit = compute_balance(lines)
    if not is_balanced(total_debit, total_credit):
        raise UnbalancedEntryError(total_debit, total_credit)
    return total_debit, total_credit


def total_amount(lines: Iterable) -> Decimal:
    """Entry total: each live line counted once, on its own side."""
    return sum(
        (
            max(Decimal(l.debit_amount), Decimal(l.credit_amount))
            for l in exclude_deleted(lines)
        ),
        ZERO,
    )


def balance_effect(
    account_type: AccountType, debit: Decimal, credit: Decimal
) -> Decimal:
    """
    Signed change to an account's running balance.

    For ASSET and EXPENSE accounts: debits - credits
    For LIABILITY, EQUITY and REVENUE: credits - debits
    """
    if account_type.increases_on_debit:
        return debit - credit
    return credit - debit
