"""
Shared enumerations for database models.

Python enums mapped to database enums mean an invalid
account_type or entry_type is rejected by the database too,
not only by request validation.
"""

import enum


class AccountType(str, enum.Enum):
    """The five fundamental accounting categories."""
    ASSET = "ASSET"
    LIABILITY = "LIABILITY"
    EQUITY = "EQUITY"
    REVENUE = "REVENUE"
    EXPENSE = "EXPENSE"

    @property
    def increases_on_debit(self) -> bool:
        """Assets and expenses carry a normal debit balance."""
        return self in (AccountType.ASSET, AccountType.EXPENSE)


class EntryType(str, enum.Enum):
    """Side of a journal entry line."""
    DEBIT = "DEBIT"
    CREDIT = "CREDIT"
