"""
Account model (chart of accounts).

Accounts form a tree through parent_id. The code, type and
parent are fixed at creation; only the name, description and
active flag may change afterwards.

Balance is a running total maintained by posting journal
entries. It is never edited directly.
"""

from decimal import Decimal

from sqlalchemy import (
    String, Boolean, Numeric, ForeignKey,
    Enum as SAEnum,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from accounting_ledger.models.audit import AuditMixin
from accounting_ledger.models.base import Base
from accounting_ledger.models.enums import AccountType


class Account(AuditMixin, Base):
    """
    A single account in the chart of accounts.

    Accounts are soft-deleted, never removed, and only when they
    have no live sub-accounts, no live journal lines and a zero
    balance.
    """

    __tablename__ = "accounts"

    id: Mapped[int] = mapped_column(primary_key=True)
    code: Mapped[str] = mapped_column(
        String(20), unique=True, nullable=False
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    account_type: Mapped[AccountType] = mapped_column(
        SAEnum(AccountType, name="account_type_enum", create_constraint=True),
        nullable=False,
    )
    description: Mapped[str] = mapped_column(
        String(255), nullable=False, default=""
    )
    balance: Mapped[Decimal] = mapped_column(
        Numeric(19, 4), nullable=False, default=Decimal("0")
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True
    )
    parent_id: Mapped[int | None] = mapped_column(
        ForeignKey("accounts.id"), nullable=True, index=True
    )

    parent: Mapped["Account | None"] = relationship(
        back_populates="sub_accounts", remote_side=[id]
    )
    sub_accounts: Mapped[list["Account"]] = relationship(
        back_populates="parent"
    )
    journal_lines: Mapped[list["JournalEntryLine"]] = relationship(
        back_populates="account"
    )

    @property
    def level(self) -> int:
        """Depth in the account tree; root accounts are level 0."""
        depth = 0
        seen = {self.id}
        node = self.parent
        while node is not None and node.id not in seen:
            seen.add(node.id)
            depth += 1
            node = node.parent
        return depth

    def __repr__(self) -> str:
        return f"<Account {self.code} ({self.account_type.value})>"
