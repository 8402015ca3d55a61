"""
Account service: the chart of accounts.

Journal entry commands consult this service to confirm that
every referenced account exists and has not been soft-deleted,
and posting rolls line amounts into account balances through
apply_posting(). The journal service never creates or deletes
accounts itself.
"""

import logging
from collections import defaultdict
from datetime import datetime
from decimal import Decimal
from typing import Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session

from accounting_ledger.exceptions import (
    AccountInUseError,
    AccountNotFoundError,
    DuplicateAccountCodeError,
    InvalidParentAccountError,
)
from accounting_ledger.models.account import Account
from accounting_ledger.models.audit import exclude_deleted, require_actor
from accounting_ledger.models.enums import AccountType
from accounting_ledger.schemas.account import AccountCreate, AccountUpdate
from accounting_ledger.services.balance import balance_effect, compute_balance

logger = logging.getLogger(__name__)


class AccountService:
    """
    All chart-of-accounts reads and writes pass through here.

    Like every service, it only flushes. The caller owns the
    transaction boundary.
    """

    def __init__(self, db: Session):
        self.db = db

    def create_account(self, request: AccountCreate, actor: str) -> Account:
        """
        Add an account with a zero balance.

        The code must be unique across all accounts, soft-deleted
        ones included. A parent, when given, must be live.
        """
        actor = require_actor(actor)

        existing = self.db.execute(
            select(Account).where(Account.code == request.code)
        ).scalar_one_or_none()
        if existing:
            raise DuplicateAccountCodeError(request.code)

        if request.parent_id is not None:
            if self.find_by_id(request.parent_id) is None:
                raise InvalidParentAccountError(request.parent_id)

        now = datetime.utcnow()
        account = Account(
            code=request.code,
            name=request.name,
            account_type=request.account_type,
            description=request.description,
            parent_id=request.parent_id,
            balance=Decimal("0"),
            is_active=True,
        )
        account.stamp_created(actor, now)
        self.db.add(account)
        self.db.flush()

        logger.info(
            "account_created",
            extra={"account_id": account.id, "code": account.code, "actor": actor},
        )
        return account

    def find_by_id(self, account_id: int) -> Account | None:
        """Return the account unless it is missing or soft-deleted."""
        return self.db.execute(
            select(Account).where(
                Account.id == account_id,
                Account.is_deleted.is_(False),
            )
        ).scalar_one_or_none()

    def get_account(self, account_id: int) -> Account:
        account = self.find_by_id(account_id)
        if account is None:
            raise AccountNotFoundError(account_id)
        return account

    def find_active_by_ids(self, account_ids: Iterable[int]) -> list[Account]:
        """Return the accounts among account_ids that are not soft-deleted."""
        ids = set(account_ids)
        if not ids:
            return []
        accounts = self.db.execute(
            select(Account).where(
                Account.id.in_(list(ids)),
                Account.is_deleted.is_(False),
            )
        ).scalars().all()
        return list(accounts)

    def missing_account_ids(self, account_ids: Iterable[int]) -> list[int]:
        """Every id that does not resolve to a live account, sorted."""
        ids = set(account_ids)
        found = {a.id for a in self.find_active_by_ids(ids)}
        return sorted(ids - found)

    def list_accounts(
        self,
        account_type: AccountType | None = None,
        include_inactive: bool = True,
    ) -> list[Account]:
        query = select(Account).where(Account.is_deleted.is_(False))
        if account_type is not None:
            query = query.where(Account.account_type == account_type)
        if not include_inactive:
            query = query.where(Account.is_active.is_(True))
        query = query.order_by(Account.account_type, Account.code)
        return list(self.db.execute(query).scalars().all())

    def get_hierarchy(self) -> list[tuple[Account, int]]:
        """
        Return the account tree flattened depth-first.

        Each item is (account, level) with roots at level 0.
        Siblings keep the type-then-code ordering of
        list_accounts(). Accounts whose parent was soft-deleted
        are treated as roots.
        """
        accounts = self.list_accounts()
        by_id = {a.id: a for a in accounts}
        children: dict[int | None, list[Account]] = defaultdict(list)
        for account in accounts:
            parent_key = account.parent_id if account.parent_id in by_id else None
            children[parent_key].append(account)

        flattened: list[tuple[Account, int]] = []

        def walk(parent_key: int | None, level: int) -> None:
            for account in children.get(parent_key, []):
                flattened.append((account, level))
                walk(account.id, level + 1)

        walk(None, 0)
        return flattened

    def update_account(
        self, account_id: int, request: AccountUpdate, actor: str
    ) -> Account:
        """Change name, description and active flag only."""
        actor = require_actor(actor)
        account = self.get_account(account_id)

        account.name = request.name
        account.description = request.description
        account.is_active = request.is_active
        account.stamp_updated(actor, datetime.utcnow())

        self.db.flush()
        return account

    def delete_account(self, account_id: int, actor: str) -> bool:
        """
        Soft-delete an account.

        Refused while the account has live sub-accounts, live
        journal lines, or a non-zero balance.
        """
        actor = require_actor(actor)
        account = self.get_account(account_id)

        if exclude_deleted(account.sub_accounts):
            raise AccountInUseError(
                account_id,
                "account has active sub-accounts. Delete or reassign "
                "them first.",
            )
        if exclude_deleted(account.journal_lines):
            raise AccountInUseError(
                account_id,
                "account has active journal entry lines. It can only "
                "be deactivated.",
            )
        if account.balance != 0:
            raise AccountInUseError(
                account_id,
                "account has a non-zero balance. Adjust it to zero first.",
            )

        account.mark_deleted(actor, datetime.utcnow())
        self.db.flush()

        logger.info(
            "account_deleted",
            extra={"account_id": account_id, "actor": actor},
        )
        return True

    def apply_posting(self, lines: Iterable, actor: str) -> dict[int, Decimal]:
        """
        Roll posted lines into the running balance of each account.

        Lines are grouped by account and the net debit/credit is
        applied with the account's normal-balance sign. Returns
        the signed change per account id. Does not flush; the
        posting command flushes entry and balances together.
        """
        actor = require_actor(actor)
        by_account: dict[int, list] = defaultdict(list)
        for line in exclude_deleted(lines):
            by_account[line.account_id].append(line)

        # Re-read under lock, in id order, so posts that share an
        # account apply their deltas one after the other.
        accounts = self.db.execute(
            select(Account)
            .where(Account.id.in_(list(by_account)))
            .order_by(Account.id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalars().all()

        now = datetime.utcnow()
        changes = {}
        for account in accounts:
            debit, credit = compute_balance(by_account[account.id])
            delta = balance_effect(account.account_type, debit, credit)
            account.balance = account.balance + delta
            account.stamp_updated(actor, now)
            changes[account.id] = delta

        return changes
