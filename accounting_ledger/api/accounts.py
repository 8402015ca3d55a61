"""
Chart of accounts API endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from accounting_ledger.api.dependencies import get_current_user
from accounting_ledger.api.errors import to_http_exception
from accounting_ledger.exceptions import LedgerError
from accounting_ledger.models.base import get_db
from accounting_ledger.models.enums import AccountType
from accounting_ledger.services.account_service import AccountService
from accounting_ledger.schemas.account import (
    AccountCreate,
    AccountUpdate,
    AccountResponse,
    AccountTreeNode,
)

router = APIRouter(prefix="/accounts", tags=["Accounts"])


@router.post("", response_model=AccountResponse, status_code=201)
def create_account(
    request: AccountCreate,
    db: Session = Depends(get_db),
    actor: str = Depends(get_current_user),
):
    """
    Create a new account.

    Every account must exist before journal lines can
    reference it.
    """
    service = AccountService(db)
    try:
        account = service.create_account(request, actor)
        db.commit()
        return account
    except LedgerError as e:
        db.rollback()
        raise to_http_exception(e)


@router.get("", response_model=list[AccountResponse])
def list_accounts(
    account_type: AccountType | None = None,
    include_inactive: bool = True,
    db: Session = Depends(get_db),
):
    """List live accounts ordered by type, then code."""
    service = AccountService(db)
    return service.list_accounts(account_type, include_inactive)


@router.get("/hierarchy", response_model=list[AccountTreeNode])
def get_accounts_hierarchy(db: Session = Depends(get_db)):
    """The account tree, flattened depth-first with levels."""
    service = AccountService(db)
    return [
        AccountTreeNode(
            id=account.id,
            code=account.code,
            name=account.name,
            account_type=account.account_type,
            balance=account.balance,
            is_active=account.is_active,
            parent_id=account.parent_id,
            parent_name=account.parent.name if account.parent else None,
            level=level,
        )
        for account, level in service.get_hierarchy()
    ]


@router.get("/{account_id}", response_model=AccountResponse)
def get_account(
    account_id: int,
    db: Session = Depends(get_db),
):
    """Get account details, including its running balance."""
    service = AccountService(db)
    try:
        return service.get_account(account_id)
    except LedgerError as e:
        raise to_http_exception(e)


@router.put("/{account_id}", response_model=AccountResponse)
def update_account(
    account_id: int,
    request: AccountUpdate,
    db: Session = Depends(get_db),
    actor: str = Depends(get_current_user),
):
    """Rename, describe or (de)activate an account."""
    service = AccountService(db)
    try:
        account = service.update_account(account_id, request, actor)
        db.commit()
        return account
    except LedgerError as e:
        db.rollback()
        raise to_http_exception(e)


@router.delete("/{account_id}", status_code=204)
def delete_account(
    account_id: int,
    db: Session = Depends(get_db),
    actor: str = Depends(get_current_user),
):
    """Soft-delete an unused account with a zero balance."""
    service = AccountService(db)
    try:
        service.delete_account(account_id, actor)
        db.commit()
    except LedgerError as e:
        db.rollback()
        raise to_http_exception(e)
