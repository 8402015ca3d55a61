"""
Pydantic schemas for chart-of-accounts operations.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from accounting_ledger.models.enums import AccountType


class AccountCreate(BaseModel):
    """Request to add an account to the chart of accounts."""
    code: str = Field(min_length=1, max_length=20)
    name: str = Field(min_length=1, max_length=100)
    account_type: AccountType
    description: str = Field(default="", max_length=255)
    parent_id: int | None = None


class AccountUpdate(BaseModel):
    """
    Editable account fields.

    Code, type and parent are deliberately absent: they are
    fixed once the account exists.
    """
    name: str = Field(min_length=1, max_length=100)
    description: str = Field(default="", max_length=255)
    is_active: bool = True


class AccountResponse(BaseModel):
    id: int
    code: str
    name: str
    account_type: AccountType
    description: str
    balance: Decimal
    is_active: bool
    parent_id: int | None
    created_at: datetime
    created_by: str
    updated_at: datetime
    updated_by: str

    model_config = {"from_attributes": True}


class AccountTreeNode(BaseModel):
    """An account in the flattened hierarchy, with its depth."""
    id: int
    code: str
    name: str
    account_type: AccountType
    balance: Decimal
    is_active: bool
    parent_id: int | None
    parent_name: str | None = None
    level: int
