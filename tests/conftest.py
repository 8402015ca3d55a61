"""
Shared test fixtures.

Sets up an isolated SQLite database so tests never touch the
real one. Tables are created before and dropped after every
test, so each test starts from an empty ledger.
"""

import os

# Must be set before the application modules read their settings
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from accounting_ledger.main import app
from accounting_ledger.models import Base
from accounting_ledger.models.base import get_db
from accounting_ledger.models.enums import AccountType
from accounting_ledger.schemas.account import AccountCreate


TEST_DATABASE_URL = "sqlite:///./test.db"

ACTOR = "alice@example.com"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
)

TestSessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)


@pytest.fixture(autouse=True)
def setup_database():
    """Create all tables before each test, drop them after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    """Provide a database session for direct service testing."""
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def other_session():
    """
    A second, independent session, standing in for a concurrent
    request against the same database.
    """
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def client(db_session):
    """
    Provide a test client bound to the test session.

    get_db is overridden so endpoints commit and roll back on
    the same session the test inspects.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def chart(db_session):
    """
    A small committed chart of accounts.

    Returns a dict of code -> Account for CASH (asset),
    AP (liability), CAPITAL (equity), SALES (revenue) and
    RENT (expense).
    """
    from accounting_ledger.services.account_service import AccountService

    service = AccountService(db_session)
    accounts = {}
    for code, name, account_type in [
        ("CASH", "Cash", AccountType.ASSET),
        ("AP", "Accounts Payable", AccountType.LIABILITY),
        ("CAPITAL", "Owner Capital", AccountType.EQUITY),
        ("SALES", "Sales", AccountType.REVENUE),
        ("RENT", "Rent Expense", AccountType.EXPENSE),
    ]:
        accounts[code] = service.create_account(
            AccountCreate(code=code, name=name, account_type=account_type),
            ACTOR,
        )
    db_session.commit()
    return accounts
