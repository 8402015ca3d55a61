"""
Accounting Ledger: FastAPI application.

Logging is configured at import time, before the first
request, and the health, accounts and journal entry routers
are mounted on the app.
"""

from fastapi import FastAPI

from accounting_ledger.config import get_settings
from accounting_ledger.logging_config import configure_logging
from accounting_ledger.api.health import router as health_router
from accounting_ledger.api.accounts import router as accounts_router
from accounting_ledger.api.journal_entries import router as journal_router

settings = get_settings()

configure_logging(settings.LOG_LEVEL)

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Double-entry journal ledger over a chart of accounts",
)

# Register routers
app.include_router(health_router)
app.include_router(accounts_router)
app.include_router(journal_router)
