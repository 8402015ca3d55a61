"""
Mapping from ledger errors to HTTP responses.

The services know nothing about HTTP; endpoints translate a
LedgerError into an HTTPException here after rolling back.
"""

import logging

from fastapi import HTTPException

from accounting_ledger.exceptions import (
    AccountInUseError,
    AccountNotFoundError,
    AlreadyPostedError,
    ConcurrencyConflictError,
    DuplicateAccountCodeError,
    EntryNotFoundError,
    EntryPostedError,
    LedgerError,
    LineNotFoundError,
)

logger = logging.getLogger(__name__)

NOT_FOUND = (EntryNotFoundError, LineNotFoundError, AccountNotFoundError)
CONFLICT = (
    EntryPostedError,
    AlreadyPostedError,
    DuplicateAccountCodeError,
    AccountInUseError,
    ConcurrencyConflictError,
)


def status_for(error: LedgerError) -> int:
    if isinstance(error, NOT_FOUND):
        return 404
    if isinstance(error, CONFLICT):
        return 409
    return 400


def to_http_exception(error: LedgerError) -> HTTPException:
    """Log the rejection and build the matching HTTPException."""
    status_code = status_for(error)
    logger.warning(
        "ledger_command_rejected",
        extra={"code": error.code, "status_code": status_code},
    )
    return HTTPException(
        status_code=status_code,
        detail={"code": error.code, "message": str(error)},
    )
