"""
Journal entry API endpoints.

The API layer is thin: it resolves the acting user, calls the
JournalEntryService, and owns the transaction. Success commits;
any LedgerError rolls back, so a rejected command writes nothing.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from accounting_ledger.api.dependencies import get_current_user
from accounting_ledger.api.errors import to_http_exception
from accounting_ledger.exceptions import LedgerError
from accounting_ledger.models.base import get_db
from accounting_ledger.services.journal_service import JournalEntryService
from accounting_ledger.schemas.journal import (
    JournalEntryCreate,
    JournalEntryUpdate,
    JournalEntryResponse,
)

router = APIRouter(prefix="/journal-entries", tags=["Journal Entries"])


@router.post("", response_model=JournalEntryResponse, status_code=201)
def create_journal_entry(
    request: JournalEntryCreate,
    db: Session = Depends(get_db),
    actor: str = Depends(get_current_user),
):
    """
    Create a draft journal entry.

    Lines must each be a debit or a credit, must balance within
    one cent, and must reference live accounts.
    """
    service = JournalEntryService(db)
    try:
        entry = service.create_entry(request, actor)
        db.commit()
    except LedgerError as e:
        db.rollback()
        raise to_http_exception(e)
    return JournalEntryResponse.from_entry(entry)


@router.get("", response_model=list[JournalEntryResponse])
def list_journal_entries(
    is_posted: bool | None = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
):
    """List live entries, newest first."""
    service = JournalEntryService(db)
    entries = service.list_entries(is_posted=is_posted, skip=skip, limit=limit)
    return [JournalEntryResponse.from_entry(e) for e in entries]


@router.get("/{entry_id}", response_model=JournalEntryResponse)
def get_journal_entry(
    entry_id: int,
    db: Session = Depends(get_db),
):
    service = JournalEntryService(db)
    try:
        entry = service.get_entry(entry_id)
    except LedgerError as e:
        raise to_http_exception(e)
    return JournalEntryResponse.from_entry(entry)


@router.put("/{entry_id}", response_model=JournalEntryResponse)
def update_journal_entry(
    entry_id: int,
    request: JournalEntryUpdate,
    db: Session = Depends(get_db),
    actor: str = Depends(get_current_user),
):
    """Replace a draft entry and all of its lines."""
    service = JournalEntryService(db)
    try:
        service.update_entry(entry_id, request, actor)
        db.commit()
    except LedgerError as e:
        db.rollback()
        raise to_http_exception(e)
    return JournalEntryResponse.from_entry(service.get_entry(entry_id))


@router.post("/{entry_id}/post", response_model=JournalEntryResponse)
def post_journal_entry(
    entry_id: int,
    db: Session = Depends(get_db),
    actor: str = Depends(get_current_user),
):
    """
    Post a draft entry.

    Posting is one-way: the entry becomes immutable and its lines
    are rolled into account balances.
    """
    service = JournalEntryService(db)
    try:
        service.post_entry(entry_id, actor)
        db.commit()
    except LedgerError as e:
        db.rollback()
        raise to_http_exception(e)
    return JournalEntryResponse.from_entry(service.get_entry(entry_id))


@router.delete("/lines/{line_id}", status_code=204)
def delete_journal_entry_line(
    line_id: int,
    db: Session = Depends(get_db),
    actor: str = Depends(get_current_user),
):
    """Soft-delete one line of a draft entry."""
    service = JournalEntryService(db)
    try:
        service.delete_line(line_id, actor)
        db.commit()
    except LedgerError as e:
        db.rollback()
        raise to_http_exception(e)


@router.delete("/{entry_id}", status_code=204)
def delete_journal_entry(
    entry_id: int,
    db: Session = Depends(get_db),
    actor: str = Depends(get_current_user),
):
    """Soft-delete a draft entry together with its lines."""
    service = JournalEntryService(db)
    try:
        service.delete_entry(entry_id, actor)
        db.commit()
    except LedgerError as e:
        db.rollback()
        raise to_http_exception(e)
