"""
Journal entry service: the double-entry lifecycle.

Entries move Draft -> Posted (terminal) or Draft -> Deleted
(terminal). Every command follows the same shape:

1. Load the entry (locked for update) or the line and its entry
2. Validate line shape, balance and referenced accounts
3. Mutate the loaded rows and stamp audit fields
4. Flush

All validation happens before the first mutation, so a
rejected command leaves nothing pending in the session. The
caller commits or rolls back.
"""

import logging
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError

from accounting_ledger.config import get_settings
from accounting_ledger.exceptions import (
    AlreadyPostedError,
    ConcurrencyConflictError,
    EntryNotFoundError,
    EntryPostedError,
    LastLineError,
    LineNotFoundError,
    UnknownOrDeletedAccountsError,
    WouldUnbalanceError,
)
from accounting_ledger.models.audit import require_actor
from accounting_ledger.models.journal_entry import JournalEntry, JournalEntryLine
from accounting_ledger.schemas.journal import (
    JournalEntryCreate,
    JournalEntryLineCreate,
    JournalEntryUpdate,
)
from accounting_ledger.services.account_service import AccountService
from accounting_ledger.services.entry_numbers import EntryNumberService
from accounting_ledger.services.balance import (
    LineAmount,
    compute_balance,
    ensure_balanced,
    is_balanced,
    total_amount,
    validate_line_shape,
)

logger = logging.getLogger(__name__)


class JournalEntryService:

    def __init__(self, db: Session):
        self.db = db
        self.account_service = AccountService(db)
        self.entry_numbers = EntryNumberService(
            db, get_settings().ENTRY_NUMBER_PREFIX
        )

    # --- Loading ---

    def _load_entry(self, entry_id: int, lock: bool = False) -> JournalEntry:
        """
        Fetch a live entry with its lines and their accounts.

        With lock=True the entry row is selected FOR UPDATE so a
        concurrent command on the same entry waits for this one.
        """
        query = (
            select(JournalEntry)
            .where(
                JournalEntry.id == entry_id,
                JournalEntry.is_deleted.is_(False),
            )
            .options(
                selectinload(JournalEntry.lines)
                .selectinload(JournalEntryLine.account)
            )
        )
        if lock:
            query = query.with_for_update().execution_options(
                populate_existing=True
            )

        entry = self.db.execute(query).scalar_one_or_none()
        if entry is None:
            raise EntryNotFoundError(entry_id)
        return entry

    def _flush(self, entry: JournalEntry) -> None:
        try:
            self.db.flush()
        except StaleDataError as e:
            raise ConcurrencyConflictError("JournalEntry", entry.id) from e

    # --- Validation ---

    def _validate_lines(
        self, lines: list[JournalEntryLineCreate]
    ) -> list[LineAmount]:
        """Shape, balance, then referenced accounts."""
        amounts = validate_line_shape(lines)
        ensure_balanced(lines)

        missing = self.account_service.missing_account_ids(
            line.account_id for line in lines
        )
        if missing:
            raise UnknownOrDeletedAccountsError(missing)

        return amounts

    def _build_lines(
        self,
        lines: list[JournalEntryLineCreate],
        amounts: list[LineAmount],
        actor: str,
        now: datetime,
    ) -> list[JournalEntryLine]:
        built = []
        for line, amount in zip(lines, amounts):
            row = JournalEntryLine(
                account_id=line.account_id,
                entry_type=amount.entry_type,
                amount=amount.amount,
                description=line.description,
            )
            row.stamp_created(actor, now)
            built.append(row)
        return built

    # --- Commands ---

    def create_entry(
        self, request: JournalEntryCreate, actor: str
    ) -> JournalEntry:
        """
        Create a draft entry.

        Raises InvalidLineShapeError, UnbalancedEntryError or
        UnknownOrDeletedAccountsError (listing every bad id)
        before anything is added to the session.
        """
        actor = require_actor(actor)
        amounts = self._validate_lines(request.lines)

        now = datetime.utcnow()
        entry = JournalEntry(
            entry_number=self.entry_numbers.next_number(now),
            transaction_date=request.transaction_date,
            description=request.description,
            reference=request.reference,
            is_posted=False,
        )
        entry.stamp_created(actor, now)
        entry.lines = self._build_lines(request.lines, amounts, actor, now)
        entry.total_amount = total_amount(entry.lines)

        self.db.add(entry)
        try:
            self.db.flush()
        except IntegrityError as e:
            # entry_number is unique
            raise ConcurrencyConflictError("JournalEntry", entry.entry_number) from e

        logger.info(
            "journal_entry_created",
            extra={
                "entry_id": entry.id,
                "entry_number": entry.entry_number,
                "total_amount": str(entry.total_amount),
                "actor": actor,
            },
        )
        return entry

    def update_entry(
        self, entry_id: int, request: JournalEntryUpdate, actor: str
    ) -> bool:
        """
        Replace a draft entry's header and its entire line set.

        The previous live lines are soft-deleted, not removed,
        so the audit history of the draft survives.
        """
        actor = require_actor(actor)
        entry = self._load_entry(entry_id, lock=True)
        if entry.is_posted:
            raise EntryPostedError(entry_id, "update")

        amounts = self._validate_lines(request.lines)

        now = datetime.utcnow()
        for old_line in entry.live_lines:
            old_line.mark_deleted(actor, now)

        entry.transaction_date = request.transaction_date
        entry.description = request.description
        entry.reference = request.reference
        entry.lines.extend(
            self._build_lines(request.lines, amounts, actor, now)
        )
        entry.total_amount = total_amount(entry.lines)
        entry.stamp_updated(actor, now)

        self._flush(entry)

        logger.info(
            "journal_entry_updated",
            extra={"entry_id": entry.id, "actor": actor},
        )
        return True

    def post_entry(self, entry_id: int, actor: str) -> bool:
        """
        Post a draft entry and roll its lines into account balances.

        Shape and balance are re-checked against the current live
        lines rather than trusted from the last edit. The entry
        state change and the balance updates are flushed together.
        """
        actor = require_actor(actor)
        entry = self._load_entry(entry_id, lock=True)
        if entry.is_posted:
            raise AlreadyPostedError(entry_id)

        lines = entry.live_lines
        validate_line_shape(lines)
        ensure_balanced(lines)

        missing = self.account_service.missing_account_ids(
            line.account_id for line in lines
        )
        if missing:
            raise UnknownOrDeletedAccountsError(missing)

        now = datetime.utcnow()
        entry.is_posted = True
        entry.posted_at = now
        entry.posted_by = actor
        entry.stamp_updated(actor, now)

        self.account_service.apply_posting(lines, actor)
        self._flush(entry)

        logger.info(
            "journal_entry_posted",
            extra={
                "entry_id": entry.id,
                "entry_number": entry.entry_number,
                "actor": actor,
            },
        )
        return True

    def delete_entry(self, entry_id: int, actor: str) -> bool:
        """
        Soft-delete a draft entry and every one of its lines.

        Posted entries are refused with EntryPostedError.
        """
        actor = require_actor(actor)
        entry = self._load_entry(entry_id, lock=True)
        if entry.is_posted:
            raise EntryPostedError(entry_id, "delete")

        now = datetime.utcnow()
        entry.mark_deleted(actor, now)
        for line in entry.live_lines:
            line.mark_deleted(actor, now)

        self._flush(entry)

        logger.info(
            "journal_entry_deleted",
            extra={"entry_id": entry.id, "actor": actor},
        )
        return True

    def delete_line(self, line_id: int, actor: str) -> bool:
        """
        Soft-delete a single line of a draft entry.

        Refused when the entry is posted, when the line is the
        only live line left (delete the entry instead), or when
        the remaining live lines would not balance.
        """
        actor = require_actor(actor)
        line = self.db.execute(
            select(JournalEntryLine).where(
                JournalEntryLine.id == line_id,
                JournalEntryLine.is_deleted.is_(False),
            )
        ).scalar_one_or_none()
        if line is None:
            raise LineNotFoundError(line_id)

        entry = self._load_entry(line.journal_entry_id, lock=True)
        if entry.is_posted:
            raise EntryPostedError(entry.id, "delete lines from")

        remaining = [l for l in entry.live_lines if l.id != line_id]
        if not remaining:
            raise LastLineError(line_id, entry.id)

        remaining_debit, remaining_credit = compute_balance(remaining)
        if not is_balanced(remaining_debit, remaining_credit):
            raise WouldUnbalanceError(line_id, remaining_debit, remaining_credit)

        now = datetime.utcnow()
        line.mark_deleted(actor, now)
        entry.total_amount = total_amount(remaining)
        entry.stamp_updated(actor, now)

        self._flush(entry)

        logger.info(
            "journal_entry_line_deleted",
            extra={"entry_id": entry.id, "line_id": line_id, "actor": actor},
        )
        return True

    # --- Queries ---

    def get_entry(self, entry_id: int) -> JournalEntry:
        """Get a live entry with its lines."""
        return self._load_entry(entry_id)

    def list_entries(
        self,
        is_posted: bool | None = None,
        skip: int = 0,
        limit: int = 100,
    ) -> list[JournalEntry]:
        """Live entries, newest transaction date first."""
        query = (
            select(JournalEntry)
            .where(JournalEntry.is_deleted.is_(False))
            .options(
                selectinload(JournalEntry.lines)
                .selectinload(JournalEntryLine.account)
            )
        )
        if is_posted is not None:
            query = query.where(JournalEntry.is_posted.is_(is_posted))
        query = (
            query.order_by(
                JournalEntry.transaction_date.desc(),
                JournalEntry.entry_number.desc(),
            )
            .offset(skip)
            .limit(limit)
        )
        return list(self.db.execute(query).scalars().all())
