"""
Entry number allocation.

Numbers look like JE2026100007: prefix, year and month of
creation, then a sequence that restarts every month. The
sequence comes from a locked counter row per month, never from
max(entry_number) + 1, so two concurrent creates cannot draw
the same number. Soft-deleted entries keep their numbers.
"""

import logging
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from accounting_ledger.exceptions import ConcurrencyConflictError
from accounting_ledger.models.entry_number import EntryNumberCounter
from accounting_ledger.models.journal_entry import JournalEntry

logger = logging.getLogger(__name__)


class EntryNumberService:

    def __init__(self, db: Session, prefix: str):
        self.db = db
        self.prefix = prefix

    def period_for(self, now: datetime) -> str:
        return f"{self.prefix}{now:%Y%m}"

    def _locked_counter(self, period: str) -> EntryNumberCounter | None:
        return self.db.execute(
            select(EntryNumberCounter)
            .where(EntryNumberCounter.period == period)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def highest_existing(self, period: str) -> int:
        """
        Largest sequence already used in the period, 0 if none.

        Ordered by length first, so JE20261010000 ranks above
        JE2026109999.
        """
        last_number = self.db.execute(
            select(JournalEntry.entry_number)
            .where(JournalEntry.entry_number.startswith(period))
            .order_by(
                func.length(JournalEntry.entry_number).desc(),
                JournalEntry.entry_number.desc(),
            )
            .limit(1)
        ).scalar_one_or_none()

        if last_number is None:
            return 0
        suffix = last_number[len(period):]
        return int(suffix) if suffix.isdigit() else 0

    def next_number(self, now: datetime) -> str:
        """
        Draw the next number for the month of `now`.

        The counter row stays locked until the caller's transaction
        ends. The first number of a month creates the row, seeded
        from any entries already numbered in that month. If another
        transaction creates the same row first, the insert fails and
        ConcurrencyConflictError is raised; the caller rolls back
        and may retry.
        """
        period = self.period_for(now)
        counter = self._locked_counter(period)

        if counter is None:
            counter = EntryNumberCounter(
                period=period,
                last_value=self.highest_existing(period),
            )
            self.db.add(counter)
            try:
                self.db.flush()
            except IntegrityError as e:
                logger.warning(
                    "entry_number_counter_race",
                    extra={"period": period},
                )
                raise ConcurrencyConflictError("EntryNumberCounter", period) from e

        counter.last_value += 1
        self.db.flush()

        logger.debug(
            "entry_number_allocated",
            extra={"period": period, "value": counter.last_value},
        )
        return f"{period}{counter.last_value:04d}"
