"""
Counter rows for journal entry numbers.

One row per numbering period (prefix plus yyyyMM, e.g.
"JE202610"). The row is locked while a number is drawn, so
concurrent creates in the same month queue on it instead of
racing on the highest existing entry number.
"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from accounting_ledger.models.base import Base


class EntryNumberCounter(Base):
    __tablename__ = "entry_number_counters"

    period: Mapped[str] = mapped_column(String(20), primary_key=True)
    last_value: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<EntryNumberCounter {self.period}={self.last_value}>"
