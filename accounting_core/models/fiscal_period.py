"""
Fiscal period model.

A period is a dated window that can be locked against
retroactive changes. Locking is one-way: there is no
transition out of the locked state.
"""

import datetime as dt

from sqlalchemy import String, Boolean, Date, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from accounting_core.models.base import Base


class FiscalPeriod(Base):
    __tablename__ = "fiscal_periods"

    id: Mapped[int] = mapped_column(primary_key=True)
    code: Mapped[str] = mapped_column(String(30), nullable=False)
    start_date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    end_date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    is_locked: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    locked_at: Mapped[dt.datetime | None] = mapped_column(
        DateTime, nullable=True, default=None
    )
    locked_by: Mapped[str | None] = mapped_column(String(64), nullable=True)

    def __repr__(self) -> str:
        state = "LOCKED" if self.is_locked else "OPEN"
        return f"<FiscalPeriod {self.code} {self.start_date}..{self.end_date} ({state})>"
