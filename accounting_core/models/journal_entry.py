"""
Journal entry and journal line models.

A journal entry is a dated header plus an ordered set of
lines. Within one entry the sum of debits equals the sum of
credits; the JournalService enforces this before anything
reaches the database. Entries are never edited in place:
they are cancelled, approved, or superseded by a reversal.
"""

import uuid
import datetime as dt
from decimal import Decimal

from sqlalchemy import (
    String, Date, DateTime, Integer, Numeric, ForeignKey,
    Enum as SAEnum, Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from accounting_core.models.base import Base
from accounting_core.models.enums import EntryStatus, DocumentType


class JournalEntry(Base):
    __tablename__ = "journal_entries"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    serial_number: Mapped[str] = mapped_column(
        String(30), unique=True, nullable=False
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    status: Mapped[EntryStatus] = mapped_column(
        SAEnum(EntryStatus, name="entry_status_enum", create_constraint=True),
        nullable=False,
        default=EntryStatus.APPROVED,
    )
    total_debit: Mapped[Decimal] = mapped_column(
        Numeric(19, 4), nullable=False
    )
    total_credit: Mapped[Decimal] = mapped_column(
        Numeric(19, 4), nullable=False
    )
    description_ar: Mapped[str | None] = mapped_column(
        String(255), nullable=True
    )
    description_en: Mapped[str | None] = mapped_column(
        String(255), nullable=True
    )
    document_type: Mapped[DocumentType | None] = mapped_column(
        SAEnum(DocumentType, name="document_type_enum"), nullable=True
    )
    document_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, nullable=True, index=True
    )
    contact_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    bank_account_id: Mapped[str | None] = mapped_column(
        String(64), nullable=True
    )
    property_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    project_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    # Set when a reversal supersedes this entry
    replaced_by: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("journal_entries.id"), nullable=True
    )
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime, nullable=False, default=dt.datetime.utcnow
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime, nullable=False, default=dt.datetime.utcnow, onupdate=dt.datetime.utcnow
    )

    lines: Mapped[list["JournalLine"]] = relationship(
        back_populates="entry",
        cascade="all, delete-orphan",
        order_by="JournalLine.position",
    )

    def __repr__(self) -> str:
        return (
            f"<JournalEntry {self.serial_number} {self.date} "
            f"{self.total_debit} ({self.status.value})>"
        )


class JournalLine(Base):
    """One debit or credit against a single account."""

    __tablename__ = "journal_lines"

    id: Mapped[int] = mapped_column(primary_key=True)
    entry_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("journal_entries.id"), nullable=False, index=True
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    account_id: Mapped[int] = mapped_column(
        ForeignKey("accounts.id"), nullable=False, index=True
    )
    debit: Mapped[Decimal] = mapped_column(
        Numeric(19, 4), nullable=False, default=Decimal("0")
    )
    credit: Mapped[Decimal] = mapped_column(
        Numeric(19, 4), nullable=False, default=Decimal("0")
    )
    description_ar: Mapped[str | None] = mapped_column(
        String(255), nullable=True
    )
    description_en: Mapped[str | None] = mapped_column(
        String(255), nullable=True
    )

    entry: Mapped["JournalEntry"] = relationship(back_populates="lines")
    account: Mapped["Account"] = relationship()

    def __repr__(self) -> str:
        return f"<JournalLine acct={self.account_id} Dr {self.debit} Cr {self.credit}>"
