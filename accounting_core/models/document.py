"""
Accounting document model.

A document is the business event (invoice, receipt, payment,
deposit, purchase invoice) that generates a journal entry
underneath. The document carries the business context; the
entry carries the accounting truth. Once posted, the entry
id is written back onto the document.
"""

import uuid
import datetime as dt
from decimal import Decimal

from sqlalchemy import (
    String, Date, DateTime, Integer, Numeric, ForeignKey, JSON,
    UniqueConstraint, Enum as SAEnum, Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from accounting_core.models.base import Base
from accounting_core.models.enums import DocumentType, DocumentStatus


class AccountingDocument(Base):
    __tablename__ = "accounting_documents"
    # Serials are numbered per document type
    __table_args__ = (
        UniqueConstraint(
            "doc_type", "serial_number", name="uq_document_type_serial"
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    serial_number: Mapped[str] = mapped_column(
        String(40), nullable=False, index=True
    )
    doc_type: Mapped[DocumentType] = mapped_column(
        SAEnum(DocumentType, name="document_type_enum", create_constraint=True),
        nullable=False,
    )
    status: Mapped[DocumentStatus] = mapped_column(
        SAEnum(
            DocumentStatus,
            name="document_status_enum",
            create_constraint=True,
        ),
        nullable=False,
        default=DocumentStatus.DRAFT,
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    due_date: Mapped[dt.date | None] = mapped_column(Date, nullable=True)
    contact_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    bank_account_id: Mapped[str | None] = mapped_column(
        String(64), nullable=True
    )
    property_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    project_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(19, 4), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False)
    vat_rate: Mapped[Decimal | None] = mapped_column(
        Numeric(7, 4), nullable=True
    )
    vat_amount: Mapped[Decimal] = mapped_column(
        Numeric(19, 4), nullable=False, default=Decimal("0")
    )
    total_amount: Mapped[Decimal] = mapped_column(
        Numeric(19, 4), nullable=False
    )
    description_ar: Mapped[str | None] = mapped_column(
        String(255), nullable=True
    )
    description_en: Mapped[str | None] = mapped_column(
        String(255), nullable=True
    )
    reference: Mapped[str | None] = mapped_column(String(100), nullable=True)
    # File metadata only ({url, name}); storage lives elsewhere
    attachments: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    journal_entry_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("journal_entries.id"), nullable=True
    )
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime, nullable=False, default=dt.datetime.utcnow
    )

    items: Mapped[list["DocumentItem"]] = relationship(
        back_populates="document",
        cascade="all, delete-orphan",
        order_by="DocumentItem.position",
    )
    journal_entry: Mapped["JournalEntry | None"] = relationship(
        foreign_keys=[journal_entry_id]
    )

    def __repr__(self) -> str:
        return (
            f"<AccountingDocument {self.serial_number} {self.doc_type.value} "
            f"{self.total_amount} {self.currency} ({self.status.value})>"
        )


class DocumentItem(Base):
    """
    A line item on a document.

    account_id is optional; when set on a purchase invoice the
    item amount is allocated to that account instead of the
    default expense account.
    """

    __tablename__ = "document_items"

    id: Mapped[int] = mapped_column(primary_key=True)
    document_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("accounting_documents.id"), nullable=False, index=True
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    description_ar: Mapped[str] = mapped_column(String(255), nullable=False)
    description_en: Mapped[str | None] = mapped_column(
        String(255), nullable=True
    )
    quantity: Mapped[Decimal] = mapped_column(
        Numeric(19, 4), nullable=False, default=Decimal("1")
    )
    unit_price: Mapped[Decimal] = mapped_column(
        Numeric(19, 4), nullable=False, default=Decimal("0")
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(19, 4), nullable=False)
    account_id: Mapped[int | None] = mapped_column(
        ForeignKey("accounts.id"), nullable=True, index=True
    )

    document: Mapped["AccountingDocument"] = relationship(back_populates="items")
