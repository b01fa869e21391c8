"""
Pydantic schemas for accounting documents.
"""

import uuid
import datetime as dt
from decimal import Decimal

from pydantic import AliasChoices, BaseModel, Field

from accounting_core.models.enums import DocumentType, DocumentStatus


class DocumentItemCreate(BaseModel):
    description_ar: str = Field(min_length=1, max_length=255)
    description_en: str | None = Field(default=None, max_length=255)
    quantity: Decimal = Field(default=Decimal("1"), ge=0)
    unit_price: Decimal = Field(default=Decimal("0"), ge=0)
    amount: Decimal = Field(ge=0, decimal_places=4)
    account_id: int | None = None


class Attachment(BaseModel):
    url: str = Field(min_length=1, max_length=500)
    name: str = Field(min_length=1, max_length=255)


class DocumentCreate(BaseModel):
    """
    Request to create a document.

    vat_amount is derived from vat_rate (a percentage) when only
    the rate is given; total_amount defaults to amount + VAT.
    """
    type: DocumentType
    status: DocumentStatus = DocumentStatus.APPROVED
    date: dt.date
    serial_number: str | None = Field(default=None, max_length=40)
    due_date: dt.date | None = None
    contact_id: str | None = Field(default=None, max_length=64)
    bank_account_id: str | None = Field(default=None, max_length=64)
    property_id: str | None = Field(default=None, max_length=64)
    project_id: str | None = Field(default=None, max_length=64)
    amount: Decimal = Field(gt=0, decimal_places=4)
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    vat_rate: Decimal | None = Field(default=None, ge=0, le=100)
    vat_amount: Decimal | None = Field(default=None, ge=0, decimal_places=4)
    total_amount: Decimal | None = Field(default=None, gt=0, decimal_places=4)
    description_ar: str | None = Field(default=None, max_length=255)
    description_en: str | None = Field(default=None, max_length=255)
    reference: str | None = Field(default=None, max_length=100)
    items: list[DocumentItemCreate] = Field(default_factory=list)
    attachments: list[Attachment] = Field(default_factory=list)


class DocumentItemResponse(BaseModel):
    description_ar: str
    description_en: str | None
    quantity: Decimal
    unit_price: Decimal
    amount: Decimal
    account_id: int | None

    model_config = {"from_attributes": True}


class DocumentResponse(BaseModel):
    id: uuid.UUID
    serial_number: str
    type: DocumentType = Field(validation_alias=AliasChoices("doc_type", "type"))
    status: DocumentStatus
    date: dt.date
    due_date: dt.date | None
    contact_id: str | None
    bank_account_id: str | None
    property_id: str | None
    project_id: str | None
    amount: Decimal
    currency: str
    vat_rate: Decimal | None
    vat_amount: Decimal
    total_amount: Decimal
    description_ar: str | None
    description_en: str | None
    reference: str | None
    items: list[DocumentItemResponse]
    attachments: list[Attachment]
    journal_entry_id: uuid.UUID | None
    created_at: dt.datetime

    model_config = {"from_attributes": True}
