"""
Pydantic schemas for chart of accounts and journal operations.

These define the API contract: what data comes in, what data
goes out. They are separate from the database models because
the API shape and the storage shape are often different.
"""

import uuid
import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from accounting_core.models.enums import (
    AccountType,
    NormalBalance,
    EntryStatus,
    DocumentType,
)


# --- Chart of Accounts ---

class AccountCreate(BaseModel):
    """Request to create a new account."""
    code: str = Field(min_length=1, max_length=20)
    name_ar: str = Field(min_length=1, max_length=150)
    name_en: str | None = Field(default=None, max_length=150)
    account_type: AccountType
    sort_order: int = 0

    @field_validator("code")
    @classmethod
    def strip_code(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("code must not be blank")
        return v


class AccountResponse(BaseModel):
    id: int
    code: str
    name_ar: str
    name_en: str | None
    account_type: AccountType
    normal_balance: NormalBalance
    sort_order: int
    is_active: bool
    created_at: dt.datetime

    model_config = {"from_attributes": True}


# --- Journal ---

class JournalLineCreate(BaseModel):
    """A single line: a debit or a credit against one account."""
    account_id: int
    debit: Decimal = Field(default=Decimal("0"), ge=0, decimal_places=4)
    credit: Decimal = Field(default=Decimal("0"), ge=0, decimal_places=4)
    description_ar: str | None = Field(default=None, max_length=255)
    description_en: str | None = Field(default=None, max_length=255)


class EntryMeta(BaseModel):
    """Descriptive and linking fields carried by an entry header."""
    description_ar: str | None = Field(default=None, max_length=255)
    description_en: str | None = Field(default=None, max_length=255)
    document_type: DocumentType | None = None
    document_id: uuid.UUID | None = None
    contact_id: str | None = Field(default=None, max_length=64)
    bank_account_id: str | None = Field(default=None, max_length=64)
    property_id: str | None = Field(default=None, max_length=64)
    project_id: str | None = Field(default=None, max_length=64)


class JournalEntryCreate(EntryMeta):
    """
    A complete journal entry: a dated group of lines that must balance.

    Entries are APPROVED unless explicitly created as DRAFT.
    """
    date: dt.date
    lines: list[JournalLineCreate]
    status: EntryStatus = EntryStatus.APPROVED

    @field_validator("status")
    @classmethod
    def status_must_be_initial(cls, v: EntryStatus) -> EntryStatus:
        if v == EntryStatus.CANCELLED:
            raise ValueError("an entry cannot be created as CANCELLED")
        return v


class CancelEntryRequest(BaseModel):
    reason: str | None = Field(default=None, max_length=500)


class ReverseEntryRequest(BaseModel):
    """Reversal date defaults to today when omitted."""
    date: dt.date | None = None


class JournalLineResponse(BaseModel):
    account_id: int
    debit: Decimal
    credit: Decimal
    description_ar: str | None
    description_en: str | None

    model_config = {"from_attributes": True}


class JournalEntryResponse(BaseModel):
    id: uuid.UUID
    serial_number: str
    date: dt.date
    status: EntryStatus
    lines: list[JournalLineResponse]
    total_debit: Decimal
    total_credit: Decimal
    description_ar: str | None
    description_en: str | None
    document_type: DocumentType | None
    document_id: uuid.UUID | None
    contact_id: str | None
    bank_account_id: str | None
    property_id: str | None
    project_id: str | None
    replaced_by: uuid.UUID | None
    created_at: dt.datetime

    model_config = {"from_attributes": True}
