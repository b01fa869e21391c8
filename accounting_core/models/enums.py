"""
Shared enumerations for database models.

Using Python enums mapped to database enums ensures that
only valid values can be stored. An invalid account type
or document status is caught at the database level, not
just in Python validation.
"""

import enum


class AccountType(str, enum.Enum):
    """The five fundamental accounting categories."""
    ASSET = "ASSET"
    LIABILITY = "LIABILITY"
    EQUITY = "EQUITY"
    REVENUE = "REVENUE"
    EXPENSE = "EXPENSE"


class NormalBalance(str, enum.Enum):
    """The side on which an account's balance increases."""
    DEBIT = "DEBIT"
    CREDIT = "CREDIT"


class EntryStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    APPROVED = "APPROVED"
    CANCELLED = "CANCELLED"


class DocumentType(str, enum.Enum):
    RECEIPT = "RECEIPT"
    INVOICE = "INVOICE"
    PURCHASE_INV = "PURCHASE_INV"
    PAYMENT = "PAYMENT"
    DEPOSIT = "DEPOSIT"
    QUOTE = "QUOTE"
    PURCHASE_ORDER = "PURCHASE_ORDER"


class DocumentStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    APPROVED = "APPROVED"
    PAID = "PAID"
    CANCELLED = "CANCELLED"


# Documents in these states must carry a posted journal entry
POSTED_DOCUMENT_STATUSES = frozenset({DocumentStatus.APPROVED, DocumentStatus.PAID})


class AuditAction(str, enum.Enum):
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    CANCEL = "CANCEL"
    REVERSE = "REVERSE"
    DELETE = "DELETE"
    PERIOD_LOCK = "PERIOD_LOCK"


class AuditEntityType(str, enum.Enum):
    ACCOUNT = "ACCOUNT"
    JOURNAL_ENTRY = "JOURNAL_ENTRY"
    DOCUMENT = "DOCUMENT"
    PERIOD = "PERIOD"
