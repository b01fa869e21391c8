"""
Database models package.

All models must be imported here so that Alembic can discover
them through Base.metadata when generating migrations.
"""

from accounting_core.models.base import Base
from accounting_core.models.enums import (
    AccountType,
    NormalBalance,
    EntryStatus,
    DocumentType,
    DocumentStatus,
    AuditAction,
    AuditEntityType,
)
from accounting_core.models.audit_log import AuditLog
from accounting_core.models.ledger_account import Account
from accounting_core.models.journal_entry import JournalEntry, JournalLine
from accounting_core.models.document import AccountingDocument, DocumentItem
from accounting_core.models.fiscal_period import FiscalPeriod

__all__ = [
    "Base",
    "AccountType",
    "NormalBalance",
    "EntryStatus",
    "DocumentType",
    "DocumentStatus",
    "AuditAction",
    "AuditEntityType",
    "AuditLog",
    "Account",
    "JournalEntry",
    "JournalLine",
    "AccountingDocument",
    "DocumentItem",
    "FiscalPeriod",
]
