"""
Chart of accounts service.

Owns account master data. Posting rules and reports rely on a
fixed set of well-known account codes; require_account() is
how they fetch them, failing with ConfigurationError before
any side effect when one is missing.
"""

import logging

from sqlalchemy import select, exists
from sqlalchemy.orm import Session

from accounting_core.exceptions import (
    ConfigurationError,
    NotFoundError,
    ValidationError,
)
from accounting_core.models.document import DocumentItem
from accounting_core.models.enums import AccountType, AuditAction, AuditEntityType
from accounting_core.models.journal_entry import JournalLine
from accounting_core.models.ledger_account import Account
from accounting_core.schemas.ledger import AccountCreate
from accounting_core.security import AuthContext, Permission, require_permission
from accounting_core.services.audit_service import AuditService

logger = logging.getLogger(__name__)


# Well-known account codes
CASH_CODE = "1000"
BANK_CODE = "1100"
PAYABLES_CODE = "2000"
DEPOSITS_PAYABLE_CODE = "2100"
VAT_PAYABLE_CODE = "2200"
REVENUE_CODE = "4000"
EXPENSE_CODE = "5000"

WELL_KNOWN_ACCOUNTS = {
    CASH_CODE: "cash",
    BANK_CODE: "bank",
    PAYABLES_CODE: "payables",
    DEPOSITS_PAYABLE_CODE: "deposits payable",
    VAT_PAYABLE_CODE: "VAT payable",
    REVENUE_CODE: "revenue",
    EXPENSE_CODE: "expense",
}

# (code, name_ar, name_en, type)
DEFAULT_CHART: list[tuple[str, str, str, AccountType]] = [
    ("1000", "الصندوق", "Cash", AccountType.ASSET),
    ("1100", "البنوك", "Banks", AccountType.ASSET),
    ("1200", "العملاء", "Receivables", AccountType.ASSET),
    ("1210", "ذمم مدينة أخرى", "Other Receivables", AccountType.ASSET),
    ("1300", "عربونات مقدمة", "Prepaid Deposits", AccountType.ASSET),
    ("1400", "مصروفات مقدمة", "Prepaid Expenses", AccountType.ASSET),
    ("1500", "أصول أخرى", "Other Assets", AccountType.ASSET),
    ("2000", "الموردون", "Payables", AccountType.LIABILITY),
    ("2100", "عربونات مستلمة", "Deposits Received", AccountType.LIABILITY),
    ("2200", "ضرائب مستحقة", "Tax Payable", AccountType.LIABILITY),
    ("2300", "التزامات أخرى", "Other Liabilities", AccountType.LIABILITY),
    ("3000", "رأس المال", "Capital", AccountType.EQUITY),
    ("3100", "أرباح محتجزة", "Retained Earnings", AccountType.EQUITY),
    ("4000", "إيرادات الإيجار", "Rent Revenue", AccountType.REVENUE),
    ("4100", "إيرادات المبيعات", "Sales Revenue", AccountType.REVENUE),
    ("4200", "رسوم إدارية", "Administrative Fees", AccountType.REVENUE),
    ("4300", "إيرادات أخرى", "Other Revenue", AccountType.REVENUE),
    ("5000", "مصروفات التشغيل", "Operating Expenses", AccountType.EXPENSE),
    ("5100", "مصروفات الصيانة", "Maintenance Expenses", AccountType.EXPENSE),
    ("5200", "مصروفات إدارية", "Administrative Expenses", AccountType.EXPENSE),
    ("5300", "إيجارات ومرافق", "Rent & Utilities", AccountType.EXPENSE),
    ("5400", "رواتب ومزايا", "Salaries & Benefits", AccountType.EXPENSE),
    ("5500", "مصروفات أخرى", "Other Expenses", AccountType.EXPENSE),
]


def _account_state(account: Account) -> dict:
    return {
        "code": account.code,
        "name_ar": account.name_ar,
        "name_en": account.name_en,
        "account_type": account.account_type.value,
        "is_active": account.is_active,
    }


class ChartOfAccountsService:
    """
    All chart of accounts operations pass through this service.

    The caller owns the session and decides when to commit.
    """

    def __init__(self, db: Session):
        self.db = db
        self.audit = AuditService(db)

    def list_accounts(self, actor: AuthContext) -> list[Account]:
        require_permission(actor, Permission.ACCOUNT_VIEW)
        return self.all_accounts()

    def all_accounts(self) -> list[Account]:
        """Every account ordered by code, without a permission check."""
        accounts = self.db.execute(
            select(Account).order_by(Account.code)
        ).scalars().all()
        return list(accounts)

    def create_account(
        self, request: AccountCreate, actor: AuthContext
    ) -> Account:
        """
        Create a new account.

        Raises ValidationError if the account code already exists.
        """
        require_permission(actor, Permission.ACCOUNT_EDIT)

        if self.get_by_code(request.code) is not None:
            raise ValidationError(
                f"Account with code '{request.code}' already exists"
            )

        account = Account(
            code=request.code,
            name_ar=request.name_ar,
            name_en=request.name_en,
            account_type=request.account_type,
            sort_order=request.sort_order,
            is_active=True,
        )
        self.db.add(account)
        self.db.flush()

        self.audit.append(
            AuditAction.CREATE,
            AuditEntityType.ACCOUNT,
            account.id,
            user_id=actor.user_id,
            new_state=_account_state(account),
        )
        logger.info("Created account %s (%s)", account.code, account.account_type.value)
        return account

    def get_account(self, account_id: int) -> Account:
        account = self.db.get(Account, account_id)
        if account is None:
            raise NotFoundError("Account", account_id)
        return account

    def get_by_code(self, code: str) -> Account | None:
        return self.db.execute(
            select(Account).where(Account.code == code)
        ).scalar_one_or_none()

    def require_account(self, code: str) -> Account:
        """Fetch a well-known account or raise ConfigurationError."""
        account = self.get_by_code(code)
        if account is None:
            purpose = WELL_KNOWN_ACCOUNTS.get(code, "")
            logger.error("Chart of accounts is missing account %s %s", code, purpose)
            raise ConfigurationError(code, purpose)
        return account

    def is_referenced(self, account_id: int) -> bool:
        """Whether any journal line or document item points at the account."""
        in_lines = self.db.execute(
            select(exists().where(JournalLine.account_id == account_id))
        ).scalar()
        in_items = self.db.execute(
            select(exists().where(DocumentItem.account_id == account_id))
        ).scalar()
        return bool(in_lines or in_items)

    def deactivate_account(
        self, account_id: int, actor: AuthContext
    ) -> Account:
        """Stop an account from receiving new postings."""
        require_permission(actor, Permission.ACCOUNT_EDIT)
        account = self.get_account(account_id)
        if not account.is_active:
            raise ValidationError(f"Account {account.code} is already inactive")

        previous = _account_state(account)
        account.is_active = False
        self.db.flush()

        self.audit.append(
            AuditAction.UPDATE,
            AuditEntityType.ACCOUNT,
            account.id,
            user_id=actor.user_id,
            reason="Account deactivated",
            previous_state=previous,
            new_state=_account_state(account),
        )
        logger.info("Deactivated account %s", account.code)
        return account

    def delete_account(self, account_id: int, actor: AuthContext) -> None:
        """
        Delete an account that nothing references.

        Referenced accounts must stay for the ledger to remain
        readable; deactivate them instead.
        """
        require_permission(actor, Permission.ACCOUNT_EDIT)
        account = self.get_account(account_id)

        if self.is_referenced(account.id):
            raise ValidationError(
                f"Account {account.code} is referenced by postings "
                f"and cannot be deleted; deactivate it instead"
            )

        previous = _account_state(account)
        self.db.delete(account)
        self.db.flush()

        self.audit.append(
            AuditAction.DELETE,
            AuditEntityType.ACCOUNT,
            account_id,
            user_id=actor.user_id,
            previous_state=previous,
        )
        logger.info("Deleted account %s", previous["code"])
