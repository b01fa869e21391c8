"""
Report service: financial statements derived from the journal.

Nothing here is stored. Every report scans the active entries
for its date window and sums their lines per account, so a
report can never disagree with the raw ledger.
"""

import logging
from collections import defaultdict
from datetime import date
from decimal import Decimal

from sqlalchemy.orm import Session

from accounting_core.config import Settings, get_settings
from accounting_core.exceptions import ValidationError
from accounting_core.models.enums import AccountType
from accounting_core.models.ledger_account import Account, DEBIT_NORMAL_TYPES
from accounting_core.schemas.report import (
    BalanceSheetReport,
    IncomeStatementReport,
    StatementItem,
    StatementSection,
    TrialBalanceReport,
    TrialBalanceRow,
)
from accounting_core.security import AuthContext, Permission, require_permission
from accounting_core.services.chart_service import ChartOfAccountsService
from accounting_core.services.journal_service import JournalService

logger = logging.getLogger(__name__)

# Amounts smaller than this are treated as zero and left off reports
ELISION_THRESHOLD = Decimal("0.001")
ZERO = Decimal("0")

REPORT_KINDS = ("trial", "income", "balance")


def _is_negligible(value: Decimal) -> bool:
    return abs(value) < ELISION_THRESHOLD


def _signed_balance(account: Account, debit: Decimal, credit: Decimal) -> Decimal:
    """Balance on the account's normal side."""
    if account.account_type in DEBIT_NORMAL_TYPES:
        return debit - credit
    return credit - debit


class ReportService:

    def __init__(self, db: Session, settings: Settings | None = None):
        self.db = db
        self.settings = settings or get_settings()
        self.chart = ChartOfAccountsService(db)
        self.journal = JournalService(db, self.settings)

    def _totals_by_account(
        self, from_date: date | None, to_date: date | None
    ) -> dict[int, tuple[Decimal, Decimal]]:
        """Σdebit and Σcredit per account id over active entries."""
        debits: dict[int, Decimal] = defaultdict(lambda: ZERO)
        credits: dict[int, Decimal] = defaultdict(lambda: ZERO)

        for entry in self.journal.active_entries(from_date, to_date):
            for line in entry.lines:
                debits[line.account_id] += line.debit
                credits[line.account_id] += line.credit

        return {
            account_id: (debits[account_id], credits[account_id])
            for account_id in set(debits) | set(credits)
        }

    def _statement_items(
        self,
        totals: dict[int, tuple[Decimal, Decimal]],
        accounts: list[Account],
        account_type: AccountType,
    ) -> StatementSection:
        items = []
        for account in accounts:
            if account.account_type != account_type or account.id not in totals:
                continue
            debit, credit = totals[account.id]
            amount = _signed_balance(account, debit, credit)
            if _is_negligible(amount):
                continue
            items.append(StatementItem(
                code=account.code,
                name_ar=account.name_ar,
                name_en=account.name_en,
                amount=amount,
            ))
        return StatementSection(items=items, total=sum((i.amount for i in items), ZERO))

    # --- Reports ---

    def trial_balance(self, from_date: date, to_date: date) -> TrialBalanceReport:
        """
        Per-account debit and credit sums for the window.

        Rows whose debit and credit are both negligible are
        dropped; totals are taken over the rows kept.
        """
        totals = self._totals_by_account(from_date, to_date)
        rows = []

        for account in self.chart.all_accounts():
            debit, credit = totals.get(account.id, (ZERO, ZERO))
            if _is_negligible(debit) and _is_negligible(credit):
                continue
            rows.append(TrialBalanceRow(
                account_id=account.id,
                account_code=account.code,
                account_name_ar=account.name_ar,
                account_name_en=account.name_en,
                account_type=account.account_type,
                debit=debit,
                credit=credit,
                balance=_signed_balance(account, debit, credit),
            ))

        return TrialBalanceReport(
            from_date=from_date,
            to_date=to_date,
            rows=rows,
            total_debit=sum((r.debit for r in rows), ZERO),
            total_credit=sum((r.credit for r in rows), ZERO),
        )

    def income_statement(
        self, from_date: date, to_date: date
    ) -> IncomeStatementReport:
        totals = self._totals_by_account(from_date, to_date)
        accounts = self.chart.all_accounts()

        revenue = self._statement_items(totals, accounts, AccountType.REVENUE)
        expense = self._statement_items(totals, accounts, AccountType.EXPENSE)

        return IncomeStatementReport(
            from_date=from_date,
            to_date=to_date,
            revenue=revenue,
            expense=expense,
            net_income=revenue.total - expense.total,
        )

    def balance_sheet(self, as_of_date: date) -> BalanceSheetReport:
        """
        Cumulative positions since inception up to as_of_date.

        Net income for the fiscal year so far (Jan 1 through
        as_of_date) is reported separately and included in
        total equity as undistributed earnings.
        """
        totals = self._totals_by_account(None, as_of_date)
        accounts = self.chart.all_accounts()

        assets = self._statement_items(totals, accounts, AccountType.ASSET)
        liabilities = self._statement_items(totals, accounts, AccountType.LIABILITY)
        equity = self._statement_items(totals, accounts, AccountType.EQUITY)

        year_start = date(as_of_date.year, 1, 1)
        net_income = self.income_statement(year_start, as_of_date).net_income

        return BalanceSheetReport(
            as_of_date=as_of_date,
            assets=assets.items,
            liabilities=liabilities.items,
            equity=equity.items,
            net_income=net_income,
            total_assets=assets.total,
            total_liabilities=liabilities.total,
            total_equity=equity.total + net_income,
        )

    def get_report(
        self,
        kind: str,
        actor: AuthContext,
        from_date: date | None = None,
        to_date: date | None = None,
        as_of_date: date | None = None,
    ) -> TrialBalanceReport | IncomeStatementReport | BalanceSheetReport:
        """
        Dispatch to one of the three reports.

        to_date defaults to today, from_date to Jan 1 of to_date's
        year and as_of_date to to_date.
        """
        require_permission(actor, Permission.REPORT_VIEW)

        if kind not in REPORT_KINDS:
            raise ValidationError(
                f"Unknown report '{kind}'; expected one of {', '.join(REPORT_KINDS)}"
            )

        to_date = to_date or date.today()
        from_date = from_date or date(to_date.year, 1, 1)
        if from_date > to_date:
            raise ValidationError("from_date must not be after to_date")

        logger.debug("Building %s report %s..%s", kind, from_date, to_date)
        if kind == "trial":
            return self.trial_balance(from_date, to_date)
        if kind == "income":
            return self.income_statement(from_date, to_date)
        return self.balance_sheet(as_of_date or to_date)
