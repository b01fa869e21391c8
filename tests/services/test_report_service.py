"""
Tests for the ReportService.

Every expected figure here is worked out by hand from the
lines posted in the test, never from another report.
"""

from datetime import date
from decimal import Decimal

import pytest

from accounting_core.exceptions import PermissionDeniedError, ValidationError
from accounting_core.models.enums import EntryStatus
from accounting_core.schemas.ledger import JournalEntryCreate, JournalLineCreate
from accounting_core.security import AuthContext
from accounting_core.services.journal_service import JournalService
from accounting_core.services.report_service import ReportService


def post(db_session, actor, entry_date, *lines, status=EntryStatus.APPROVED):
    """Post an entry from (account, debit, credit) tuples."""
    return JournalService(db_session).create_entry(JournalEntryCreate(
        date=entry_date,
        status=status,
        lines=[
            JournalLineCreate(
                account_id=account.id,
                debit=Decimal(debit),
                credit=Decimal(credit),
            )
            for account, debit, credit in lines
        ],
    ), actor)


@pytest.fixture
def quarter(db_session, chart, accountant):
    """Three balanced entries touching Cash, Revenue and VAT in Q1 2025."""
    cash, revenue, vat = chart["1000"], chart["4000"], chart["2200"]
    entries = [
        post(db_session, accountant, date(2025, 1, 10),
             (cash, "105", "0"), (revenue, "0", "100"), (vat, "0", "5")),
        post(db_session, accountant, date(2025, 2, 10),
             (cash, "210", "0"), (revenue, "0", "200"), (vat, "0", "10")),
        post(db_session, accountant, date(2025, 3, 10),
             (vat, "15", "0"), (cash, "0", "15")),
    ]
    db_session.commit()
    return entries


def rows_by_code(report):
    return {row.account_code: row for row in report.rows}


class TestTrialBalance:

    def test_totals_equal_sum_of_entries(self, db_session, quarter):
        report = ReportService(db_session).trial_balance(
            date(2025, 1, 1), date(2025, 3, 31)
        )

        expected = sum(e.total_debit for e in quarter)
        assert expected == Decimal("330")
        assert report.total_debit == expected
        assert report.total_credit == expected

    def test_rows_match_raw_lines(self, db_session, quarter):
        report = ReportService(db_session).trial_balance(
            date(2025, 1, 1), date(2025, 3, 31)
        )
        rows = rows_by_code(report)

        assert list(rows) == ["1000", "2200", "4000"]
        assert (rows["1000"].debit, rows["1000"].credit) == (Decimal("315"), Decimal("15"))
        assert rows["1000"].balance == Decimal("300")
        assert (rows["4000"].debit, rows["4000"].credit) == (Decimal("0"), Decimal("300"))
        assert rows["4000"].balance == Decimal("300")
        assert (rows["2200"].debit, rows["2200"].credit) == (Decimal("15"), Decimal("15"))
        assert rows["2200"].balance == Decimal("0")

    def test_window_excludes_other_dates(self, db_session, quarter):
        report = ReportService(db_session).trial_balance(
            date(2025, 2, 1), date(2025, 2, 28)
        )
        assert report.total_debit == Decimal("210")

    def test_cancelled_entries_excluded(self, db_session, quarter, approver):
        JournalService(db_session).cancel_entry(quarter[1].id, approver)
        db_session.commit()

        report = ReportService(db_session).trial_balance(
            date(2025, 1, 1), date(2025, 3, 31)
        )
        assert report.total_debit == Decimal("120")

    def test_reversal_replaces_original(self, db_session, quarter, approver):
        JournalService(db_session).reverse_entry(
            quarter[0].id, approver, reverse_date=date(2025, 3, 20)
        )
        db_session.commit()

        report = ReportService(db_session).trial_balance(
            date(2025, 1, 1), date(2025, 3, 31)
        )
        rows = rows_by_code(report)
        # Original 105/100/5 is dropped; its mirror is counted instead
        assert rows["1000"].debit == Decimal("210")
        assert rows["1000"].credit == Decimal("120")
        assert report.total_debit == report.total_credit == Decimal("330")

    def test_negligible_rows_elided(self, db_session, chart, accountant):
        post(db_session, accountant, date(2025, 1, 5),
             (chart["1000"], "0.0005", "0"), (chart["4300"], "0", "0.0005"))
        db_session.commit()

        report = ReportService(db_session).trial_balance(
            date(2025, 1, 1), date(2025, 1, 31)
        )
        assert report.rows == []
        assert report.total_debit == Decimal("0")


class TestIncomeStatement:

    def test_net_income(self, db_session, quarter, chart, accountant):
        post(db_session, accountant, date(2025, 3, 15),
             (chart["5000"], "70", "0"), (chart["1000"], "0", "70"))
        db_session.commit()

        report = ReportService(db_session).income_statement(
            date(2025, 1, 1), date(2025, 3, 31)
        )

        assert [i.code for i in report.revenue.items] == ["4000"]
        assert report.revenue.total == Decimal("300")
        assert report.expense.total == Decimal("70")
        assert report.net_income == Decimal("230")

    def test_accounts_without_activity_are_omitted(self, db_session, quarter):
        report = ReportService(db_session).income_statement(
            date(2025, 1, 1), date(2025, 3, 31)
        )
        assert report.expense.items == []
        assert report.expense.total == Decimal("0")


class TestBalanceSheet:

    def test_net_income_folds_into_equity(self, db_session, chart, accountant):
        cash, capital = chart["1000"], chart["3000"]
        post(db_session, accountant, date(2024, 12, 31),
             (cash, "1000", "0"), (capital, "0", "1000"))
        post(db_session, accountant, date(2025, 2, 1),
             (cash, "105", "0"), (chart["4000"], "0", "100"), (chart["2200"], "0", "5"))
        post(db_session, accountant, date(2025, 3, 1),
             (chart["5000"], "40", "0"), (cash, "0", "40"))
        db_session.commit()

        report = ReportService(db_session).balance_sheet(date(2025, 6, 30))

        assert report.total_assets == Decimal("1065")
        assert report.total_liabilities == Decimal("5")
        assert report.net_income == Decimal("60")
        assert report.total_equity == Decimal("1060")
        assert report.total_assets == report.total_liabilities + report.total_equity
        assert [i.code for i in report.equity] == ["3000"]

    def test_entries_after_as_of_date_ignored(self, db_session, quarter):
        report = ReportService(db_session).balance_sheet(date(2025, 1, 31))
        assert report.total_assets == Decimal("105")
        assert report.net_income == Decimal("100")


class TestGetReport:

    def test_dispatches_by_kind(self, db_session, quarter, auditor):
        service = ReportService(db_session)
        trial = service.get_report(
            "trial", auditor, date(2025, 1, 1), date(2025, 3, 31)
        )
        balance = service.get_report(
            "balance", auditor, as_of_date=date(2025, 3, 31)
        )

        assert trial.report == "trial"
        assert balance.report == "balance"
        assert balance.as_of_date == date(2025, 3, 31)

    def test_unknown_kind_rejected(self, db_session, auditor):
        with pytest.raises(ValidationError, match="Unknown report"):
            ReportService(db_session).get_report("cashbook", auditor)

    def test_inverted_range_rejected(self, db_session, auditor):
        with pytest.raises(ValidationError):
            ReportService(db_session).get_report(
                "trial", auditor, date(2025, 3, 1), date(2025, 1, 1)
            )

    def test_caller_without_role_rejected(self, db_session):
        with pytest.raises(PermissionDeniedError):
            ReportService(db_session).get_report("trial", AuthContext(role=None))
