"""
Pydantic schemas for financial statements and forecasts.
"""

import datetime as dt
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel

from accounting_core.models.enums import AccountType


class TrialBalanceRow(BaseModel):
    account_id: int
    account_code: str
    account_name_ar: str
    account_name_en: str | None
    account_type: AccountType
    debit: Decimal
    credit: Decimal
    balance: Decimal


class TrialBalanceReport(BaseModel):
    report: Literal["trial"] = "trial"
    from_date: dt.date
    to_date: dt.date
    rows: list[TrialBalanceRow]
    total_debit: Decimal
    total_credit: Decimal


class StatementItem(BaseModel):
    code: str
    name_ar: str
    name_en: str | None
    amount: Decimal


class StatementSection(BaseModel):
    items: list[StatementItem]
    total: Decimal


class IncomeStatementReport(BaseModel):
    report: Literal["income"] = "income"
    from_date: dt.date
    to_date: dt.date
    revenue: StatementSection
    expense: StatementSection
    net_income: Decimal


class BalanceSheetReport(BaseModel):
    report: Literal["balance"] = "balance"
    as_of_date: dt.date
    assets: list[StatementItem]
    liabilities: list[StatementItem]
    equity: list[StatementItem]
    net_income: Decimal
    total_assets: Decimal
    total_liabilities: Decimal
    total_equity: Decimal


# --- Forecast ---

class SeriesSet(BaseModel):
    labels: list[str]
    revenue: list[float]
    expense: list[float]
    cash_flow: list[float]


class ForecastSummary(BaseModel):
    avg_revenue: float
    avg_expense: float
    avg_cash_flow: float
    trend_revenue: float
    trend_expense: float
    trend_cash_flow: float


class ForecastResponse(BaseModel):
    months: int
    forecast_months: int
    historical: SeriesSet
    forecast: SeriesSet
    summary: ForecastSummary
