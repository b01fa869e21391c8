"""
Report and forecast API endpoints.

Every response is computed from the journal on request.
"""

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from accounting_core.api.deps import get_auth_context
from accounting_core.exceptions import AccountingError
from accounting_core.models.base import get_db
from accounting_core.schemas.report import (
    BalanceSheetReport,
    ForecastResponse,
    IncomeStatementReport,
    TrialBalanceReport,
)
from accounting_core.security import AuthContext
from accounting_core.services.forecast_service import ForecastService
from accounting_core.services.report_service import ReportService

router = APIRouter(prefix="/accounting", tags=["Reports"])


@router.get(
    "/reports",
    response_model=TrialBalanceReport | IncomeStatementReport | BalanceSheetReport,
)
def get_report(
    report: str = Query(default="trial"),
    from_date: date | None = Query(default=None),
    to_date: date | None = Query(default=None),
    as_of_date: date | None = Query(default=None),
    db: Session = Depends(get_db),
    actor: AuthContext = Depends(get_auth_context),
):
    """
    Trial balance, income statement or balance sheet.

    report is one of trial, income or balance.
    """
    service = ReportService(db)
    try:
        return service.get_report(report, actor, from_date, to_date, as_of_date)
    except AccountingError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.get("/forecast", response_model=ForecastResponse)
def get_forecast(
    months: int | None = Query(default=None),
    forecast_months: int | None = Query(default=None),
    db: Session = Depends(get_db),
    actor: AuthContext = Depends(get_auth_context),
):
    """Revenue, expense and cash-flow projection from recent months."""
    service = ForecastService(db)
    try:
        return service.get_forecast(actor, months, forecast_months)
    except AccountingError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
