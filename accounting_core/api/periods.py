"""
Fiscal period API endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from accounting_core.api.deps import get_auth_context
from accounting_core.exceptions import AccountingError
from accounting_core.models.base import get_db
from accounting_core.schemas.period import FiscalPeriodCreate, FiscalPeriodResponse
from accounting_core.security import AuthContext
from accounting_core.services.period_service import FiscalPeriodService

router = APIRouter(prefix="/accounting/periods", tags=["Fiscal Periods"])


@router.get("", response_model=list[FiscalPeriodResponse])
def list_periods(db: Session = Depends(get_db)):
    """All periods with their lock state, oldest first."""
    return FiscalPeriodService(db).list_periods()


@router.post("", response_model=FiscalPeriodResponse, status_code=201)
def create_period(
    request: FiscalPeriodCreate,
    db: Session = Depends(get_db),
    actor: AuthContext = Depends(get_auth_context),
):
    service = FiscalPeriodService(db)
    try:
        period = service.create_period(request, actor)
        db.commit()
        return period
    except AccountingError as e:
        db.rollback()
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.post("/{period_id}/lock", response_model=FiscalPeriodResponse)
def lock_period(
    period_id: int,
    db: Session = Depends(get_db),
    actor: AuthContext = Depends(get_auth_context),
):
    """
    Lock a period against further postings.

    The locking user is taken from the X-User-Id header. There
    is no way to unlock a period.
    """
    service = FiscalPeriodService(db)
    try:
        period = service.lock_period(period_id, actor)
        db.commit()
        return period
    except AccountingError as e:
        db.rollback()
        raise HTTPException(status_code=e.status_code, detail=str(e))
