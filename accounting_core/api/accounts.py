"""
Chart of accounts API endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from accounting_core.api.deps import get_auth_context
from accounting_core.exceptions import AccountingError
from accounting_core.models.base import get_db
from accounting_core.schemas.ledger import AccountCreate, AccountResponse
from accounting_core.security import AuthContext
from accounting_core.services.chart_service import ChartOfAccountsService

router = APIRouter(prefix="/accounting/accounts", tags=["Accounts"])


@router.get("", response_model=list[AccountResponse])
def list_accounts(
    db: Session = Depends(get_db),
    actor: AuthContext = Depends(get_auth_context),
):
    """List every account ordered by code."""
    service = ChartOfAccountsService(db)
    try:
        return service.list_accounts(actor)
    except AccountingError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.post("", response_model=AccountResponse, status_code=201)
def create_account(
    request: AccountCreate,
    db: Session = Depends(get_db),
    actor: AuthContext = Depends(get_auth_context),
):
    """
    Create a new account.

    Account codes are unique; a duplicate code is rejected.
    """
    service = ChartOfAccountsService(db)
    try:
        account = service.create_account(request, actor)
        db.commit()
        return account
    except AccountingError as e:
        db.rollback()
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.post("/{account_id}/deactivate", response_model=AccountResponse)
def deactivate_account(
    account_id: int,
    db: Session = Depends(get_db),
    actor: AuthContext = Depends(get_auth_context),
):
    service = ChartOfAccountsService(db)
    try:
        account = service.deactivate_account(account_id, actor)
        db.commit()
        return account
    except AccountingError as e:
        db.rollback()
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.delete("/{account_id}", status_code=204)
def delete_account(
    account_id: int,
    db: Session = Depends(get_db),
    actor: AuthContext = Depends(get_auth_context),
):
    """
    Delete an unused account.

    Accounts referenced by journal lines or document items
    cannot be deleted; deactivate them instead.
    """
    service = ChartOfAccountsService(db)
    try:
        service.delete_account(account_id, actor)
        db.commit()
    except AccountingError as e:
        db.rollback()
        raise HTTPException(status_code=e.status_code, detail=str(e))
