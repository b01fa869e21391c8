"""
Journal API endpoints.

These endpoints expose the journal operations to HTTP clients.
The API layer is thin: it handles HTTP concerns (status codes,
response formatting, the transaction boundary) and delegates
all business logic to the JournalService.
"""

import uuid
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from accounting_core.api.deps import get_auth_context
from accounting_core.exceptions import AccountingError
from accounting_core.models.base import get_db
from accounting_core.schemas.ledger import (
    CancelEntryRequest,
    JournalEntryCreate,
    JournalEntryResponse,
    ReverseEntryRequest,
)
from accounting_core.security import AuthContext, Permission, require_permission
from accounting_core.services.journal_service import JournalService

router = APIRouter(prefix="/accounting/journal", tags=["Journal"])


@router.get("", response_model=list[JournalEntryResponse])
def list_journal_entries(
    from_date: date | None = Query(default=None),
    to_date: date | None = Query(default=None),
    db: Session = Depends(get_db),
    actor: AuthContext = Depends(get_auth_context),
):
    """Entries dated within the inclusive range, newest first."""
    service = JournalService(db)
    try:
        return service.list_entries(actor, from_date, to_date)
    except AccountingError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.post("", response_model=JournalEntryResponse, status_code=201)
def create_journal_entry(
    request: JournalEntryCreate,
    db: Session = Depends(get_db),
    actor: AuthContext = Depends(get_auth_context),
):
    """
    Post a balanced journal entry.

    The header and all of its lines are committed together.
    Imbalanced entries, unknown or inactive accounts and dates
    inside a locked fiscal period are rejected.
    """
    service = JournalService(db)
    try:
        entry = service.create_entry(request, actor)
        db.commit()
        return entry
    except AccountingError as e:
        db.rollback()
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.get("/{entry_id}", response_model=JournalEntryResponse)
def get_journal_entry(
    entry_id: uuid.UUID,
    db: Session = Depends(get_db),
    actor: AuthContext = Depends(get_auth_context),
):
    service = JournalService(db)
    try:
        require_permission(actor, Permission.REPORT_VIEW)
        return service.get_entry(entry_id)
    except AccountingError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.post("/{entry_id}/cancel", response_model=JournalEntryResponse)
def cancel_journal_entry(
    entry_id: uuid.UUID,
    request: CancelEntryRequest | None = None,
    db: Session = Depends(get_db),
    actor: AuthContext = Depends(get_auth_context),
):
    service = JournalService(db)
    try:
        entry = service.cancel_entry(
            entry_id, actor, reason=request.reason if request else None
        )
        db.commit()
        return entry
    except AccountingError as e:
        db.rollback()
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.post("/{entry_id}/reverse", response_model=JournalEntryResponse, status_code=201)
def reverse_journal_entry(
    entry_id: uuid.UUID,
    request: ReverseEntryRequest | None = None,
    db: Session = Depends(get_db),
    actor: AuthContext = Depends(get_auth_context),
):
    """
    Reverse an entry by posting its mirror image.

    Returns the new reversal entry; the original is marked as
    replaced by it.
    """
    service = JournalService(db)
    try:
        reversal = service.reverse_entry(
            entry_id, actor, reverse_date=request.date if request else None
        )
        db.commit()
        return reversal
    except AccountingError as e:
        db.rollback()
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.post("/{entry_id}/approve", response_model=JournalEntryResponse)
def approve_journal_entry(
    entry_id: uuid.UUID,
    db: Session = Depends(get_db),
    actor: AuthContext = Depends(get_auth_context),
):
    service = JournalService(db)
    try:
        entry = service.approve_entry(entry_id, actor)
        db.commit()
        return entry
    except AccountingError as e:
        db.rollback()
        raise HTTPException(status_code=e.status_code, detail=str(e))
