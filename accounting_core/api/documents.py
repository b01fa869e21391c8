"""
Document API endpoints.

Creating an APPROVED or PAID document posts its journal entry
in the same transaction. When posting fails the whole request
is rolled back, so no document is left without its entry.
"""

import uuid
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from accounting_core.api.deps import get_auth_context
from accounting_core.exceptions import AccountingError
from accounting_core.models.base import get_db
from accounting_core.models.enums import DocumentType
from accounting_core.schemas.document import DocumentCreate, DocumentResponse
from accounting_core.security import AuthContext, Permission, require_permission
from accounting_core.services.document_service import DocumentService

router = APIRouter(prefix="/accounting/documents", tags=["Documents"])


@router.post("", response_model=DocumentResponse, status_code=201)
def create_document(
    request: DocumentCreate,
    db: Session = Depends(get_db),
    actor: AuthContext = Depends(get_auth_context),
):
    """Create a document; the response carries journal_entry_id once posted."""
    service = DocumentService(db)
    try:
        document = service.create_document(request, actor)
        db.commit()
        return document
    except AccountingError as e:
        db.rollback()
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.get("", response_model=list[DocumentResponse])
def list_documents(
    from_date: date | None = Query(default=None),
    to_date: date | None = Query(default=None),
    type: DocumentType | None = Query(default=None),
    db: Session = Depends(get_db),
    actor: AuthContext = Depends(get_auth_context),
):
    service = DocumentService(db)
    try:
        return service.list_documents(actor, from_date, to_date, type)
    except AccountingError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.get("/{document_id}", response_model=DocumentResponse)
def get_document(
    document_id: uuid.UUID,
    db: Session = Depends(get_db),
    actor: AuthContext = Depends(get_auth_context),
):
    service = DocumentService(db)
    try:
        require_permission(actor, Permission.REPORT_VIEW)
        return service.get_document(document_id)
    except AccountingError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
