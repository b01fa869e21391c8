"""
Audit log API endpoint.
"""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from accounting_core.api.deps import get_auth_context
from accounting_core.exceptions import AccountingError
from accounting_core.models.base import get_db
from accounting_core.models.enums import AuditEntityType
from accounting_core.schemas.audit import AuditLogResponse
from accounting_core.security import AuthContext
from accounting_core.services.audit_service import AuditService

router = APIRouter(prefix="/accounting/audit", tags=["Audit"])


@router.get("", response_model=list[AuditLogResponse])
def get_audit_log(
    entity_type: AuditEntityType | None = Query(default=None),
    entity_id: str | None = Query(default=None),
    limit: int | None = Query(default=None),
    db: Session = Depends(get_db),
    actor: AuthContext = Depends(get_auth_context),
):
    """Audit records, newest first. limit is capped at AUDIT_LOG_MAX_LIMIT."""
    service = AuditService(db)
    try:
        return service.query(actor, entity_type, entity_id, limit)
    except AccountingError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
