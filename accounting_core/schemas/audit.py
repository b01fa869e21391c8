"""
Pydantic schemas for the audit log.
"""

from datetime import datetime

from pydantic import BaseModel

from accounting_core.models.enums import AuditAction, AuditEntityType


class AuditLogResponse(BaseModel):
    id: int
    timestamp: datetime
    action: AuditAction
    entity_type: AuditEntityType
    entity_id: str
    user_id: str | None
    reason: str | None
    previous_state: str | None
    new_state: str | None

    model_config = {"from_attributes": True}
