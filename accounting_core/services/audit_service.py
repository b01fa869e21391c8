"""
Audit service: append-only trail of every mutating action.

Records are written in the caller's session, so an audit
record commits or rolls back together with the change it
describes.
"""

import json

from sqlalchemy import select
from sqlalchemy.orm import Session

from accounting_core.config import Settings, get_settings
from accounting_core.models.audit_log import AuditLog
from accounting_core.models.enums import AuditAction, AuditEntityType
from accounting_core.security import AuthContext, Permission, require_permission


def _serialize_state(state) -> str | None:
    if state is None or isinstance(state, str):
        return state
    return json.dumps(state, default=str, ensure_ascii=False, sort_keys=True)


class AuditService:

    def __init__(self, db: Session, settings: Settings | None = None):
        self.db = db
        self.settings = settings or get_settings()

    def append(
        self,
        action: AuditAction,
        entity_type: AuditEntityType,
        entity_id,
        user_id: str | None = None,
        reason: str | None = None,
        previous_state=None,
        new_state=None,
    ) -> AuditLog:
        """
        Add an audit record to the session.

        previous_state/new_state may be strings or JSON-serializable
        dicts. The record is never updated afterwards.
        """
        record = AuditLog(
            action=action,
            entity_type=entity_type,
            entity_id=str(entity_id),
            user_id=user_id,
            reason=reason,
            previous_state=_serialize_state(previous_state),
            new_state=_serialize_state(new_state),
        )
        self.db.add(record)
        self.db.flush()
        return record

    def query(
        self,
        actor: AuthContext,
        entity_type: AuditEntityType | None = None,
        entity_id: str | None = None,
        limit: int | None = None,
    ) -> list[AuditLog]:
        """Return matching records, newest first, at most AUDIT_LOG_MAX_LIMIT."""
        require_permission(actor, Permission.AUDIT_VIEW)

        if limit is None:
            limit = self.settings.AUDIT_LOG_DEFAULT_LIMIT
        limit = max(1, min(limit, self.settings.AUDIT_LOG_MAX_LIMIT))

        stmt = select(AuditLog)
        if entity_type is not None:
            stmt = stmt.where(AuditLog.entity_type == entity_type)
        if entity_id is not None:
            stmt = stmt.where(AuditLog.entity_id == str(entity_id))
        stmt = stmt.order_by(
            AuditLog.timestamp.desc(), AuditLog.id.desc()
        ).limit(limit)

        return list(self.db.execute(stmt).scalars().all())
