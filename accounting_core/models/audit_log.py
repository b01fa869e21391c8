"""
Audit log model.

Records every mutating accounting action: who did what to
which entity, why, and what it looked like before and after.
"""

from datetime import datetime

from sqlalchemy import String, DateTime, Text, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from accounting_core.models.base import Base
from accounting_core.models.enums import AuditAction, AuditEntityType


class AuditLog(Base):
    """
    Immutable record of an accounting action.

    Like journal entries, audit logs are append-only.
    You never update or delete an audit record.
    """

    __tablename__ = "audit_log"

    id: Mapped[int] = mapped_column(primary_key=True)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False, index=True
    )
    action: Mapped[AuditAction] = mapped_column(
        SAEnum(AuditAction, name="audit_action_enum"), nullable=False
    )
    entity_type: Mapped[AuditEntityType] = mapped_column(
        SAEnum(AuditEntityType, name="audit_entity_type_enum"), nullable=False
    )
    entity_id: Mapped[str] = mapped_column(
        String(64), nullable=False, index=True
    )
    user_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    reason: Mapped[str | None] = mapped_column(String(500), nullable=True)
    previous_state: Mapped[str | None] = mapped_column(Text, nullable=True)
    new_state: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return (
            f"<AuditLog {self.action.value} "
            f"{self.entity_type.value}:{self.entity_id}>"
        )
