"""
Fiscal period service.

Tracks which dated windows are locked. The journal service
consults ensure_open() before creating, cancelling, approving
or reversing an entry, so nothing dated inside a locked period
can change.

Locking is one-way. There is no unlock operation.
"""

import logging
from datetime import date, datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from accounting_core.exceptions import (
    NotFoundError,
    PeriodLockedError,
    ValidationError,
)
from accounting_core.models.enums import AuditAction, AuditEntityType
from accounting_core.models.fiscal_period import FiscalPeriod
from accounting_core.schemas.period import FiscalPeriodCreate
from accounting_core.security import AuthContext, Permission, require_permission
from accounting_core.services.audit_service import AuditService

logger = logging.getLogger(__name__)


class FiscalPeriodService:

    def __init__(self, db: Session):
        self.db = db
        self.audit = AuditService(db)

    def list_periods(self) -> list[FiscalPeriod]:
        """All periods with their lock state, oldest first."""
        periods = self.db.execute(
            select(FiscalPeriod).order_by(FiscalPeriod.start_date)
        ).scalars().all()
        return list(periods)

    def get_period(self, period_id: int) -> FiscalPeriod:
        period = self.db.get(FiscalPeriod, period_id)
        if period is None:
            raise NotFoundError("Fiscal period", period_id)
        return period

    def create_period(
        self, request: FiscalPeriodCreate, actor: AuthContext
    ) -> FiscalPeriod:
        """
        Define a new fiscal period.

        Periods may not overlap; a date belongs to at most one.
        """
        require_permission(actor, Permission.PERIOD_LOCK)

        overlapping = self.db.execute(
            select(FiscalPeriod).where(
                FiscalPeriod.start_date <= request.end_date,
                FiscalPeriod.end_date >= request.start_date,
            ).limit(1)
        ).scalar_one_or_none()
        if overlapping is not None:
            raise ValidationError(
                f"Period {request.start_date}..{request.end_date} overlaps "
                f"{overlapping.code}"
            )

        period = FiscalPeriod(
            code=request.code or f"FY-{request.start_date.year}",
            start_date=request.start_date,
            end_date=request.end_date,
            is_locked=False,
        )
        self.db.add(period)
        self.db.flush()

        self.audit.append(
            AuditAction.CREATE,
            AuditEntityType.PERIOD,
            period.id,
            user_id=actor.user_id,
            new_state={
                "code": period.code,
                "start_date": period.start_date.isoformat(),
                "end_date": period.end_date.isoformat(),
            },
        )
        logger.info("Created fiscal period %s", period.code)
        return period

    def lock_period(self, period_id: int, actor: AuthContext) -> FiscalPeriod:
        """
        Lock a period against further postings.

        Locking an already locked period returns it unchanged.
        """
        require_permission(actor, Permission.PERIOD_LOCK)
        period = self.get_period(period_id)

        if period.is_locked:
            logger.info("Fiscal period %s is already locked", period.code)
            return period

        period.is_locked = True
        period.locked_at = datetime.utcnow()
        period.locked_by = actor.user_id
        self.db.flush()

        self.audit.append(
            AuditAction.PERIOD_LOCK,
            AuditEntityType.PERIOD,
            period.id,
            user_id=actor.user_id,
            reason="Period closed for posting",
            previous_state={"is_locked": False},
            new_state={"is_locked": True},
        )
        logger.info("Locked fiscal period %s by %s", period.code, actor.user_id)
        return period

    def period_for_date(self, target: date) -> FiscalPeriod | None:
        return self.db.execute(
            select(FiscalPeriod).where(
                FiscalPeriod.start_date <= target,
                FiscalPeriod.end_date >= target,
            ).limit(1)
        ).scalar_one_or_none()

    def is_locked(self, target: date) -> bool:
        """Dates outside every defined period are open."""
        period = self.period_for_date(target)
        return period is not None and period.is_locked

    def ensure_open(self, target: date) -> None:
        period = self.period_for_date(target)
        if period is not None and period.is_locked:
            logger.warning(
                "Rejected mutation dated %s in locked period %s",
                target, period.code,
            )
            raise PeriodLockedError(target, period.code)
