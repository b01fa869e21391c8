"""
Tests for the FiscalPeriodService.
"""

from datetime import date

import pytest
from pydantic import ValidationError as SchemaValidationError
from sqlalchemy import select

from accounting_core.exceptions import (
    NotFoundError,
    PeriodLockedError,
    PermissionDeniedError,
    ValidationError,
)
from accounting_core.models.audit_log import AuditLog
from accounting_core.models.enums import AuditAction, AuditEntityType
from accounting_core.schemas.period import FiscalPeriodCreate
from accounting_core.seed import ensure_default_periods
from accounting_core.services.period_service import FiscalPeriodService


def make_period(service, actor, start, end, code=None):
    return service.create_period(
        FiscalPeriodCreate(start_date=start, end_date=end, code=code), actor
    )


class TestCreatePeriod:

    def test_code_defaults_to_fiscal_year(self, db_session, admin):
        service = FiscalPeriodService(db_session)
        period = make_period(service, admin, date(2025, 1, 1), date(2025, 12, 31))

        assert period.code == "FY-2025"
        assert period.is_locked is False

    def test_overlap_rejected(self, db_session, admin):
        service = FiscalPeriodService(db_session)
        make_period(service, admin, date(2025, 1, 1), date(2025, 6, 30), code="H1-2025")

        with pytest.raises(ValidationError, match="overlaps H1-2025"):
            make_period(service, admin, date(2025, 6, 1), date(2025, 12, 31))

    def test_adjacent_periods_allowed(self, db_session, admin):
        service = FiscalPeriodService(db_session)
        make_period(service, admin, date(2025, 1, 1), date(2025, 6, 30), code="H1-2025")
        make_period(service, admin, date(2025, 7, 1), date(2025, 12, 31), code="H2-2025")

        assert [p.code for p in service.list_periods()] == ["H1-2025", "H2-2025"]

    def test_end_before_start_rejected(self):
        with pytest.raises(SchemaValidationError):
            FiscalPeriodCreate(start_date=date(2025, 2, 1), end_date=date(2025, 1, 1))

    def test_accountant_cannot_create(self, db_session, accountant):
        service = FiscalPeriodService(db_session)
        with pytest.raises(PermissionDeniedError):
            make_period(service, accountant, date(2025, 1, 1), date(2025, 12, 31))


class TestLockPeriod:

    def test_lock_stamps_user_and_time(self, db_session, admin):
        service = FiscalPeriodService(db_session)
        period = make_period(service, admin, date(2025, 1, 1), date(2025, 12, 31))

        locked = service.lock_period(period.id, admin)
        db_session.commit()

        assert locked.is_locked is True
        assert locked.locked_by == "admin-1"
        assert locked.locked_at is not None

    def test_lock_is_audited_once(self, db_session, admin):
        service = FiscalPeriodService(db_session)
        period = make_period(service, admin, date(2025, 1, 1), date(2025, 12, 31))
        service.lock_period(period.id, admin)
        service.lock_period(period.id, admin)
        db_session.commit()

        records = db_session.execute(
            select(AuditLog).where(
                AuditLog.entity_type == AuditEntityType.PERIOD,
                AuditLog.action == AuditAction.PERIOD_LOCK,
            )
        ).scalars().all()
        assert len(records) == 1
        assert records[0].entity_id == str(period.id)

    def test_approver_cannot_lock(self, db_session, admin, approver):
        service = FiscalPeriodService(db_session)
        period = make_period(service, admin, date(2025, 1, 1), date(2025, 12, 31))

        with pytest.raises(PermissionDeniedError):
            service.lock_period(period.id, approver)

    def test_unknown_period(self, db_session, admin):
        with pytest.raises(NotFoundError):
            FiscalPeriodService(db_session).lock_period(999, admin)


class TestLockChecks:

    def test_dates_outside_every_period_are_open(self, db_session, admin):
        service = FiscalPeriodService(db_session)
        period = make_period(service, admin, date(2025, 1, 1), date(2025, 1, 31))
        service.lock_period(period.id, admin)

        assert service.is_locked(date(2025, 1, 31)) is True
        assert service.is_locked(date(2025, 2, 1)) is False
        service.ensure_open(date(2024, 12, 31))

    def test_ensure_open_raises_inside_locked_period(self, db_session, admin):
        service = FiscalPeriodService(db_session)
        period = make_period(service, admin, date(2025, 1, 1), date(2025, 1, 31))
        service.lock_period(period.id, admin)

        with pytest.raises(PeriodLockedError) as exc_info:
            service.ensure_open(date(2025, 1, 15))
        assert exc_info.value.target_date == date(2025, 1, 15)


class TestSeeding:

    def test_seed_creates_current_year_once(self, db_session):
        period = ensure_default_periods(db_session, today=date(2025, 8, 9))
        assert period.code == "FY-2025"
        assert period.start_date == date(2025, 1, 1)
        assert period.end_date == date(2025, 12, 31)

        assert ensure_default_periods(db_session) is None
