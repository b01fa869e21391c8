"""
Default data for a fresh ledger.

Installs the standard chart of accounts and a fiscal period
for the current calendar year. Both functions do nothing when
data of their kind already exists, so they are safe to run on
every startup.
"""

import logging
from datetime import date

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from accounting_core.models.fiscal_period import FiscalPeriod
from accounting_core.models.ledger_account import Account
from accounting_core.services.chart_service import DEFAULT_CHART

logger = logging.getLogger(__name__)


def ensure_default_accounts(db: Session) -> int:
    """Install the default chart when no account exists. Returns the number added."""
    existing = db.execute(select(func.count(Account.id))).scalar()
    if existing:
        return 0

    for sort_order, (code, name_ar, name_en, account_type) in enumerate(DEFAULT_CHART):
        db.add(Account(
            code=code,
            name_ar=name_ar,
            name_en=name_en,
            account_type=account_type,
            sort_order=sort_order,
            is_active=True,
        ))
    db.flush()
    logger.info("Seeded default chart of accounts (%d accounts)", len(DEFAULT_CHART))
    return len(DEFAULT_CHART)


def ensure_default_periods(db: Session, today: date | None = None) -> FiscalPeriod | None:
    """Create the current calendar year's period when no period exists."""
    existing = db.execute(select(func.count(FiscalPeriod.id))).scalar()
    if existing:
        return None

    year = (today or date.today()).year
    period = FiscalPeriod(
        code=f"FY-{year}",
        start_date=date(year, 1, 1),
        end_date=date(year, 12, 31),
        is_locked=False,
    )
    db.add(period)
    db.flush()
    logger.info("Seeded fiscal period %s", period.code)
    return period
