"""
Accounting Core: FastAPI application.

Entry point for the service. Logging is configured before
anything else, then every router is registered here.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from accounting_core.config import get_settings
from accounting_core.logging_config import configure_logging
from accounting_core.models.base import Base, SessionLocal, engine
from accounting_core.seed import ensure_default_accounts, ensure_default_periods
from accounting_core.api.health import router as health_router
from accounting_core.api.accounts import router as accounts_router
from accounting_core.api.journal import router as journal_router
from accounting_core.api.documents import router as documents_router
from accounting_core.api.periods import router as periods_router
from accounting_core.api.reports import router as reports_router
from accounting_core.api.audit import router as audit_router

settings = get_settings()
configure_logging(settings)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Install the default chart and fiscal year on a fresh database."""
    if settings.SEED_DEFAULTS:
        Base.metadata.create_all(bind=engine)
        db = SessionLocal()
        try:
            ensure_default_accounts(db)
            ensure_default_periods(db)
            db.commit()
        except Exception:
            db.rollback()
            logger.exception("Seeding default ledger data failed")
            raise
        finally:
            db.close()
    logger.info(
        "%s %s started (%s)",
        settings.APP_NAME, settings.APP_VERSION, settings.ENVIRONMENT,
    )
    yield


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Double-entry ledger with document posting, period locking and reporting",
    lifespan=lifespan,
)

# Register routers
app.include_router(health_router)
app.include_router(accounts_router)
app.include_router(journal_router)
app.include_router(documents_router)
app.include_router(periods_router)
app.include_router(reports_router)
app.include_router(audit_router)
