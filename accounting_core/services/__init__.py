"""Business logic services."""

from accounting_core.services.audit_service import AuditService
from accounting_core.services.chart_service import ChartOfAccountsService
from accounting_core.services.document_service import DocumentService
from accounting_core.services.forecast_service import ForecastService
from accounting_core.services.journal_service import JournalService
from accounting_core.services.period_service import FiscalPeriodService
from accounting_core.services.report_service import ReportService

__all__ = [
    "AuditService",
    "ChartOfAccountsService",
    "DocumentService",
    "ForecastService",
    "FiscalPeriodService",
    "JournalService",
    "ReportService",
]
