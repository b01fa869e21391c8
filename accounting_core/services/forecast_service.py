"""
Forecast service: revenue, expense and cash-flow projections.

Monthly totals for the trailing window are fitted with an
ordinary least squares line per series, and the line is
extended forward. The output is an estimate, so it is
computed in floats rather than ledger Decimals.
"""

import calendar
import logging
from datetime import date

from sqlalchemy.orm import Session

from accounting_core.config import Settings, get_settings
from accounting_core.exceptions import ValidationError
from accounting_core.models.enums import AccountType
from accounting_core.schemas.report import ForecastResponse, ForecastSummary, SeriesSet
from accounting_core.security import AuthContext, Permission, require_permission
from accounting_core.services.chart_service import ChartOfAccountsService
from accounting_core.services.journal_service import JournalService

logger = logging.getLogger(__name__)

# Upper bound for both the history and the forecast window
MAX_WINDOW_MONTHS = 120


def linear_regression(xs: list[float], ys: list[float]) -> tuple[float, float]:
    """
    Closed-form OLS fit, returning (slope, intercept).

    With fewer than two points there is no trend: the slope is
    0 and the intercept is the single value, or 0 when empty.
    """
    n = len(xs)
    if n < 2:
        return 0.0, (float(ys[0]) if ys else 0.0)

    sum_x = sum(xs)
    sum_y = sum(ys)
    sum_xy = sum(x * y for x, y in zip(xs, ys))
    sum_x2 = sum(x * x for x in xs)

    denominator = n * sum_x2 - sum_x * sum_x
    slope = (n * sum_xy - sum_x * sum_y) / denominator if denominator else 0.0
    intercept = (sum_y - slope * sum_x) / n
    return slope, intercept


def _shift_month(first_of_month: date, months: int) -> date:
    index = first_of_month.year * 12 + (first_of_month.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def _month_end(first_of_month: date) -> date:
    last_day = calendar.monthrange(first_of_month.year, first_of_month.month)[1]
    return first_of_month.replace(day=last_day)


def _label(first_of_month: date) -> str:
    return f"{first_of_month.year}-{first_of_month.month:02d}"


def _mean(values: list[float]) -> float:
    return sum(values) / len(values) if values else 0.0


class ForecastService:

    def __init__(self, db: Session, settings: Settings | None = None):
        self.db = db
        self.settings = settings or get_settings()
        self.chart = ChartOfAccountsService(db)
        self.journal = JournalService(db, self.settings)

    def _monthly_series(self, month_starts: list[date]):
        accounts = self.chart.all_accounts()
        revenue_ids = {a.id for a in accounts if a.account_type == AccountType.REVENUE}
        expense_ids = {a.id for a in accounts if a.account_type == AccountType.EXPENSE}
        cash_ids = {
            a.id for a in accounts if a.code in self.settings.CASH_ACCOUNT_CODES
        }

        buckets = {m: [0.0, 0.0, 0.0] for m in month_starts}
        entries = self.journal.active_entries(
            month_starts[0], _month_end(month_starts[-1])
        )
        for entry in entries:
            bucket = buckets.get(entry.date.replace(day=1))
            if bucket is None:
                continue
            for line in entry.lines:
                debit, credit = float(line.debit), float(line.credit)
                if line.account_id in revenue_ids:
                    bucket[0] += credit - debit
                if line.account_id in expense_ids:
                    bucket[1] += debit - credit
                if line.account_id in cash_ids:
                    bucket[2] += debit - credit

        revenue = [buckets[m][0] for m in month_starts]
        expense = [buckets[m][1] for m in month_starts]
        cash_flow = [buckets[m][2] for m in month_starts]
        return revenue, expense, cash_flow

    def get_forecast(
        self,
        actor: AuthContext,
        months: int | None = None,
        forecast_months: int | None = None,
        as_of: date | None = None,
    ) -> ForecastResponse:
        """
        Fit the last `months` complete months and project `forecast_months` ahead.

        History ends with the month before as_of (today by
        default); the first forecast point is as_of's month.
        """
        require_permission(actor, Permission.REPORT_VIEW)

        months = self.settings.FORECAST_HISTORY_MONTHS if months is None else months
        forecast_months = (
            self.settings.FORECAST_MONTHS if forecast_months is None else forecast_months
        )
        if not 1 <= months <= MAX_WINDOW_MONTHS:
            raise ValidationError(
                f"months must be between 1 and {MAX_WINDOW_MONTHS}"
            )
        if not 1 <= forecast_months <= MAX_WINDOW_MONTHS:
            raise ValidationError(
                f"forecast_months must be between 1 and {MAX_WINDOW_MONTHS}"
            )

        current_month = (as_of or date.today()).replace(day=1)
        try:
            history_start = _shift_month(current_month, -months)
            month_starts = [_shift_month(history_start, i) for i in range(months)]
            forecast_starts = [
                _shift_month(current_month, i) for i in range(forecast_months)
            ]
        except ValueError as e:
            raise ValidationError(
                f"Forecast window around {current_month} leaves the calendar: {e}"
            ) from e

        revenue, expense, cash_flow = self._monthly_series(month_starts)

        xs = [float(i) for i in range(months)]
        rev_slope, rev_intercept = linear_regression(xs, revenue)
        exp_slope, exp_intercept = linear_regression(xs, expense)
        cash_slope, cash_intercept = linear_regression(xs, cash_flow)

        ahead = [months + i for i in range(forecast_months)]
        forecast = SeriesSet(
            labels=[_label(m) for m in forecast_starts],
            revenue=[max(0.0, rev_slope * x + rev_intercept) for x in ahead],
            expense=[max(0.0, exp_slope * x + exp_intercept) for x in ahead],
            cash_flow=[cash_slope * x + cash_intercept for x in ahead],
        )

        logger.debug(
            "Forecast from %s over %d months: revenue trend %.4f",
            _label(history_start), months, rev_slope,
        )
        return ForecastResponse(
            months=months,
            forecast_months=forecast_months,
            historical=SeriesSet(
                labels=[_label(m) for m in month_starts],
                revenue=revenue,
                expense=expense,
                cash_flow=cash_flow,
            ),
            forecast=forecast,
            summary=ForecastSummary(
                avg_revenue=_mean(revenue),
                avg_expense=_mean(expense),
                avg_cash_flow=_mean(cash_flow),
                trend_revenue=rev_slope,
                trend_expense=exp_slope,
                trend_cash_flow=cash_slope,
            ),
        )
