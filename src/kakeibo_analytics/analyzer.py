"""Monthly expense analysis.

This module provides:
1. analyze_month - the pure monthly report computation
2. MonthlyAnalyzer - a service that fronts analyze_month with a result cache
   and logs how long each analysis took
"""

import calendar
import time
from collections.abc import Iterable, Mapping, Sequence
from typing import Any, Optional, Union

import structlog

from .aggregation import (
    HUNDRED,
    ZERO,
    Number,
    calculate_budget_comparison,
    calculate_category_breakdown,
    calculate_monthly_trend,
    filter_by_month,
    parse_year_month,
    shift_month,
    split_fixed_variable,
    sum_amounts,
    to_decimal,
)
from .anomalies import detect_anomalies
from .cache import AnalyticsCache
from .config import AnalyticsConfig
from .models import Expense, MonthlyAnalyticsReport, load_expenses

logger = structlog.get_logger()

DEFAULT_TREND_MONTHS = 6
NO_BUDGET = "no-budget"


def analyze_month(
    expenses: Sequence[Expense],
    year_month: str,
    budget: Optional[Number] = None,
    *,
    trend_months: int = DEFAULT_TREND_MONTHS,
) -> MonthlyAnalyticsReport:
    """Build the analytics report for one month.

    Args:
        expenses: Every known expense. The month is selected from it, and the
            whole collection is the baseline for trends and anomalies.
        year_month: Target month as YYYY-MM.
        budget: Optional budget to compare the month's total against; 0 means none.
        trend_months: Length of the trend series ending at ``year_month``.

    Returns:
        MonthlyAnalyticsReport for ``year_month``.

    Raises:
        ValidationError: If ``year_month`` is not a valid YYYY-MM key.
    """
    first_day = parse_year_month(year_month)

    month_expenses = filter_by_month(expenses, year_month)
    total, fixed, variable = split_fixed_variable(month_expenses)

    previous_total = sum_amounts(filter_by_month(expenses, shift_month(year_month, -1)))
    growth = (
        (total - previous_total) / previous_total * HUNDRED if previous_total > 0 else ZERO
    )

    days_in_month = calendar.monthrange(first_day.year, first_day.month)[1]

    return MonthlyAnalyticsReport(
        year_month=year_month,
        total_expense=total,
        fixed_expense=fixed,
        variable_expense=variable,
        category_breakdown=calculate_category_breakdown(month_expenses),
        monthly_trend=calculate_monthly_trend(expenses, year_month, trend_months),
        budget_comparison=(
            calculate_budget_comparison(total, budget) if budget else None
        ),
        month_over_month_growth=growth,
        average_daily_expense=total / days_in_month,
        anomalies=detect_anomalies(month_expenses, expenses),
    )


def cache_key(year_month: str, budget: Optional[Number] = None) -> str:
    """Cache key for a monthly analysis.

    A missing or zero budget shares the no-budget key. Equal budgets map to
    one key whatever their numeric type.
    """
    budget_part = format(to_decimal(budget).normalize(), "f") if budget else NO_BUDGET
    return f"analysis-{year_month}-{budget_part}"


class MonthlyAnalyzer:
    """
    Cached monthly analysis service.

    The cache is supplied by the caller so that its lifetime and TTL are
    under the caller's control; analyzers built without one get a private
    cache using the configured TTL.

    Reports are keyed by (year_month, budget) only. Callers whose expense
    data changes must clear the cache to see the change before expiry.
    """

    def __init__(
        self,
        cache: Optional[AnalyticsCache] = None,
        config: Optional[AnalyticsConfig] = None,
    ):
        self.config = config or AnalyticsConfig()
        self.cache = cache if cache is not None else AnalyticsCache(
            ttl_seconds=self.config.cache_ttl_seconds
        )

    def analyze(
        self,
        expenses: Iterable[Union[Expense, Mapping[str, Any]]],
        year_month: str,
        budget: Optional[Number] = None,
        use_cache: Optional[bool] = None,
    ) -> MonthlyAnalyticsReport:
        """
        Return the report for ``year_month``, from the cache when possible.

        Args:
            expenses: Expense models or raw records; raw records are validated.
            year_month: Target month as YYYY-MM.
            budget: Optional monthly budget.
            use_cache: Override ``config.use_cache`` for this call.

        Raises:
            ExpenseValidationError: If a raw record is malformed.
            ValidationError: If ``year_month`` is malformed.
        """
        if use_cache is None:
            use_cache = self.config.use_cache

        if not use_cache:
            return self._compute(expenses, year_month, budget)

        key = cache_key(year_month, budget)
        computed = False

        def compute() -> MonthlyAnalyticsReport:
            nonlocal computed
            computed = True
            return self._compute(expenses, year_month, budget)

        report = self.cache.get_or_compute(key, compute)
        if not computed:
            logger.info("analysis_cache_hit", key=key)
        return report

    def _compute(
        self,
        expenses: Iterable[Union[Expense, Mapping[str, Any]]],
        year_month: str,
        budget: Optional[Number],
    ) -> MonthlyAnalyticsReport:
        records = load_expenses(expenses)
        started = time.perf_counter()
        report = analyze_month(
            records,
            year_month,
            budget,
            trend_months=self.config.trend_months,
        )
        duration_ms = (time.perf_counter() - started) * 1000

        if duration_ms > self.config.slow_analysis_threshold_ms:
            logger.warning(
                "slow_analysis",
                year_month=year_month,
                duration_ms=round(duration_ms, 2),
                threshold_ms=self.config.slow_analysis_threshold_ms,
            )

        logger.info(
            "analysis_completed",
            year_month=year_month,
            expense_count=len(records),
            total_expense=str(report.total_expense),
            anomalies=len(report.anomalies),
            duration_ms=round(duration_ms, 2),
        )
        return report
