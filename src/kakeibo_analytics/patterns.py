"""Seasonality and day-of-week spending patterns.

Both analyzers always return a full calendar: 12 seasonality points and 7
weekday patterns, zero-filled where there is no data.
"""

import statistics
from collections import Counter
from collections.abc import Sequence
from decimal import Decimal

from .models import Expense, SeasonalityPoint, SpendingPattern

ZERO = Decimal("0")
ONE = Decimal("1")
MONTHS_IN_YEAR = 12
DAYS_IN_WEEK = 7
PEAK_CATEGORY_COUNT = 3


def _mean_or_zero(amounts: Sequence[Decimal]) -> Decimal:
    return statistics.mean(amounts) if amounts else ZERO


def day_of_week(expense: Expense) -> int:
    """Weekday of the expense with Sunday as 0 and Saturday as 6."""
    return expense.calendar_date.isoweekday() % DAYS_IN_WEEK


def analyze_seasonality(expenses: Sequence[Expense]) -> list[SeasonalityPoint]:
    """Average expense per calendar month across all years.

    The seasonal index compares each month's average expense with the
    yearly total spread evenly over 12 months. An index of 1 means a
    typical month; with no spending at all every index is 1.
    """
    by_month: dict[int, list[Decimal]] = {month: [] for month in range(1, MONTHS_IN_YEAR + 1)}
    for expense in expenses:
        by_month[expense.calendar_date.month].append(expense.amount)

    overall_average = sum((e.amount for e in expenses), ZERO) / MONTHS_IN_YEAR

    points = []
    for month, amounts in by_month.items():
        average = _mean_or_zero(amounts)
        points.append(
            SeasonalityPoint(
                month=month,
                average_expense=average,
                seasonal_index=average / overall_average if overall_average > 0 else ONE,
            )
        )
    return points


def analyze_spending_patterns(expenses: Sequence[Expense]) -> list[SpendingPattern]:
    """Average spend, frequency and most common categories per weekday."""
    amounts: dict[int, list[Decimal]] = {day: [] for day in range(DAYS_IN_WEEK)}
    categories: dict[int, Counter] = {day: Counter() for day in range(DAYS_IN_WEEK)}
    for expense in expenses:
        day = day_of_week(expense)
        amounts[day].append(expense.amount)
        categories[day][expense.category] += 1

    # most_common keeps first-seen order among equal counts
    return [
        SpendingPattern(
            day_of_week=day,
            average_amount=_mean_or_zero(amounts[day]),
            frequency=len(amounts[day]),
            peak_categories=[
                category for category, _ in categories[day].most_common(PEAK_CATEGORY_COUNT)
            ],
        )
        for day in range(DAYS_IN_WEEK)
    ]
