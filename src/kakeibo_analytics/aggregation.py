"""Category, trend and budget aggregations.

Functions that compute summaries and trends from expense records. Month
membership is decided by prefix-matching the record's ``YYYY-MM-DD`` date
against a ``YYYY-MM`` key; no other date parsing happens when filtering.
"""

from collections.abc import Iterable, Sequence
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Union

from dateutil.relativedelta import relativedelta

from .classifier import is_fixed_expense
from .exceptions import ValidationError
from .models import (
    YEAR_MONTH_PATTERN,
    BudgetComparison,
    CategorySummary,
    Expense,
    TrendPoint,
)

Number = Union[int, float, Decimal]

ZERO = Decimal("0")
HUNDRED = Decimal("100")
MOVING_AVERAGE_WINDOW = 3


def to_decimal(value: Number) -> Decimal:
    """Convert an int, float or Decimal to Decimal without binary noise."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def month_key(d: date) -> str:
    return f"{d.year:04d}-{d.month:02d}"


def parse_year_month(year_month: str) -> date:
    """Return the first day of the month named by a ``YYYY-MM`` key.

    Raises:
        ValidationError: If the key is not a valid year-month.
    """
    if not isinstance(year_month, str) or not YEAR_MONTH_PATTERN.match(year_month):
        raise ValidationError(
            f"Invalid year-month: {year_month!r}",
            field="year_month",
            value=year_month,
            constraint="YYYY-MM with month 01-12",
        )
    return date(int(year_month[:4]), int(year_month[5:7]), 1)


def shift_month(year_month: str, months: int) -> str:
    """Move a ``YYYY-MM`` key by ``months`` calendar months."""
    return month_key(parse_year_month(year_month) + relativedelta(months=months))


def filter_by_month(expenses: Iterable[Expense], year_month: str) -> list[Expense]:
    return [e for e in expenses if e.date.startswith(year_month)]


def sum_amounts(expenses: Iterable[Expense]) -> Decimal:
    return sum((e.amount for e in expenses), ZERO)


def split_fixed_variable(expenses: Sequence[Expense]) -> tuple[Decimal, Decimal, Decimal]:
    """Return (total, fixed, variable) for a set of expenses.

    ``variable`` is always exactly ``total - fixed``.
    """
    total = sum_amounts(expenses)
    fixed = sum_amounts(e for e in expenses if is_fixed_expense(e.category))
    return total, fixed, total - fixed


def calculate_category_breakdown(expenses: Sequence[Expense]) -> list[CategorySummary]:
    """Group expenses by category with totals, counts and percentage shares.

    Categories are sorted by amount, largest first. Categories with equal
    amounts keep the order in which they were first seen.
    """
    total = sum_amounts(expenses)
    groups: dict[str, list[Decimal]] = {}
    for expense in expenses:
        groups.setdefault(expense.category, []).append(expense.amount)

    breakdown = [
        CategorySummary(
            category=category,
            amount=sum(amounts, ZERO),
            count=len(amounts),
            percentage=(sum(amounts, ZERO) / total * HUNDRED) if total > 0 else ZERO,
            is_fixed=is_fixed_expense(category),
        )
        for category, amounts in groups.items()
    ]
    breakdown.sort(key=lambda s: s.amount, reverse=True)
    return breakdown


def calculate_monthly_trend(
    expenses: Sequence[Expense],
    current_month: str,
    months_to_analyze: int = 6,
) -> list[TrendPoint]:
    """Build a chronological series of monthly totals ending at ``current_month``.

    Every point from the third onward carries a three-month moving average
    of ``total_expense``, rounded half-up to a whole unit.

    Raises:
        ValidationError: If ``current_month`` is malformed or
            ``months_to_analyze`` is less than 1.
    """
    if months_to_analyze < 1:
        raise ValidationError(
            f"months_to_analyze must be at least 1, got {months_to_analyze}",
            field="months_to_analyze",
            value=months_to_analyze,
            constraint=">= 1",
        )
    start = parse_year_month(current_month) - relativedelta(months=months_to_analyze - 1)

    trend: list[TrendPoint] = []
    for offset in range(months_to_analyze):
        month = month_key(start + relativedelta(months=offset))
        total, fixed, variable = split_fixed_variable(filter_by_month(expenses, month))
        trend.append(
            TrendPoint(
                month=month,
                total_expense=total,
                fixed_expense=fixed,
                variable_expense=variable,
            )
        )

    for i in range(MOVING_AVERAGE_WINDOW - 1, len(trend)):
        window = trend[i - MOVING_AVERAGE_WINDOW + 1 : i + 1]
        mean = sum((p.total_expense for p in window), ZERO) / MOVING_AVERAGE_WINDOW
        trend[i].moving_average = mean.quantize(Decimal("1"), rounding=ROUND_HALF_UP)

    return trend


def calculate_budget_comparison(
    actual_amount: Number,
    budget_amount: Number,
) -> BudgetComparison:
    """Compare actual spending against a budget.

    A budget of zero or less yields a variance percentage of 0.
    """
    actual = to_decimal(actual_amount)
    budget = to_decimal(budget_amount)
    variance = actual - budget
    return BudgetComparison(
        budget_amount=budget,
        actual_amount=actual,
        variance=variance,
        variance_percentage=(variance / budget * HUNDRED) if budget > 0 else ZERO,
        is_over_budget=variance > 0,
    )
