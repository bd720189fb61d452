"""Billing periods and period statistics for the dashboard.

A household may close its books on a day other than the 1st, so a monthly
billing period runs from ``start_day`` of one month to the day before
``start_day`` of the next.
"""

from collections.abc import Sequence
from datetime import date
from decimal import Decimal
from typing import Optional

from dateutil.relativedelta import relativedelta
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ValidationError
from .models import BillingPeriod, Expense, ExpenseStats

ZERO = Decimal("0")


def billing_period(year: int, month: int, start_day: int = 1) -> BillingPeriod:
    """Monthly billing period starting on ``start_day`` of ``year``/``month``.

    Raises:
        ValidationError: If the start date does not exist.
    """
    try:
        start = date(year, month, start_day)
    except ValueError as exc:
        raise ValidationError(
            f"Invalid billing period start: {year}-{month:02d}-{start_day:02d}",
            field="start_day",
            value=start_day,
            constraint=str(exc),
        ) from exc

    end = start + relativedelta(months=1) - relativedelta(days=1)
    label = f"{year}-{month:02d}" if start_day == 1 else f"{start.isoformat()} - {end.isoformat()}"
    return BillingPeriod(start_date=start.isoformat(), end_date=end.isoformat(), label=label)


def custom_period(start_date: str, end_date: str) -> BillingPeriod:
    """Inclusive period between two YYYY-MM-DD dates.

    Raises:
        ValidationError: If either date is malformed or the range is reversed.
    """
    try:
        return BillingPeriod(start_date=start_date, end_date=end_date)
    except PydanticValidationError as exc:
        error = exc.errors()[0]
        raise ValidationError(
            f"Invalid period {start_date!r} to {end_date!r}: {error['msg']}",
            field=".".join(str(part) for part in error["loc"]) or None,
            constraint=error["msg"],
        ) from exc


def calculate_expense_stats(
    expenses: Sequence[Expense],
    period: Optional[BillingPeriod] = None,
) -> ExpenseStats:
    """Totals for the records that count towards a period.

    Records sharing an ``id`` are counted once (the last one wins). Records
    outside ``period`` or with ``include_in_total`` unset are ignored.
    """
    by_id: dict[str, Expense] = {}
    for expense in expenses:
        by_id[expense.id] = expense

    included = [
        e
        for e in by_id.values()
        if e.include_in_total and (period is None or period.contains(e))
    ]

    category_totals: dict[str, Decimal] = {}
    daily_totals: dict[str, Decimal] = {}
    for expense in included:
        category_totals[expense.category] = (
            category_totals.get(expense.category, ZERO) + expense.amount
        )
        daily_totals[expense.date] = daily_totals.get(expense.date, ZERO) + expense.amount

    return ExpenseStats(
        total_amount=sum((e.amount for e in included), ZERO),
        expense_count=len(included),
        category_totals=category_totals,
        daily_totals=daily_totals,
    )
