"""Outlier detection for monthly expenses.

Two independent rules flag an expense:

1. Category z-score: how far the amount lies from the mean of the same
   category's history, in population standard deviations. Thresholds of
   2, 2.5 and 3 map to low, medium and high severity.
2. Overall magnitude: an amount above five times the mean of every
   historical expense is always high severity.

A record that trips both rules is reported once, keyed by
(date, category, amount). The more severe candidate is kept; on equal
severity the overall-magnitude reason wins.
"""

import statistics
from collections.abc import Sequence
from decimal import Decimal
from typing import NamedTuple, Optional

import structlog

from .models import Anomaly, Expense, Severity

logger = structlog.get_logger()

HIGH_Z_SCORE = Decimal("3")
MEDIUM_Z_SCORE = Decimal("2.5")
LOW_Z_SCORE = Decimal("2")
OVERALL_MEAN_MULTIPLIER = Decimal("5")


class CategoryStats(NamedTuple):
    mean: Decimal
    std_dev: Decimal


def calculate_category_stats(expenses: Sequence[Expense]) -> dict[str, CategoryStats]:
    """Mean and population standard deviation of amounts per category."""
    amounts_by_category: dict[str, list[Decimal]] = {}
    for expense in expenses:
        amounts_by_category.setdefault(expense.category, []).append(expense.amount)

    return {
        category: CategoryStats(
            mean=statistics.mean(amounts),
            std_dev=statistics.pstdev(amounts),
        )
        for category, amounts in amounts_by_category.items()
    }


def _z_score_anomaly(expense: Expense, stats: CategoryStats) -> Optional[Anomaly]:
    if stats.std_dev <= 0:
        return None

    z_score = abs(expense.amount - stats.mean) / stats.std_dev
    if z_score >= HIGH_Z_SCORE:
        severity, multiple = Severity.HIGH, "3"
    elif z_score >= MEDIUM_Z_SCORE:
        severity, multiple = Severity.MEDIUM, "2.5"
    elif z_score >= LOW_Z_SCORE:
        severity, multiple = Severity.LOW, "2"
    else:
        return None

    return Anomaly(
        date=expense.date,
        category=expense.category,
        amount=expense.amount,
        reason=(
            f"At least {multiple}× standard deviation away from "
            f"usual {expense.category} spending"
        ),
        severity=severity,
    )


def detect_anomalies(
    month_expenses: Sequence[Expense],
    historical_expenses: Sequence[Expense],
) -> list[Anomaly]:
    """Flag outliers in ``month_expenses`` against ``historical_expenses``.

    Args:
        month_expenses: Expenses to check, usually one month's records.
        historical_expenses: Baseline used for the statistics. May include
            ``month_expenses`` themselves.

    Returns:
        One anomaly per flagged (date, category, amount), largest amount first.
    """
    category_stats = calculate_category_stats(historical_expenses)
    overall_mean = (
        statistics.mean(e.amount for e in historical_expenses)
        if historical_expenses
        else None
    )

    candidates: list[Anomaly] = []
    for expense in month_expenses:
        stats = category_stats.get(expense.category)
        if stats is not None:
            anomaly = _z_score_anomaly(expense, stats)
            if anomaly is not None:
                candidates.append(anomaly)

        if overall_mean is not None and expense.amount > overall_mean * OVERALL_MEAN_MULTIPLIER:
            candidates.append(
                Anomaly(
                    date=expense.date,
                    category=expense.category,
                    amount=expense.amount,
                    reason="High-value expense above 5× the overall average",
                    severity=Severity.HIGH,
                )
            )

    unique: dict[tuple[str, str, Decimal], Anomaly] = {}
    for candidate in candidates:
        key = (candidate.date, candidate.category, candidate.amount)
        current = unique.get(key)
        if current is None or candidate.severity.rank >= current.severity.rank:
            unique[key] = candidate

    anomalies = sorted(unique.values(), key=lambda a: a.amount, reverse=True)
    if anomalies:
        logger.info(
            "anomalies_detected",
            checked=len(month_expenses),
            flagged=len(anomalies),
            high=sum(1 for a in anomalies if a.severity is Severity.HIGH),
        )
    return anomalies
