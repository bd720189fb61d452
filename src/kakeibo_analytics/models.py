"""Data models for the expense analytics engine.

This module provides the pydantic models that flow through the engine:
- Expense records as supplied by the expense store
- Category summaries, trend points and budget comparisons
- Anomalies, seasonality points and day-of-week spending patterns
- The monthly analytics report that the cache stores
- Billing periods and period statistics for the dashboard

Amounts are Decimal. In observed usage they are whole yen, so sums stay
exact and reports compare equal across runs.
"""

import re
from collections.abc import Iterable, Mapping
from datetime import date as date_type
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional, Union

import structlog
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ExpenseValidationError

logger = structlog.get_logger()

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
YEAR_MONTH_PATTERN = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


def check_iso_date(value: str) -> str:
    """Return ``value`` if it is a real calendar date written YYYY-MM-DD."""
    if not DATE_PATTERN.match(value):
        raise ValueError(f"date must be formatted YYYY-MM-DD, got {value!r}")
    try:
        date_type.fromisoformat(value)
    except ValueError as exc:
        raise ValueError(f"date is not a valid calendar date: {value!r}") from exc
    return value


# =============================================================================
# INPUT RECORDS
# =============================================================================


class Expense(BaseModel):
    """A single expense record.

    Records arrive from the expense store with their category already
    normalized. Presentation-only fields (ownership, OCR text, line items)
    are accepted and carried through untouched.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="allow",
        json_schema_extra={
            "examples": [
                {
                    "id": "exp_001",
                    "amount": 3000,
                    "date": "2024-08-01",
                    "category": "食費",
                    "description": "ランチ",
                    "include_in_total": True,
                }
            ]
        },
    )

    id: str = Field(description="Opaque unique identifier of the record")
    amount: Decimal = Field(
        ge=Decimal("0"),
        description="Expense amount in the smallest whole currency unit (yen)",
    )
    date: str = Field(description="Expense date as YYYY-MM-DD")
    category: str = Field(description="Canonical category name")
    description: str = Field(default="", description="Free-text description")
    include_in_total: bool = Field(
        default=True,
        description="Whether the record counts towards period totals",
    )

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id_to_str(cls, v):
        """Accept numeric identifiers from the store."""
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("amount", mode="before")
    @classmethod
    def coerce_amount_to_decimal(cls, v):
        """Coerce string and float amounts to Decimal."""
        if isinstance(v, str):
            try:
                return Decimal(v.strip())
            except InvalidOperation as exc:
                raise ValueError(f"amount is not a number: {v!r}") from exc
        if isinstance(v, float):
            return Decimal(str(v))
        return v

    @field_validator("date")
    @classmethod
    def validate_date(cls, v: str) -> str:
        """Require a real calendar date in YYYY-MM-DD form."""
        return check_iso_date(v)

    @property
    def calendar_date(self) -> date_type:
        """The record's date as a ``datetime.date``."""
        return date_type.fromisoformat(self.date)

    @property
    def year_month(self) -> str:
        """The ``YYYY-MM`` month key of the record."""
        return self.date[:7]


def load_expenses(
    records: Iterable[Union[Expense, Mapping[str, Any]]],
) -> list[Expense]:
    """Validate raw records into Expense models.

    Expense instances pass through unchanged; mappings are validated.

    Raises:
        ExpenseValidationError: On the first record that fails validation.
    """
    expenses: list[Expense] = []
    for index, record in enumerate(records):
        if isinstance(record, Expense):
            expenses.append(record)
            continue
        try:
            expenses.append(Expense.model_validate(record))
        except PydanticValidationError as exc:
            error = exc.errors()[0]
            field = ".".join(str(part) for part in error["loc"]) or None
            record_id = record.get("id") if isinstance(record, Mapping) else None
            logger.warning(
                "expense_rejected",
                index=index,
                record_id=record_id,
                field=field,
                error=error["msg"],
            )
            raise ExpenseValidationError(
                f"Invalid expense record at index {index}: {error['msg']}",
                index=index,
                record_id=None if record_id is None else str(record_id),
                field=field,
                constraint=error["msg"],
            ) from exc
    return expenses


# =============================================================================
# ANALYTICS RESULTS
# =============================================================================


class CategorySummary(BaseModel):
    """Spending totals for one category within a set of expenses."""

    category: str
    amount: Decimal = Field(description="Sum of the category's amounts")
    count: int = Field(ge=0, description="Number of records in the category")
    percentage: Decimal = Field(
        description="Share of the set's total amount, 0-100",
    )
    is_fixed: bool = Field(description="Whether the category is a fixed expense")


class TrendPoint(BaseModel):
    """Totals for one month of a trend series."""

    month: str = Field(description="Month key as YYYY-MM")
    total_expense: Decimal
    fixed_expense: Decimal
    variable_expense: Decimal
    moving_average: Optional[Decimal] = Field(
        default=None,
        description="Rounded mean of this and the two preceding totals",
    )


class BudgetComparison(BaseModel):
    """Actual spending compared with a target budget."""

    budget_amount: Decimal
    actual_amount: Decimal
    variance: Decimal = Field(description="actual - budget")
    variance_percentage: Decimal = Field(
        description="variance / budget * 100, or 0 when budget <= 0",
    )
    is_over_budget: bool


class Severity(str, Enum):
    """Severity of a detected anomaly."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        """Ordering rank, higher is more severe."""
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {Severity.LOW: 1, Severity.MEDIUM: 2, Severity.HIGH: 3}


class Anomaly(BaseModel):
    """An expense flagged as a statistical outlier."""

    date: str
    category: str
    amount: Decimal
    reason: str = Field(description="Human-readable explanation of the flag")
    severity: Severity


class SeasonalityPoint(BaseModel):
    """Average spending level of one calendar month across all years."""

    month: int = Field(ge=1, le=12)
    average_expense: Decimal
    seasonal_index: Decimal = Field(
        description="average_expense relative to the yearly total spread over 12 months",
    )


class SpendingPattern(BaseModel):
    """Spending behaviour on one day of the week."""

    day_of_week: int = Field(ge=0, le=6, description="0=Sunday .. 6=Saturday")
    average_amount: Decimal
    frequency: int = Field(ge=0)
    peak_categories: list[str] = Field(
        default_factory=list,
        max_length=3,
        description="Most frequent categories on this day, most frequent first",
    )


class MonthlyAnalyticsReport(BaseModel):
    """Full analytics report for a single month."""

    year_month: str
    total_expense: Decimal
    fixed_expense: Decimal
    variable_expense: Decimal
    category_breakdown: list[CategorySummary] = Field(default_factory=list)
    monthly_trend: list[TrendPoint] = Field(default_factory=list)
    budget_comparison: Optional[BudgetComparison] = None
    month_over_month_growth: Decimal = Field(
        default=Decimal("0"),
        description="Percentage change against the previous month, 0 without prior data",
    )
    average_daily_expense: Decimal = Decimal("0")
    anomalies: list[Anomaly] = Field(default_factory=list)


# =============================================================================
# PERIOD STATISTICS
# =============================================================================


class BillingPeriod(BaseModel):
    """An inclusive date range used for dashboard statistics."""

    start_date: str
    end_date: str
    label: Optional[str] = None

    @field_validator("start_date", "end_date")
    @classmethod
    def validate_dates(cls, v: str) -> str:
        """Require YYYY-MM-DD dates."""
        return check_iso_date(v)

    @field_validator("end_date")
    @classmethod
    def end_date_after_start_date(cls, v, info):
        """Validate that end_date is not before start_date."""
        if "start_date" in info.data and v < info.data["start_date"]:
            raise ValueError("end_date must be on or after start_date")
        return v

    def contains(self, expense: Expense) -> bool:
        """Check whether the expense falls inside the period."""
        return self.start_date <= expense.date <= self.end_date


class ExpenseStats(BaseModel):
    """Summary statistics for a billing period."""

    total_amount: Decimal = Decimal("0")
    expense_count: int = Field(default=0, ge=0)
    category_totals: dict[str, Decimal] = Field(default_factory=dict)
    daily_totals: dict[str, Decimal] = Field(default_factory=dict)
