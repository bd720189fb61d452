"""Kakeibo Analytics - Household expense analytics engine."""

__version__ = "0.1.0"

from .aggregation import (
    calculate_budget_comparison,
    calculate_category_breakdown,
    calculate_monthly_trend,
)
from .analyzer import MonthlyAnalyzer, analyze_month
from .anomalies import detect_anomalies
from .cache import AnalyticsCache
from .classifier import FIXED_EXPENSE_CATEGORIES, is_fixed_expense
from .config import AnalyticsConfig, configure_logging
from .exceptions import (
    ConfigurationError,
    ExpenseValidationError,
    KakeiboError,
    ValidationError,
)
from .models import (
    Anomaly,
    BillingPeriod,
    BudgetComparison,
    CategorySummary,
    Expense,
    ExpenseStats,
    MonthlyAnalyticsReport,
    SeasonalityPoint,
    Severity,
    SpendingPattern,
    TrendPoint,
    load_expenses,
)
from .patterns import analyze_seasonality, analyze_spending_patterns
from .stats import billing_period, calculate_expense_stats, custom_period

__all__ = [
    # Analytics
    "is_fixed_expense",
    "FIXED_EXPENSE_CATEGORIES",
    "calculate_category_breakdown",
    "calculate_monthly_trend",
    "calculate_budget_comparison",
    "detect_anomalies",
    "analyze_seasonality",
    "analyze_spending_patterns",
    "analyze_month",
    "MonthlyAnalyzer",
    "AnalyticsCache",
    # Period statistics
    "billing_period",
    "custom_period",
    "calculate_expense_stats",
    # Models
    "Expense",
    "load_expenses",
    "CategorySummary",
    "TrendPoint",
    "BudgetComparison",
    "Severity",
    "Anomaly",
    "SeasonalityPoint",
    "SpendingPattern",
    "MonthlyAnalyticsReport",
    "BillingPeriod",
    "ExpenseStats",
    # Configuration
    "AnalyticsConfig",
    "configure_logging",
    # Errors
    "KakeiboError",
    "ValidationError",
    "ExpenseValidationError",
    "ConfigurationError",
]
