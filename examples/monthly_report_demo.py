#!/usr/bin/env python3
"""
Monthly Analytics Demonstration

This script demonstrates the monthly analysis workflow:
1. Validate raw expense records
2. Run a cached monthly analysis with a budget
3. Print the breakdown, trend, anomalies and weekday patterns

Run: python examples/monthly_report_demo.py
"""

from kakeibo_analytics import (
    AnalyticsCache,
    AnalyticsConfig,
    MonthlyAnalyzer,
    analyze_spending_patterns,
    configure_logging,
    load_expenses,
)

RAW_EXPENSES = [
    {"id": "1", "amount": 3000, "date": "2024-08-01", "category": "食費", "description": "ランチ"},
    {"id": "2", "amount": 50000, "date": "2024-08-05", "category": "光熱費", "description": "電気・ガス"},
    {"id": "3", "amount": 15000, "date": "2024-08-10", "category": "通信費", "description": "スマホ"},
    {"id": "4", "amount": 5000, "date": "2024-08-15", "category": "娯楽", "description": "映画"},
    {"id": "5", "amount": 8000, "date": "2024-08-20", "category": "日用品", "description": "ドラッグストア"},
    {"id": "6", "amount": 3500, "date": "2024-09-01", "category": "食費", "description": "ランチ"},
    {"id": "7", "amount": 52000, "date": "2024-09-05", "category": "光熱費", "description": "電気・ガス"},
    {"id": "8", "amount": 15000, "date": "2024-09-10", "category": "通信費", "description": "スマホ"},
    {"id": "9", "amount": 10000, "date": "2024-09-15", "category": "娯楽", "description": "コンサート"},
    {"id": "10", "amount": 200000, "date": "2024-09-20", "category": "その他", "description": "家電"},
]


def main() -> None:
    config = AnalyticsConfig()
    configure_logging(config.log_level)

    expenses = load_expenses(RAW_EXPENSES)
    analyzer = MonthlyAnalyzer(
        cache=AnalyticsCache(ttl_seconds=config.cache_ttl_seconds),
        config=config,
    )
    report = analyzer.analyze(expenses, "2024-09", budget=100000)

    print("=" * 60)
    print(f"MONTHLY REPORT {report.year_month}")
    print("=" * 60)
    print(f"Total:    ¥{report.total_expense:,}")
    print(f"Fixed:    ¥{report.fixed_expense:,}")
    print(f"Variable: ¥{report.variable_expense:,}")
    print(f"Daily average: ¥{report.average_daily_expense:,.0f}")
    print(f"Month-over-month: {report.month_over_month_growth:+.1f}%")

    if report.budget_comparison:
        budget = report.budget_comparison
        status = "OVER" if budget.is_over_budget else "within"
        print(f"Budget ¥{budget.budget_amount:,}: {status} by ¥{abs(budget.variance):,}")

    print("\n-- Categories --")
    for summary in report.category_breakdown:
        kind = "fixed" if summary.is_fixed else "variable"
        print(f"{summary.category:10} ¥{summary.amount:>10,} {summary.percentage:5.1f}% ({kind})")

    print("\n-- Trend --")
    for point in report.monthly_trend:
        average = f"¥{point.moving_average:,}" if point.moving_average is not None else "-"
        print(f"{point.month}  ¥{point.total_expense:>10,}  3-month avg {average}")

    print("\n-- Anomalies --")
    for anomaly in report.anomalies:
        print(f"[{anomaly.severity.value}] {anomaly.date} {anomaly.category} ¥{anomaly.amount:,}: {anomaly.reason}")

    print("\n-- Weekday patterns --")
    days = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
    for pattern in analyze_spending_patterns(expenses):
        peaks = ", ".join(pattern.peak_categories) or "-"
        print(f"{days[pattern.day_of_week]}  x{pattern.frequency}  avg ¥{pattern.average_amount:,.0f}  {peaks}")


if __name__ == "__main__":
    main()
