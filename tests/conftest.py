"""Shared fixtures for the analytics tests."""

import pytest
import structlog

from kakeibo_analytics import Expense, load_expenses

# Two months of household data. August totals 81000 (fixed 65000);
# September totals 280500 and contains one 200000 outlier.
SAMPLE_RECORDS = [
    {"id": "1", "lineId": "user1", "amount": 3000, "description": "ランチ",
     "date": "2024-08-01", "category": "食費"},
    {"id": "2", "lineId": "user1", "amount": 50000, "description": "光熱費支払い",
     "date": "2024-08-05", "category": "光熱費"},
    {"id": "3", "lineId": "user1", "amount": 15000, "description": "通信費",
     "date": "2024-08-10", "category": "通信費"},
    {"id": "4", "lineId": "user1", "amount": 5000, "description": "娯楽",
     "date": "2024-08-15", "category": "娯楽"},
    {"id": "5", "lineId": "user1", "amount": 8000, "description": "日用品",
     "date": "2024-08-20", "category": "日用品"},
    {"id": "6", "lineId": "user1", "amount": 3500, "description": "ランチ",
     "date": "2024-09-01", "category": "食費"},
    {"id": "7", "lineId": "user1", "amount": 52000, "description": "光熱費支払い",
     "date": "2024-09-05", "category": "光熱費"},
    {"id": "8", "lineId": "user1", "amount": 15000, "description": "通信費",
     "date": "2024-09-10", "category": "通信費"},
    {"id": "9", "lineId": "user1", "amount": 10000, "description": "娯楽",
     "date": "2024-09-15", "category": "娯楽"},
    {"id": "10", "lineId": "user1", "amount": 200000, "description": "特別な買い物",
     "date": "2024-09-20", "category": "その他"},
]


def make_expense(amount, date="2024-09-01", category="食費", id=None, **extra) -> Expense:
    """Build a single Expense with sensible defaults."""
    return Expense(
        id=id or f"{category}-{date}-{amount}",
        amount=amount,
        date=date,
        category=category,
        **extra,
    )


class FakeClock:
    """Manually advanced clock for cache expiry tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def sample_expenses() -> list[Expense]:
    """The two-month household sample as validated Expense models."""
    return load_expenses(SAMPLE_RECORDS)


@pytest.fixture
def august_expenses(sample_expenses: list[Expense]) -> list[Expense]:
    return [e for e in sample_expenses if e.date.startswith("2024-08")]


@pytest.fixture
def september_expenses(sample_expenses: list[Expense]) -> list[Expense]:
    return [e for e in sample_expenses if e.date.startswith("2024-09")]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo any structlog configuration a test installs."""
    yield
    structlog.reset_defaults()
