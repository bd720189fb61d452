"""Tests for expense records and ingestion."""

from datetime import date
from decimal import Decimal

import pytest

from kakeibo_analytics import Expense, ExpenseValidationError, KakeiboError, load_expenses


class TestExpense:
    """Tests for the Expense model."""

    def test_create_basic_expense(self):
        expense = Expense(id="1", amount=3000, date="2024-08-01", category="食費")

        assert expense.amount == Decimal("3000")
        assert expense.description == ""
        assert expense.include_in_total is True
        assert expense.calendar_date == date(2024, 8, 1)
        assert expense.year_month == "2024-08"

    def test_amount_coercion(self):
        assert Expense(id="1", amount="1500", date="2024-08-01", category="x").amount == 1500
        assert Expense(id="1", amount=12.5, date="2024-08-01", category="x").amount == Decimal("12.5")

    def test_numeric_id_coerced(self):
        assert Expense(id=42, amount=1, date="2024-08-01", category="x").id == "42"

    def test_presentation_fields_carried_through(self):
        expense = Expense(
            id="1",
            amount=3000,
            date="2024-08-01",
            category="食費",
            lineId="user1",
            payerDisplayName="Taro",
        )

        assert expense.model_extra == {"lineId": "user1", "payerDisplayName": "Taro"}

    def test_expense_is_immutable(self):
        expense = Expense(id="1", amount=3000, date="2024-08-01", category="食費")

        with pytest.raises(ValueError):
            expense.amount = Decimal("1")

    def test_negative_amount_rejected(self):
        with pytest.raises(ValueError):
            Expense(id="1", amount=-1, date="2024-08-01", category="食費")

    @pytest.mark.parametrize("value", ["2024/08/01", "2024-8-1", "20240801", "2024-02-30"])
    def test_malformed_date_rejected(self, value):
        with pytest.raises(ValueError):
            Expense(id="1", amount=1, date=value, category="食費")


class TestLoadExpenses:
    """Tests for load_expenses."""

    def test_loads_mappings(self):
        expenses = load_expenses([
            {"id": "1", "amount": 3000, "date": "2024-08-01", "category": "食費"},
            {"id": "2", "amount": 500, "date": "2024-08-02", "category": "娯楽"},
        ])

        assert [e.id for e in expenses] == ["1", "2"]
        assert all(isinstance(e, Expense) for e in expenses)

    def test_models_pass_through(self):
        expense = Expense(id="1", amount=3000, date="2024-08-01", category="食費")

        assert load_expenses([expense])[0] is expense

    def test_empty_input(self):
        assert load_expenses([]) == []

    def test_missing_field_reports_index(self):
        records = [
            {"id": "1", "amount": 3000, "date": "2024-08-01", "category": "食費"},
            {"id": "2", "amount": 500, "category": "娯楽"},
        ]

        with pytest.raises(ExpenseValidationError) as exc_info:
            load_expenses(records)

        error = exc_info.value
        assert error.index == 1
        assert error.record_id == "2"
        assert error.field == "date"
        assert error.details["index"] == 1
        assert isinstance(error, KakeiboError)

    def test_impossible_date_rejected(self):
        with pytest.raises(ExpenseValidationError) as exc_info:
            load_expenses([{"id": "x", "amount": 1, "date": "2024-02-30", "category": "食費"}])

        assert exc_info.value.field == "date"
        assert "2024-02-30" in str(exc_info.value)

    def test_non_numeric_amount_rejected(self):
        with pytest.raises(ExpenseValidationError) as exc_info:
            load_expenses([{"id": "1", "amount": "abc", "date": "2024-09-01", "category": "食費"}])

        error = exc_info.value
        assert error.index == 0
        assert error.record_id == "1"
        assert error.field == "amount"
