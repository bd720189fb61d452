"""Tests for the exception hierarchy."""

import pytest

from kakeibo_analytics import (
    ConfigurationError,
    ExpenseValidationError,
    KakeiboError,
    ValidationError,
)


class TestKakeiboError:
    def test_message_and_defaults(self):
        error = KakeiboError("Something went wrong")

        assert str(error) == "Something went wrong"
        assert error.details == {}
        assert error.recoverable is False

    def test_repr(self):
        error = KakeiboError("oops", details={"code": 1})

        assert repr(error) == "KakeiboError(message='oops', details={'code': 1}, recoverable=False)"


class TestValidationError:
    def test_context_added_to_details(self):
        error = ValidationError(
            "Invalid year-month",
            field="year_month",
            value="2024-13",
            constraint="YYYY-MM with month 01-12",
        )

        assert error.recoverable is True
        assert error.details == {
            "field": "year_month",
            "value": "2024-13",
            "constraint": "YYYY-MM with month 01-12",
        }

    def test_expense_validation_error_is_validation_error(self):
        error = ExpenseValidationError("bad record", index=3, record_id="abc", field="amount")

        assert isinstance(error, ValidationError)
        assert error.details["index"] == 3
        assert error.details["record_id"] == "abc"

    def test_catchable_as_base(self):
        with pytest.raises(KakeiboError):
            raise ConfigurationError("Unknown log level", config_key="KAKEIBO_LOG_LEVEL")
