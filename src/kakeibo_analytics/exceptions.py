"""Custom exceptions for Kakeibo Analytics.

This module provides a small hierarchy of exception classes for the
analytics engine. All exceptions inherit from KakeiboError, so callers can
catch every library-specific failure in one place.

The analytics functions themselves never raise for empty or zero-valued
input; these exceptions signal precondition violations only (a malformed
record, an invalid year-month key, an unusable configuration value).

Example:
    try:
        expenses = load_expenses(raw_records)
    except ExpenseValidationError as e:
        logger.warning("expense_rejected", index=e.index, field=e.field)
        raise
    except KakeiboError as e:
        logger.error("analytics_failed", error=str(e))
"""

from typing import Any, Optional


class KakeiboError(Exception):
    """Base exception for all Kakeibo Analytics errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context.
        recoverable: Whether the caller can fix the input and retry.

    Example:
        >>> raise KakeiboError("Something went wrong", details={"code": 500})
        KakeiboError: Something went wrong
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        """Initialize KakeiboError.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional context about the error.
            recoverable: Whether the error can be fixed by correcting the input.
                Defaults to False.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        """Return string representation of the error."""
        return self.message

    def __repr__(self) -> str:
        """Return detailed representation of the error."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"details={self.details!r}, "
            f"recoverable={self.recoverable!r})"
        )


class ValidationError(KakeiboError):
    """Error raised when caller-supplied input fails validation.

    Raised for malformed year-month keys, a non-positive trend window,
    impossible billing periods, and similar precondition violations.

    Attributes:
        field: The field or argument that failed validation.
        value: The invalid value.
        constraint: The validation constraint that was violated.

    Example:
        >>> raise ValidationError(
        ...     "Invalid year-month",
        ...     field="year_month",
        ...     value="2024-13",
        ...     constraint="YYYY-MM with month 01-12",
        ... )
        ValidationError: Invalid year-month
    """

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        constraint: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        """Initialize ValidationError.

        Args:
            message: Human-readable error description.
            field: The name of the field that failed validation.
            value: The invalid value.
            constraint: Description of the validation rule violated.
            details: Optional dictionary with additional context.
            recoverable: Whether the error can be fixed by the caller.
                Defaults to True.
        """
        super().__init__(message, details=details, recoverable=recoverable)
        self.field = field
        self.value = value
        self.constraint = constraint

        if field:
            self.details["field"] = field
        if value is not None:
            self.details["value"] = value
        if constraint:
            self.details["constraint"] = constraint


class ExpenseValidationError(ValidationError):
    """Error raised when an expense record is rejected at ingestion.

    Attributes:
        index: Position of the offending record in the input collection.
        record_id: The record's ``id`` if one could be read.
    """

    def __init__(
        self,
        message: str,
        *,
        index: Optional[int] = None,
        record_id: Optional[str] = None,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        constraint: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message,
            field=field,
            value=value,
            constraint=constraint,
            details=details,
        )
        self.index = index
        self.record_id = record_id

        if index is not None:
            self.details["index"] = index
        if record_id is not None:
            self.details["record_id"] = record_id


class ConfigurationError(KakeiboError):
    """Error raised when configuration is invalid or missing.

    Attributes:
        config_key: The configuration key that is problematic.
        expected: Description of the expected value or format.
        actual: The actual value found (if any).

    Example:
        >>> raise ConfigurationError(
        ...     "Unknown log level",
        ...     config_key="KAKEIBO_LOG_LEVEL",
        ...     expected="DEBUG, INFO, WARNING, ERROR or CRITICAL",
        ...     actual="VERBOSE",
        ... )
        ConfigurationError: Unknown log level
    """

    def __init__(
        self,
        message: str,
        *,
        config_key: Optional[str] = None,
        expected: Optional[str] = None,
        actual: Optional[Any] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        """Initialize ConfigurationError.

        Args:
            message: Human-readable error description.
            config_key: The name of the configuration key that is problematic.
            expected: Description of what value was expected.
            actual: The actual value found.
            details: Optional dictionary with additional context.
            recoverable: Whether the error can be fixed at runtime.
                Defaults to False.
        """
        super().__init__(message, details=details, recoverable=recoverable)
        self.config_key = config_key
        self.expected = expected
        self.actual = actual

        if config_key:
            self.details["config_key"] = config_key
        if expected:
            self.details["expected"] = expected
        if actual is not None:
            self.details["actual"] = actual


__all__ = [
    "KakeiboError",
    "ValidationError",
    "ExpenseValidationError",
    "ConfigurationError",
]
