"""
Centralized error handling utilities for ContractLens.

This module provides the exception hierarchy surfaced to callers of the
analysis engine and a decorator for the "log and continue" policy used by
optional collaborators.
"""

import functools
import logging
import traceback
from enum import Enum
from typing import Any, Callable, Dict, Optional, Type, TypeVar, Union, cast

# Configure logger
logger = logging.getLogger(__name__)

# Type variable for function return types
T = TypeVar("T")


class ErrorSeverity(Enum):
    """Enum for error severity levels."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ContractLensError(Exception):
    """Base exception class for ContractLens-specific errors."""

    def __init__(
        self,
        message: str,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize ContractLensError.

        Args:
            message: Error message
            severity: Error severity level
            details: Additional error details
        """
        self.message = message
        self.severity = severity
        self.details = details or {}
        super().__init__(message)


class ValidationError(ContractLensError):
    """Raised when caller input is rejected before any analysis starts."""

    def __init__(self, message: str, field: str, value: Any):
        """
        Initialize ValidationError.

        Args:
            message: Error message
            field: Field that failed validation
            value: Invalid value
        """
        super().__init__(
            message,
            severity=ErrorSeverity.MEDIUM,
            details={"field": field, "value": _preview(value)}
        )
        self.field = field
        self.value = value


class ResourceError(ContractLensError):
    """Raised when the scoped temporary source file cannot be created or removed."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        details = {"cause": repr(cause)} if cause is not None else {}
        super().__init__(message, severity=ErrorSeverity.HIGH, details=details)
        self.cause = cause


class ExplorerError(ContractLensError):
    """Exception for chain explorer API errors."""
    pass


def _preview(value: Any, limit: int = 80) -> str:
    text = str(value)
    return text if len(text) <= limit else text[:limit] + '...'


def error_to_payload(error: Exception) -> Dict[str, Any]:
    """
    Convert an exception into a serializable error payload.

    Args:
        error: The exception to convert

    Returns:
        Dictionary with the error category, message and details
    """
    if isinstance(error, ValidationError):
        return {
            "type": "validation_error",
            "message": error.message,
            "field": error.field,
            "value": _preview(error.value),
        }
    if isinstance(error, ResourceError):
        return {
            "type": "resource_error",
            "message": error.message,
            "severity": error.severity.value,
            "details": error.details,
        }
    if isinstance(error, ContractLensError):
        payload = {
            "type": error.__class__.__name__.lower(),
            "message": str(error),
            "severity": error.severity.value,
        }
        if error.details:
            payload["details"] = error.details
        return payload
    return {
        "type": "unknown",
        "message": str(error) or "An unexpected error occurred",
    }


def handle_exceptions(
    error_types: Optional[Union[Type[Exception], tuple]] = None,
    log_traceback: bool = True,
    default_return: Any = None,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """
    Decorator that logs exceptions and returns a default value instead.

    Args:
        error_types: Exception type(s) to catch; anything else propagates
        log_traceback: Whether to log the traceback
        default_return: Default value to return on error

    Returns:
        Decorated function
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                if error_types and not isinstance(e, error_types):
                    raise

                if log_traceback:
                    logger.error(
                        f"Error in {func.__name__}: {str(e)}\n"
                        f"{traceback.format_exc()}"
                    )
                else:
                    logger.error(f"Error in {func.__name__}: {str(e)}")

                return cast(T, default_return)

        return wrapper

    return decorator
