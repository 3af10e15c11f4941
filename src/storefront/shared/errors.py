"""Storefront Error Handling Module

This module defines the error handling system for Storefront, providing
structured error classes with context information and user-friendly messages.

The error hierarchy follows these principles:
- One Source of Truth: All error codes are defined in ErrorCode enum
- Structured Context: ErrorContext provides additional information
- User-friendly Messages: Errors can be converted to user-friendly messages
- Proper Exception Chaining: Original exceptions are preserved
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any, Union

from storefront.shared.constants import HTTPStatusCodes

# Type alias for primitive context values (str, int, float, bool only)
PrimitiveContextValue = Union[str, int, float, bool]


class ErrorCode(str, Enum):
    """Error codes for the Storefront application.

    This enum serves as the single source of truth for all error codes
    used throughout the application.
    """

    # Network and API Errors
    NETWORK_ERROR = "NETWORK_ERROR"
    API_REQUEST_FAILED = "API_REQUEST_FAILED"
    API_TIMEOUT = "API_TIMEOUT"
    API_SERVER_ERROR = "API_SERVER_ERROR"
    INVALID_RESPONSE = "INVALID_RESPONSE"

    # Query Errors
    FETCH_FAILED = "FETCH_FAILED"
    INVALID_QUERY_KEY = "INVALID_QUERY_KEY"

    # Parsing and Validation Errors
    PARSING_ERROR = "PARSING_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_FILTER_STATE = "INVALID_FILTER_STATE"

    # Configuration Errors
    CONFIG_INVALID = "CONFIG_INVALID"

    # Application Errors
    OPERATION_CANCELLED = "OPERATION_CANCELLED"

    # CLI Errors
    CLI_COMMAND_FAILED = "CLI_COMMAND_FAILED"
    CLI_UNEXPECTED_ERROR = "CLI_UNEXPECTED_ERROR"


def _coerce_primitives(value: Any | None) -> dict[str, PrimitiveContextValue] | None:
    """Coerce additional_data values to primitives.

    Converts Path, Enum, Decimal to primitive types.

    Args:
        value: Input dictionary or None

    Returns:
        Dictionary with primitive values only, or None

    Raises:
        TypeError: If value is not a dict or contains unconvertible types
    """
    if value is None:
        return None

    if not isinstance(value, dict):
        error_msg = f"additional_data must be dict, got {type(value).__name__}"
        raise TypeError(error_msg)

    coerced: dict[str, PrimitiveContextValue] = {}
    for key, val in value.items():
        if isinstance(val, (str, int, float, bool)):
            coerced[key] = val
        elif isinstance(val, Path):
            coerced[key] = str(val)
        elif isinstance(val, Enum):
            coerced[key] = val.value
        elif isinstance(val, Decimal):
            coerced[key] = float(val)
        else:
            error_msg = (
                f"Cannot coerce {type(val).__name__} to primitive type. "
                f"Only str, int, float, bool, Path, Enum, Decimal are allowed."
            )
            raise TypeError(error_msg)

    return coerced


@dataclass(frozen=True)
class ErrorContext:
    """Context information for errors.

    Only primitive types (str, int, float, bool) are allowed in
    additional_data to ensure safe serialization into structured logs.

    Attributes:
        operation: Optional operation name that caused the error
        query_key: Optional string form of the query key involved
        additional_data: Optional dict with primitive values only
    """

    operation: str | None = None
    query_key: str | None = None
    additional_data: dict[str, PrimitiveContextValue] | None = None

    def __post_init__(self) -> None:
        """Post-initialization validation and coercion."""
        if self.additional_data is not None:
            coerced = _coerce_primitives(self.additional_data)
            object.__setattr__(self, "additional_data", coerced)

    def safe_dict(self) -> dict[str, Any]:
        """Export context as a dict for logging.

        Returns:
            Dictionary with a guaranteed additional_data key.
        """
        data: dict[str, Any] = {}
        if self.operation is not None:
            data["operation"] = self.operation
        if self.query_key is not None:
            data["query_key"] = self.query_key
        data["additional_data"] = dict(self.additional_data or {})
        return data


class StorefrontError(Exception):
    """Base exception class for all Storefront errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
    ) -> None:
        """Initialize StorefrontError.

        Args:
            code: Error code from ErrorCode enum
            message: Human-readable error message
            context: Additional context information
            original_error: Original exception that caused this error
        """
        self.code = code
        self.message = message
        self.context = context or ErrorContext()
        self.original_error = original_error

        super().__init__(f"{code.value}: {message}")

    def __str__(self) -> str:
        """Return string representation of the error."""
        return f"{self.code.value}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging and JSON output.

        Returns:
            Dictionary representation of the error with code, message,
            context, and original_error (if present)
        """
        return {
            "code": self.code.value,
            "message": self.message,
            "context": self.context.safe_dict(),
            "original_error": str(self.original_error) if self.original_error else None,
        }


class DomainError(StorefrontError):
    """Domain-specific errors.

    These errors occur when business rules are violated, for example an
    invalid filter state or a query key that cannot be served.
    """


class InfrastructureError(StorefrontError):
    """Infrastructure-related errors.

    These errors occur when interacting with external systems such as
    the remote catalog API.
    """


class StorefrontNetworkError(InfrastructureError):
    """Transport failure while talking to the catalog API.

    Examples:
    - Connection refused or reset
    - DNS failures
    - Request timeouts
    """


class NotOkError(InfrastructureError):
    """The catalog API answered with a non-success status code."""

    def __init__(
        self,
        status_code: int,
        message: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
    ) -> None:
        self.status_code = status_code
        code = ErrorCode.API_SERVER_ERROR if HTTPStatusCodes.is_server_error(status_code) else ErrorCode.API_REQUEST_FAILED
        super().__init__(code, message, context, original_error)


class StorefrontParsingError(DomainError):
    """Malformed input data.

    Raised for unparseable persisted filter parameters (recovered locally
    by the state synchronizer) and for malformed API response bodies.
    """


class ApplicationError(StorefrontError):
    """Application-level errors such as invalid configuration."""


class CliError(ApplicationError):
    """Error of a CLI command, carrying the process exit code."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
        command: str | None = None,
        exit_code: int = 1,
    ):
        super().__init__(code, message, context, original_error)
        self.command = command
        self.exit_code = exit_code


# Convenience functions for common error scenarios
def create_network_error(
    message: str,
    operation: str | None = None,
    url: str | None = None,
    original_error: Exception | None = None,
    code: ErrorCode = ErrorCode.NETWORK_ERROR,
) -> StorefrontNetworkError:
    """Create a network error with context."""
    additional = {"url": url} if url else None
    context = ErrorContext(operation=operation, additional_data=additional)
    return StorefrontNetworkError(
        code,
        message,
        context,
        original_error,
    )


def create_not_ok_error(
    status_code: int,
    url: str,
    operation: str | None = None,
) -> NotOkError:
    """Create an error for a non-success HTTP response."""
    context = ErrorContext(
        operation=operation,
        additional_data={"url": url, "status_code": status_code},
    )
    return NotOkError(
        status_code,
        f"Request to {url} failed with status {status_code}",
        context,
    )


def create_parsing_error(
    message: str,
    operation: str | None = None,
    code: ErrorCode = ErrorCode.PARSING_ERROR,
    additional_data: dict[str, Any] | None = None,
    original_error: Exception | None = None,
) -> StorefrontParsingError:
    """Create a parsing error with context."""
    context = ErrorContext(operation=operation, additional_data=additional_data)
    return StorefrontParsingError(code, message, context, original_error)


def create_config_error(
    message: str,
    config_path: str | None = None,
    original_error: Exception | None = None,
) -> ApplicationError:
    """Create a configuration error with context."""
    additional = {"config_path": config_path} if config_path else None
    context = ErrorContext(operation="load_settings", additional_data=additional)
    return ApplicationError(
        ErrorCode.CONFIG_INVALID,
        message,
        context,
        original_error,
    )


def create_cli_error(
    message: str,
    command: str | None = None,
    code: ErrorCode = ErrorCode.CLI_UNEXPECTED_ERROR,
    original_error: Exception | None = None,
    exit_code: int = 1,
) -> CliError:
    """Create a CLI error with context."""
    additional = {"command": command} if command else None
    context = ErrorContext(operation="cli", additional_data=additional)
    return CliError(
        code,
        message,
        context,
        original_error,
        command,
        exit_code,
    )
