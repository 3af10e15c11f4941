"""Tests for the Storefront error hierarchy."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

import pytest

from storefront.shared.errors import (
    ApplicationError,
    CliError,
    DomainError,
    ErrorCode,
    ErrorContext,
    InfrastructureError,
    NotOkError,
    StorefrontError,
    StorefrontNetworkError,
    StorefrontParsingError,
    create_cli_error,
    create_config_error,
    create_network_error,
    create_not_ok_error,
    create_parsing_error,
)


class _Mode(Enum):
    SEARCH = "search"


class TestErrorContext:
    """ErrorContext validation and export."""

    def test_primitive_values_coerced(self):
        context = ErrorContext(additional_data={"path": Path("a/b"), "mode": _Mode.SEARCH, "n": 1})

        assert context.additional_data == {"path": str(Path("a/b")), "mode": "search", "n": 1}

    def test_non_primitive_value_rejected(self):
        with pytest.raises(TypeError, match="Cannot coerce"):
            ErrorContext(additional_data={"items": [1, 2]})

    def test_safe_dict(self):
        context = ErrorContext(operation="fetch_query", query_key="products:search:'':4:0")

        assert context.safe_dict() == {
            "operation": "fetch_query",
            "query_key": "products:search:'':4:0",
            "additional_data": {},
        }


class TestStorefrontError:
    """Base error behavior."""

    def test_str_and_to_dict(self):
        original = ValueError("bad")
        error = DomainError(ErrorCode.VALIDATION_ERROR, "invalid", original_error=original)

        assert str(error) == "VALIDATION_ERROR: invalid"
        data = error.to_dict()
        assert data["code"] == "VALIDATION_ERROR"
        assert data["message"] == "invalid"
        assert data["original_error"] == "bad"
        assert data["context"] == {"additional_data": {}}

    def test_hierarchy(self):
        assert issubclass(StorefrontNetworkError, InfrastructureError)
        assert issubclass(NotOkError, InfrastructureError)
        assert issubclass(StorefrontParsingError, DomainError)
        assert issubclass(CliError, ApplicationError)
        assert issubclass(ApplicationError, StorefrontError)


class TestFactories:
    """create_* helpers."""

    def test_network_error(self):
        original = ConnectionError("refused")

        error = create_network_error("down", operation="search_products", url="http://x", original_error=original)

        assert isinstance(error, StorefrontNetworkError)
        assert error.code is ErrorCode.NETWORK_ERROR
        assert error.context.additional_data == {"url": "http://x"}
        assert error.original_error is original

    @pytest.mark.parametrize(
        ("status", "code"),
        [(400, ErrorCode.API_REQUEST_FAILED), (404, ErrorCode.API_REQUEST_FAILED), (500, ErrorCode.API_SERVER_ERROR)],
    )
    def test_not_ok_error_code_by_status(self, status, code):
        error = create_not_ok_error(status, "http://x/products", operation="search_products")

        assert error.status_code == status
        assert error.code is code
        assert error.message == f"Request to http://x/products failed with status {status}"

    def test_parsing_error_code_override(self):
        error = create_parsing_error("bad body", code=ErrorCode.INVALID_RESPONSE)

        assert isinstance(error, StorefrontParsingError)
        assert error.code is ErrorCode.INVALID_RESPONSE

    def test_config_error(self):
        error = create_config_error("broken", config_path="storefront.toml")

        assert isinstance(error, ApplicationError)
        assert error.code is ErrorCode.CONFIG_INVALID
        assert error.context.additional_data == {"config_path": "storefront.toml"}

    def test_cli_error(self):
        error = create_cli_error("interrupted", command="browse", code=ErrorCode.OPERATION_CANCELLED, exit_code=130)

        assert error.exit_code == 130
        assert error.command == "browse"
        assert error.code is ErrorCode.OPERATION_CANCELLED
