"""Tests for custom error classes."""

import pytest

from core.errors import (
    APIError,
    AuthenticationError,
    CredentialsNotFoundError,
    DocInsertError,
    PermissionDeniedError,
    RateLimitError,
    ResourceNotFoundError,
    TableNotFoundError,
    ValidationError,
)


class TestErrorHierarchy:
    """Test error class inheritance."""

    def test_base_error_is_exception(self):
        assert issubclass(DocInsertError, Exception)

    def test_auth_error_inherits_base(self):
        assert issubclass(AuthenticationError, DocInsertError)
        assert issubclass(CredentialsNotFoundError, AuthenticationError)

    def test_validation_error_inherits_base(self):
        assert issubclass(ValidationError, DocInsertError)

    def test_api_errors_inherit_api_error(self):
        for error_class in (ResourceNotFoundError, PermissionDeniedError, RateLimitError):
            assert issubclass(error_class, APIError)

    def test_table_not_found_inherits_base(self):
        assert issubclass(TableNotFoundError, DocInsertError)


class TestAPIError:
    """Test APIError class."""

    def test_api_error_with_status_code(self):
        error = APIError("Test error", status_code=500)
        assert error.status_code == 500
        assert str(error) == "Test error"

    def test_api_error_without_status_code(self):
        error = APIError("Test error")
        assert error.status_code is None

    def test_rate_limit_is_catchable_as_base(self):
        with pytest.raises(DocInsertError):
            raise RateLimitError("Quota", status_code=429)


class TestStructuredErrors:
    def test_credentials_not_found_message(self):
        error = CredentialsNotFoundError("/tmp/token.json")
        assert error.token_path == "/tmp/token.json"
        assert "/tmp/token.json" in str(error)

    def test_table_not_found_message(self):
        error = TableNotFoundError("doc123", 42)
        assert error.min_start_index == 42
        assert "42" in str(error)
        assert "doc123" in str(error)
