"""Core utilities for Google Docs markdown insertion."""

from core.config import InsertConfig, Pacing
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
from core.utils import TransientNetworkError, handle_http_errors, validate_document_id

__all__ = [
    "APIError",
    "AuthenticationError",
    "CredentialsNotFoundError",
    "DocInsertError",
    "handle_http_errors",
    "InsertConfig",
    "Pacing",
    "PermissionDeniedError",
    "RateLimitError",
    "ResourceNotFoundError",
    "TableNotFoundError",
    "TransientNetworkError",
    "validate_document_id",
    "ValidationError",
]
