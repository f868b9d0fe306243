"""
Custom error types for markdown insertion into Google Docs.

Provides a small exception hierarchy so callers can tell quota problems,
structural lookup failures and plain input mistakes apart.
"""

# =============================================================================
# Base Exception Hierarchy
# =============================================================================


class DocInsertError(Exception):
    """Base exception for all markdown insertion errors."""

    pass


# =============================================================================
# Authentication Errors
# =============================================================================


class AuthenticationError(DocInsertError):
    """Raised when credentials are missing or cannot be refreshed."""

    pass


class CredentialsNotFoundError(AuthenticationError):
    """Raised when no token file is found."""

    def __init__(self, token_path: str):
        super().__init__(f"No credentials found at {token_path}. Authorize the application and save a token first.")
        self.token_path = token_path


# =============================================================================
# Validation Errors
# =============================================================================


class ValidationError(DocInsertError):
    """Raised when input validation fails."""

    pass


# =============================================================================
# API Errors
# =============================================================================


class APIError(DocInsertError):
    """Raised for general Google API errors."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ResourceNotFoundError(APIError):
    """Raised when a requested resource doesn't exist (404)."""

    pass


class PermissionDeniedError(APIError):
    """Raised when the user lacks permission for an operation (401/403)."""

    pass


class RateLimitError(APIError):
    """Raised when the write quota is exhausted (429 or quota 403)."""

    pass


# =============================================================================
# Structural Errors
# =============================================================================


class TableNotFoundError(DocInsertError):
    """Raised when a freshly created table cannot be located in the document."""

    def __init__(self, document_id: str, min_start_index: int):
        super().__init__(f"No table found at or after index {min_start_index} in document {document_id}")
        self.document_id = document_id
        self.min_start_index = min_start_index
