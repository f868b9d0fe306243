import asyncio
import functools
import logging
import re
import ssl

from googleapiclient.errors import HttpError

from core.errors import (
    APIError,
    PermissionDeniedError,
    RateLimitError,
    ResourceNotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Reasons the Docs/Drive APIs attach to quota rejections
QUOTA_ERROR_MARKERS = ("rateLimitExceeded", "userRateLimitExceeded", "RATE_LIMIT_EXCEEDED", "Quota exceeded")


def validate_document_id(document_id: str, param_name: str = "document_id") -> str:
    """Validate a Google Docs document ID."""
    if not document_id:
        raise ValidationError(f"{param_name} is required")

    document_id = document_id.strip()
    if not document_id:
        raise ValidationError(f"{param_name} cannot be empty")

    if not re.match(r"^[\w\-]+$", document_id):
        raise ValidationError(f"{param_name} contains invalid characters")

    return document_id


class TransientNetworkError(Exception):
    """Custom exception for transient network errors after retries."""

    pass


def is_quota_error(error: HttpError) -> bool:
    """True when an HttpError is a write-quota rejection rather than a real fault."""
    if error.resp.status == 429:
        return True
    return error.resp.status == 403 and any(marker in str(error) for marker in QUOTA_ERROR_MARKERS)


def classify_http_error(operation: str, error: HttpError) -> APIError:
    """Map a googleapiclient HttpError onto the APIError hierarchy."""
    status = error.resp.status
    message = f"API error in {operation}: {error}"

    if is_quota_error(error):
        return RateLimitError(f"Write quota exceeded in {operation}: {error}", status_code=status)
    if status == 404:
        return ResourceNotFoundError(message, status_code=status)
    if status in (401, 403):
        return PermissionDeniedError(
            f"{message}. Check that the token grants Docs and Drive access to this document.",
            status_code=status,
        )
    return APIError(message, status_code=status)


def handle_http_errors(operation: str, is_read_only: bool = False):
    """
    A decorator to handle Google API HttpErrors and transient SSL errors in a standardized way.

    It wraps a coroutine, catches HttpError, logs a detailed error message,
    and raises the matching APIError subclass.

    If is_read_only is True, it will also catch ssl.SSLError and retry with
    exponential backoff. After exhausting retries, it raises a TransientNetworkError.
    Writes are never retried in place: a replayed insert would duplicate text.

    Args:
        operation (str): The name of the operation being decorated (e.g., 'get_document').
        is_read_only (bool): If True, the operation is considered safe to retry on
                             transient network errors. Defaults to False.
    """

    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            max_retries = 3
            base_delay = 1

            for attempt in range(max_retries):
                try:
                    return await func(*args, **kwargs)
                except ssl.SSLError as e:
                    if is_read_only and attempt < max_retries - 1:
                        delay = base_delay * (2**attempt)
                        logger.warning(
                            f"SSL error in {operation} on attempt {attempt + 1}: {e}. Retrying in {delay} seconds..."
                        )
                        await asyncio.sleep(delay)
                    else:
                        logger.error(f"SSL error in {operation} on final attempt: {e}. Raising exception.")
                        raise TransientNetworkError(
                            f"A transient SSL error occurred in '{operation}' after {attempt + 1} attempt(s). "
                            "This is likely a temporary network or certificate issue. Please try again shortly."
                        ) from e
                except HttpError as error:
                    api_error = classify_http_error(operation, error)
                    if isinstance(api_error, RateLimitError):
                        logger.warning(str(api_error))
                    else:
                        logger.error(f"API error in {operation}: {error}", exc_info=True)
                    raise api_error from error

        return wrapper

    return decorator
