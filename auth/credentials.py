"""
Credential loading for Google Docs/Drive services.

Credentials are acquired out of band (any OAuth desktop flow that writes an
authorized-user token file). This module only loads, refreshes and persists
that token, then builds the API service objects.
"""

import json
import logging
import os
from datetime import datetime
from typing import Any

from google.auth.exceptions import RefreshError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build

from auth.scopes import get_required_scopes
from core.errors import AuthenticationError, CredentialsNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_FILE = "~/.config/gdocs-markdown-inserter/token.json"
DEFAULT_TOKEN_URI = "https://oauth2.googleapis.com/token"


def get_token_path(token_file: str | None = None) -> str:
    """Resolve the token file path: explicit argument, then GOOGLE_DOCS_TOKEN_FILE, then the default."""
    path = token_file or os.getenv("GOOGLE_DOCS_TOKEN_FILE", DEFAULT_TOKEN_FILE)
    return os.path.expanduser(path)


def load_credentials(token_file: str | None = None, scopes: list[str] | None = None) -> Credentials:
    """
    Load credentials from an authorized-user token file, refreshing them if expired.

    Raises:
        CredentialsNotFoundError: If the token file does not exist.
        AuthenticationError: If the file is unreadable or the refresh fails.
    """
    token_path = get_token_path(token_file)
    if not os.path.exists(token_path):
        raise CredentialsNotFoundError(token_path)

    try:
        with open(token_path) as f:
            creds_data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise AuthenticationError(f"Could not read token file {token_path}: {e}") from e

    expiry = None
    if creds_data.get("expiry"):
        try:
            expiry = datetime.fromisoformat(creds_data["expiry"].replace("Z", "+00:00"))
            if expiry.tzinfo is not None:
                expiry = expiry.replace(tzinfo=None)
        except (ValueError, TypeError) as e:
            logger.warning(f"Could not parse expiry time in {token_path}: {e}")

    credentials = Credentials(
        token=creds_data.get("token") or creds_data.get("access_token"),
        refresh_token=creds_data.get("refresh_token"),
        token_uri=creds_data.get("token_uri", DEFAULT_TOKEN_URI),
        client_id=creds_data.get("client_id"),
        client_secret=creds_data.get("client_secret"),
        scopes=scopes or creds_data.get("scopes"),
        expiry=expiry,
    )

    if not credentials.valid:
        if not credentials.refresh_token:
            raise AuthenticationError(f"Token in {token_path} is expired and has no refresh token")
        try:
            credentials.refresh(Request())
        except RefreshError as e:
            raise AuthenticationError(f"Failed to refresh token from {token_path}: {e}") from e
        save_credentials(credentials, token_path)
        logger.info(f"Refreshed credentials from {token_path}")

    return credentials


def save_credentials(credentials: Credentials, token_path: str) -> None:
    creds_data = {
        "token": credentials.token,
        "refresh_token": credentials.refresh_token,
        "token_uri": credentials.token_uri,
        "client_id": credentials.client_id,
        "client_secret": credentials.client_secret,
        "scopes": credentials.scopes,
        "expiry": credentials.expiry.isoformat() if credentials.expiry else None,
    }
    try:
        with open(token_path, "w") as f:
            json.dump(creds_data, f, indent=2)
    except OSError as e:
        logger.error(f"Error storing refreshed credentials to {token_path}: {e}")


def build_services(token_file: str | None = None, insert_images: bool = False) -> tuple[Any, Any]:
    """Build the Docs v1 and Drive v3 service objects."""
    credentials = load_credentials(token_file, scopes=get_required_scopes(insert_images))
    docs = build("docs", "v1", credentials=credentials, cache_discovery=False)
    drive = build("drive", "v3", credentials=credentials, cache_discovery=False)
    return docs, drive
