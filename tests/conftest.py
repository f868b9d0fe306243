"""Shared pytest fixtures for gdocs-markdown-inserter tests."""

import tempfile
from unittest.mock import MagicMock

import pytest

from core.config import InsertConfig, Pacing
from tests.fakes import FakeDocsService


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def pacing():
    """Pacing with every pause disabled."""
    return Pacing.immediate()


@pytest.fixture
def fake_docs():
    """An empty in-memory Google Doc."""
    return FakeDocsService()


@pytest.fixture
def insert_config(pacing):
    """Default insertion options without pauses."""
    return InsertConfig(pacing=pacing)


@pytest.fixture
def mock_drive_service():
    """Create a mock Google Drive service that accepts uploads."""
    service = MagicMock()
    service.files.return_value.create.return_value.execute.return_value = {"id": "file1"}
    service.permissions.return_value.create.return_value.execute.return_value = {"id": "anyoneWithLink"}
    return service


@pytest.fixture
def sample_credentials():
    """Create sample OAuth credentials for testing."""
    return {
        "token": "test_access_token",
        "refresh_token": "test_refresh_token",
        "token_uri": "https://oauth2.googleapis.com/token",
        "client_id": "test_client_id",
        "client_secret": "test_client_secret",
        "scopes": ["https://www.googleapis.com/auth/documents"],
    }


@pytest.fixture
def env_override(monkeypatch):
    """Helper to override environment variables."""

    def _override(**kwargs):
        for key, value in kwargs.items():
            if value is None:
                monkeypatch.delenv(key, raising=False)
            else:
                monkeypatch.setenv(key, value)

    return _override
