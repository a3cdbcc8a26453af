"""
Shared fixtures for gateway tests.

The Appwrite REST API is mocked with responses; every test gets a fresh
mock so routes and recorded calls never leak between tests.
"""

from typing import Dict

import pytest
import responses
from fastapi.testclient import TestClient

from app.config import Settings
from app.main import create_app
from backend_fakes import APPWRITE_ENDPOINT, SESSION_TOKEN


@pytest.fixture
def mock_settings() -> Settings:
    """Settings pointing at the mocked Appwrite endpoint."""
    return Settings(
        _env_file=None,
        APPWRITE_ENDPOINT=APPWRITE_ENDPOINT,
        APPWRITE_PROJECT_ID="test-project",
        APPWRITE_API_KEY="test-api-key",
        DATABASE_ID="test-db",
    )


@pytest.fixture
def app(mock_settings):
    """Create test FastAPI application"""
    return create_app(mock_settings)


@pytest.fixture
def client(app):
    """Create test client"""
    return TestClient(app)


@pytest.fixture
def appwrite():
    """responses mock standing in for the Appwrite API"""
    with responses.RequestsMock(assert_all_requests_are_fired=False) as mock:
        yield mock


@pytest.fixture
def session_headers() -> Dict[str, str]:
    return {"X-Session-Token": SESSION_TOKEN}
