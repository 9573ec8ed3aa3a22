"""Fixtures for FastAPI application and settings."""

import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

# Ensure tests can import from parent directory
THIS_DIR = Path(__file__).parent
TESTS_DIR = THIS_DIR.parent
TESTS_DIR_PARENT = (TESTS_DIR / "..").resolve()
sys.path.insert(0, str(TESTS_DIR_PARENT))


@pytest.fixture
def mock_settings(tmp_path):
    """Settings pointing the accounts file at a temporary directory."""
    from msp_migrate.settings import Settings

    return Settings(
        accounts_file=tmp_path / "accounts.json",
        log_level="WARNING",
        max_retries=0,
    )


@pytest.fixture
def app(mock_settings, token_fetcher):
    """Create FastAPI test application with a stubbed token exchange and platform client."""
    from msp_migrate.main import create_app
    from msp_migrate.rks_api.client import ResourceClient

    app = create_app(settings=mock_settings)

    app.state.token_fetcher = token_fetcher
    app.state.account_store.token_fetcher = token_fetcher
    app.state.migrator.token_fetcher = token_fetcher

    resource_client = MagicMock(spec=ResourceClient)
    app.state.resource_client = resource_client
    app.state.migrator.client = resource_client
    yield app


@pytest.fixture
def mock_resource_client(app):
    """The platform client mock wired into the app."""
    return app.state.resource_client


@pytest.fixture
def client(app):
    """Create FastAPI test client."""
    with TestClient(app) as test_client:
        yield test_client
