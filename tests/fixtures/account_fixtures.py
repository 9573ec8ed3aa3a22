"""Fixtures for saved accounts and the account store."""

from unittest.mock import MagicMock

import pytest

from tests.consts import CLIENT_ID
from tests.consts import CLIENT_SECRET
from tests.consts import SOURCE_TENANT_ID
from tests.consts import TARGET_TENANT_ID


def _token_for(tenant_id, client_id, client_secret, region, **kwargs):
    return f"token-{tenant_id[:6]}"


@pytest.fixture
def token_fetcher():
    """Token fetcher stub. The token names the tenant it was issued for."""
    return MagicMock(side_effect=_token_for)


@pytest.fixture
def source_credentials():
    return {"tenant_id": SOURCE_TENANT_ID, "client_id": CLIENT_ID, "client_secret": CLIENT_SECRET}


@pytest.fixture
def target_credentials():
    return {"tenant_id": TARGET_TENANT_ID, "client_id": CLIENT_ID, "client_secret": CLIENT_SECRET}


@pytest.fixture
def memory_backend():
    from msp_migrate.store.backends import InMemoryBackend

    return InMemoryBackend()


@pytest.fixture
def account_store(memory_backend, token_fetcher):
    """Account store over an in-memory backend with the stubbed token exchange."""
    from msp_migrate.store.account_store import AccountStore

    return AccountStore(memory_backend, token_fetcher=token_fetcher)


@pytest.fixture
def source_account(account_store, source_credentials):
    """Saved Europe account that tenants are migrated from."""
    return account_store.add(region="Europe", **source_credentials)


@pytest.fixture
def target_account(account_store, target_credentials):
    """Saved Europe account that tenants are migrated to."""
    return account_store.add(region="Europe", **target_credentials)
