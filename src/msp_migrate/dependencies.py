"""FastAPI dependencies for accessing app state."""

from fastapi import Request

from msp_migrate.orchestrator.migration import TenantMigrator
from msp_migrate.rks_api.client import ResourceClient
from msp_migrate.settings import Settings
from msp_migrate.store.account_store import AccountStore


def get_settings(request: Request) -> Settings:
    """
    Get application settings from request state.

    Parameters
    ----------
    request : Request
        FastAPI request object

    Returns
    -------
    Settings
        Application settings instance
    """
    return request.app.state.settings


def get_account_store(request: Request) -> AccountStore:
    """
    Get the account store from app state.

    The store is created once in create_app and shared by every request, so
    its lock is the single guard over the accounts file.
    """
    return request.app.state.account_store


def get_resource_client(request: Request) -> ResourceClient:
    return request.app.state.resource_client


def get_migrator(request: Request) -> TenantMigrator:
    return request.app.state.migrator


def get_token_fetcher(request: Request):
    """Token fetcher bound to the configured platform domain and timeout."""
    return request.app.state.token_fetcher
