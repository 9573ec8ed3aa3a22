"""
Read-only platform queries made on behalf of a saved account.

Every request fetches a fresh token for the account and sends the account's
own tenant id as the acting tenant.
"""

from typing import Any
from typing import Dict

from fastapi import APIRouter
from fastapi import Depends
from fastapi import Request
from fastapi import status
from loguru import logger
from starlette.concurrency import run_in_threadpool

from msp_migrate.dependencies import get_account_store
from msp_migrate.dependencies import get_resource_client
from msp_migrate.dependencies import get_settings
from msp_migrate.dependencies import get_token_fetcher
from msp_migrate.models.account import Account
from msp_migrate.models.venues import VenuesQueryResponse
from msp_migrate.models.venues import build_venues_query
from msp_migrate.rks_api.client import ResourceClient
from msp_migrate.rks_auth.regions import resolve_region
from msp_migrate.schemas.schemas import RawQueryRequest
from msp_migrate.schemas.schemas import VenuesQueryRequest
from msp_migrate.settings import Settings
from msp_migrate.store.account_store import AccountStore

ROUTER_RESOURCES = APIRouter(tags=["Resources"])

UPSTREAM_ERRORS = {
    status.HTTP_403_FORBIDDEN: {
        "description": "Platform denied access",
        "content": {
            "application/json": {
                "example": {
                    "detail": "HTTP 403 from query_venues: access denied.",
                    "error_type": "forbidden",
                    "upstream_status": 403,
                }
            }
        },
    },
    status.HTTP_404_NOT_FOUND: {"description": "Account or platform resource not found"},
    status.HTTP_502_BAD_GATEWAY: {"description": "Platform returned an error"},
    status.HTTP_503_SERVICE_UNAVAILABLE: {"description": "Platform could not be reached"},
}


def _account_context(store: AccountStore, token_fetcher, account_id: str, domain: str):
    """Blocking: resolve the account, its API host and a fresh token."""
    account: Account = store.get(account_id)
    api_base = resolve_region(account.region, domain=domain).api_base
    token = token_fetcher(account.tenant_id, account.client_id, account.client_secret, account.region)
    return account, api_base, token


@ROUTER_RESOURCES.get("/accounts/{account_id}/tenants/{tenant_id}", responses=UPSTREAM_ERRORS)
async def get_tenant(
    request: Request,
    account_id: str,
    tenant_id: str,
    store: AccountStore = Depends(get_account_store),
    client: ResourceClient = Depends(get_resource_client),
    settings: Settings = Depends(get_settings),
    token_fetcher=Depends(get_token_fetcher),
) -> Dict[str, Any]:
    """Read one tenant as the platform returns it."""
    logger.info(
        "Getting tenant",
        account_id=account_id,
        tenant_id=tenant_id,
        method=request.method,
        path=request.url.path,
    )

    def _run():
        _, api_base, token = _account_context(store, token_fetcher, account_id, settings.platform_domain)
        return client.get_tenant(api_base, tenant_id, token)

    return await run_in_threadpool(_run)


@ROUTER_RESOURCES.post("/accounts/{account_id}/venues/query", responses=UPSTREAM_ERRORS)
async def query_venues(
    request: Request,
    account_id: str,
    body: VenuesQueryRequest,
    store: AccountStore = Depends(get_account_store),
    client: ResourceClient = Depends(get_resource_client),
    settings: Settings = Depends(get_settings),
    token_fetcher=Depends(get_token_fetcher),
) -> VenuesQueryResponse:
    """Query the account's venues. Fields left out of ``overrides`` keep their defaults."""
    query = build_venues_query(body.overrides)
    logger.info(
        "Querying venues",
        account_id=account_id,
        page=query.page,
        page_size=query.page_size,
        method=request.method,
        path=request.url.path,
    )

    def _run():
        account, api_base, token = _account_context(store, token_fetcher, account_id, settings.platform_domain)
        return client.query_venues(api_base, account.tenant_id, token, query)

    return await run_in_threadpool(_run)


@ROUTER_RESOURCES.post("/accounts/{account_id}/wifi-networks/query", responses=UPSTREAM_ERRORS)
async def query_wifi_networks(
    request: Request,
    account_id: str,
    body: RawQueryRequest,
    store: AccountStore = Depends(get_account_store),
    client: ResourceClient = Depends(get_resource_client),
    settings: Settings = Depends(get_settings),
    token_fetcher=Depends(get_token_fetcher),
) -> Dict[str, Any]:
    """Query the account's Wi-Fi networks with a caller supplied body."""
    logger.info("Querying Wi-Fi networks", account_id=account_id, method=request.method, path=request.url.path)

    def _run():
        account, api_base, token = _account_context(store, token_fetcher, account_id, settings.platform_domain)
        return client.query_wifi_networks(api_base, account.tenant_id, token, body.query)

    return await run_in_threadpool(_run)


@ROUTER_RESOURCES.post("/accounts/{account_id}/aps/query", responses=UPSTREAM_ERRORS)
async def query_aps(
    request: Request,
    account_id: str,
    body: RawQueryRequest,
    store: AccountStore = Depends(get_account_store),
    client: ResourceClient = Depends(get_resource_client),
    settings: Settings = Depends(get_settings),
    token_fetcher=Depends(get_token_fetcher),
) -> Dict[str, Any]:
    """Query the account's access points with a caller supplied body."""
    logger.info("Querying access points", account_id=account_id, method=request.method, path=request.url.path)

    def _run():
        account, api_base, token = _account_context(store, token_fetcher, account_id, settings.platform_domain)
        return client.query_aps(api_base, account.tenant_id, token, body.query)

    return await run_in_threadpool(_run)
