from typing import Optional

from fastapi import APIRouter
from fastapi import Depends
from fastapi import HTTPException
from fastapi import Query
from fastapi import Request
from fastapi import Response
from fastapi import status
from loguru import logger
from starlette.concurrency import run_in_threadpool

from msp_migrate.dependencies import get_account_store
from msp_migrate.dependencies import get_settings
from msp_migrate.enums import Region
from msp_migrate.rks_auth.regions import parse_region
from msp_migrate.rks_auth.regions import resolve_region
from msp_migrate.rks_auth.token_gen import validate_credentials
from msp_migrate.schemas.schemas import AccountResponse
from msp_migrate.schemas.schemas import AddAccountRequest
from msp_migrate.schemas.schemas import DeleteAccountResponse
from msp_migrate.schemas.schemas import ListAccountsResponse
from msp_migrate.schemas.schemas import RegionInfo
from msp_migrate.schemas.schemas import ValidateCredentialsResponse
from msp_migrate.settings import Settings
from msp_migrate.store.account_store import AccountStore

ROUTER_ACCOUNTS = APIRouter(tags=["Accounts"])


@ROUTER_ACCOUNTS.get("/regions")
async def list_regions(settings: Settings = Depends(get_settings)) -> list[RegionInfo]:
    """Auth and API base URLs for every supported region."""
    rows = []
    for region in Region:
        endpoints = resolve_region(region, domain=settings.platform_domain)
        rows.append(RegionInfo(region=region, auth_base=endpoints.auth_base, api_base=endpoints.api_base))
    return rows


@ROUTER_ACCOUNTS.get(
    "/accounts",
    responses={
        status.HTTP_400_BAD_REQUEST: {
            "description": "Unknown region filter",
            "content": {
                "application/json": {
                    "example": {
                        "detail": "Invalid region selected: 'Mars'",
                        "error_type": "invalid_region",
                        "upstream_status": None,
                    }
                }
            },
        },
    },
)
async def list_accounts(
    request: Request,
    region: Optional[str] = Query(default=None, description="Only return accounts in this region"),
    store: AccountStore = Depends(get_account_store),
) -> ListAccountsResponse:
    """List saved MSP accounts. Client secrets are never returned."""
    logger.info("Listing accounts", region=region, method=request.method, path=request.url.path)
    accounts = await run_in_threadpool(store.list, region)

    if not accounts:
        message = "No accounts saved" if region is None else f"No accounts saved in {parse_region(region).value}"
    else:
        message = f"Fetched {len(accounts)} account(s)"

    return ListAccountsResponse(
        Message=message,
        Account=[AccountResponse.from_account(a) for a in accounts],
    )


@ROUTER_ACCOUNTS.post(
    "/accounts",
    status_code=status.HTTP_201_CREATED,
    responses={
        status.HTTP_400_BAD_REQUEST: {
            "description": "Malformed credentials or unknown region",
            "content": {
                "application/json": {
                    "example": {
                        "detail": "Invalid Tenant ID format",
                        "error_type": "validation",
                        "upstream_status": None,
                    }
                }
            },
        },
        status.HTTP_401_UNAUTHORIZED: {
            "description": "Token exchange failed",
            "content": {
                "application/json": {
                    "example": {
                        "detail": "Failed to fetch token. Please check your credentials.",
                        "error_type": "credentials",
                        "upstream_status": None,
                    }
                }
            },
        },
    },
)
async def add_account(
    request: Request,
    body: AddAccountRequest,
    store: AccountStore = Depends(get_account_store),
) -> AccountResponse:
    """Validate credentials with a token exchange and save the account."""
    logger.info(
        "Adding MSP account",
        region=body.region,
        method=request.method,
        path=request.url.path,
    )
    account = await run_in_threadpool(
        store.add,
        body.tenant_id,
        body.client_id,
        body.client_secret,
        body.region,
    )
    return AccountResponse.from_account(account)


@ROUTER_ACCOUNTS.post("/accounts/validate")
async def validate_account_credentials(
    body: AddAccountRequest,
    settings: Settings = Depends(get_settings),
) -> ValidateCredentialsResponse:
    """
    Check credentials without saving them.

    Malformed input and a rejected token exchange are reported as errors, the
    same way as when adding an account.
    """
    await run_in_threadpool(
        validate_credentials,
        body.tenant_id,
        body.client_id,
        body.client_secret,
        body.region,
        domain=settings.platform_domain,
        timeout=settings.request_timeout,
    )

    logger.info("Credentials validated", region=body.region)
    return ValidateCredentialsResponse(valid=True, message="Credentials are valid")


@ROUTER_ACCOUNTS.delete(
    "/accounts/{account_id}",
    responses={
        status.HTTP_404_NOT_FOUND: {
            "description": "Account not found",
            "content": {"application/json": {"example": {"detail": "MSP account 'msp-1-abc' not found"}}},
        },
    },
)
async def delete_account(
    request: Request,
    account_id: str,
    response: Response,
    store: AccountStore = Depends(get_account_store),
) -> DeleteAccountResponse:
    """Delete a saved account."""
    deleted = await run_in_threadpool(store.delete, account_id)

    if not deleted:
        logger.warning(
            "Account not found",
            account_id=account_id,
            http_status=404,
            http_method=request.method,
            url_path=str(request.url.path),
        )
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"MSP account '{account_id}' not found",
        )

    response.status_code = status.HTTP_200_OK
    return DeleteAccountResponse(message=f"Deleted account {account_id}", deleted=True)
