"""Module for fetching platform access tokens for an MSP account.

NOTE: Tokens are never cached here. Callers fetch a token right before the
calls that consume it and hold it only for that logical operation. The copy
kept on a saved account is informational.
"""

import json
from datetime import datetime
from datetime import timedelta
from datetime import timezone
from typing import Optional
from typing import Union

import requests
from loguru import logger
from pydantic import BaseModel

from msp_migrate.enums import Region
from msp_migrate.errors import CredentialsError
from msp_migrate.errors import ValidationError
from msp_migrate.rks_auth.regions import DEFAULT_PLATFORM_DOMAIN
from msp_migrate.rks_auth.regions import resolve_region

MIN_CREDENTIAL_LENGTH = 32
DEFAULT_TOKEN_TIMEOUT = 30


class TokenResponse(BaseModel):
    """OAuth client-credentials token response."""

    access_token: str
    token_type: str = "Bearer"
    expires_in: int = 3600
    scope: Optional[str] = None
    expires_at: datetime


def get_token_response(
    tenant_id: str,
    client_id: str,
    client_secret: str,
    region: Union[Region, str, None],
    domain: str = DEFAULT_PLATFORM_DOMAIN,
    timeout: float = DEFAULT_TOKEN_TIMEOUT,
) -> TokenResponse:
    """
    Exchange MSP account credentials for an access token.

    Parameters
    ----------
    tenant_id : str
        Tenant id of the MSP account
    client_id : str
        OAuth client id
    client_secret : str
        OAuth client secret
    region : Region
        Account region, selects the auth host
    domain : str
        Platform root domain
    timeout : float
        Request timeout in seconds

    Returns
    -------
    TokenResponse
        Token with the expiry advertised by the platform

    Raises
    ------
    InvalidRegionError
        If the region is not valid (raised before any request)
    CredentialsError
        If the token could not be fetched for any reason
    """
    endpoints = resolve_region(region, domain=domain)
    url = f"{endpoints.auth_base}/oauth2/token/{tenant_id}"

    payload = {
        "grant_type": "client_credentials",
        "client_id": client_id,
        "client_secret": client_secret,
    }
    headers = {"Content-Type": "application/x-www-form-urlencoded"}

    try:
        created_at_utc = datetime.now(timezone.utc)

        response = requests.post(url, headers=headers, data=payload, timeout=timeout)

        if not 200 <= response.status_code < 300:
            logger.warning(
                "Token request rejected",
                url=url,
                status_code=response.status_code,
            )
            raise CredentialsError()

        try:
            token_data = response.json()
        except (json.JSONDecodeError, ValueError) as e:
            logger.warning("Failed to parse token response as JSON", url=url, error=str(e))
            raise CredentialsError() from e

        access_token = token_data.get("access_token") if isinstance(token_data, dict) else None
        if not access_token or not isinstance(access_token, str):
            logger.warning("Access token not found in response", url=url)
            raise CredentialsError()

        expires_in = token_data.get("expires_in") or 3600

        token = TokenResponse(
            access_token=access_token,
            token_type=token_data.get("token_type") or "Bearer",
            expires_in=expires_in,
            scope=token_data.get("scope"),
            expires_at=created_at_utc + timedelta(seconds=int(expires_in)),
        )
        logger.info("Access token fetched", url=url, expires_at=token.expires_at.isoformat())
        return token

    except requests.exceptions.RequestException as e:
        logger.warning("Network error during token request", url=url, error=str(e))
        raise CredentialsError() from e
    except CredentialsError:
        raise
    except Exception as e:
        logger.warning("Unexpected error during token request", url=url, error=str(e))
        raise CredentialsError() from e


def fetch_token(
    tenant_id: str,
    client_id: str,
    client_secret: str,
    region: Union[Region, str, None],
    domain: str = DEFAULT_PLATFORM_DOMAIN,
    timeout: float = DEFAULT_TOKEN_TIMEOUT,
) -> str:
    """Return only the access token string. See get_token_response."""
    return get_token_response(tenant_id, client_id, client_secret, region, domain=domain, timeout=timeout).access_token


def check_credential_format(tenant_id: str, client_id: str, client_secret: str) -> None:
    """
    Reject obviously malformed credentials before any network call.

    Raises
    ------
    ValidationError
        If a value is missing or shorter than MIN_CREDENTIAL_LENGTH
    """
    for label, value in (
        ("Tenant ID", tenant_id),
        ("Client ID", client_id),
        ("Client Secret", client_secret),
    ):
        if not value or not isinstance(value, str) or len(value.strip()) < MIN_CREDENTIAL_LENGTH:
            raise ValidationError(f"Invalid {label} format")


def validate_credentials(
    tenant_id: str,
    client_id: str,
    client_secret: str,
    region: Union[Region, str, None],
    domain: str = DEFAULT_PLATFORM_DOMAIN,
    timeout: float = DEFAULT_TOKEN_TIMEOUT,
) -> str:
    """
    Validate credentials locally, then prove them with a token exchange.

    Returns the fetched token so callers do not need a second round-trip.
    """
    resolve_region(region, domain=domain)
    check_credential_format(tenant_id, client_id, client_secret)
    return fetch_token(tenant_id, client_id, client_secret, region, domain=domain, timeout=timeout)
