"""Region resolution and OAuth token exchange for MSP accounts."""

from msp_migrate.rks_auth.regions import RegionEndpoints
from msp_migrate.rks_auth.regions import resolve_region
from msp_migrate.rks_auth.token_gen import fetch_token
from msp_migrate.rks_auth.token_gen import validate_credentials

__all__ = [
    "RegionEndpoints",
    "resolve_region",
    "fetch_token",
    "validate_credentials",
]
