"""
Models Module

Pydantic models for accounts, tenant payloads, venue queries and migration results.
"""

from msp_migrate.models.account import Account
from msp_migrate.models.migration import MigrationBatchResult
from msp_migrate.models.tenant import TenantCreationPayload
from msp_migrate.models.tenant import build_tenant_payload
from msp_migrate.models.venues import VenuesQuery
from msp_migrate.models.venues import VenuesQueryResponse
from msp_migrate.models.venues import build_venues_query

__all__ = [
    "Account",
    "MigrationBatchResult",
    "TenantCreationPayload",
    "build_tenant_payload",
    "VenuesQuery",
    "VenuesQueryResponse",
    "build_venues_query",
]
