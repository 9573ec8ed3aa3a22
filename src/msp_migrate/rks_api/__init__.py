"""Platform resource endpoints (tenants, venues, Wi-Fi networks, APs)."""

from msp_migrate.rks_api.client import ACTING_TENANT_HEADER
from msp_migrate.rks_api.client import ResourceClient
from msp_migrate.rks_api.client import error_for_status

__all__ = [
    "ACTING_TENANT_HEADER",
    "ResourceClient",
    "error_for_status",
]
