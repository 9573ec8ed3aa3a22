"""
Migration Orchestrator Module

Coordinates tenant migration between two MSP accounts.
"""

from msp_migrate.orchestrator.migration import TenantMigrator
from msp_migrate.orchestrator.status_tracker import StatusTracker

__all__ = [
    "TenantMigrator",
    "StatusTracker",
]
