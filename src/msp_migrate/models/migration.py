"""
Migration Result Model

Aggregate outcome of one migration batch.
"""

from typing import Dict
from typing import List

from pydantic import BaseModel
from pydantic import Field


class MigrationBatchResult(BaseModel):
    """
    Outcome of migrating a list of tenant ids.

    Every requested tenant id is in exactly one of ``migrated_tenants`` or
    ``failed_tenants``, in request order. ``errors`` holds the reason for each
    failed tenant.
    """

    success: bool
    message: str
    migrated_tenants: List[str] = Field(default_factory=list)
    failed_tenants: List[str] = Field(default_factory=list)
    errors: Dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_outcomes(cls, migrated: List[str], failed: List[str], errors: Dict[str, str]) -> "MigrationBatchResult":
        if failed:
            message = f"Migration completed with {len(failed)} failure(s)"
        else:
            message = f"Successfully migrated {len(migrated)} tenant(s)"
        return cls(
            success=not failed,
            message=message,
            migrated_tenants=list(migrated),
            failed_tenants=list(failed),
            errors=dict(errors),
        )
