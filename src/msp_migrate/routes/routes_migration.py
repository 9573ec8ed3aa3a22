from fastapi import APIRouter
from fastapi import Depends
from fastapi import Request
from fastapi import status
from loguru import logger
from starlette.concurrency import run_in_threadpool

from msp_migrate.dependencies import get_migrator
from msp_migrate.models.migration import MigrationBatchResult
from msp_migrate.orchestrator.migration import TenantMigrator
from msp_migrate.schemas.schemas import MigrationRequest

ROUTER_MIGRATION = APIRouter(tags=["Migration"])


@ROUTER_MIGRATION.post(
    "/migrations",
    responses={
        status.HTTP_200_OK: {
            "description": "Batch finished; per-tenant outcomes are in the body",
            "content": {
                "application/json": {
                    "example": {
                        "success": False,
                        "message": "Migration completed with 1 failure(s)",
                        "migrated_tenants": ["t1"],
                        "failed_tenants": ["t2"],
                        "errors": {"t2": "HTTP 404 from get_tenant: resource or endpoint not found."},
                    }
                }
            },
        },
        status.HTTP_400_BAD_REQUEST: {"description": "Accounts in different regions or malformed tenant list"},
        status.HTTP_404_NOT_FOUND: {"description": "Source or target account not found"},
    },
)
async def run_migration(
    request: Request,
    body: MigrationRequest,
    migrator: TenantMigrator = Depends(get_migrator),
) -> MigrationBatchResult:
    """
    Migrate tenants from the source account to the target account.

    Tenant failures do not fail the request: the batch always answers 200 once
    both accounts are resolved, and ``success`` is false if any tenant failed.
    """
    logger.info(
        "Migration requested",
        source_account_id=body.source_account_id,
        target_account_id=body.target_account_id,
        tenant_count=len(body.tenant_ids),
        method=request.method,
        path=request.url.path,
    )
    return await run_in_threadpool(
        migrator.migrate,
        body.source_account_id,
        body.target_account_id,
        body.tenant_ids,
    )
