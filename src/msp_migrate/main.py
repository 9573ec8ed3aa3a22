from functools import partial
from textwrap import dedent

import pydantic
from fastapi import FastAPI
from fastapi.routing import APIRoute
from loguru import logger

from msp_migrate.errors import MigrationToolError
from msp_migrate.errors import handle_broad_exceptions
from msp_migrate.errors import handle_migration_errors
from msp_migrate.errors import handle_pydantic_validation_errors
from msp_migrate.monitoring.logger import configure_logger
from msp_migrate.orchestrator.migration import TenantMigrator
from msp_migrate.rks_api.client import ResourceClient
from msp_migrate.rks_auth.token_gen import fetch_token
from msp_migrate.routes.routes_accounts import ROUTER_ACCOUNTS
from msp_migrate.routes.routes_health import ROUTER_HEALTH
from msp_migrate.routes.routes_migration import ROUTER_MIGRATION
from msp_migrate.routes.routes_resources import ROUTER_RESOURCES
from msp_migrate.settings import Settings
from msp_migrate.store.account_store import AccountStore
from msp_migrate.store.backends import JsonFileBackend


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create a FastAPI application.

    Configuration is loaded from ``MSP_MIGRATE_*`` environment variables or a
    local .env file via pydantic-settings.
    """
    settings = settings or Settings()

    configure_logger(level=settings.log_level, log_file=settings.log_file)

    logger.info(
        "Configuration loaded successfully",
        accounts_file=str(settings.accounts_file),
        platform_domain=settings.platform_domain,
        max_retries=settings.max_retries,
        migration_workers=settings.migration_workers,
        file_logging=settings.log_file is not None,
    )

    app = FastAPI(
        title="MSP Tenant Migration API",
        version="v1",
        description=dedent(
            """
        Local API for moving customer tenants between two MSP accounts of the same region.

        | Step | Endpoint |
        | --- | --- |
        | Save both MSP accounts | `POST /api/accounts` |
        | Inspect the source account | `POST /api/accounts/{id}/venues/query` |
        | Run the batch | `POST /api/migrations` |
        """
        ),
        generate_unique_id_function=custom_generate_unique_id,
    )
    app.state.settings = settings

    # One token fetcher for the whole app, bound to the configured domain and timeout
    token_fetcher = partial(fetch_token, domain=settings.platform_domain, timeout=settings.request_timeout)
    app.state.token_fetcher = token_fetcher

    app.state.account_store = AccountStore(
        backend=JsonFileBackend(settings.accounts_file),
        token_fetcher=token_fetcher,
    )
    app.state.resource_client = ResourceClient(
        timeout=settings.request_timeout,
        max_retries=settings.max_retries,
        backoff_factor=settings.retry_backoff_factor,
    )
    app.state.migrator = TenantMigrator(
        account_store=app.state.account_store,
        client=app.state.resource_client,
        token_fetcher=token_fetcher,
        domain=settings.platform_domain,
        workers=settings.migration_workers,
        default_tenant_type=settings.default_tenant_type,
        admin_role=settings.default_admin_role,
        service_term_days=settings.service_term_days,
    )
    logger.info("Account store and migrator initialized")

    app.include_router(ROUTER_HEALTH, prefix="/api")
    app.include_router(ROUTER_ACCOUNTS, prefix="/api")
    app.include_router(ROUTER_RESOURCES, prefix="/api")
    app.include_router(ROUTER_MIGRATION, prefix="/api")

    app.add_exception_handler(
        exc_class_or_status_code=pydantic.ValidationError,
        handler=handle_pydantic_validation_errors,
    )
    app.add_exception_handler(
        exc_class_or_status_code=MigrationToolError,
        handler=handle_migration_errors,
    )

    app.middleware("http")(handle_broad_exceptions)

    return app


def custom_generate_unique_id(route: APIRoute):
    """
    Generate prettier `operationId`s in the OpenAPI schema.

    These become the function names in generated client SDKs.
    """
    if route.tags:
        return f"{route.tags[0]}-{route.name}"
    return route.name


if __name__ == "__main__":
    import uvicorn

    settings = Settings()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)
