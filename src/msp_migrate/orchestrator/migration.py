"""
Tenant Migration

Moves tenants from a source MSP account to a target MSP account:

- Preconditions (both accounts exist, same region, tenant ids given as a list) are
  checked before any network call and abort the whole batch.
- One token is fetched per account for the batch, never per tenant.
- Each tenant is read from the source, its venues are read from the source, and
  it is created under the target with the target token.
- A failing tenant is recorded and the batch moves on; migrate() always returns
  a MigrationBatchResult once the preconditions hold.
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any
from typing import Callable
from typing import List
from typing import Optional
from uuid import uuid4

from loguru import logger

from msp_migrate.errors import MigrationToolError
from msp_migrate.errors import ValidationError
from msp_migrate.models.account import Account
from msp_migrate.models.migration import MigrationBatchResult
from msp_migrate.models.tenant import build_tenant_payload
from msp_migrate.orchestrator.status_tracker import StatusTracker
from msp_migrate.rks_api.client import ResourceClient
from msp_migrate.rks_auth.regions import DEFAULT_PLATFORM_DOMAIN
from msp_migrate.rks_auth.regions import resolve_region
from msp_migrate.rks_auth.token_gen import fetch_token
from msp_migrate.store.account_store import AccountStore

TokenFetcher = Callable[..., str]


@dataclass(frozen=True)
class AccountSession:
    """An account together with the token and API host used for this batch."""

    account: Account
    api_base: str
    token: str


INVALID_TENANT_ID = "Tenant id must be a non-empty string"


def is_valid_tenant_id(tenant_id: Any) -> bool:
    return isinstance(tenant_id, str) and bool(tenant_id.strip())


def normalize_tenant_ids(tenant_ids: List[Any]) -> List[str]:
    """
    Strip each id, keeping every entry in request order.

    Repeats are kept so each occurrence gets its own outcome. Entries that are
    not strings come back as ``str(value)``; use is_valid_tenant_id on the raw
    entry to tell them apart.

    Raises
    ------
    ValidationError
        If tenant_ids is not a list
    """
    if not isinstance(tenant_ids, (list, tuple)):
        raise ValidationError("tenant_ids must be a list of tenant ids")
    return [t.strip() if isinstance(t, str) else str(t) for t in tenant_ids]


class TenantMigrator:
    """Runs migration batches between two saved MSP accounts."""

    def __init__(
        self,
        account_store: AccountStore,
        client: ResourceClient,
        token_fetcher: TokenFetcher = fetch_token,
        domain: str = DEFAULT_PLATFORM_DOMAIN,
        workers: int = 1,
        default_tenant_type: str = "MSP_EC",
        admin_role: str = "PRIME_ADMIN",
        service_term_days: int = 365,
    ):
        """
        Initialize the migrator.

        Args:
            account_store: Source of the saved accounts
            client: Platform resource client
            token_fetcher: ``(tenant_id, client_id, client_secret, region) -> token``
            domain: Platform root domain used to resolve region hosts
            workers: Tenants processed concurrently; 1 keeps the batch sequential
            default_tenant_type: tenant_type when the source record has none
            admin_role: admin_role forced on every created tenant
            service_term_days: Default service term for created tenants
        """
        if workers < 1:
            raise ValueError("workers must be at least 1")
        self.account_store = account_store
        self.client = client
        self.token_fetcher = token_fetcher
        self.domain = domain
        self.workers = workers
        self.default_tenant_type = default_tenant_type
        self.admin_role = admin_role
        self.service_term_days = service_term_days

    def _check_preconditions(self, source_account_id: str, target_account_id: str):
        """Resolve both accounts and reject cross-region batches. No I/O beyond the store."""
        source = self.account_store.get(source_account_id)
        target = self.account_store.get(target_account_id)
        if source.region != target.region:
            raise ValidationError(
                f"Source account is in {source.region.value} and target account is in "
                f"{target.region.value}; both accounts must be in the same region"
            )
        # Fails here, not mid-batch, if a stored region is somehow unusable
        resolve_region(source.region, domain=self.domain)
        return source, target

    def _open_session(self, account: Account) -> AccountSession:
        endpoints = resolve_region(account.region, domain=self.domain)
        token = self.token_fetcher(account.tenant_id, account.client_id, account.client_secret, account.region)
        return AccountSession(account=account, api_base=endpoints.api_base, token=token)

    def migrate(
        self,
        source_account_id: str,
        target_account_id: str,
        tenant_ids: List[str],
    ) -> MigrationBatchResult:
        """
        Migrate tenants from the source account to the target account.

        Raises
        ------
        AccountNotFoundError
            If either account id is unknown (whole batch aborted)
        ValidationError
            If the accounts are in different regions or tenant_ids is not a list
        """
        source, target = self._check_preconditions(source_account_id, target_account_id)
        raw_ids = tenant_ids
        tenant_ids = normalize_tenant_ids(raw_ids)

        batch_id = uuid4().hex[:8]
        tracker = StatusTracker(batch_id, tenant_ids)
        logger.info(
            f"[{batch_id}] Starting tenant migration",
            source_account_id=source.id,
            target_account_id=target.id,
            region=source.region.value,
            tenant_count=len(tenant_ids),
            workers=self.workers,
        )

        if not tenant_ids:
            return tracker.result()

        try:
            source_session = self._open_session(source)
            target_session = self._open_session(target)
        except MigrationToolError as e:
            logger.error(f"[{batch_id}] Authentication failed, no tenant migrated", error=e.message)
            tracker.fail_all(e.message)
            return tracker.result()

        pending = []
        for index, raw_id in enumerate(raw_ids):
            if is_valid_tenant_id(raw_id):
                pending.append(index)
            else:
                tracker.failed(index, INVALID_TENANT_ID)

        if self.workers == 1:
            for index in pending:
                self._migrate_tenant(index, tenant_ids[index], source_session, target_session, tracker)
        else:
            with ThreadPoolExecutor(max_workers=self.workers, thread_name_prefix=f"migrate-{batch_id}") as pool:
                futures = [
                    pool.submit(self._migrate_tenant, index, tenant_ids[index], source_session, target_session, tracker)
                    for index in pending
                ]
                for future in futures:
                    future.result()

        return tracker.result()

    def _migrate_tenant(
        self,
        index: int,
        tenant_id: str,
        source: AccountSession,
        target: AccountSession,
        tracker: StatusTracker,
    ) -> Optional[str]:
        """
        Read, transform and write one tenant. Never raises.

        Returns the id of the created tenant when the platform reports one.
        """
        try:
            tracker.update(index, "Reading tenant from source account")
            record = self.client.get_tenant(source.api_base, tenant_id, source.token)

            # Acting tenant is the source account itself, not the tenant being migrated
            venues = self.client.query_venues(source.api_base, source.account.tenant_id, source.token)
            tracker.update(index, f"Read {venues.total_count} venue(s) from source account")

            payload = build_tenant_payload(
                record,
                default_tenant_type=self.default_tenant_type,
                admin_role=self.admin_role,
                service_term_days=self.service_term_days,
            )

            tracker.update(index, "Creating tenant under target account")
            created = self.client.put_tenant(target.api_base, target.account.tenant_id, target.token, payload)
        except MigrationToolError as e:
            tracker.failed(index, e.message)
            return None
        except Exception as e:  # pylint: disable=broad-except
            logger.opt(exception=e).error("Unexpected error while migrating tenant", tenant_id=tenant_id)
            tracker.failed(index, f"Unexpected error: {type(e).__name__}")
            return None

        tracker.succeeded(index)
        return created.get("id") if isinstance(created, dict) else None
