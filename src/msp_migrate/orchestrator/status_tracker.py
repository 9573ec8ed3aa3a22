"""
Status Tracker

Helper for recording per-tenant outcomes while a migration batch runs.
"""

import threading
from typing import Dict
from typing import List
from typing import Optional

from loguru import logger

from msp_migrate.models.migration import MigrationBatchResult


class StatusTracker:
    """
    Collects migrated / failed tenant ids for one batch and logs progress.

    Outcomes are keyed by position in the batch, so a tenant id listed twice is
    counted twice. They may be recorded from worker threads; ``result()``
    always lists ids in the order the batch was requested.
    """

    def __init__(self, batch_id: str, tenant_ids: List[str]):
        """
        Initialize status tracker.

        Args:
            batch_id: Identifier used to prefix progress log lines
            tenant_ids: Tenant ids of the batch, in request order
        """
        self.batch_id = batch_id
        self.tenant_ids = list(tenant_ids)
        self._outcomes: Dict[int, Optional[str]] = {}
        self._lock = threading.Lock()

    def update(self, index: int, message: str):
        """Log a progress step for the tenant at ``index``."""
        logger.info(f"[{self.batch_id}] {message}", tenant_id=self.tenant_ids[index], position=index)

    def succeeded(self, index: int):
        with self._lock:
            self._outcomes[index] = None
        logger.success(f"[{self.batch_id}] Tenant migrated", tenant_id=self.tenant_ids[index], position=index)

    def failed(self, index: int, error: str):
        with self._lock:
            self._outcomes[index] = error
        logger.error(
            f"[{self.batch_id}] Tenant migration FAILED",
            tenant_id=self.tenant_ids[index],
            position=index,
            error=error,
        )

    def fail_all(self, error: str):
        """Record every tenant of the batch as failed with the same reason."""
        for index in range(len(self.tenant_ids)):
            self.failed(index, error)

    def result(self) -> MigrationBatchResult:
        """Aggregate result. Tenants without a recorded outcome count as failed."""
        migrated: List[str] = []
        failed: List[str] = []
        errors: Dict[str, str] = {}
        with self._lock:
            for index, tenant_id in enumerate(self.tenant_ids):
                if index in self._outcomes and self._outcomes[index] is None:
                    migrated.append(tenant_id)
                else:
                    failed.append(tenant_id)
                    errors[tenant_id] = self._outcomes.get(index) or "Migration did not complete"

        result = MigrationBatchResult.from_outcomes(migrated, failed, errors)
        log = logger.success if result.success else logger.warning
        log(
            f"[{self.batch_id}] {result.message}",
            migrated=len(migrated),
            failed=len(failed),
        )
        return result
