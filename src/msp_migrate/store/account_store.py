"""
Account Store

Single-owner repository for saved MSP accounts.

The whole collection is the unit of durability: it is read from the backend once,
on first access, cached for the life of the process, and rewritten in full after
every add or delete. That is fine for tens of accounts; it does not scale to
thousands and should move to a keyed store before it needs to.
"""

import threading
from typing import Callable
from typing import List
from typing import Optional
from typing import Union

from loguru import logger

from msp_migrate.enums import Region
from msp_migrate.errors import AccountNotFoundError
from msp_migrate.models.account import Account
from msp_migrate.rks_auth.regions import parse_region
from msp_migrate.rks_auth.token_gen import check_credential_format
from msp_migrate.rks_auth.token_gen import fetch_token
from msp_migrate.store.backends import AccountBackend

TokenFetcher = Callable[[str, str, str, Region], str]


class AccountStore:
    """
    Thread-safe CRUD over saved accounts.

    Attributes
    ----------
    _accounts : Optional[List[Account]]
        In-memory collection, None until first access
    _lock : threading.RLock
        Guards load, mutate and save of the collection
    """

    def __init__(self, backend: AccountBackend, token_fetcher: TokenFetcher = fetch_token):
        """
        Initialize the store. Nothing is read until the first call.

        Parameters
        ----------
        backend : AccountBackend
            Persistence for the account collection
        token_fetcher : callable
            ``(tenant_id, client_id, client_secret, region) -> token``, used by add()
        """
        self.backend = backend
        self.token_fetcher = token_fetcher
        self._accounts: Optional[List[Account]] = None
        self._lock = threading.RLock()

    def _ensure_loaded(self) -> List[Account]:
        # Caller must hold self._lock
        if self._accounts is None:
            records = self.backend.load()
            self._accounts = [Account.model_validate(r) for r in records]
            logger.info("Accounts loaded", count=len(self._accounts))
        return self._accounts

    def _persist(self, accounts: List[Account]) -> None:
        self.backend.save([a.model_dump(mode="json") for a in accounts])

    def add(
        self,
        tenant_id: str,
        client_id: str,
        client_secret: str,
        region: Union[Region, str, None],
    ) -> Account:
        """
        Validate credentials, fetch a first token and save a new account.

        Nothing is stored if validation or the token exchange fails.

        Raises
        ------
        InvalidRegionError
            If the region is not valid
        ValidationError
            If a credential is malformed
        CredentialsError
            If the token exchange fails
        """
        region = parse_region(region)
        check_credential_format(tenant_id, client_id, client_secret)

        token = self.token_fetcher(tenant_id, client_id, client_secret, region)
        account = Account.create(
            tenant_id=tenant_id,
            client_id=client_id,
            client_secret=client_secret,
            region=region,
            session_token=token,
        )

        with self._lock:
            accounts = self._ensure_loaded()
            updated = accounts + [account]
            self._persist(updated)
            self._accounts = updated

        logger.info("MSP account added", account_id=account.id, region=region.value)
        return account

    def list(self, region: Union[Region, str, None] = None) -> List[Account]:
        """Accounts in insertion order, optionally filtered to one region."""
        with self._lock:
            accounts = list(self._ensure_loaded())
        if region is None:
            return accounts
        region = parse_region(region)
        return [a for a in accounts if a.region == region]

    def get(self, account_id: str) -> Account:
        """
        Look up an account by id.

        Raises
        ------
        AccountNotFoundError
            If no account has this id
        """
        with self._lock:
            for account in self._ensure_loaded():
                if account.id == account_id:
                    return account
        raise AccountNotFoundError(account_id)

    def delete(self, account_id: str) -> bool:
        """Remove an account. Returns False, without writing, when it does not exist."""
        with self._lock:
            accounts = self._ensure_loaded()
            remaining = [a for a in accounts if a.id != account_id]
            if len(remaining) == len(accounts):
                logger.info("Delete requested for unknown account", account_id=account_id)
                return False
            self._persist(remaining)
            self._accounts = remaining

        logger.info("MSP account deleted", account_id=account_id)
        return True
