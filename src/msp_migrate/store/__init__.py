"""Saved MSP account storage."""

from msp_migrate.store.account_store import AccountStore
from msp_migrate.store.backends import InMemoryBackend
from msp_migrate.store.backends import JsonFileBackend

__all__ = [
    "AccountStore",
    "InMemoryBackend",
    "JsonFileBackend",
]
