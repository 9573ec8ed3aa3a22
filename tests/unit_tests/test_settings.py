"""Tests for settings.py."""

from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from msp_migrate.settings import DEFAULT_ACCOUNTS_FILE
from msp_migrate.settings import Settings


def test_defaults():
    with patch.dict("os.environ", {}, clear=True):
        settings = Settings(_env_file=None)

    assert settings.accounts_file == DEFAULT_ACCOUNTS_FILE
    assert settings.platform_domain == "ruckus.cloud"
    assert settings.request_timeout == 30.0
    assert settings.max_retries == 3
    assert settings.migration_workers == 1
    assert settings.default_admin_role == "PRIME_ADMIN"
    assert settings.log_file is None


def test_reads_prefixed_environment():
    with patch.dict(
        "os.environ",
        {
            "MSP_MIGRATE_ACCOUNTS_FILE": "/tmp/accounts.json",
            "MSP_MIGRATE_MIGRATION_WORKERS": "4",
            "msp_migrate_platform_domain": "example.test",
        },
        clear=True,
    ):
        settings = Settings(_env_file=None)

    assert settings.accounts_file == Path("/tmp/accounts.json")
    assert settings.migration_workers == 4
    assert settings.platform_domain == "example.test"


def test_workers_must_be_positive():
    with patch.dict("os.environ", {"MSP_MIGRATE_MIGRATION_WORKERS": "0"}, clear=True):
        with pytest.raises(ValidationError):
            Settings(_env_file=None)
