"""Settings for the tenant migration service."""

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict

DEFAULT_ACCOUNTS_FILE = Path.home() / ".msp-migrate" / "accounts.json"


class Settings(BaseSettings):
    """
    Settings for the tenant migration service.

    [pydantic.BaseSettings](https://docs.pydantic.dev/latest/concepts/pydantic_settings/) is a popular
    framework for organizing, validating, and reading configuration values from a variety of sources
    including environment variables.

    This class automatically reads from:
    1. Environment variables prefixed with ``MSP_MIGRATE_``
    2. .env file (local development)

    Account credentials are NOT configured here. They are entered by the operator and
    persisted in the accounts file.
    """

    # Account persistence
    accounts_file: Path = DEFAULT_ACCOUNTS_FILE
    """JSON document holding the saved MSP accounts."""

    # Platform
    platform_domain: str = "ruckus.cloud"
    """Root domain used to build per-region auth and API hosts."""

    request_timeout: float = Field(default=30.0, gt=0)
    """Timeout in seconds for every outbound platform request."""

    max_retries: int = Field(default=3, ge=0)
    """Retry attempts for transient platform failures (0 disables retries)."""

    retry_backoff_factor: float = Field(default=0.5, ge=0)
    """Exponential backoff factor between retries, in seconds."""

    # Migration
    migration_workers: int = Field(default=1, ge=1)
    """Tenants migrated concurrently. 1 keeps the batch strictly sequential."""

    default_tenant_type: str = "MSP_EC"
    """tenant_type used when the source record does not carry one."""

    default_admin_role: str = "PRIME_ADMIN"
    """admin_role forced onto every created tenant."""

    service_term_days: int = Field(default=365, gt=0)
    """Days between service_effective_date and service_expiration_date when absent."""

    # Logging
    log_level: str = "INFO"
    """Minimum level for console logging."""

    log_file: Optional[Path] = None
    """Optional rotating log file. Disabled when unset."""

    # Local server
    host: str = "127.0.0.1"
    """Interface the local API binds to."""

    port: int = 8000
    """Port the local API listens on."""

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_prefix="MSP_MIGRATE_",
        env_file=".env",  # Load from .env file if it exists (local development)
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore extra environment variables not defined in the model
        validate_default=True,  # Validate default values
    )
