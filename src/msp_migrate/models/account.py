"""
MSP Account Model

A saved connection to one MSP account on the platform.
"""

import secrets
import string
import time
from typing import Optional

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

from msp_migrate.enums import Region

_BASE36 = string.digits + string.ascii_lowercase


def generate_account_id() -> str:
    """Time based id with a random suffix, e.g. ``msp-1718000000000-k3j9x0a1b``."""
    suffix = "".join(secrets.choice(_BASE36) for _ in range(9))
    return f"msp-{time.time_ns() // 1_000_000}-{suffix}"


def account_display_name(tenant_id: str) -> str:
    return f"MSP Account ({tenant_id[:8]}...)"


class Account(BaseModel):
    """Saved MSP account. Credentials and region never change once stored."""

    id: str = Field(default_factory=generate_account_id)
    name: str
    tenant_id: str
    client_id: str
    client_secret: str
    session_token: Optional[str] = None  # last fetched token, a cache only
    region: Region

    model_config = ConfigDict(frozen=True)

    @classmethod
    def create(
        cls,
        tenant_id: str,
        client_id: str,
        client_secret: str,
        region: Region,
        session_token: Optional[str] = None,
    ) -> "Account":
        """Build a new account with a generated id and display name."""
        return cls(
            name=account_display_name(tenant_id),
            tenant_id=tenant_id,
            client_id=client_id,
            client_secret=client_secret,
            session_token=session_token,
            region=region,
        )
