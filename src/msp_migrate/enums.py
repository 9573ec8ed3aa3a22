"""
Enums

Enum types shared by the auth, API client, store and orchestrator layers.
Values must match what the platform and the persisted account file use.
"""

from enum import Enum

# ════════════════════════════════════════════════════════════════════════════
# Geographic Enums
# ════════════════════════════════════════════════════════════════════════════


class Region(str, Enum):
    """Platform regions. Every account belongs to exactly one."""

    EUROPE = "Europe"
    ASIA = "Asia"
    NORTH_AMERICA = "North America"


# ════════════════════════════════════════════════════════════════════════════
# Error Enums
# ════════════════════════════════════════════════════════════════════════════


class ErrorKind(str, Enum):
    """Classification attached to every MigrationToolError."""

    INVALID_REGION = "invalid_region"
    CREDENTIALS = "credentials"
    VALIDATION = "validation"
    ACCOUNT_NOT_FOUND = "account_not_found"
    UNAUTHORIZED = "unauthorized"  # HTTP 401
    FORBIDDEN = "forbidden"  # HTTP 403
    NOT_FOUND = "not_found"  # HTTP 404
    SERVER = "server"  # HTTP 5xx
    HTTP = "http"  # any other non-2xx
    TRANSPORT = "transport"  # request never completed


# ════════════════════════════════════════════════════════════════════════════
# Query Enums
# ════════════════════════════════════════════════════════════════════════════


class SortOrder(str, Enum):
    """Sort direction accepted by the platform query endpoints."""

    ASC = "ASC"
    DESC = "DESC"
