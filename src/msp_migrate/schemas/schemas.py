####################################
# --- Request/response schemas --- #
####################################

from typing import Any
from typing import Dict
from typing import List
from typing import Optional

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

from msp_migrate.enums import Region
from msp_migrate.models.account import Account


# create (Crud)
class AddAccountRequest(BaseModel):
    """Request model for adding an MSP account."""

    tenant_id: str = Field(..., description="Tenant id of the MSP account")
    client_id: str = Field(..., description="OAuth client id")
    client_secret: str = Field(..., description="OAuth client secret")
    region: Optional[str] = Field(default=None, description="Europe, Asia or North America")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "tenant_id": "0123456789abcdef0123456789abcdef",
                "client_id": "fedcba9876543210fedcba9876543210",
                "client_secret": "00112233445566778899aabbccddeeff",
                "region": "Europe",
            }
        }
    )


class ValidateCredentialsResponse(BaseModel):
    """Response model for credential validation."""

    valid: bool
    message: str


# read (cRud)
class AccountResponse(BaseModel):
    """Saved account as returned to the front-end. Secrets are never included."""

    id: str
    name: str
    tenant_id: str
    client_id: str
    region: Region
    has_session_token: bool

    @classmethod
    def from_account(cls, account: Account) -> "AccountResponse":
        return cls(
            id=account.id,
            name=account.name,
            tenant_id=account.tenant_id,
            client_id=account.client_id,
            region=account.region,
            has_session_token=bool(account.session_token),
        )


class ListAccountsResponse(BaseModel):
    """Response model for listing accounts."""

    Message: str
    Account: List[AccountResponse]


class RegionInfo(BaseModel):
    """One row of the region table."""

    region: Region
    auth_base: str
    api_base: str


# delete (cruD)
class DeleteAccountResponse(BaseModel):
    """Response model for deleting an account."""

    message: str
    deleted: bool


class MigrationRequest(BaseModel):
    """Request model for a migration batch."""

    source_account_id: str = Field(..., min_length=1)
    target_account_id: str = Field(..., min_length=1)
    tenant_ids: List[str] = Field(default_factory=list)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "source_account_id": "msp-1718000000000-k3j9x0a1b",
                "target_account_id": "msp-1718000000500-p0q9r8s7t",
                "tenant_ids": ["t1", "t2"],
            }
        }
    )


class VenuesQueryRequest(BaseModel):
    """Partial venue query; any field left out keeps its default."""

    overrides: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(json_schema_extra={"example": {"overrides": {"page": 2, "pageSize": 25}}})


class RawQueryRequest(BaseModel):
    """Query body forwarded as-is (Wi-Fi networks, APs)."""

    query: Dict[str, Any] = Field(default_factory=dict)
