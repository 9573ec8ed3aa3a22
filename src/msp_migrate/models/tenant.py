"""
Tenant Creation Payload

Remaps a tenant record read from the source account into the body accepted by
the ``mspCustomers`` endpoint of the target account.
"""

from datetime import date
from datetime import datetime
from datetime import timedelta
from datetime import timezone
from typing import Any
from typing import Dict
from typing import List
from typing import Optional

import pydantic
from pydantic import BaseModel
from pydantic import Field
from pydantic import field_validator

from msp_migrate.errors import ValidationError

# Source keys accepted for each payload field (snake_case first, then camelCase)
_ALIASES = {
    "name": ("name",),
    "tenant_type": ("tenant_type", "tenantType"),
    "service_effective_date": ("service_effective_date", "serviceEffectiveDate"),
    "service_expiration_date": ("service_expiration_date", "serviceExpirationDate"),
    "admin_email": ("admin_email", "adminEmail"),
    "admin_firstname": ("admin_firstname", "adminFirstname", "adminFirstName"),
    "admin_lastname": ("admin_lastname", "adminLastname", "adminLastName"),
    "street_address": ("street_address", "streetAddress", "addressLine", "address_line"),
    "city": ("city",),
    "state": ("state",),
    "country": ("country",),
    "postal_code": ("postal_code", "postalCode", "zip"),
    "latitude": ("latitude",),
    "longitude": ("longitude",),
}

# Keys on a nested admin object ({"admins": [...]} or {"admin": {...}})
_ADMIN_ALIASES = {
    "admin_email": ("email", "admin_email"),
    "admin_firstname": ("firstname", "first_name", "firstName"),
    "admin_lastname": ("lastname", "last_name", "lastName"),
}

ADDRESS_FIELDS = ("street_address", "city", "state", "country", "postal_code", "latitude", "longitude")
REQUIRED_ADMIN_FIELDS = ("admin_email", "admin_firstname", "admin_lastname")


class TenantCreationPayload(BaseModel):
    """Body of POST /mspCustomers."""

    name: str = Field(..., min_length=1)
    tenant_type: str
    service_effective_date: str
    service_expiration_date: str
    admin_email: str = Field(..., min_length=3)
    admin_firstname: str = Field(..., min_length=1)
    admin_lastname: str = Field(..., min_length=1)
    admin_role: str

    # Optional address, always strings on the wire
    street_address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    postal_code: Optional[str] = None
    latitude: Optional[str] = None
    longitude: Optional[str] = None

    licenses: Dict[str, Any] = Field(default_factory=dict)
    delegations: List[Any] = Field(default_factory=list)
    admin_delegations: List[Any] = Field(default_factory=list)

    @field_validator(*ADDRESS_FIELDS, mode="before")
    @classmethod
    def coerce_to_string(cls, v):
        """Address values may arrive as numbers (coordinates, zip codes)."""
        if v is None:
            return None
        return str(v)

    def to_body(self) -> Dict[str, Any]:
        """JSON body for the create call, without unset optional fields."""
        return self.model_dump(exclude_none=True)


def _pick(source: Dict[str, Any], keys) -> Any:
    for key in keys:
        value = source.get(key)
        if value is not None and value != "":
            return value
    return None


def _admin_source(record: Dict[str, Any]) -> Dict[str, Any]:
    """First nested admin object, if the record carries one."""
    admins = record.get("admins")
    if isinstance(admins, list) and admins and isinstance(admins[0], dict):
        return admins[0]
    admin = record.get("admin")
    if isinstance(admin, dict):
        return admin
    return {}


def _as_date_string(value: Any) -> str:
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def build_tenant_payload(
    record: Dict[str, Any],
    default_tenant_type: str = "MSP_EC",
    admin_role: str = "PRIME_ADMIN",
    service_term_days: int = 365,
    today: Optional[date] = None,
) -> TenantCreationPayload:
    """
    Build the creation payload for a tenant read from the source account.

    - tenant_type falls back to ``default_tenant_type``
    - service dates default to today and today + ``service_term_days`` (UTC)
    - admin_role is always ``admin_role``, whatever the source says
    - address fields are flattened from a nested ``address`` object and coerced to strings
    - licenses / delegations / admin_delegations pass through, defaulting to empty

    Raises
    ------
    ValidationError
        If the record is not an object or lacks a name or admin contact
    """
    if not isinstance(record, dict):
        raise ValidationError("Tenant record must be a JSON object")

    address = record.get("address") if isinstance(record.get("address"), dict) else {}
    admin = _admin_source(record)

    fields: Dict[str, Any] = {}
    for field, keys in _ALIASES.items():
        value = _pick(record, keys)
        if value is None and field in ADDRESS_FIELDS:
            value = _pick(address, keys)
        if value is None and field in _ADMIN_ALIASES:
            value = _pick(admin, _ADMIN_ALIASES[field])
        fields[field] = value

    if not fields["name"]:
        raise ValidationError("Tenant record is missing required field 'name'")
    for field in REQUIRED_ADMIN_FIELDS:
        if not fields[field]:
            raise ValidationError(f"Tenant record is missing required field '{field}'")

    effective = today or datetime.now(timezone.utc).date()
    if fields["service_effective_date"] is None:
        fields["service_effective_date"] = effective
    if fields["service_expiration_date"] is None:
        fields["service_expiration_date"] = effective + timedelta(days=service_term_days)
    fields["service_effective_date"] = _as_date_string(fields["service_effective_date"])
    fields["service_expiration_date"] = _as_date_string(fields["service_expiration_date"])

    fields["tenant_type"] = fields["tenant_type"] or default_tenant_type
    fields["admin_role"] = admin_role

    fields["licenses"] = record.get("licenses") or {}
    fields["delegations"] = record.get("delegations") or []
    fields["admin_delegations"] = record.get("admin_delegations") or record.get("adminDelegations") or []

    try:
        return TenantCreationPayload(**fields)
    except pydantic.ValidationError as e:
        raise ValidationError(f"Tenant record could not be mapped: {e}") from e
