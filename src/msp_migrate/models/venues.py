"""
Venue Query Models

Request descriptor for POST /venues/query and its parsed response.
"""

from typing import Any
from typing import Dict
from typing import List
from typing import Optional

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic.alias_generators import to_camel

from msp_migrate.enums import SortOrder

DEFAULT_VENUE_FIELDS = [
    "id",
    "name",
    "country",
    "city",
    "addressLine",
    "status",
    "clients",
    "aggregatedApDeviceStatus",
]


class VenuesQuery(BaseModel):
    """Venue query body. Serialized with camelCase keys (``searchTargetFields``, ``pageSize``...)."""

    fields: List[str] = Field(default_factory=lambda: list(DEFAULT_VENUE_FIELDS))
    search_target_fields: List[str] = Field(default_factory=lambda: ["name", "addressLine"])
    filters: Dict[str, Any] = Field(default_factory=dict)
    sort_field: str = "name"
    sort_order: SortOrder = SortOrder.ASC
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=10, ge=1)
    default_page_size: int = Field(default=10, ge=1)
    total: int = Field(default=0, ge=0)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_body(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


def build_venues_query(overrides: Optional[Dict[str, Any]] = None) -> VenuesQuery:
    """
    Shallow-merge ``overrides`` over the default query.

    Keys may be field names (``page_size``) or wire names (``pageSize``). Only the
    overridden keys change; nested values replace, they are not merged.
    """
    body = VenuesQuery().to_body()
    for key, value in (overrides or {}).items():
        field = VenuesQuery.model_fields.get(key)
        body[field.alias if field and field.alias else key] = value
    return VenuesQuery.model_validate(body)


class VenuesQueryResponse(BaseModel):
    """Parsed venue query result."""

    data: List[Dict[str, Any]] = Field(default_factory=list)
    total_count: int = 0
    has_more: bool = False

    @classmethod
    def from_api(cls, body: Dict[str, Any], query: VenuesQuery) -> "VenuesQueryResponse":
        """Build from the platform response (``{"data": [...], "totalCount": n}``)."""
        data = body.get("data") or []
        total_count = body.get("totalCount", body.get("total_count", len(data)))
        return cls(
            data=data,
            total_count=total_count,
            has_more=query.page * query.page_size < int(total_count),
        )
