"""Unit tests for models/venues.py."""

from msp_migrate.models.venues import DEFAULT_VENUE_FIELDS
from msp_migrate.models.venues import VenuesQuery
from msp_migrate.models.venues import VenuesQueryResponse
from msp_migrate.models.venues import build_venues_query


def test_default_body():
    body = VenuesQuery().to_body()

    assert body == {
        "fields": DEFAULT_VENUE_FIELDS,
        "searchTargetFields": ["name", "addressLine"],
        "filters": {},
        "sortField": "name",
        "sortOrder": "ASC",
        "page": 1,
        "pageSize": 10,
        "defaultPageSize": 10,
        "total": 0,
    }


def test_partial_override_only_changes_that_key():
    default = VenuesQuery().to_body()

    merged = build_venues_query({"page": 2}).to_body()

    assert merged["page"] == 2
    assert {k: v for k, v in merged.items() if k != "page"} == {k: v for k, v in default.items() if k != "page"}


def test_override_by_field_name_or_wire_name():
    assert build_venues_query({"page_size": 50}).page_size == 50
    assert build_venues_query({"pageSize": 25}).page_size == 25


def test_nested_values_replace():
    query = build_venues_query({"filters": {"country": ["Ireland"]}, "sortOrder": "DESC"})

    assert query.filters == {"country": ["Ireland"]}
    assert query.to_body()["sortOrder"] == "DESC"


def test_default_fields_not_shared_between_queries():
    first = VenuesQuery()
    first.fields.append("extra")

    assert "extra" not in VenuesQuery().fields


class TestVenuesQueryResponse:
    """Tests for parsing the platform response."""

    def test_last_page(self):
        query = build_venues_query({"page": 3, "pageSize": 10})

        response = VenuesQueryResponse.from_api({"data": [{"id": "v"}] * 5, "totalCount": 25}, query)

        assert response.total_count == 25
        assert response.has_more is False

    def test_missing_total_uses_data_length(self):
        response = VenuesQueryResponse.from_api({"data": [{"id": "v1"}]}, VenuesQuery())

        assert response.total_count == 1
        assert response.has_more is False
