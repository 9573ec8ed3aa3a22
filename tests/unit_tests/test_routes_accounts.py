"""Tests for account and region endpoints."""

import json
from unittest.mock import patch

from fastapi.testclient import TestClient

from msp_migrate.errors import CredentialsError
from tests.consts import API_BASE
from tests.consts import CLIENT_ID
from tests.consts import CLIENT_SECRET
from tests.consts import SOURCE_TENANT_ID
from tests.consts import TARGET_TENANT_ID
from tests.fixtures.http_fixtures import make_response


def _account_body(tenant_id=SOURCE_TENANT_ID, region="Europe"):
    return {"tenant_id": tenant_id, "client_id": CLIENT_ID, "client_secret": CLIENT_SECRET, "region": region}


class TestRegions:
    """Tests for GET /regions."""

    def test_region_table(self, client):
        response = client.get(f"{API_BASE}/regions")

        assert response.status_code == 200
        rows = {row["region"]: row for row in response.json()}
        assert rows["Europe"]["api_base"] == "https://api.eu.ruckus.cloud"
        assert rows["North America"]["auth_base"] == "https://ruckus.cloud"


class TestAddAccount:
    """Tests for POST /accounts."""

    def test_add_account(self, client, mock_settings):
        response = client.post(f"{API_BASE}/accounts", json=_account_body())

        assert response.status_code == 201
        data = response.json()
        assert data["tenant_id"] == SOURCE_TENANT_ID
        assert data["region"] == "Europe"
        assert data["has_session_token"] is True
        assert "client_secret" not in data

        saved = json.loads(mock_settings.accounts_file.read_text(encoding="utf-8"))
        assert saved[0]["id"] == data["id"]

    def test_short_tenant_id(self, client, token_fetcher):
        response = client.post(f"{API_BASE}/accounts", json=_account_body(tenant_id="abc"))

        assert response.status_code == 400
        assert response.json() == {
            "detail": "Invalid Tenant ID format",
            "error_type": "validation",
            "upstream_status": None,
        }
        token_fetcher.assert_not_called()

    def test_missing_region(self, client):
        body = _account_body()
        del body["region"]

        response = client.post(f"{API_BASE}/accounts", json=body)

        assert response.status_code == 400
        assert response.json()["error_type"] == "invalid_region"

    def test_rejected_credentials(self, client, token_fetcher, mock_settings):
        token_fetcher.side_effect = CredentialsError()

        response = client.post(f"{API_BASE}/accounts", json=_account_body())

        assert response.status_code == 401
        assert response.json()["detail"] == "Failed to fetch token. Please check your credentials."
        assert not mock_settings.accounts_file.exists()

    def test_missing_field_is_422(self, client):
        response = client.post(f"{API_BASE}/accounts", json={"tenant_id": SOURCE_TENANT_ID})

        assert response.status_code == 422


class TestListAndDelete:
    """Tests for GET /accounts and DELETE /accounts/{id}."""

    def test_list_filters_by_region(self, client):
        client.post(f"{API_BASE}/accounts", json=_account_body())
        client.post(f"{API_BASE}/accounts", json=_account_body(tenant_id=TARGET_TENANT_ID, region="Asia"))

        response = client.get(f"{API_BASE}/accounts", params={"region": "Asia"})

        assert response.status_code == 200
        accounts = response.json()["Account"]
        assert [a["tenant_id"] for a in accounts] == [TARGET_TENANT_ID]

    def test_list_empty(self, client):
        response = client.get(f"{API_BASE}/accounts")

        assert response.status_code == 200
        assert response.json() == {"Message": "No accounts saved", "Account": []}

    def test_list_unknown_region(self, client):
        response = client.get(f"{API_BASE}/accounts", params={"region": "Mars"})

        assert response.status_code == 400

    def test_delete(self, client):
        account_id = client.post(f"{API_BASE}/accounts", json=_account_body()).json()["id"]

        response = client.delete(f"{API_BASE}/accounts/{account_id}")

        assert response.status_code == 200
        assert response.json()["deleted"] is True
        assert client.get(f"{API_BASE}/accounts").json()["Account"] == []

    def test_delete_unknown(self, client):
        response = client.delete(f"{API_BASE}/accounts/msp-0-missing")

        assert response.status_code == 404


class TestValidate:
    """Tests for POST /accounts/validate."""

    @patch("msp_migrate.rks_auth.token_gen.requests.post")
    def test_valid(self, mock_post, client, mock_settings):
        mock_post.return_value = make_response(200, {"access_token": "abc123"})

        response = client.post(f"{API_BASE}/accounts/validate", json=_account_body())

        assert response.status_code == 200
        assert response.json() == {"valid": True, "message": "Credentials are valid"}
        assert not mock_settings.accounts_file.exists()

    @patch("msp_migrate.rks_auth.token_gen.requests.post")
    def test_uses_configured_domain_and_timeout(self, mock_post, tmp_path):
        from msp_migrate.main import create_app
        from msp_migrate.settings import Settings

        settings = Settings(
            accounts_file=tmp_path / "accounts.json",
            log_level="WARNING",
            platform_domain="staging.example.net",
            request_timeout=7.5,
        )
        mock_post.return_value = make_response(200, {"access_token": "abc123"})

        with TestClient(create_app(settings=settings)) as test_client:
            response = test_client.post(f"{API_BASE}/accounts/validate", json=_account_body())

        assert response.status_code == 200
        args, kwargs = mock_post.call_args
        assert args[0] == f"https://eu.staging.example.net/oauth2/token/{SOURCE_TENANT_ID}"
        assert kwargs["timeout"] == 7.5

    @patch("msp_migrate.rks_auth.token_gen.requests.post")
    def test_rejected(self, mock_post, client):
        mock_post.return_value = make_response(401, {"error": "invalid_client"})

        response = client.post(f"{API_BASE}/accounts/validate", json=_account_body())

        assert response.status_code == 401
        assert response.json()["error_type"] == "credentials"

    @patch("msp_migrate.rks_auth.token_gen.requests.post")
    def test_malformed_credentials_skip_token_exchange(self, mock_post, client):
        response = client.post(f"{API_BASE}/accounts/validate", json=_account_body(tenant_id="short"))

        assert response.status_code == 400
        mock_post.assert_not_called()
