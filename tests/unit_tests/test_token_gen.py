"""Unit tests for rks_auth/token_gen.py."""

from unittest.mock import patch

import pytest
import requests

from msp_migrate.errors import CredentialsError
from msp_migrate.errors import ValidationError
from msp_migrate.rks_auth.token_gen import check_credential_format
from msp_migrate.rks_auth.token_gen import fetch_token
from msp_migrate.rks_auth.token_gen import get_token_response
from msp_migrate.rks_auth.token_gen import validate_credentials
from tests.consts import CLIENT_ID
from tests.consts import CLIENT_SECRET
from tests.consts import SOURCE_TENANT_ID
from tests.fixtures.http_fixtures import make_response


class TestFetchToken:
    """Tests for the client-credentials token exchange."""

    @patch("msp_migrate.rks_auth.token_gen.requests.post")
    def test_fetch_token_success(self, mock_post):
        mock_post.return_value = make_response(200, {"access_token": "abc123", "expires_in": 7200})

        token = fetch_token(SOURCE_TENANT_ID, CLIENT_ID, CLIENT_SECRET, "Europe")

        assert token == "abc123"
        mock_post.assert_called_once()
        args, kwargs = mock_post.call_args
        assert args[0] == f"https://eu.ruckus.cloud/oauth2/token/{SOURCE_TENANT_ID}"
        assert kwargs["headers"] == {"Content-Type": "application/x-www-form-urlencoded"}
        assert kwargs["data"] == {
            "grant_type": "client_credentials",
            "client_id": CLIENT_ID,
            "client_secret": CLIENT_SECRET,
        }

    @patch("msp_migrate.rks_auth.token_gen.requests.post")
    def test_north_america_uses_root_domain(self, mock_post):
        mock_post.return_value = make_response(200, {"access_token": "abc123"})

        fetch_token(SOURCE_TENANT_ID, CLIENT_ID, CLIENT_SECRET, "North America")

        assert mock_post.call_args[0][0] == f"https://ruckus.cloud/oauth2/token/{SOURCE_TENANT_ID}"

    @patch("msp_migrate.rks_auth.token_gen.requests.post")
    def test_token_response_expiry(self, mock_post):
        mock_post.return_value = make_response(200, {"access_token": "abc123", "expires_in": 60})

        token = get_token_response(SOURCE_TENANT_ID, CLIENT_ID, CLIENT_SECRET, "Asia")

        assert token.expires_in == 60
        assert token.token_type == "Bearer"
        assert token.expires_at.tzinfo is not None

    @pytest.mark.parametrize(
        "response",
        [
            make_response(401, {"error": "invalid_client"}),
            make_response(500, text="upstream exploded"),
            make_response(200, {"token_type": "Bearer"}),
            make_response(200, text="<html>not json</html>"),
        ],
    )
    @patch("msp_migrate.rks_auth.token_gen.requests.post")
    def test_any_failure_is_credentials_error(self, mock_post, response):
        mock_post.return_value = response

        with pytest.raises(CredentialsError) as exc_info:
            fetch_token(SOURCE_TENANT_ID, CLIENT_ID, CLIENT_SECRET, "Europe")

        assert exc_info.value.message == "Failed to fetch token. Please check your credentials."

    @patch("msp_migrate.rks_auth.token_gen.requests.post")
    def test_network_error_is_credentials_error(self, mock_post):
        mock_post.side_effect = requests.exceptions.ConnectionError("DNS failure")

        with pytest.raises(CredentialsError):
            fetch_token(SOURCE_TENANT_ID, CLIENT_ID, CLIENT_SECRET, "Europe")


class TestValidateCredentials:
    """Tests for local credential checks."""

    @pytest.mark.parametrize(
        "tenant_id,client_id,client_secret,expected",
        [
            ("short", CLIENT_ID, CLIENT_SECRET, "Invalid Tenant ID format"),
            (SOURCE_TENANT_ID, "", CLIENT_SECRET, "Invalid Client ID format"),
            (SOURCE_TENANT_ID, CLIENT_ID, "x" * 31, "Invalid Client Secret format"),
        ],
    )
    def test_short_credentials_rejected(self, tenant_id, client_id, client_secret, expected):
        with pytest.raises(ValidationError) as exc_info:
            check_credential_format(tenant_id, client_id, client_secret)

        assert exc_info.value.message == expected

    @patch("msp_migrate.rks_auth.token_gen.requests.post")
    def test_malformed_credentials_skip_network(self, mock_post):
        with pytest.raises(ValidationError):
            validate_credentials("short", CLIENT_ID, CLIENT_SECRET, "Europe")

        mock_post.assert_not_called()

    @patch("msp_migrate.rks_auth.token_gen.requests.post")
    def test_valid_credentials_return_token(self, mock_post):
        mock_post.return_value = make_response(200, {"access_token": "abc123"})

        assert validate_credentials(SOURCE_TENANT_ID, CLIENT_ID, CLIENT_SECRET, "Europe") == "abc123"
