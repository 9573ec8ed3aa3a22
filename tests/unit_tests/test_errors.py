"""Tests for the error taxonomy and its HTTP rendering."""

import json
from unittest.mock import MagicMock

import pytest

from msp_migrate.enums import ErrorKind
from msp_migrate.errors import AccountNotFoundError
from msp_migrate.errors import ApiError
from msp_migrate.errors import CredentialsError
from msp_migrate.errors import ForbiddenError
from msp_migrate.errors import InvalidRegionError
from msp_migrate.errors import MigrationToolError
from msp_migrate.errors import NotFoundError
from msp_migrate.errors import ServerError
from msp_migrate.errors import TransportError
from msp_migrate.errors import UnauthorizedError
from msp_migrate.errors import ValidationError
from msp_migrate.errors import handle_broad_exceptions
from msp_migrate.errors import handle_migration_errors


def _request():
    request = MagicMock()
    request.method = "POST"
    request.url.path = "/api/migrations"
    return request


class TestErrorTypes:
    """Tests for MigrationToolError subclasses."""

    def test_all_share_base_class(self):
        for error in (
            InvalidRegionError("x"),
            CredentialsError(),
            ValidationError("x"),
            AccountNotFoundError("a"),
            ApiError("x"),
            TransportError("x"),
        ):
            assert isinstance(error, MigrationToolError)

    def test_str_is_message(self):
        assert str(AccountNotFoundError("msp-1-a")) == "MSP account 'msp-1-a' not found"

    def test_http_errors_are_api_errors(self):
        for cls in (UnauthorizedError, ForbiddenError, NotFoundError, ServerError):
            assert issubclass(cls, ApiError)


class TestHandleMigrationErrors:
    """Tests for the FastAPI handler that renders MigrationToolError."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error,status_code,error_type",
        [
            (InvalidRegionError("Invalid region selected: 'Mars'"), 400, "invalid_region"),
            (ValidationError("Invalid Tenant ID format"), 400, "validation"),
            (CredentialsError(), 401, "credentials"),
            (AccountNotFoundError("msp-1-a"), 404, "account_not_found"),
            (UnauthorizedError("x", status_code=401), 401, "unauthorized"),
            (ForbiddenError("x", status_code=403), 403, "forbidden"),
            (NotFoundError("x", status_code=404), 404, "not_found"),
            (ServerError("x", status_code=500), 502, "server"),
            (ApiError("x", status_code=409), 502, "http"),
            (TransportError("x"), 503, "transport"),
        ],
    )
    async def test_status_mapping(self, error, status_code, error_type):
        response = await handle_migration_errors(_request(), error)

        assert response.status_code == status_code
        body = json.loads(response.body)
        assert body["error_type"] == error_type
        assert body["detail"] == error.message

    @pytest.mark.asyncio
    async def test_upstream_status_included(self):
        response = await handle_migration_errors(_request(), ServerError("x", status_code=503))

        assert json.loads(response.body)["upstream_status"] == 503

    @pytest.mark.asyncio
    async def test_local_errors_have_no_upstream_status(self):
        response = await handle_migration_errors(_request(), ValidationError("x"))

        assert json.loads(response.body)["upstream_status"] is None


class TestHandleBroadExceptions:
    """Tests for the catch-all middleware."""

    @pytest.mark.asyncio
    async def test_unhandled_exception_returns_500(self):
        async def call_next(request):
            raise RuntimeError("boom")

        response = await handle_broad_exceptions(_request(), call_next)

        assert response.status_code == 500
        assert json.loads(response.body) == {"detail": "Internal server error", "error_type": "RuntimeError"}

    @pytest.mark.asyncio
    async def test_passes_through_response(self):
        sentinel = MagicMock()

        async def call_next(request):
            return sentinel

        assert await handle_broad_exceptions(_request(), call_next) is sentinel
