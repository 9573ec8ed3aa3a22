"""
Platform Resource Client

Narrow wrappers over the platform endpoints the migration needs. Each call is a
single HTTP exchange whose outcome is classified here, once, into the error
taxonomy in msp_migrate.errors. Callers never inspect message text.
"""

import json
from typing import Any
from typing import Dict
from typing import Optional

import pydantic
import requests
from loguru import logger
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from msp_migrate.errors import ApiError
from msp_migrate.errors import ForbiddenError
from msp_migrate.errors import NotFoundError
from msp_migrate.errors import ServerError
from msp_migrate.errors import TransportError
from msp_migrate.errors import UnauthorizedError
from msp_migrate.models.tenant import TenantCreationPayload
from msp_migrate.models.venues import VenuesQuery
from msp_migrate.models.venues import VenuesQueryResponse
from msp_migrate.models.venues import build_venues_query

ACTING_TENANT_HEADER = "x-rks-tenantid"
ACTING_TENANT_HINT = (
    f" Check that the {ACTING_TENANT_HEADER} header carries the tenant id of the account"
    " whose token was used, not the id of the tenant being queried."
)
RETRY_STATUSES = (429, 502, 503, 504)


def error_for_status(status_code: int, body: str, operation: str, acting_tenant: bool = False) -> ApiError:
    """
    Build the typed error for a non-2xx response.

    Parameters
    ----------
    status_code : int
        HTTP status returned by the platform
    body : str
        Raw response text, kept for diagnostics
    operation : str
        Name of the client operation (get_tenant, query_venues...)
    acting_tenant : bool
        True for calls that send the acting-tenant header; adds a hint to 403 messages
    """
    if status_code == 401:
        return UnauthorizedError(
            f"HTTP 401 from {operation}: the access token is invalid or expired. Fetch a new token and retry.",
            status_code=status_code,
            body=body,
            operation=operation,
        )
    if status_code == 403:
        message = f"HTTP 403 from {operation}: access denied."
        if acting_tenant:
            message += ACTING_TENANT_HINT
        return ForbiddenError(message, status_code=status_code, body=body, operation=operation)
    if status_code == 404:
        return NotFoundError(
            f"HTTP 404 from {operation}: resource or endpoint not found. Check the tenant id and region.",
            status_code=status_code,
            body=body,
            operation=operation,
        )
    if status_code >= 500:
        return ServerError(
            f"HTTP {status_code} from {operation}: the platform failed to process the request. Try again later.",
            status_code=status_code,
            body=body,
            operation=operation,
        )
    return ApiError(
        f"HTTP {status_code} from {operation}: the platform rejected the request.",
        status_code=status_code,
        body=body,
        operation=operation,
    )


def build_session(max_retries: int, backoff_factor: float, retry_status: bool) -> requests.Session:
    """
    Session with a bounded retry policy.

    Connection errors are always retried (the request never reached the server).
    Status based retries are only enabled for idempotent reads.
    """
    retry_strategy = Retry(
        total=max_retries,
        connect=max_retries,
        read=max_retries if retry_status else 0,
        status=max_retries if retry_status else 0,
        backoff_factor=backoff_factor,
        status_forcelist=RETRY_STATUSES if retry_status else (),
        allowed_methods=["GET", "POST"] if retry_status else ["GET"],
        raise_on_status=False,
    )
    session = requests.Session()
    adapter = HTTPAdapter(max_retries=retry_strategy)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session


class ResourceClient:
    """
    Client for the tenant, venue and device endpoints of the platform.

    Reads (tenant lookups and the query POSTs) go through a session that retries
    transient statuses. Tenant creation goes through a session that only retries
    connection failures, so a customer is never created twice.

    Usage:
        client = ResourceClient(timeout=30, max_retries=3)
        tenant = client.get_tenant("https://api.eu.ruckus.cloud", tenant_id, token)
    """

    DEFAULT_TIMEOUT = 30  # seconds

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = 3,
        backoff_factor: float = 0.5,
        session: Optional[requests.Session] = None,
        write_session: Optional[requests.Session] = None,
    ):
        """
        Initialize the client.

        Args:
            timeout: Request timeout in seconds
            max_retries: Maximum number of retry attempts for transient failures
            backoff_factor: Exponential backoff factor between retries
            session: Session for reads (built with the retry policy when omitted)
            write_session: Session for writes (defaults to ``session`` when that is given)
        """
        self.timeout = timeout
        self._session = session or build_session(max_retries, backoff_factor, retry_status=True)
        self._write_session = write_session or session or build_session(max_retries, backoff_factor, retry_status=False)

    def _request(
        self,
        session: requests.Session,
        method: str,
        url: str,
        operation: str,
        headers: Dict[str, str],
        body: Optional[Dict[str, Any]] = None,
        acting_tenant: bool = False,
    ) -> Any:
        """Perform one exchange and return the parsed JSON body, or raise a typed error."""
        logger.debug("Platform request", operation=operation, method=method, url=url)
        try:
            response = session.request(method, url, headers=headers, json=body, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.warning("Platform request did not complete", operation=operation, url=url, error=str(e))
            raise TransportError(
                f"{operation} could not reach the platform ({type(e).__name__}). Check your network connection.",
                operation=operation,
            ) from e

        text = response.text or ""
        if not 200 <= response.status_code < 300:
            logger.warning(
                "Platform request failed",
                operation=operation,
                url=url,
                status_code=response.status_code,
                body=text[:500],
            )
            raise error_for_status(response.status_code, text, operation, acting_tenant=acting_tenant)

        if not text.strip():
            return {}
        try:
            return response.json()
        except (json.JSONDecodeError, ValueError) as e:
            raise ApiError(
                f"{operation} returned a response that is not valid JSON.",
                status_code=response.status_code,
                body=text,
                operation=operation,
            ) from e

    @staticmethod
    def _auth_headers(token: str, acting_tenant_id: Optional[str] = None) -> Dict[str, str]:
        headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/json",
        }
        if acting_tenant_id:
            headers[ACTING_TENANT_HEADER] = acting_tenant_id
        return headers

    def get_tenant(self, api_base: str, tenant_id: str, token: str) -> Dict[str, Any]:
        """GET {api}/tenants/{tenant_id}."""
        return self._request(
            self._session,
            "GET",
            f"{api_base}/tenants/{tenant_id}",
            operation="get_tenant",
            headers=self._auth_headers(token),
        )

    def query_venues(
        self,
        api_base: str,
        acting_tenant_id: str,
        token: str,
        query: Optional[Any] = None,
    ) -> VenuesQueryResponse:
        """
        POST {api}/venues/query.

        ``acting_tenant_id`` must be the tenant id of the account that issued
        ``token``, otherwise the platform answers 403. ``query`` is either a
        VenuesQuery or a dict of overrides merged over the default query.
        """
        if not isinstance(query, VenuesQuery):
            query = build_venues_query(query)
        body = self._request(
            self._session,
            "POST",
            f"{api_base}/venues/query",
            operation="query_venues",
            headers={**self._auth_headers(token, acting_tenant_id), "Content-Type": "application/json"},
            body=query.to_body(),
            acting_tenant=True,
        )
        try:
            if not isinstance(body, dict):
                raise TypeError(f"expected a JSON object, got {type(body).__name__}")
            return VenuesQueryResponse.from_api(body, query)
        except (TypeError, ValueError, pydantic.ValidationError) as e:
            logger.warning("Venue query response could not be parsed", operation="query_venues", error=str(e))
            raise ApiError(
                "query_venues returned a response in an unexpected format.",
                status_code=200,
                body=json.dumps(body, default=str),
                operation="query_venues",
            ) from e

    def query_wifi_networks(
        self,
        api_base: str,
        acting_tenant_id: str,
        token: str,
        query: Dict[str, Any],
    ) -> Dict[str, Any]:
        """POST {api}/wifiNetworks/query. Same acting-tenant contract as query_venues."""
        return self._request(
            self._session,
            "POST",
            f"{api_base}/wifiNetworks/query",
            operation="query_wifi_networks",
            headers={**self._auth_headers(token, acting_tenant_id), "Content-Type": "application/json"},
            body=query,
            acting_tenant=True,
        )

    def query_aps(
        self,
        api_base: str,
        acting_tenant_id: str,
        token: str,
        query: Dict[str, Any],
    ) -> Dict[str, Any]:
        """POST {api}/venues/aps/query. Same acting-tenant contract as query_venues."""
        return self._request(
            self._session,
            "POST",
            f"{api_base}/venues/aps/query",
            operation="query_aps",
            headers={**self._auth_headers(token, acting_tenant_id), "Content-Type": "application/json"},
            body=query,
            acting_tenant=True,
        )

    def put_tenant(
        self,
        api_base: str,
        target_account_tenant_id: str,
        token: str,
        payload: Any,
    ) -> Dict[str, Any]:
        """
        POST {api}/mspCustomers, creating (or updating) a customer tenant.

        ``token`` must belong to the target account identified by
        ``target_account_tenant_id``. The body is the flat payload, no wrapper.
        """
        body = payload.to_body() if isinstance(payload, TenantCreationPayload) else payload
        logger.info(
            "Creating tenant under target account",
            target_account_tenant_id=target_account_tenant_id,
            tenant_name=body.get("name") if isinstance(body, dict) else None,
        )
        return self._request(
            self._write_session,
            "POST",
            f"{api_base}/mspCustomers",
            operation="put_tenant",
            headers={**self._auth_headers(token), "Content-Type": "application/json"},
            body=body,
        )
