"""Minimal JSON client facade for tracker REST APIs.

An ApiClient is bound to an API base URL derived from the page being
scanned and exposes a single ``get`` operation returning parsed JSON.

HTTP Client Sharing:
    Hosts scanning many pages may inject a shared ``httpx.AsyncClient`` for
    connection pooling. Without one, a short-lived client is created for
    each request inside ``async with``, so callers carry no cleanup
    obligations and cancelling the awaiting task cancels the request.

Error Mapping:
    HTTP 404 -> TicketNotFoundError
    Other non-2xx -> TrackerApiError
    Transport failures and timeouts -> TrackerConnectionError
    Malformed JSON -> TrackerResponseParseError
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, TypedDict

import httpx

from ticketeer.config.fetch_config import FetchPerformanceConfig
from ticketeer.integrations.exceptions import (
    TicketNotFoundError,
    TrackerApiError,
    TrackerConnectionError,
    TrackerResponseParseError,
)

logger = logging.getLogger(__name__)

# HTTP status code for Not Found
HTTP_NOT_FOUND = 404

# Maximum length for error response body in exception messages
# Prevents PII leakage and huge HTML payloads in logs
MAX_ERROR_BODY_LENGTH = 200

DEFAULT_HEADERS: Mapping[str, str] = {"Accept": "application/json"}


class RequestOptions(TypedDict, total=False):
    """Per-request options for ApiClient.get.

    Attributes:
        search_params: Query string parameters (e.g., a field-selection directive)
        timeout_seconds: Per-request timeout override
    """

    search_params: Mapping[str, str]
    timeout_seconds: float


class ApiClient:
    """JSON GET client bound to a tracker API base URL.

    Attributes:
        base_url: API root every request path is resolved against
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout_seconds: float | None = None,
        headers: Mapping[str, str] | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: API root (e.g., "https://acme.youtrack.cloud/api")
            timeout_seconds: Default request timeout; read from the
                environment via FetchPerformanceConfig when omitted
            headers: Extra headers merged over the JSON Accept header
            http_client: Optional shared HTTP client
        """
        self.base_url = base_url.rstrip("/")
        if timeout_seconds is None:
            timeout_seconds = FetchPerformanceConfig.from_env().timeout_seconds
        self._timeout_seconds = timeout_seconds
        self._headers = {**DEFAULT_HEADERS, **(headers or {})}
        self._http_client = http_client

    def url_for(self, path: str) -> str:
        """Resolve a resource path against the base URL."""
        return f"{self.base_url}/{path.lstrip('/')}"

    async def get(self, path: str, options: RequestOptions | None = None) -> Any:
        """Fetch a resource and return its decoded JSON body.

        Args:
            path: Resource path relative to the base URL (e.g., "issues/TT-1")
            options: Optional query parameters and timeout override

        Returns:
            Decoded JSON payload

        Raises:
            TicketNotFoundError: If the API answers 404
            TrackerApiError: For any other non-success status
            TrackerConnectionError: For transport failures and timeouts
            TrackerResponseParseError: If the body is not valid JSON
        """
        options = options or {}
        url = self.url_for(path)
        params = dict(options.get("search_params", {}))
        timeout = httpx.Timeout(options.get("timeout_seconds", self._timeout_seconds))

        logger.debug("GET %s params=%s", url, params)

        try:
            if self._http_client is not None:
                response = await self._http_client.get(
                    url, params=params, headers=self._headers, timeout=timeout
                )
            else:
                async with httpx.AsyncClient(timeout=timeout) as client:
                    response = await client.get(url, params=params, headers=self._headers)
        except httpx.TimeoutException as e:
            raise TrackerConnectionError(f"Request to {url} timed out: {e}") from e
        except httpx.HTTPError as e:
            raise TrackerConnectionError(f"Request to {url} failed: {e}") from e

        self._check_status(response, url, path)

        try:
            return response.json()
        except (json.JSONDecodeError, ValueError) as e:
            raise TrackerResponseParseError(f"Invalid JSON in response from {url}: {e}") from e

    def _check_status(self, response: httpx.Response, url: str, path: str) -> None:
        """Raise the matching tracker exception for non-success responses."""
        if response.status_code == HTTP_NOT_FOUND:
            resource = path.rstrip("/").rsplit("/", 1)[-1]
            raise TicketNotFoundError(ticket_id=resource, url=url)

        if not response.is_success:
            body = response.text[:MAX_ERROR_BODY_LENGTH]
            raise TrackerApiError(
                f"GET {url} failed with HTTP {response.status_code}: {body}",
                status_code=response.status_code,
                url=url,
            )


def create_client(base_url: str, **kwargs: Any) -> ApiClient:
    """Create an ApiClient bound to ``base_url``.

    Adapters construct their clients through this factory so hosts and
    tests can substitute it at the call site.
    """
    return ApiClient(base_url, **kwargs)


__all__ = [
    "ApiClient",
    "DEFAULT_HEADERS",
    "MAX_ERROR_BODY_LENGTH",
    "RequestOptions",
    "create_client",
]
