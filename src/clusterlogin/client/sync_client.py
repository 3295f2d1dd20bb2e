"""Synchronous HTTP client for talking to a cluster.

This module provides :class:`SyncClient`, the blocking HTTP transport used by
the login flow. It wraps :class:`httpx.Client` and layers on:

- **Base URL handling** -- root-relative paths are resolved against the
  cluster URL; absolute URLs are sent as-is. :meth:`SyncClient.build_url`
  exposes the same resolution for URLs that are opened in a browser rather
  than requested.
- **Error mapping** -- HTTP error statuses and network failures are raised
  as :class:`~clusterlogin.exceptions.ClusterLoginError` subclasses.

Requests are never retried here; the login flow owns retry.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from clusterlogin.exceptions import AuthError, NotFoundError, ServerError, TransportError
from clusterlogin.models import RequestConfig

logger = logging.getLogger(__name__)


class SyncClient:
    """Synchronous HTTP client bound to one cluster.

    Must be used as a context manager so that the underlying transport is
    properly opened and closed.

    Args:
        base_url: The cluster's base address (e.g. ``https://cluster.example.com``).
        request_config: Timeout and TLS verification settings.
        transport: Optional :mod:`httpx` transport, mainly for tests
            (:class:`httpx.MockTransport`).

    Example::

        with SyncClient("https://cluster.example.com") as client:
            response = client.get("/acs/api/v1/auth/providers")
    """

    def __init__(
        self,
        base_url: str,
        request_config: Optional[RequestConfig] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._base_url = base_url
        self._config = request_config or RequestConfig()
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    @property
    def base_url(self) -> str:
        """The cluster base URL this client was created for."""
        return self._base_url

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> SyncClient:
        self._client = httpx.Client(
            base_url=self._base_url,
            timeout=self._config.timeout,
            verify=self._config.verify_ssl,
            follow_redirects=True,
            transport=self._transport,
        )
        return self

    def __exit__(self, *args: object) -> None:
        if self._client:
            self._client.close()
            self._client = None

    # ------------------------------------------------------------------ #
    # Public request methods
    # ------------------------------------------------------------------ #

    def request(
        self,
        method: str,
        path: str,
        headers: Optional[dict[str, str]] = None,
        json_body: Optional[Any] = None,
        reject_as_auth: bool = False,
    ) -> httpx.Response:
        """Send an HTTP request and map error statuses to exceptions.

        Args:
            method: HTTP method (GET, POST, ...).
            path: Root-relative path (joined to the base URL) or absolute URL.
            headers: Extra request headers.
            json_body: JSON-serialisable body.
            reject_as_auth: Treat every 4xx other than 404 as
                :class:`AuthError`. Used for login submissions, where a 400
                means the server refused the credentials.

        Returns:
            The :class:`httpx.Response` from the server.

        Raises:
            AuthError: On 401 / 403 (or any non-404 4xx with *reject_as_auth*).
            NotFoundError: On 404.
            ServerError: On 5xx and other 4xx.
            TransportError: On network / timeout errors.
        """
        assert self._client is not None, "Client not initialised -- use as context manager"

        merged_headers: dict[str, str] = {"Accept": "application/json"}
        merged_headers.update(headers or {})

        kwargs: dict[str, Any] = {
            "method": method,
            "url": path,
            "headers": merged_headers,
        }
        if json_body is not None:
            kwargs["json"] = json_body

        logger.debug("%s %s", method.upper(), path)
        try:
            response = self._client.request(**kwargs)
        except httpx.TransportError as exc:
            raise TransportError(f"Couldn't reach {self._base_url}: {exc}") from exc
        except httpx.InvalidURL as exc:
            raise TransportError(f"Invalid URL '{path}': {exc}") from exc

        self._map_response_error(response, reject_as_auth)
        return response

    def get(self, path: str, **kwargs: Any) -> httpx.Response:
        """Send a GET request.

        Args:
            path: Path relative to the base URL, or an absolute URL.
            **kwargs: Forwarded to :meth:`request`.
        """
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs: Any) -> httpx.Response:
        """Send a POST request.

        Args:
            path: Path relative to the base URL, or an absolute URL.
            **kwargs: Forwarded to :meth:`request`.
        """
        return self.request("POST", path, **kwargs)

    def build_url(self, path: str) -> str:
        """Return the absolute URL a request to *path* would be sent to."""
        assert self._client is not None, "Client not initialised -- use as context manager"
        return str(self._client.build_request("GET", path).url)

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _map_response_error(self, response: httpx.Response, reject_as_auth: bool) -> None:
        """Raise a typed exception for error HTTP status codes."""
        status = response.status_code
        if status < 400:
            return

        try:
            detail = response.json()
            if isinstance(detail, dict):
                msg = (
                    detail.get("description")
                    or detail.get("message")
                    or detail.get("error")
                    or detail.get("detail")
                    or detail.get("title")
                    or ""
                )
            else:
                msg = str(detail)
        except ValueError:
            msg = response.text[:200] if response.text else ""

        prefix = f"HTTP {status}"
        full_msg = f"{prefix}: {msg}" if msg else prefix

        if status in (401, 403):
            raise AuthError(full_msg)
        if status == 404:
            raise NotFoundError(full_msg)
        if status < 500 and reject_as_auth:
            raise AuthError(full_msg)
        raise ServerError(full_msg)
