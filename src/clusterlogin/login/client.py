"""Client for the cluster's authentication service (ACS).

Two calls make up the login protocol:

* ``GET /acs/api/v1/auth/providers`` -- the provider catalog.
* ``POST <start-flow URL or /acs/api/v1/auth/login>`` -- submit credentials,
  receive ``{"token": "<access token>"}``.
"""

from __future__ import annotations

import logging
from typing import Optional

from pydantic import ValidationError

from clusterlogin.client.sync_client import SyncClient
from clusterlogin.exceptions import (
    AuthError,
    NotFoundError,
    ServerError,
    TransportError,
)
from clusterlogin.models import Credentials, Providers

logger = logging.getLogger(__name__)

PROVIDERS_PATH = "/acs/api/v1/auth/providers"
LOGIN_PATH = "/acs/api/v1/auth/login"


class LoginClient:
    """Talk to the authentication service through a :class:`SyncClient`.

    Args:
        http: An open client bound to the cluster URL.
    """

    def __init__(self, http: SyncClient) -> None:
        self.http = http

    def providers(self) -> Providers:
        """Fetch the login providers available on the cluster.

        Returns:
            The provider catalog.

        Raises:
            TransportError: If the request fails or the response does not
                decode into the provider schema.
        """
        try:
            response = self.http.get(PROVIDERS_PATH)
        except (AuthError, NotFoundError, ServerError) as exc:
            raise TransportError(f"Couldn't fetch login providers: {exc}") from exc

        try:
            return Providers.model_validate(response.json())
        except ValueError as exc:
            # ValidationError is a ValueError; so is a JSON decoding error.
            reason = _summarize(exc)
            raise TransportError(f"Couldn't decode login providers: {reason}") from exc

    def login(self, endpoint: Optional[str], credentials: Credentials) -> str:
        """Submit *credentials* and return the access token.

        Args:
            endpoint: The provider's start-flow URL, or ``None``/empty for the
                default login endpoint.
            credentials: The credentials to POST as JSON.

        Returns:
            The access token, exactly as returned by the cluster.

        Raises:
            AuthError: If the cluster rejects the credentials.
            TransportError: If the response carries no token.
        """
        url = endpoint or LOGIN_PATH
        logger.debug("Submitting %s to %s", sorted(credentials.to_payload()), url)

        try:
            response = self.http.post(url, json_body=credentials.to_payload(), reject_as_auth=True)
        except AuthError as exc:
            raise AuthError(f"Authentication failed: {exc}") from exc

        try:
            data = response.json()
        except ValueError as exc:
            raise TransportError(f"Couldn't decode login response: {exc}") from exc

        token = data.get("token") if isinstance(data, dict) else None
        if not token:
            raise TransportError("Login response is missing the 'token' field")
        return token


def _summarize(exc: ValueError) -> str:
    if isinstance(exc, ValidationError):
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        return f"{location}: {first['msg']}" if location else first["msg"]
    return str(exc)
