"""Service account login tokens.

Service accounts log in without a password: the CLI signs a short-lived JWT
with the account's RSA private key and submits it as the login token. The
cluster verifies it against the public key registered for the account.

Token format::

    header  {"alg": "RS256", "typ": "JWT"}
    payload {"uid": "<service account uid>", "exp": <unix seconds>}
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization

from clusterlogin.exceptions import SigningError

logger = logging.getLogger(__name__)

SERVICE_TOKEN_ALGORITHM = "RS256"

SERVICE_TOKEN_LIFETIME = timedelta(minutes=5)
"""How long a service login token stays valid. Not configurable."""


def issue_service_token(
    uid: str,
    private_key: Optional[str],
    now: Optional[datetime] = None,
) -> str:
    """Sign a service login token for *uid*.

    Args:
        uid: The service account UID, stored in the ``uid`` claim.
        private_key: PEM-encoded RSA private key (unencrypted).
        now: Issuance time; defaults to the current wall-clock time.

    Returns:
        The encoded JWT.

    Raises:
        SigningError: If no key is given, the key cannot be parsed, or
            signing fails.
    """
    if not private_key:
        raise SigningError(
            "A private key is required to log in with a service account (--private-key)"
        )

    try:
        key = serialization.load_pem_private_key(private_key.encode("utf-8"), password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise SigningError(f"Invalid service account private key: {exc}") from exc

    issued_at = now or datetime.now(timezone.utc)
    claims = {
        "uid": uid,
        "exp": int((issued_at + SERVICE_TOKEN_LIFETIME).timestamp()),
    }

    try:
        token = jwt.encode(claims, key, algorithm=SERVICE_TOKEN_ALGORITHM)
    except (jwt.PyJWTError, ValueError, TypeError) as exc:
        raise SigningError(f"Couldn't sign service login token: {exc}") from exc

    logger.debug("Signed service login token for '%s' (exp=%d)", uid, claims["exp"])
    return token
