"""Exception hierarchy for cluster-login.

All exceptions inherit from :class:`ClusterLoginError`, which carries an
``exit_code`` attribute mapped to a constant from
:mod:`clusterlogin.exit_codes`. The top-level error handler in
:func:`clusterlogin.app.main` catches ``ClusterLoginError`` and exits with the
appropriate code, while unexpected exceptions produce a crash log and exit
with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    ClusterLoginError (exit 1)
    +-- InvalidUsageError         (exit 2)
    +-- AuthError                 (exit 3)
    +-- NotFoundError             (exit 4)
    +-- ServerError               (exit 5)
    +-- TransportError            (exit 6)
    +-- ProviderSelectionError    (exit 7)
    |   +-- UnknownProviderError
    |   +-- NoProviderError
    +-- SigningError              (exit 8)
    +-- BrowserOpenError          (exit 1)
    +-- ConfigError               (exit 1)

Only :class:`AuthError` is ever retried by the login flow, and only when the
user typed something during the current flow.
"""

from clusterlogin.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_PROVIDER_ERROR,
    EXIT_SERVER_ERROR,
    EXIT_SIGNING_ERROR,
    EXIT_TRANSPORT_ERROR,
)


class ClusterLoginError(Exception):
    """Base exception for all cluster-login errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`clusterlogin.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(ClusterLoginError):
    """Raised for invalid or incompatible login flags, or a prompt under ``--no-input``."""

    exit_code = EXIT_INVALID_USAGE


class AuthError(ClusterLoginError):
    """Raised when the cluster rejects the submitted credentials."""

    exit_code = EXIT_AUTH_FAILURE


class NotFoundError(ClusterLoginError):
    """Raised when the cluster returns HTTP 404 (resource not found)."""

    exit_code = EXIT_NOT_FOUND


class ServerError(ClusterLoginError):
    """Raised when the cluster returns an HTTP 5xx server error."""

    exit_code = EXIT_SERVER_ERROR


class TransportError(ClusterLoginError):
    """Raised on network-level failures or undecodable responses.

    Covers timeouts, DNS resolution, refused connections, and provider
    catalogs that do not match the expected schema.
    """

    exit_code = EXIT_TRANSPORT_ERROR


class ProviderSelectionError(ClusterLoginError):
    """Base class for failures to pick a login provider."""

    exit_code = EXIT_PROVIDER_ERROR


class UnknownProviderError(ProviderSelectionError):
    """Raised when ``--provider`` names an ID the cluster does not expose.

    Args:
        provider_id: The requested provider ID.
    """

    def __init__(self, provider_id: str):
        super().__init__(f"unknown login provider ID '{provider_id}'")
        self.provider_id = provider_id


class NoProviderError(ProviderSelectionError):
    """Raised when no login provider is compatible with the given flags."""


class SigningError(ClusterLoginError):
    """Raised when a service login token cannot be signed (malformed or missing key)."""

    exit_code = EXIT_SIGNING_ERROR


class BrowserOpenError(ClusterLoginError):
    """Raised by an opener that could not launch a browser.

    The login flow logs this error and carries on; it never aborts a login.
    """

    exit_code = EXIT_GENERIC_FAILURE


class ConfigError(ClusterLoginError):
    """Raised for configuration problems (no cluster URL, invalid config file)."""

    exit_code = EXIT_GENERIC_FAILURE
