"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~clusterlogin.exceptions.ClusterLoginError` subclass.
Scripts wrapping ``cluster-login auth login`` can inspect the exit code to
tell a rejected password from an unreachable cluster without parsing stderr.

Example::

    $ cluster-login auth login --username alice --password-env PW
    $ echo $?
    3   # EXIT_AUTH_FAILURE -- credentials were rejected
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid or incompatible flags."""

EXIT_AUTH_FAILURE = 3
"""The cluster rejected the submitted credentials."""

EXIT_NOT_FOUND = 4
"""The requested resource was not found (HTTP 404)."""

EXIT_SERVER_ERROR = 5
"""The cluster returned an HTTP 5xx server error."""

EXIT_TRANSPORT_ERROR = 6
"""A network-level or decoding error occurred talking to the cluster."""

EXIT_PROVIDER_ERROR = 7
"""No login provider could be selected."""

EXIT_SIGNING_ERROR = 8
"""A service login token could not be signed with the given private key."""
