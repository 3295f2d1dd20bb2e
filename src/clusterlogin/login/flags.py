"""Command-line flags for ``cluster-login auth login``.

:class:`Flags` holds the raw option values, validates their combination and
reads any secrets they point to (:meth:`Flags.resolve`), then answers whether
a given login provider can be used with them (:meth:`Flags.supports`).
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from clusterlogin.exceptions import InvalidUsageError
from clusterlogin.models import ClientMethod, Provider


class Flags:
    """Login flags as typed on the command line.

    Args:
        provider_id: Explicit login provider ID (``--provider``).
        username: UID to log in with (``--username``).
        password: Password given inline (``--password``).
        password_file: File holding the password (``--password-file``).
        password_env: Environment variable holding the password
            (``--password-env``).
        private_key_file: PEM file with a service account private key
            (``--private-key``).
    """

    def __init__(
        self,
        provider_id: str = "",
        username: str = "",
        password: str = "",
        password_file: str = "",
        password_env: str = "",
        private_key_file: str = "",
    ) -> None:
        self.provider_id = provider_id
        self.username = username
        self.password = password
        self.password_file = password_file
        self.password_env = password_env
        self.private_key_file = private_key_file
        self.private_key: Optional[str] = None
        self._resolved = False

    def resolve(self) -> None:
        """Validate the flag combination and load file/env based values.

        After this call :attr:`password` holds the password from whichever
        source was used and :attr:`private_key` holds the PEM text of the
        private key. Calling it again is a no-op.

        Raises:
            InvalidUsageError: If incompatible flags are combined, or a
                password file, private key file, or environment variable
                cannot be read.
        """
        if self._resolved:
            return

        password_sources = [
            flag
            for flag, value in (
                ("--password", self.password),
                ("--password-file", self.password_file),
                ("--password-env", self.password_env),
            )
            if value
        ]
        if len(password_sources) > 1:
            raise InvalidUsageError(
                f"{' and '.join(password_sources)} cannot be used together"
            )
        if self.private_key_file and password_sources:
            raise InvalidUsageError(
                f"--private-key cannot be used together with {password_sources[0]}"
            )

        if self.password_file:
            self.password = _read_file(self.password_file, "password file").strip()
        elif self.password_env:
            value = os.environ.get(self.password_env)
            if value is None:
                raise InvalidUsageError(
                    f"Environment variable '{self.password_env}' is not set "
                    "(--password-env)"
                )
            self.password = value

        if self.private_key_file:
            self.private_key = _read_file(self.private_key_file, "private key file")

        self._resolved = True

    def supports(self, provider: Provider) -> bool:
        """Return whether *provider* can be used with these flags.

        A browser login cannot make use of a username, password or private
        key. Credential logins cannot use a private key. Service logins need
        a private key and cannot use a password. Providers whose client
        method is not implemented are never compatible.
        """
        method = provider.client_method
        if method == ClientMethod.BROWSER_TOKEN:
            return not (self.username or self.password or self.private_key_file)
        if method in (ClientMethod.CREDENTIAL, ClientMethod.USER_CREDENTIAL):
            return not self.private_key_file
        if method == ClientMethod.SERVICE_CREDENTIAL:
            return bool(self.private_key_file) and not self.password
        return False


def _read_file(file_path: str, what: str) -> str:
    path = Path(file_path).expanduser()
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise InvalidUsageError(f"Cannot read {what} {path}: {exc}") from exc
