"""Shared test fixtures for cluster-login.

Provides reusable fixtures for isolated config environments, output state,
a fake cluster authentication service backed by ``httpx.MockTransport``,
fake prompt/browser collaborators, and a generated RSA key pair. These
fixtures are automatically discovered by pytest and available to all test
modules without explicit imports.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

import httpx
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from clusterlogin.client.sync_client import SyncClient
from clusterlogin.exceptions import BrowserOpenError
from clusterlogin.login.client import LOGIN_PATH, PROVIDERS_PATH
from clusterlogin.output import OutputFormat, OutputManager, reset_output, set_output


CLUSTER_URL = "https://cluster.example.com"


# ---------------------------------------------------------------------------
# Provider catalog samples (as returned by the authentication service)
# ---------------------------------------------------------------------------


def credential_provider(
    start_flow_url: str = "",
    description: str = "",
    method: str = "dcos-usercredential-post-receive-authtoken",
) -> dict[str, Any]:
    return {
        "type": "dcos-uid-password",
        "description": description or "Default DC/OS login provider",
        "client-method": method,
        "config": {"start_flow_url": start_flow_url},
    }


def service_provider() -> dict[str, Any]:
    return {
        "type": "dcos-uid-servicekey",
        "description": "Service account login",
        "client-method": "dcos-servicecredential-post-receive-authtoken",
        "config": {"start_flow_url": ""},
    }


def browser_provider(start_flow_url: str = "/login?redirect_uri=urn:ietf:wg:oauth:2.0:oob") -> dict[str, Any]:
    return {
        "type": "oidc-authorization-code-flow",
        "description": "Google",
        "client-method": "browser-prompt-authtoken",
        "config": {"start_flow_url": start_flow_url},
    }


# ---------------------------------------------------------------------------
# Auto-reset global state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time.  When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale
    ("I/O operation on closed file").  Resetting forces a fresh manager
    to be created on next use.
    """
    yield
    reset_output()


@pytest.fixture(autouse=True)
def _reset_package_logger() -> None:
    """Drop the stderr handler and level the CLI callback installs."""
    yield
    package_logger = logging.getLogger("clusterlogin")
    package_logger.handlers = []
    package_logger.setLevel(logging.NOTSET)


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME, XDG_CACHE_HOME, and XDG_DATA_HOME to
    subdirectories of tmp_path so that tests never touch real user
    config, clears CLUSTER_LOGIN_URL, and changes the working directory
    to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setattr("clusterlogin.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.delenv("CLUSTER_LOGIN_URL", raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet, colorless OutputManager globally."""
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def plain_output() -> OutputManager:
    """Install a PLAIN-format, colorless OutputManager globally."""
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# Fake collaborators
# ---------------------------------------------------------------------------


class FakePrompt:
    """Scripted prompt: answers come from queues, every call is recorded."""

    def __init__(
        self,
        inputs: Optional[list[str]] = None,
        passwords: Optional[list[str]] = None,
        selections: Optional[list[int]] = None,
    ) -> None:
        self.inputs = list(inputs or [])
        self.passwords = list(passwords or [])
        self.selections = list(selections or [])
        self.calls: list[tuple[str, Any]] = []

    def input(self, message: str) -> str:
        self.calls.append(("input", message))
        return self.inputs.pop(0)

    def password(self, message: str) -> str:
        self.calls.append(("password", message))
        return self.passwords.pop(0)

    def select(self, message: str, options: list[str]) -> int:
        self.calls.append(("select", (message, list(options))))
        return self.selections.pop(0)

    def kinds(self) -> list[str]:
        return [kind for kind, _ in self.calls]


class FakeOpener:
    """Records opened URLs; raises BrowserOpenError when *fail* is set."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.opened: list[str] = []

    def open(self, url: str) -> None:
        self.opened.append(url)
        if self.fail:
            raise BrowserOpenError("Couldn't open a browser: no runnable browser found")


class FakeCluster:
    """In-memory authentication service served through ``httpx.MockTransport``.

    ``login_responses`` are consumed in order by POST requests; once empty,
    logins succeed with :attr:`token`.
    """

    def __init__(self, providers: Optional[dict[str, Any]] = None, token: str = "s3cr3t-token") -> None:
        self.providers: Any = providers if providers is not None else {}
        self.token = token
        self.login_responses: list[httpx.Response] = []
        self.requests: list[httpx.Request] = []

    def reject(self, times: int = 1, status_code: int = 401) -> None:
        for _ in range(times):
            self.login_responses.append(
                httpx.Response(
                    status_code,
                    json={"title": "Unauthorized", "description": "The UID or password is wrong."},
                )
            )

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method == "GET" and request.url.path == PROVIDERS_PATH:
            return httpx.Response(200, json=self.providers)
        if request.method == "POST":
            if self.login_responses:
                return self.login_responses.pop(0)
            return httpx.Response(200, json={"token": self.token})
        return httpx.Response(404, json={"description": "not found"})

    @property
    def logins(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == "POST"]

    def login_bodies(self) -> list[dict[str, Any]]:
        return [json.loads(r.content) for r in self.logins]

    def client(self) -> SyncClient:
        return SyncClient(CLUSTER_URL, transport=httpx.MockTransport(self.handler))


@pytest.fixture
def fake_cluster() -> FakeCluster:
    return FakeCluster()


@pytest.fixture
def default_login_url() -> str:
    return CLUSTER_URL + LOGIN_PATH


# ---------------------------------------------------------------------------
# Keys
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def rsa_private_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def private_key_pem(rsa_private_key: rsa.RSAPrivateKey) -> str:
    return rsa_private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("ascii")


@pytest.fixture(scope="session")
def public_key_pem(rsa_private_key: rsa.RSAPrivateKey) -> str:
    return rsa_private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode("ascii")


@pytest.fixture
def private_key_file(tmp_path: Path, private_key_pem: str) -> Path:
    path = tmp_path / "service-account.pem"
    path.write_text(private_key_pem)
    return path


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
