"""Tests for login flag resolution and provider compatibility."""

from __future__ import annotations

from pathlib import Path

import pytest

from clusterlogin.exceptions import InvalidUsageError
from clusterlogin.login.flags import Flags
from clusterlogin.models import ClientMethod, Provider


def _provider(method: ClientMethod) -> Provider:
    return Provider(id="p", type="t", client_method=method)


class TestResolve:
    def test_inline_password_kept(self) -> None:
        flags = Flags(username="alice", password="pw")
        flags.resolve()
        assert flags.password == "pw"
        assert flags.private_key is None

    def test_password_file_is_read_and_stripped(self, tmp_path: Path) -> None:
        pw_file = tmp_path / "pw"
        pw_file.write_text("hunter2\n")
        flags = Flags(password_file=str(pw_file))
        flags.resolve()
        assert flags.password == "hunter2"

    def test_password_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CLUSTER_PW", "from-env")
        flags = Flags(password_env="CLUSTER_PW")
        flags.resolve()
        assert flags.password == "from-env"

    def test_password_env_unset(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("CLUSTER_PW", raising=False)
        with pytest.raises(InvalidUsageError, match="CLUSTER_PW"):
            Flags(password_env="CLUSTER_PW").resolve()

    def test_two_password_sources_conflict(self, tmp_path: Path) -> None:
        with pytest.raises(InvalidUsageError, match="--password and --password-file"):
            Flags(password="pw", password_file=str(tmp_path / "pw")).resolve()

    def test_private_key_with_password_conflicts(self, tmp_path: Path) -> None:
        with pytest.raises(InvalidUsageError, match="--private-key cannot be used together with --password-env"):
            Flags(password_env="X", private_key_file=str(tmp_path / "k.pem")).resolve()

    def test_private_key_file_read(self, private_key_file: Path, private_key_pem: str) -> None:
        flags = Flags(username="svc", private_key_file=str(private_key_file))
        flags.resolve()
        assert flags.private_key == private_key_pem

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(InvalidUsageError, match="Cannot read private key file"):
            Flags(private_key_file=str(tmp_path / "nope.pem")).resolve()

    def test_resolve_runs_once(self, tmp_path: Path) -> None:
        pw_file = tmp_path / "pw"
        pw_file.write_text("first")
        flags = Flags(password_file=str(pw_file))
        flags.resolve()
        pw_file.write_text("second")
        flags.resolve()
        assert flags.password == "first"

    def test_exit_code(self) -> None:
        with pytest.raises(InvalidUsageError) as exc_info:
            Flags(password="a", password_env="B").resolve()
        assert exc_info.value.exit_code == 2


class TestSupports:
    @pytest.mark.parametrize(
        "flags, expected",
        [
            (Flags(), True),
            (Flags(username="alice"), False),
            (Flags(password="pw"), False),
            (Flags(private_key_file="k.pem"), False),
        ],
    )
    def test_browser(self, flags: Flags, expected: bool) -> None:
        assert flags.supports(_provider(ClientMethod.BROWSER_TOKEN)) is expected

    @pytest.mark.parametrize("method", [ClientMethod.CREDENTIAL, ClientMethod.USER_CREDENTIAL])
    def test_credential_methods(self, method: ClientMethod) -> None:
        assert Flags(username="alice", password="pw").supports(_provider(method))
        assert not Flags(username="svc", private_key_file="k.pem").supports(_provider(method))

    def test_service(self) -> None:
        provider = _provider(ClientMethod.SERVICE_CREDENTIAL)
        assert Flags(username="svc", private_key_file="k.pem").supports(provider)
        assert not Flags(username="svc").supports(provider)
        assert not Flags(username="svc", password="pw", private_key_file="k.pem").supports(provider)
        assert not Flags(username="alice", password="pw").supports(provider)
