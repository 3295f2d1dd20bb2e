"""Where cluster-login keeps its settings, and how the cluster URL is chosen.

Directories follow the XDG Base Directory layout on Linux and BSD
(``$XDG_CONFIG_HOME/cluster-login``, ``$XDG_DATA_HOME/cluster-login``) and
live under ``~/.cluster-login/`` elsewhere.

The only persistent file is ``config.json``, a serialised
:class:`~clusterlogin.models.GlobalConfig`. It is replaced atomically on
every save so a crash never leaves half a file behind.

Nothing in here stores tokens: a login prints its token and forgets it.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Optional

from clusterlogin.exceptions import ConfigError
from clusterlogin.models import GlobalConfig

_APP_NAME = "cluster-login"
_CONFIG_FILENAME = "config.json"
_URL_ENV_VAR = "CLUSTER_LOGIN_URL"


# --- Directories ---


def _is_xdg_platform() -> bool:
    system = platform.system()
    return system == "Linux" or system.endswith("BSD")


def _app_dir(xdg_var: str, xdg_default: tuple[str, ...], fallback: tuple[str, ...]) -> Path:
    if _is_xdg_platform():
        base = os.environ.get(xdg_var) or Path.home().joinpath(*xdg_default)
        path = Path(base) / _APP_NAME
    else:
        path = Path.home().joinpath(f".{_APP_NAME}", *fallback)
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_config_dir() -> Path:
    """Return (and create) the directory holding ``config.json``.

    ``$XDG_CONFIG_HOME/cluster-login`` (default ``~/.config/cluster-login``)
    on XDG platforms, ``~/.cluster-login`` otherwise.
    """
    return _app_dir("XDG_CONFIG_HOME", (".config",), ())


def get_data_dir() -> Path:
    """Return (and create) the directory crash logs are written under.

    ``$XDG_DATA_HOME/cluster-login`` (default ``~/.local/share/cluster-login``)
    on XDG platforms, ``~/.cluster-login/logs`` otherwise.
    """
    return _app_dir("XDG_DATA_HOME", (".local", "share"), ("logs",))


# --- Persistence ---


def _atomic_write(path: Path, data: str) -> None:
    """Replace *path* with *data* via a sibling temp file and ``os.replace``."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as tmp:
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def _global_config_path() -> Path:
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Read ``config.json``, or return defaults when it does not exist.

    Raises:
        ConfigError: If the file is not valid JSON or does not match
            :class:`~clusterlogin.models.GlobalConfig`.
    """
    path = _global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        return GlobalConfig.model_validate(json.loads(path.read_text(encoding="utf-8")))
    except ValueError as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    payload = json.dumps(config.model_dump(mode="json"), indent=2) + "\n"
    _atomic_write(_global_config_path(), payload)


# --- Effective configuration ---


def resolve_config(cli_url: Optional[str] = None) -> GlobalConfig:
    """Load the global config and apply URL overrides.

    ``cluster_url`` is taken from, in order: *cli_url* (``--url``), the
    ``CLUSTER_LOGIN_URL`` environment variable, then ``config.json``. A
    trailing slash is removed. The result may still have no URL; see
    :func:`require_cluster_url`.
    """
    config = load_global_config()
    override = cli_url or os.environ.get(_URL_ENV_VAR)
    if override:
        config.cluster_url = override
    if config.cluster_url:
        config.cluster_url = config.cluster_url.rstrip("/")
    return config


def require_cluster_url(config: GlobalConfig) -> str:
    """Return the configured cluster URL or raise a :class:`ConfigError` saying how to set one."""
    if not config.cluster_url:
        raise ConfigError(
            "No cluster URL configured. Pass --url, set "
            f"{_URL_ENV_VAR}, or run 'cluster-login config set cluster_url <URL>'"
        )
    return config.cluster_url
