"""Config commands -- inspect and change the persisted settings.

``cluster-login config`` reads and writes ``config.json`` in the config
directory (see :mod:`clusterlogin.config`): the default cluster URL plus the
request and output defaults.
"""

from __future__ import annotations

from typing import Any

import typer

from clusterlogin.output import error, get_output, info, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Print the stored configuration as JSON.

    Example::

        cluster-login config show
    """
    from clusterlogin.config import get_config_dir, load_global_config

    info(f"Config directory: {get_config_dir()}")
    get_output().print_json(load_global_config().model_dump(mode="json"))


def _lookup(data: dict[str, Any], key: str) -> tuple[dict[str, Any], str]:
    """Return the dict holding the last segment of dotted *key*, and that segment."""
    *parents, leaf = key.split(".")
    node = data
    for part in parents:
        child = node.get(part)
        if not isinstance(child, dict):
            error(f"Invalid config key: {key}")
            raise typer.Exit(code=2)
        node = child
    if leaf not in node:
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=2)
    return node, leaf


def _coerce(key: str, current: Any, value: str) -> Any:
    # bool before int: bool is an int subclass
    if isinstance(current, bool):
        return value.lower() in ("true", "1", "yes")
    if isinstance(current, int):
        try:
            return int(value)
        except ValueError:
            error(f"Expected integer for {key}, got: {value}")
            raise typer.Exit(code=2) from None
    return value


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Config key, dotted for nested values (e.g. 'request.timeout')."),
    value: str = typer.Argument(help="New value."),
) -> None:
    """Change one configuration value.

    The value is converted to the type of the current setting, and the
    whole configuration is validated before it is written.

    Example::

        cluster-login config set cluster_url https://cluster.example.com
        cluster-login config set request.verify_ssl false
    """
    from clusterlogin.config import load_global_config, save_global_config
    from clusterlogin.models import GlobalConfig

    data = load_global_config().model_dump(mode="json")
    node, leaf = _lookup(data, key)
    node[leaf] = _coerce(key, node[leaf], value)

    try:
        updated = GlobalConfig.model_validate(data)
    except ValueError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=2) from None

    save_global_config(updated)
    success(f"Set {key} = {node[leaf]}")


@config_app.command("reset")
def config_reset(ctx: typer.Context) -> None:
    """Restore the default configuration.

    Asks first unless the global ``--force`` flag is given.

    Example::

        cluster-login --force config reset
    """
    from clusterlogin.config import save_global_config
    from clusterlogin.models import GlobalConfig

    force = bool(ctx.obj and ctx.obj.get("force"))
    if not force and not typer.confirm("Reset all config to defaults?"):
        info("Cancelled.")
        raise typer.Exit()

    save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")
