"""Auth commands -- log in to a cluster and inspect its login providers.

Provides the ``cluster-login auth`` sub-command group.

Typical workflow::

    cluster-login auth list-providers
    cluster-login auth login                          # interactive
    cluster-login auth login --username alice --password-env PW
    cluster-login auth login --username svc --private-key svc.pem
"""

from __future__ import annotations

import typer

from clusterlogin.exceptions import ClusterLoginError
from clusterlogin.output import OutputFormat, error, get_output, success, suggest


auth_app = typer.Typer(no_args_is_help=True)


@auth_app.command("login")
def auth_login(
    ctx: typer.Context,
    provider: str = typer.Option(
        "", "--provider", help="ID of the login provider to use."
    ),
    username: str = typer.Option("", "--username", "-u", help="Username (UID)."),
    password: str = typer.Option(
        "", "--password", help="Password (prefer --password-file or --password-env)."
    ),
    password_file: str = typer.Option(
        "", "--password-file", help="Read the password from this file."
    ),
    password_env: str = typer.Option(
        "", "--password-env", help="Read the password from this environment variable."
    ),
    private_key: str = typer.Option(
        "", "--private-key", help="Service account private key (PEM file)."
    ),
) -> None:
    """Log in to the cluster and print the access token.

    Fetches the cluster's login providers and picks one: the one named by
    ``--provider``, the only one compatible with the given flags, or the one
    the user selects. Missing credentials are prompted for; when anything
    was prompted for, a rejected login may be retried twice.

    The token is written to stdout (as ``{"token": ...}`` with ``--json``);
    all other messages go to stderr.

    Raises:
        typer.Exit: With the exit code of the failure (see
            :mod:`clusterlogin.exit_codes`).

    Example::

        cluster-login auth login --username alice --password-file ~/.pw
    """
    from clusterlogin.client import SyncClient
    from clusterlogin.config import require_cluster_url, resolve_config
    from clusterlogin.login import Flags, Flow
    from clusterlogin.login.prompt import Prompt

    obj = ctx.obj or {}
    flags = Flags(
        provider_id=provider,
        username=username,
        password=password,
        password_file=password_file,
        password_env=password_env,
        private_key_file=private_key,
    )

    try:
        config = resolve_config(obj.get("url"))
        cluster_url = require_cluster_url(config)
        flow = Flow(prompt=Prompt(no_input=obj.get("no_input", False)))
        with SyncClient(cluster_url, config.request) as http:
            token = flow.start(flags, http)
    except ClusterLoginError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    output = get_output()
    if output.format == OutputFormat.JSON:
        output.print_json({"token": token})
    else:
        output.print_data(token)
    success(f"Logged in to {cluster_url}.")


@auth_app.command("list-providers")
def auth_list_providers(ctx: typer.Context) -> None:
    """List the login providers the cluster offers.

    Prints a table with each provider's ID, type, client method, and
    start-flow URL. Use an ID with ``auth login --provider``.

    Example::

        cluster-login auth list-providers --json
    """
    from clusterlogin.client import SyncClient
    from clusterlogin.config import require_cluster_url, resolve_config
    from clusterlogin.login import LoginClient

    obj = ctx.obj or {}
    try:
        config = resolve_config(obj.get("url"))
        cluster_url = require_cluster_url(config)
        with SyncClient(cluster_url, config.request) as http:
            providers = LoginClient(http).providers()
    except ClusterLoginError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    if len(providers) == 0:
        error(f"{cluster_url} does not expose any login provider.")
        raise typer.Exit(code=1)

    headers = ["ID", "Type", "Client Method", "Start Flow URL"]
    rows = [
        [p.id, p.type, p.method_name, p.config.start_flow_url or "-"]
        for p in providers.as_list()
    ]
    get_output().print_table(headers, rows, title="Login Providers")
    suggest("Log in with one: cluster-login auth login --provider <ID>")
