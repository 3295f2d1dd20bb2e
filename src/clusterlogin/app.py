"""The ``cluster-login`` command line.

:data:`app` is the root Typer application with the ``auth`` and ``config``
groups attached. Its callback turns the global flags into an
:class:`~clusterlogin.output.OutputManager`, a logging level, and the
``ctx.obj`` values the sub-commands read (``url``, ``force``, ``no_input``).

:func:`main` is the console-script entry point. It exits 130 on Ctrl-C,
with the error's exit code for a :class:`~clusterlogin.exceptions.ClusterLoginError`
that escaped a command, and with 1 after writing a crash log for anything
else.
"""

from __future__ import annotations

import logging
import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from clusterlogin import __version__
from clusterlogin.commands.auth import auth_app
from clusterlogin.commands.config import config_app
from clusterlogin.exit_codes import EXIT_GENERIC_FAILURE
from clusterlogin.output import OutputFormat, OutputManager, set_output

_EXIT_INTERRUPTED = 130

app = typer.Typer(
    name="cluster-login",
    help="Log in to a cluster and print an access token.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)
app.add_typer(auth_app, name="auth", help="Log in and list the cluster's login providers.")
app.add_typer(config_app, name="config", help="Show or change stored settings.")


def _print_version(value: bool) -> None:
    if value:
        typer.echo(f"cluster-login {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    """Send ``clusterlogin.*`` records to stderr at INFO (``--verbose``) or WARNING."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    package_logger = logging.getLogger("clusterlogin")
    package_logger.handlers = [handler]
    package_logger.setLevel(logging.INFO if verbose else logging.WARNING)


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False, "--version", callback=_print_version, is_eager=True, help="Print the version and exit."
    ),
    url: Optional[str] = typer.Option(
        None, "--url", help="Cluster URL (overrides CLUSTER_LOGIN_URL and the config file)."
    ),
    json_output: bool = typer.Option(False, "--json", help="Write data as JSON."),
    plain_output: bool = typer.Option(False, "--plain", help="Write data as plain text."),
    no_color: bool = typer.Option(False, "--no-color", help="Never use colour."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only print data, warnings and errors."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log what the login flow does."),
    force: bool = typer.Option(False, "--force", "-f", help="Do not ask for confirmation."),
    no_input: bool = typer.Option(
        False, "--no-input", help="Fail instead of prompting for missing values."
    ),
) -> None:
    """Apply global flags before any sub-command runs."""
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN
    else:
        fmt = OutputFormat.AUTO
    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))
    _configure_logging(verbose)

    ctx.ensure_object(dict)
    ctx.obj.update(url=url, force=force, no_input=no_input, verbose=verbose)


def _setup_signal_handlers() -> None:
    def _on_sigint(signum: int, frame: Any) -> None:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(_EXIT_INTERRUPTED)

    signal.signal(signal.SIGINT, _on_sigint)


def _write_crash_log(exc: BaseException) -> str:
    """Save the traceback of *exc* under ``<data dir>/logs`` and return the file path."""
    from clusterlogin.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_path = logs_dir / f"crash-{datetime.now():%Y%m%d-%H%M%S}.log"
    log_path.write_text("".join(traceback.format_exception(type(exc), exc, exc.__traceback__)))
    return str(log_path)


def main() -> None:
    """Run the CLI; always ends in :class:`SystemExit`."""
    from clusterlogin.exceptions import ClusterLoginError
    from clusterlogin.output import error

    _setup_signal_handlers()
    try:
        app()
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(_EXIT_INTERRUPTED)
    except ClusterLoginError as exc:
        error(str(exc))
        sys.exit(exc.exit_code)
    except Exception as exc:
        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
