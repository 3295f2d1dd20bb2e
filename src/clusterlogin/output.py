"""Terminal output for cluster-login.

A login is usually scripted as ``TOKEN=$(cluster-login auth login ...)``, so
the two streams have fixed roles:

* **stdout** carries data only: the access token, or a provider table.
* **stderr** carries everything meant for a human: progress, warnings,
  errors, retry notices, and the link to follow when no browser opens.

Rich styling is used when stdout is a terminal and colour is allowed
(``NO_COLOR``, ``TERM=dumb`` and ``--no-color`` all turn it off); otherwise
output is plain text.

:class:`OutputManager` holds the preferences for one invocation and is
installed globally by :func:`~clusterlogin.app.main_callback`. The module
level helpers (:func:`info`, :func:`error`, ...) forward to it.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, Optional

from rich.console import Console
from rich.table import Table


class OutputFormat(str, Enum):
    """How data written to stdout is rendered.

    ``AUTO`` becomes ``RICH`` on a colour-capable terminal and ``PLAIN``
    everywhere else.
    """

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class OutputManager:
    """Route data to stdout and diagnostics to stderr.

    Args:
        format: Rendering for data output; ``AUTO`` is resolved here.
        no_color: Never emit colour or Rich markup.
        quiet: Drop informational messages (``info``, ``success``,
            ``suggest``). Warnings, errors and notices are always shown.
        verbose: Show ``debug`` messages.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose

        if format != OutputFormat.AUTO:
            self._format = format
        elif _is_tty() and not self._no_color:
            self._format = OutputFormat.RICH
        else:
            self._format = OutputFormat.PLAIN

        rich_stdout = self._format == OutputFormat.RICH
        self._stdout = Console(file=sys.stdout, no_color=self._no_color, force_terminal=rich_stdout)
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    @property
    def is_quiet(self) -> bool:
        return self._quiet

    @property
    def is_verbose(self) -> bool:
        return self._verbose

    # --- stdout ---

    def print_data(self, text: str) -> None:
        """Write *text* and a newline to stdout, unstyled."""
        print(text, file=sys.stdout, flush=True)

    def print_json(self, data: Any) -> None:
        self.print_data(json.dumps(data, indent=2, ensure_ascii=False, default=str))

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Write a table to stdout.

        JSON mode emits a list of objects keyed by header, plain mode emits
        tab-separated lines with a header line first, and Rich mode draws a
        titled table.
        """
        if self._format == OutputFormat.JSON:
            self.print_json([dict(zip(headers, row)) for row in rows])
            return

        if self._format == OutputFormat.PLAIN:
            for line in [headers, *rows]:
                self.print_data("\t".join(line))
            return

        table = Table(title=title, show_header=True, header_style="bold cyan")
        for header in headers:
            table.add_column(header)
        for row in rows:
            table.add_row(*row)
        self._stdout.print(table)

    # --- stderr ---

    def _emit(self, plain: str, styled: Optional[str] = None, markup: bool = True) -> None:
        if self._no_color:
            print(plain, file=sys.stderr, flush=True)
        else:
            self._stderr.print(styled if styled is not None else plain, markup=markup, highlight=markup)

    def info(self, message: str) -> None:
        if not self._quiet:
            self._emit(message)

    def notice(self, message: str) -> None:
        """Show an instruction the user has to act on, even with ``--quiet``.

        The text is printed verbatim (no markup or highlighting) so that URLs
        come out exactly as they must be followed.
        """
        self._emit(message, markup=False)

    def success(self, message: str) -> None:
        if not self._quiet:
            self._emit(message, f"[green]{message}[/green]")

    def warning(self, message: str) -> None:
        self._emit(f"Warning: {message}", f"[yellow]Warning:[/yellow] {message}")

    def error(self, message: str) -> None:
        self._emit(f"Error: {message}", f"[bold red]Error:[/bold red] {message}")

    def suggest(self, message: str) -> None:
        """Point at a likely next command. Hidden by ``--quiet``."""
        if not self._quiet:
            self._emit(f"→ {message}", f"[dim]→ {message}[/dim]")

    def debug(self, message: str) -> None:
        if self._verbose:
            self._emit(f"[debug] {message}", f"[dim]\\[debug] {message}[/dim]")


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """True when ``NO_COLOR`` is set (to anything) or ``TERM`` is ``dumb``."""
    return "NO_COLOR" in os.environ or os.environ.get("TERM") == "dumb"


# --- Global instance ---

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed :class:`OutputManager`, creating a default one on first use."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager (tests use this between CLI runs)."""
    global _output
    _output = None


def print_data(text: str) -> None:
    get_output().print_data(text)


def info(message: str) -> None:
    get_output().info(message)


def error(message: str) -> None:
    get_output().error(message)


def success(message: str) -> None:
    get_output().success(message)


def warning(message: str) -> None:
    get_output().warning(message)


def suggest(message: str) -> None:
    get_output().suggest(message)
