"""Terminal prompts used by the login flow.

The flow only needs three primitives -- ask for a line, ask for a secret,
and pick one of several options -- so anything with ``input``, ``password``
and ``select`` methods can stand in for :class:`Prompt` (tests pass a fake).

Prompt text goes to stderr so that stdout only ever carries the token.
"""

from __future__ import annotations

import getpass
import sys

import typer

from clusterlogin.exceptions import InvalidUsageError


class Prompt:
    """Interactive prompts backed by :func:`typer.prompt` and :func:`getpass.getpass`.

    Args:
        no_input: When ``True`` every prompt raises
            :class:`~clusterlogin.exceptions.InvalidUsageError` instead of
            waiting for input (``--no-input``).
    """

    def __init__(self, no_input: bool = False) -> None:
        self._no_input = no_input

    def input(self, message: str) -> str:
        """Read one line of visible input."""
        self._ensure_allowed(message)
        return str(typer.prompt(message.rstrip(": "), default="", show_default=False, err=True))

    def password(self, message: str) -> str:
        """Read a secret without echoing it."""
        self._ensure_allowed(message)
        return getpass.getpass(message, stream=sys.stderr)

    def select(self, message: str, options: list[str]) -> int:
        """Ask the user to pick one of *options*; return its zero-based index.

        Invalid answers are reported and asked again.
        """
        self._ensure_allowed(message)
        typer.echo(message, err=True)
        for i, option in enumerate(options, 1):
            typer.echo(f"  ({i}) {option}", err=True)

        while True:
            choice = typer.prompt(f"(1-{len(options)})", default="1", err=True)
            try:
                idx = int(choice) - 1
            except ValueError:
                idx = -1
            if 0 <= idx < len(options):
                return idx
            typer.echo(f"Selection must be between 1 and {len(options)}.", err=True)

    def _ensure_allowed(self, message: str) -> None:
        if self._no_input:
            raise InvalidUsageError(
                f"Interactive input required ({message.strip().rstrip(':')}) "
                "but --no-input is set"
            )
