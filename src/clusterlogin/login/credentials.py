"""Collect login credentials from flags or from the user.

Flag values always win and are returned verbatim. Anything missing is asked
for interactively, which marks the flow as interactive (see
:class:`FlowState`) and makes a rejected login eligible for retry.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from clusterlogin.login.flags import Flags
from clusterlogin.login.service_token import issue_service_token


class Prompter(Protocol):
    """The prompt primitives the login flow relies on."""

    def input(self, message: str) -> str: ...

    def password(self, message: str) -> str: ...

    def select(self, message: str, options: list[str]) -> int: ...


@dataclass
class FlowState:
    """Per-flow state shared by the selector, the collector and the orchestrator.

    Attributes:
        interactive: Whether any value in this flow came from the user rather
            than from flags. Starts ``False`` and never goes back.
        attempt: The current login attempt, starting at 1.
    """

    interactive: bool = False
    attempt: int = 1


class CredentialCollector:
    """Produce UID, password and tokens for one login flow.

    Args:
        flags: Resolved login flags.
        prompt: Prompt used when a flag is missing.
        state: The flow state to mark interactive when prompting.
    """

    def __init__(self, flags: Flags, prompt: Prompter, state: FlowState) -> None:
        self._flags = flags
        self._prompt = prompt
        self._state = state

    def uid(self) -> str:
        """Return the UID from ``--username`` or prompt for it."""
        if self._flags.username:
            return self._flags.username
        self._state.interactive = True
        return self._prompt.input("Username: ")

    def password(self) -> str:
        """Return the resolved password flag or prompt for it (no echo)."""
        if self._flags.password:
            return self._flags.password
        self._state.interactive = True
        return self._prompt.password("Password: ")

    def browser_token(self) -> str:
        """Prompt for the token the user copied from the browser."""
        self._state.interactive = True
        return self._prompt.input("Enter token from the browser: ")

    def service_token(self, uid: str) -> str:
        """Sign a service login token for *uid* with the ``--private-key`` key."""
        return issue_service_token(uid, self._flags.private_key)
