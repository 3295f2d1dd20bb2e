"""Open the user's browser at a provider's start-flow page.

Opening a browser is best effort: on a headless host there may be none. The
link is therefore always printed as well, whether or not the browser opened.
"""

from __future__ import annotations

import logging
import webbrowser
from typing import Protocol

from clusterlogin.client.sync_client import SyncClient
from clusterlogin.exceptions import BrowserOpenError
from clusterlogin.output import OutputManager

logger = logging.getLogger(__name__)

FALLBACK_MESSAGE = "If your browser didn't open, please follow this link:\n\n    {url}\n"


class Opener(Protocol):
    """Anything that can open a URL, raising ``BrowserOpenError`` on failure."""

    def open(self, url: str) -> None: ...


class WebBrowserOpener:
    """Open URLs with the standard :mod:`webbrowser` module."""

    def open(self, url: str) -> None:
        try:
            opened = webbrowser.open(url)
        except (webbrowser.Error, OSError) as exc:
            raise BrowserOpenError(f"Couldn't open a browser: {exc}") from exc
        if not opened:
            raise BrowserOpenError("Couldn't open a browser: no runnable browser found")


def resolve_start_flow_url(start_flow_url: str, http: SyncClient) -> str:
    """Make a root-relative start-flow URL absolute against the cluster URL."""
    if start_flow_url.startswith("/"):
        return http.build_url(start_flow_url)
    return start_flow_url


def open_start_flow(
    start_flow_url: str,
    http: SyncClient,
    opener: Opener,
    output: OutputManager,
) -> str:
    """Open the browser at the start-flow URL and print the link.

    Args:
        start_flow_url: Absolute or root-relative start-flow URL.
        http: Client used to resolve root-relative URLs.
        opener: Browser opener; its failures are logged, never raised.
        output: Where the fallback link is written.

    Returns:
        The absolute URL that was opened and printed.
    """
    url = resolve_start_flow_url(start_flow_url, http)

    try:
        opener.open(url)
    except BrowserOpenError as exc:
        logger.error("%s", exc)

    output.notice(FALLBACK_MESSAGE.format(url=url))
    return url
