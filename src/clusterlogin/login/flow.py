"""The login flow: from provider catalog to access token.

:class:`Flow` drives one login end to end::

    resolve flags -> fetch providers -> select provider
        -> acquire credentials -> submit -> token
                 ^                    |
                 +---- retry ---------+  (interactive flows only, 3 attempts)

A rejected login is retried only when the user typed something during the
flow. A fully flag-driven login fails on the first rejection.
"""

from __future__ import annotations

import logging
from typing import Optional

from clusterlogin.client.sync_client import SyncClient
from clusterlogin.exceptions import AuthError, ProviderSelectionError
from clusterlogin.login.browser import Opener, WebBrowserOpener, open_start_flow
from clusterlogin.login.client import LoginClient
from clusterlogin.login.credentials import CredentialCollector, FlowState, Prompter
from clusterlogin.login.flags import Flags
from clusterlogin.login.prompt import Prompt
from clusterlogin.login.selector import select_provider
from clusterlogin.models import ClientMethod, Credentials, Provider
from clusterlogin.output import OutputManager, get_output

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 3
"""Total login attempts allowed in an interactive flow (first try included)."""


class Flow:
    """A single login flow.

    Args:
        prompt: Prompt collaborator; defaults to a terminal :class:`Prompt`.
        opener: Browser opener; defaults to :class:`WebBrowserOpener`.
        output: Output manager for user-facing messages; defaults to the
            global one.

    Example::

        with SyncClient(cluster_url) as http:
            token = Flow().start(Flags(username="alice"), http)
    """

    def __init__(
        self,
        prompt: Optional[Prompter] = None,
        opener: Optional[Opener] = None,
        output: Optional[OutputManager] = None,
    ) -> None:
        self._prompt = prompt or Prompt()
        self._opener = opener or WebBrowserOpener()
        self._output = output or get_output()

    def start(self, flags: Flags, http: SyncClient) -> str:
        """Log in to the cluster behind *http* and return the access token.

        Args:
            flags: Login flags; resolved here, once.
            http: An open client bound to the cluster URL.

        Returns:
            The access token returned by the cluster.

        Raises:
            InvalidUsageError: If the flags are invalid.
            TransportError: If the provider catalog cannot be fetched.
            UnknownProviderError: If ``--provider`` is not in the catalog.
            NoProviderError: If no provider fits the flags.
            ProviderSelectionError: If the selected provider uses a client
                method this client does not implement.
            SigningError: If a service login token cannot be signed.
            AuthError: If the cluster rejects the credentials and no retry
                is left.
        """
        flags.resolve()
        state = FlowState()

        client = LoginClient(http)
        providers = client.providers()

        provider = select_provider(flags, providers, self._prompt, state)
        logger.info("Using login provider '%s'.", provider.type)

        collector = CredentialCollector(flags, self._prompt, state)
        return self._trigger_method(provider, client, collector, state)

    def _trigger_method(
        self,
        provider: Provider,
        client: LoginClient,
        collector: CredentialCollector,
        state: FlowState,
    ) -> str:
        credentials = Credentials()
        while True:
            endpoint = self._acquire_credentials(provider, client, collector, credentials, state)
            try:
                return client.login(endpoint, credentials)
            except AuthError as exc:
                if not state.interactive or state.attempt >= MAX_ATTEMPTS:
                    raise
                state.attempt += 1
                self._output.warning(
                    f"{exc} Please try again (attempt {state.attempt} of {MAX_ATTEMPTS})."
                )

    def _acquire_credentials(
        self,
        provider: Provider,
        client: LoginClient,
        collector: CredentialCollector,
        credentials: Credentials,
        state: FlowState,
    ) -> Optional[str]:
        """Fill *credentials* for the provider's method; return the login endpoint.

        ``None`` means the default login endpoint.
        """
        method = provider.client_method

        if method in (ClientMethod.CREDENTIAL, ClientMethod.USER_CREDENTIAL):
            credentials.uid = collector.uid()
            credentials.password = collector.password()
            return provider.config.start_flow_url

        if method == ClientMethod.SERVICE_CREDENTIAL:
            credentials.uid = collector.uid()
            credentials.token = collector.service_token(credentials.uid)
            return None

        if method == ClientMethod.BROWSER_TOKEN:
            # The user continues in the browser and pastes the token back.
            if state.attempt == 1:
                open_start_flow(provider.config.start_flow_url, client.http, self._opener, self._output)
            credentials.token = collector.browser_token()
            return None

        raise ProviderSelectionError(
            f"login provider '{provider.id}' uses client method '{provider.method_name}', "
            "which this client does not support"
        )
