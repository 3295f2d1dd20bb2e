"""Pick the login provider for a flow.

Selection is explicit (``--provider``), implicit (only one provider fits the
flags), or manual (the user picks from the providers that fit).
"""

from __future__ import annotations

import logging

from clusterlogin.exceptions import NoProviderError, UnknownProviderError
from clusterlogin.login.credentials import FlowState, Prompter
from clusterlogin.login.flags import Flags
from clusterlogin.models import Provider, Providers

logger = logging.getLogger(__name__)


def select_provider(
    flags: Flags,
    providers: Providers,
    prompt: Prompter,
    state: FlowState,
) -> Provider:
    """Select the provider to log in with.

    Args:
        flags: Resolved login flags.
        providers: The cluster's provider catalog.
        prompt: Used for manual selection when several providers fit.
        state: Marked interactive when the user has to choose.

    Returns:
        The selected :class:`~clusterlogin.models.Provider`.

    Raises:
        UnknownProviderError: If ``--provider`` names an ID missing from
            the catalog.
        NoProviderError: If no provider is compatible with the flags.
    """
    if flags.provider_id:
        provider = providers.get(flags.provider_id)
        if provider is None:
            raise UnknownProviderError(flags.provider_id)
        return provider

    candidates: list[Provider] = []
    for provider in providers.as_list():
        if not provider.is_supported:
            logger.info(
                "Excluding provider '%s': unsupported client method '%s'.",
                provider.id,
                provider.method_name,
            )
        elif flags.supports(provider):
            candidates.append(provider)
        else:
            logger.info("Excluding provider '%s' based on command-line flags.", provider.id)

    if not candidates:
        if len(providers) == 0:
            raise NoProviderError("couldn't determine a login provider: the cluster exposes none")
        raise NoProviderError(
            "couldn't determine a login provider: all providers were excluded "
            "by command-line flags"
        )

    if len(candidates) == 1:
        return candidates[0]

    state.interactive = True
    idx = prompt.select(
        "Please select a login method:",
        [provider.label for provider in candidates],
    )
    return candidates[idx]
