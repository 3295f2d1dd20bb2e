"""Interactive login to a cluster.

This package implements the ``cluster-login auth login`` flow: fetch the
cluster's login providers, pick one, collect or derive credentials, and
exchange them for an access token, retrying when a user mistypes.

The main entry points are:

- :class:`Flow` -- the orchestrator; ``Flow().start(flags, http)`` returns
  the access token.
- :class:`Flags` -- the validated command-line inputs.
- :class:`LoginClient` -- the two authentication-service calls.

Typical usage::

    from clusterlogin.client import SyncClient
    from clusterlogin.login import Flags, Flow

    with SyncClient("https://cluster.example.com") as http:
        token = Flow().start(Flags(username="alice"), http)
"""

from clusterlogin.login.client import LoginClient
from clusterlogin.login.flags import Flags
from clusterlogin.login.flow import MAX_ATTEMPTS, Flow

__all__ = ["Flags", "Flow", "LoginClient", "MAX_ATTEMPTS"]
