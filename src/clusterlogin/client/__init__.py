"""HTTP client module for cluster-login.

Provides :class:`SyncClient`, a blocking client backed by
:class:`httpx.Client` that resolves paths against the cluster URL and maps
HTTP error statuses to :mod:`clusterlogin.exceptions`.

Example::

    from clusterlogin.client import SyncClient

    with SyncClient("https://cluster.example.com") as client:
        resp = client.get("/acs/api/v1/auth/providers")
"""

from clusterlogin.client.sync_client import SyncClient

__all__ = ["SyncClient"]
