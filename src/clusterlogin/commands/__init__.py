"""Built-in CLI sub-commands for cluster-login.

* :mod:`~clusterlogin.commands.auth` -- log in and list login providers.
* :mod:`~clusterlogin.commands.config` -- view and modify global settings.

Each module exports a :class:`typer.Typer` sub-application registered on the
root app by :func:`clusterlogin.app.main`.
"""
