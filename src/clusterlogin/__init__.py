"""cluster-login -- log in to a cluster from the command line.

This package negotiates which login provider a cluster offers, collects or
derives credentials (username/password, a signed service-account token, or a
token pasted from a browser login), and exchanges them for an access token.

Typical workflow::

    cluster-login config set cluster_url https://cluster.example.com
    cluster-login auth list-providers
    TOKEN=$(cluster-login auth login --username alice)

Modules:
    app: Typer application factory and CLI entry point.
    login: The login flow (provider selection, credentials, retry).
    models: Pydantic models shared across the entire package.
    config: XDG-aware configuration and cluster URL resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
