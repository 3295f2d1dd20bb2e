"""Canonical Pydantic models shared across all cluster-login modules.

The models fall into two groups:

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`RequestConfig`, :class:`OutputConfig`, and :class:`GlobalConfig`.

**Login models** -- decoded from the cluster's authentication service or
accumulated during a login flow:
    :class:`ClientMethod`, :class:`ProviderConfig`, :class:`Provider`,
    :class:`Providers`, and :class:`Credentials`.

All models use Pydantic v2. Providers are frozen once decoded; credentials are
a mutable accumulator filled in by the login flow.
"""

from __future__ import annotations

import enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, RootModel, field_validator, model_validator


# --- Configuration ---


class RequestConfig(BaseModel):
    """HTTP settings applied to every request sent to the cluster."""

    timeout: int = Field(default=30, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/cluster-login/config.json``.

    Loaded and saved by :func:`~clusterlogin.config.load_global_config` and
    :func:`~clusterlogin.config.save_global_config`. ``cluster_url`` can be
    overridden by the ``CLUSTER_LOGIN_URL`` environment variable or the
    ``--url`` flag; see :func:`~clusterlogin.config.resolve_config`.
    """

    cluster_url: Optional[str] = Field(
        default=None, description="Base URL of the cluster to log in to"
    )
    request: RequestConfig = Field(default_factory=RequestConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)


# --- Login providers ---


class ClientMethod(str, enum.Enum):
    """The protocol a login provider expects the CLI to follow.

    The values are the ``client-method`` strings sent by the cluster's
    authentication service.
    """

    CREDENTIAL = "dcos-credential-post-receive-authtoken"
    USER_CREDENTIAL = "dcos-usercredential-post-receive-authtoken"
    SERVICE_CREDENTIAL = "dcos-servicecredential-post-receive-authtoken"
    BROWSER_TOKEN = "browser-prompt-authtoken"


class ProviderConfig(BaseModel):
    """Provider-specific configuration.

    ``start_flow_url`` is either where credentials are POSTed (credential
    methods) or the page the user's browser is sent to (browser method). It
    may be absolute or root-relative.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    start_flow_url: str = ""


class Provider(BaseModel):
    """A login provider exposed by the cluster's authentication service."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    type: str
    description: str = ""
    client_method: Union[ClientMethod, str] = Field(alias="client-method")
    config: ProviderConfig = Field(default_factory=ProviderConfig)

    @field_validator("client_method", mode="before")
    @classmethod
    def _known_method(cls, value: Any) -> Any:
        # Methods this client does not implement stay plain strings.
        try:
            return ClientMethod(value)
        except ValueError:
            return value

    @property
    def is_supported(self) -> bool:
        """Whether this client implements the provider's client method."""
        return isinstance(self.client_method, ClientMethod)

    @property
    def method_name(self) -> str:
        """The client method exactly as the cluster sent it."""
        if isinstance(self.client_method, ClientMethod):
            return self.client_method.value
        return self.client_method

    @property
    def label(self) -> str:
        """Human-readable label shown when the user picks a provider."""
        return self.description or f"{self.type} ({self.id})"


class Providers(RootModel[dict[str, Provider]]):
    """Provider catalog keyed by provider ID.

    The ``id`` of each provider is taken from its key in the JSON object
    returned by the cluster, so it is always consistent with the catalog.

    Example::

        providers = Providers.model_validate(response.json())
        providers.get("dcos-users")
        [p.id for p in providers.as_list()]
    """

    @model_validator(mode="before")
    @classmethod
    def _inject_ids(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        return {
            key: {**value, "id": key} if isinstance(value, dict) else value
            for key, value in data.items()
        }

    def get(self, provider_id: str) -> Optional[Provider]:
        """Return the provider registered under *provider_id*, if any."""
        return self.root.get(provider_id)

    def as_list(self) -> list[Provider]:
        """Return the providers in catalog order (sorted by ID)."""
        return sorted(self.root.values(), key=lambda provider: provider.id)

    def __len__(self) -> int:
        return len(self.root)


class Credentials(BaseModel):
    """Values submitted to a login endpoint.

    Which fields are set depends on the provider's client method:
    ``uid``/``password`` for credential methods, ``uid``/``token`` for
    service accounts, and ``token`` alone for browser logins.
    """

    uid: Optional[str] = None
    password: Optional[str] = None
    token: Optional[str] = None

    def to_payload(self) -> dict[str, str]:
        """Return the JSON body for the login request (unset fields omitted)."""
        return self.model_dump(exclude_none=True)
