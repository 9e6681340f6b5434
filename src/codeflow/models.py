"""Canonical models shared across codeflow modules.

**Configuration** -- :class:`ProviderConfig`, the immutable option set a
strategy works from. Provider files are validated into it by
:mod:`codeflow.config`.

**Flow artifacts** -- :class:`AuthorizationRequest`, :class:`TokenResponse`
and :class:`CallbackResult` are produced by
:class:`~codeflow.strategies.base.Strategy` implementations and live only
for the duration of a single ``authorize_url`` / ``callback`` call.

:class:`HTTPResponse` is the value returned by HTTP adapters.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


# --- Provider config ---


class ProviderConfig(BaseModel):
    """Options for one OAuth2 provider.

    Instances are frozen; use :meth:`with_options` to derive an updated
    copy (e.g. to set ``redirect_uri`` or the expected ``state``). Unknown
    keys are preserved in ``model_extra`` so provider strategies can read
    their own options.

    Endpoint options may be absolute URLs or paths relative to ``site``.

    Example::

        ProviderConfig(
            site="https://provider.example.com",
            client_id="abc",
            client_secret="secret",
            user_url="/api/user",
        )
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    strategy: str = Field(
        default="oauth2", description="Registered strategy name, e.g. oauth2 or github"
    )
    site: Optional[str] = Field(
        default=None, description="Base URL for relative endpoint paths"
    )
    client_id: Optional[str] = None
    client_secret: Optional[str] = None
    authorize_url: Optional[str] = "/oauth/authorize"
    token_url: Optional[str] = "/oauth/token"
    user_url: Optional[str] = None
    redirect_uri: Optional[str] = None
    scope: Optional[str] = Field(
        default=None, description="Requested permission scope string"
    )
    state: Optional[str] = Field(
        default=None,
        description="Expected CSRF token for the callback, or a preset state for authorize_url",
    )
    response_type: str = "code"
    authorization_params: dict[str, str] = Field(
        default_factory=dict, description="Extra query parameters for the authorize URL"
    )
    user_token_param: Optional[str] = Field(
        default=None,
        description="Send the access token as this query parameter instead of a bearer header",
    )
    uid_field: Optional[str] = Field(
        default=None, description="Payload key holding the provider's user identifier"
    )

    def with_options(self, **options: Any) -> ProviderConfig:
        """Return a copy with *options* replaced."""
        return self.model_copy(update=options)


# --- Flow artifacts ---


class AuthorizationRequest(BaseModel):
    """Redirect URL plus the ``state`` the caller must store for the callback."""

    url: str
    state: str


class TokenResponse(BaseModel):
    """Parsed token endpoint payload."""

    access_token: str
    token_type: str = "Bearer"
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None
    scope: Optional[str] = None
    raw: dict[str, Any] = Field(default_factory=dict, repr=False)


class CallbackResult:
    """Outcome of a successful callback.

    Args:
        user: The normalized user profile. Contains at least ``uid`` when
            the provider payload carried an identifier.
        token: The token used to fetch the profile.
    """

    def __init__(self, user: Any, token: TokenResponse):
        self.user = user
        self.token = token

    def __repr__(self) -> str:
        return f"CallbackResult(user={self.user!r})"


@dataclass
class HTTPResponse:
    """Status, headers, and raw body of a completed HTTP exchange.

    Header names are lower-cased by the adapters.
    """

    status: int
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    @property
    def content_type(self) -> str:
        """Media type without parameters, e.g. ``application/json``."""
        return self.headers.get("content-type", "").split(";")[0].strip().lower()

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    @property
    def is_success(self) -> bool:
        return 200 <= self.status < 300
