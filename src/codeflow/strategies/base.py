"""Abstract base class for authentication strategies.

A strategy implements the two halves of a redirect-based login:

- :meth:`Strategy.authorize_url` -- build the URL the user is sent to,
  together with the ``state`` the caller must keep until the callback.
- :meth:`Strategy.callback` -- turn the parameters the provider redirected
  back with into a normalized user profile.

Both raise :class:`~codeflow.exceptions.CodeflowError` subclasses on
failure. Strategies hold no per-request state: the HTTP adapter and JSON
codec are injected once and every call works only from its arguments, so
one instance can serve concurrent requests.

See Also:
    :class:`codeflow.strategies.oauth2.OAuth2Strategy` for the generic
    OAuth2 implementation.
    :class:`codeflow.strategies.registry.StrategyRegistry` for lookup by
    name.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Optional

from codeflow.client.adapter import HTTPAdapter, HttpxAdapter
from codeflow.client.codec import JSONCodec
from codeflow.models import AuthorizationRequest, CallbackResult, ProviderConfig
from codeflow.normalizer import UID_KEY, normalize


class Strategy(ABC):
    """Base class for strategies.

    Subclasses provide :attr:`strategy_name`, :meth:`authorize_url` and
    :meth:`callback`. Field mapping is customised through the
    :attr:`uid_field` and :attr:`field_map` class attributes, which feed
    the default :meth:`normalize`.

    Args:
        http_adapter: Adapter used for provider requests. Defaults to
            :class:`~codeflow.client.adapter.HttpxAdapter`.
        json_codec: Codec for JSON payloads. Defaults to
            :class:`~codeflow.client.codec.JSONCodec`.
    """

    uid_field: str = UID_KEY
    field_map: Optional[dict[str, str]] = None

    def __init__(
        self,
        http_adapter: Optional[HTTPAdapter] = None,
        json_codec: Optional[JSONCodec] = None,
    ) -> None:
        self.http_adapter = http_adapter or HttpxAdapter()
        self.json_codec = json_codec or JSONCodec()

    @property
    @abstractmethod
    def strategy_name(self) -> str:
        """Return the name this strategy is registered under (e.g. ``"oauth2"``)."""
        ...

    @abstractmethod
    def authorize_url(self, config: ProviderConfig) -> AuthorizationRequest:
        """Build the authorization redirect URL.

        Args:
            config: Provider options.

        Returns:
            The URL and the ``state`` to store for the callback.

        Raises:
            ConfigurationError: If a required endpoint is missing.
        """
        ...

    @abstractmethod
    def callback(self, config: ProviderConfig, params: Mapping[str, str]) -> CallbackResult:
        """Complete the flow from the provider's redirect parameters.

        Args:
            config: Provider options, with ``state`` set to the value
                stored when the authorization URL was built.
            params: Query or body parameters of the callback request.

        Returns:
            The normalized user profile and the access token.

        Raises:
            CallbackError: The provider redirected with an ``error``.
            CallbackCSRFError: The ``state`` is missing or does not match.
            RequestError: A provider request failed.
            ConfigurationError: A required option is missing.
        """
        ...

    def normalize(self, config: ProviderConfig, user: Any) -> Any:
        """Map the raw user payload into a canonical profile."""
        return normalize(
            user,
            uid_field=config.uid_field or self.uid_field,
            field_map=self.field_map,
        )

    def validate_config(self, config: ProviderConfig) -> list[str]:
        """Return human-readable problems with *config*; empty when usable."""
        return []
