"""Session-backed helper for running strategies from a web application.

:class:`AuthFlow` sits between a request handler and the strategies. It
looks up a provider's config and strategy by name, keeps the ``state``
token in the caller's session between the redirect and the callback, and
returns the strategy result unchanged.

Any mutable mapping works as a session (a framework session object, a
signed-cookie dict, a plain ``dict`` in tests)::

    flow = AuthFlow(providers)

    # GET /auth/github
    url = flow.authenticate(request.session, "github", "https://app/auth/github/callback")

    # GET /auth/github/callback
    result = flow.callback(request.session, "github", request.query_params)

Storing users or identities is left to the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, MutableMapping
from typing import Any, Optional

from codeflow.client.adapter import HTTPAdapter
from codeflow.client.codec import JSONCodec
from codeflow.exceptions import ConfigurationError
from codeflow.models import CallbackResult, ProviderConfig
from codeflow.strategies.base import Strategy
from codeflow.strategies.registry import StrategyRegistry, create_default_registry

logger = logging.getLogger(__name__)

SESSION_KEY = "codeflow_state"
"""Default session key under which pending states are stored."""


class AuthFlow:
    """Run provider strategies with the ``state`` kept in a session.

    Pending states are stored per provider under ``session[session_key]``,
    together with the redirect URI they were issued for, so that concurrent
    logins with different providers do not clobber each other. A state is removed as soon as its callback runs, whatever the
    outcome.

    Args:
        providers: Provider name to config mapping.
        registry: Strategy registry. Defaults to
            :func:`~codeflow.strategies.registry.create_default_registry`.
        http_adapter: Adapter handed to every strategy.
        json_codec: Codec handed to every strategy.
        session_key: Session key for pending states.
    """

    def __init__(
        self,
        providers: Mapping[str, ProviderConfig],
        registry: Optional[StrategyRegistry] = None,
        http_adapter: Optional[HTTPAdapter] = None,
        json_codec: Optional[JSONCodec] = None,
        session_key: str = SESSION_KEY,
    ) -> None:
        self._providers = dict(providers)
        self._registry = registry or create_default_registry()
        self._http_adapter = http_adapter
        self._json_codec = json_codec
        self._session_key = session_key

    @property
    def session_key(self) -> str:
        return self._session_key

    def available_providers(self) -> list[str]:
        """Return the configured provider names, sorted."""
        return sorted(self._providers)

    def get_provider(self, provider: str) -> tuple[Strategy, ProviderConfig]:
        """Return the strategy instance and config for *provider*.

        Raises:
            ConfigurationError: If the provider is not configured or names
                an unknown strategy.
        """
        config = self._providers.get(provider)
        if config is None:
            raise ConfigurationError(f"No configuration for provider '{provider}'")
        strategy = self._registry.create(
            config.strategy,
            http_adapter=self._http_adapter,
            json_codec=self._json_codec,
        )
        return strategy, config

    def authenticate(
        self, session: MutableMapping[str, Any], provider: str, callback_url: str
    ) -> str:
        """Build the authorization URL for *provider* and remember its state.

        Args:
            session: The caller's session mapping.
            provider: Configured provider name.
            callback_url: Redirect URI registered with the provider.

        Returns:
            The URL to redirect the user to.
        """
        strategy, config = self.get_provider(provider)
        request = strategy.authorize_url(config.with_options(redirect_uri=callback_url))

        pending = dict(session.get(self._session_key) or {})
        pending[provider] = {"state": request.state, "redirect_uri": callback_url}
        session[self._session_key] = pending

        logger.debug("Stored authorization state for provider '%s'", provider)
        return request.url

    def callback(
        self,
        session: MutableMapping[str, Any],
        provider: str,
        params: Mapping[str, str],
        callback_url: Optional[str] = None,
    ) -> CallbackResult:
        """Complete the flow for *provider* with the stored state.

        Args:
            session: The caller's session mapping.
            provider: Configured provider name.
            params: Query or body parameters of the callback request.
            callback_url: Redirect URI for the token request. Defaults to
                the one stored by :meth:`authenticate`.

        Returns:
            The strategy's :class:`~codeflow.models.CallbackResult`.

        Raises:
            CodeflowError: Whatever the strategy raises; a missing stored
                state surfaces as :class:`~codeflow.exceptions.CallbackCSRFError`.
        """
        strategy, config = self.get_provider(provider)

        pending = dict(session.get(self._session_key) or {})
        entry = pending.pop(provider, None) or {}
        if pending:
            session[self._session_key] = pending
        else:
            session.pop(self._session_key, None)

        options: dict[str, Any] = {"state": entry.get("state")}
        redirect_uri = callback_url or entry.get("redirect_uri")
        if redirect_uri is not None:
            options["redirect_uri"] = redirect_uri
        return strategy.callback(config.with_options(**options), params)
