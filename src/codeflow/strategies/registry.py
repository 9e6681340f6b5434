"""Strategy registry -- maps strategy names to strategy classes.

Provider configs name their strategy (``"oauth2"``, ``"github"``, ...);
:class:`StrategyRegistry` resolves that name to a class and instantiates
it with the caller's HTTP adapter and JSON codec.

For most use cases call :func:`create_default_registry` to get a registry
pre-loaded with the built-in strategies.
"""

from __future__ import annotations

from typing import Optional

from codeflow.client.adapter import HTTPAdapter
from codeflow.client.codec import JSONCodec
from codeflow.exceptions import ConfigurationError
from codeflow.strategies.base import Strategy


class StrategyRegistry:
    """Registry of strategy classes keyed by name.

    Example::

        registry = StrategyRegistry()
        registry.register("oauth2", OAuth2Strategy)
        strategy = registry.create("oauth2", http_adapter=adapter)
    """

    def __init__(self) -> None:
        self._strategies: dict[str, type[Strategy]] = {}

    def register(self, name: str, strategy_cls: type[Strategy]) -> None:
        """Register *strategy_cls* under *name*, replacing any previous entry."""
        self._strategies[name] = strategy_cls

    def get(self, name: str) -> type[Strategy]:
        """Return the strategy class registered under *name*.

        Raises:
            ConfigurationError: If no strategy is registered for *name*.
        """
        strategy_cls = self._strategies.get(name)
        if strategy_cls is None:
            available = ", ".join(sorted(self._strategies)) or "(none)"
            raise ConfigurationError(
                f"No strategy registered for '{name}'. Available strategies: {available}"
            )
        return strategy_cls

    def create(
        self,
        name: str,
        http_adapter: Optional[HTTPAdapter] = None,
        json_codec: Optional[JSONCodec] = None,
    ) -> Strategy:
        """Instantiate the strategy registered under *name* with the given collaborators."""
        return self.get(name)(http_adapter=http_adapter, json_codec=json_codec)

    def list_types(self) -> list[str]:
        """Return the registered strategy names, sorted."""
        return sorted(self._strategies)


def create_default_registry() -> StrategyRegistry:
    """Create a :class:`StrategyRegistry` with the built-in strategies.

    - ``oauth2`` -- generic OAuth2 authorization code flow.
    - ``github`` -- GitHub OAuth apps.
    """
    from codeflow.strategies.github import GitHubStrategy
    from codeflow.strategies.oauth2 import OAuth2Strategy

    registry = StrategyRegistry()
    registry.register("oauth2", OAuth2Strategy)
    registry.register("github", GitHubStrategy)
    return registry
