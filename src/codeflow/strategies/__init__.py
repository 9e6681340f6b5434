"""Authentication strategies.

- :class:`Strategy` -- abstract base for redirect-based login strategies.
- :class:`OAuth2Strategy` -- the generic OAuth2 authorization code flow.
- :class:`GitHubStrategy` -- GitHub defaults and field mapping.
- :class:`StrategyRegistry` / :func:`create_default_registry` -- lookup by name.
"""

from codeflow.strategies.base import Strategy
from codeflow.strategies.github import GitHubStrategy
from codeflow.strategies.oauth2 import OAuth2Strategy
from codeflow.strategies.registry import StrategyRegistry, create_default_registry

__all__ = [
    "Strategy",
    "OAuth2Strategy",
    "GitHubStrategy",
    "StrategyRegistry",
    "create_default_registry",
]
