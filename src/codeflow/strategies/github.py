"""GitHub strategy.

Uses GitHub's OAuth endpoints and maps the ``/user`` payload onto the
canonical profile keys. Only the defaults and the field map differ from
:class:`~codeflow.strategies.oauth2.OAuth2Strategy`.
"""

from __future__ import annotations

from typing import Any

from codeflow.strategies.oauth2 import OAuth2Strategy


class GitHubStrategy(OAuth2Strategy):
    """Authenticate with a GitHub OAuth app."""

    default_config: dict[str, Any] = {
        "site": "https://api.github.com",
        "authorize_url": "https://github.com/login/oauth/authorize",
        "token_url": "https://github.com/login/oauth/access_token",
        "user_url": "/user",
        "scope": "read:user user:email",
    }
    uid_field = "id"
    field_map = {
        "name": "name",
        "nickname": "login",
        "email": "email",
        "location": "location",
        "description": "bio",
        "image": "avatar_url",
        "website": "blog",
        "profile_url": "html_url",
    }

    @property
    def strategy_name(self) -> str:
        return "github"
