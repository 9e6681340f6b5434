"""Generic OAuth2 authorization code strategy.

:class:`OAuth2Strategy` implements the ``oauth2`` strategy:

1. :meth:`~OAuth2Strategy.authorize_url` builds the provider redirect with
   ``client_id``, ``redirect_uri``, ``response_type``, ``scope`` and a
   fresh ``state``.
2. :meth:`~OAuth2Strategy.callback` checks the redirect for a provider
   error, verifies ``state``, exchanges the code at the token endpoint,
   fetches the user endpoint with the access token and normalizes the
   result.

Every provider request is made at most once; the first failure raises and
nothing after it runs. Provider strategies subclass this and only set
:attr:`~OAuth2Strategy.default_config` and the field mapping.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Optional
from urllib.parse import urlencode, urlparse

from codeflow.client.codec import decode_body
from codeflow.exceptions import (
    CallbackError,
    ConfigurationError,
    DecodeError,
    RequestError,
    RequestErrorKind,
    TransportError,
)
from codeflow.models import (
    AuthorizationRequest,
    CallbackResult,
    HTTPResponse,
    ProviderConfig,
    TokenResponse,
)
from codeflow.state import generate_state, verify_state
from codeflow.strategies.base import Strategy

logger = logging.getLogger(__name__)

_ENDPOINT_LABELS = {
    "authorize_url": "authorize URL",
    "token_url": "token URL",
    "user_url": "user URL",
}


class OAuth2Strategy(Strategy):
    """OAuth2 authorization code flow.

    Options missing from the caller's config fall back to
    :attr:`default_config`, then to the :class:`~codeflow.models.ProviderConfig`
    defaults.

    Example::

        strategy = OAuth2Strategy()
        request = strategy.authorize_url(config)
        session["state"] = request.state
        # ... user returns from the provider ...
        result = strategy.callback(config.with_options(state=session.pop("state")), params)
        result.user["uid"]
    """

    default_config: dict[str, Any] = {}

    @property
    def strategy_name(self) -> str:
        return "oauth2"

    # ------------------------------------------------------------------ #
    # Authorization request
    # ------------------------------------------------------------------ #

    def authorize_url(self, config: ProviderConfig) -> AuthorizationRequest:
        config = self.resolve_config(config)
        url = self.endpoint(config, "authorize_url")
        state = config.state or generate_state()

        params: dict[str, str] = dict(config.authorization_params)
        params.update(
            {
                "client_id": config.client_id or "",
                "redirect_uri": config.redirect_uri or "",
                "response_type": config.response_type,
                "state": state,
            }
        )
        if config.scope:
            params["scope"] = config.scope

        return AuthorizationRequest(url=_with_query(url, params), state=state)

    # ------------------------------------------------------------------ #
    # Callback
    # ------------------------------------------------------------------ #

    def callback(self, config: ProviderConfig, params: Mapping[str, str]) -> CallbackResult:
        config = self.resolve_config(config)

        self.check_redirect_error(params)
        verify_state(config.state, params.get("state"))
        token = self.get_access_token(config, params)
        user = self.get_user(config, token)
        profile = self.normalize(config, user)

        logger.info("Completed %s callback", self.strategy_name)
        return CallbackResult(user=profile, token=token)

    def check_redirect_error(self, params: Mapping[str, str]) -> None:
        """Raise :class:`CallbackError` if the provider redirected with an ``error``."""
        if "error" in params:
            logger.debug("Provider redirected with error '%s'", params["error"])
            raise CallbackError(
                params["error"],
                error_description=params.get("error_description"),
                error_uri=params.get("error_uri"),
            )

    def get_access_token(
        self, config: ProviderConfig, params: Mapping[str, str]
    ) -> TokenResponse:
        """Exchange the authorization code for an access token.

        Raises:
            RequestError: ``UNREACHABLE`` on transport failure,
                ``INVALID_SERVER_RESPONSE`` on a non-2xx status, and
                ``UNEXPECTED_RESPONSE`` when a 2xx body is undecodable,
                carries an ``error`` field or lacks ``access_token``.
        """
        token_url = self.endpoint(config, "token_url")
        form = {
            "client_id": config.client_id,
            "client_secret": config.client_secret,
            "code": params.get("code", ""),
            "grant_type": "authorization_code",
            "redirect_uri": config.redirect_uri,
            "response_type": "code",
        }
        body = urlencode({k: v for k, v in form.items() if v is not None})

        logger.debug("Exchanging authorization code at %s", token_url)
        response = self.request(
            "POST",
            token_url,
            headers={
                "Accept": "application/json",
                "Content-Type": "application/x-www-form-urlencoded",
            },
            body=body,
        )
        if not response.is_success:
            raise _invalid_server_response(response)

        try:
            payload = decode_body(response, self.json_codec)
        except DecodeError as exc:
            raise RequestError(
                f"Unexpected token response: {exc}",
                RequestErrorKind.UNEXPECTED_RESPONSE,
                response.status,
                response.text,
            ) from exc

        if not isinstance(payload, Mapping):
            raise RequestError(
                "Unexpected token response: expected an object",
                RequestErrorKind.UNEXPECTED_RESPONSE,
                response.status,
                response.text,
            )
        if payload.get("error"):
            raise RequestError(
                str(payload.get("error_description") or payload["error"]),
                RequestErrorKind.UNEXPECTED_RESPONSE,
                response.status,
                response.text,
            )
        if not payload.get("access_token"):
            raise RequestError(
                "No access token in token response",
                RequestErrorKind.UNEXPECTED_RESPONSE,
                response.status,
                response.text,
            )

        return TokenResponse(
            access_token=str(payload["access_token"]),
            token_type=str(payload.get("token_type") or "Bearer"),
            refresh_token=_to_str(payload.get("refresh_token")),
            expires_in=_to_int(payload.get("expires_in")),
            scope=_to_str(payload.get("scope")),
            raw=dict(payload),
        )

    def get_user(self, config: ProviderConfig, token: TokenResponse) -> Any:
        """Fetch the raw user payload with *token*.

        Raises:
            ConfigurationError: If no ``user_url`` is configured.
            RequestError: ``UNREACHABLE`` on transport failure,
                ``UNAUTHORIZED`` ("Unauthorized token") on 401,
                ``INVALID_SERVER_RESPONSE`` on other non-2xx statuses, and
                ``UNEXPECTED_RESPONSE`` for an undecodable body.
        """
        user_url = self.endpoint(config, "user_url")
        headers, query = self.user_request_auth(config, token)

        logger.debug("Fetching user from %s", user_url)
        response = self.request("GET", _with_query(user_url, query), headers=headers)
        if response.status == 401:
            raise RequestError(
                "Unauthorized token",
                RequestErrorKind.UNAUTHORIZED,
                response.status,
                response.text,
            )
        if not response.is_success:
            raise _invalid_server_response(response)

        try:
            return decode_body(response, self.json_codec)
        except DecodeError as exc:
            raise RequestError(
                f"Unexpected user response: {exc}",
                RequestErrorKind.UNEXPECTED_RESPONSE,
                response.status,
                response.text,
            ) from exc

    def user_request_auth(
        self, config: ProviderConfig, token: TokenResponse
    ) -> tuple[dict[str, str], dict[str, str]]:
        """Return the headers and query params that authenticate the user request.

        Sends ``Authorization: Bearer <token>`` unless ``user_token_param``
        is configured, in which case the token goes in that query param.
        """
        headers = {"Accept": "application/json"}
        if config.user_token_param:
            return headers, {config.user_token_param: token.access_token}
        token_type = "Bearer" if token.token_type.lower() == "bearer" else token.token_type
        headers["Authorization"] = f"{token_type} {token.access_token}"
        return headers, {}

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    def resolve_config(self, config: ProviderConfig) -> ProviderConfig:
        """Fill options the caller did not set from :attr:`default_config`."""
        if not self.default_config:
            return config
        values = dict(self.default_config)
        values.update(config.model_dump(exclude_unset=True))
        return ProviderConfig(**values)

    def endpoint(self, config: ProviderConfig, option: str) -> str:
        """Return the absolute URL for endpoint *option*.

        Raises:
            ConfigurationError: If the option is unset or unparseable, or is
                a relative path and no ``site`` is configured.
        """
        label = _ENDPOINT_LABELS.get(option, option)
        value: Optional[str] = getattr(config, option, None)
        if not value:
            raise ConfigurationError(f"No {label} set")
        try:
            scheme = urlparse(value).scheme
        except ValueError as exc:
            raise ConfigurationError(f"Invalid {label} '{value}'") from exc
        if scheme:
            return value
        if not config.site:
            raise ConfigurationError(f"No site set to resolve relative {label} '{value}'")
        return f"{config.site.rstrip('/')}/{value.lstrip('/')}"

    def validate_config(self, config: ProviderConfig) -> list[str]:
        config = self.resolve_config(config)
        errors: list[str] = []
        for option in ("authorize_url", "token_url", "user_url"):
            try:
                self.endpoint(config, option)
            except ConfigurationError as exc:
                errors.append(exc.message)
        if not config.client_id:
            errors.append("No client ID set")
        return errors

    def request(
        self,
        method: str,
        url: str,
        headers: Optional[dict[str, str]] = None,
        body: Optional[str] = None,
    ) -> HTTPResponse:
        """Send a request through the adapter, classifying transport failures."""
        try:
            return self.http_adapter.request(method, url, headers=headers, body=body)
        except TransportError as exc:
            raise RequestError(
                f"Could not reach provider: {exc}", RequestErrorKind.UNREACHABLE
            ) from exc


def _invalid_server_response(response: HTTPResponse) -> RequestError:
    return RequestError(
        f"Server responded with status: {response.status}",
        RequestErrorKind.INVALID_SERVER_RESPONSE,
        response.status,
        response.text,
    )


def _with_query(url: str, params: Mapping[str, str]) -> str:
    """Append *params* to *url* in sorted key order."""
    if not params:
        return url
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{urlencode(sorted(params.items()))}"


def _to_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _to_int(value: Any) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
