"""Flow commands -- run a provider's authorization code flow by hand.

Useful when registering a new OAuth app or debugging a provider config:

    codeflow providers                       # list configured providers
    codeflow authorize github --redirect-uri http://localhost:8000/cb
    codeflow callback github --state <state> --url 'http://localhost:8000/cb?code=...&state=...'

``authorize`` prints the URL and the generated state; after approving in
the browser, paste the callback URL (or its parameters) into ``callback``
together with that state to see the normalized profile.
"""

from __future__ import annotations

from typing import NoReturn, Optional
from urllib.parse import parse_qsl, urlparse

import typer

from codeflow.exceptions import CodeflowError, InvalidUsageError
from codeflow.flow import AuthFlow
from codeflow.output import debug, error, get_output, success


def _load_flow(ctx: typer.Context) -> AuthFlow:
    """Build an :class:`AuthFlow` from the provider file selected by the global options."""
    from codeflow.client.adapter import HttpxAdapter
    from codeflow.config import load_providers, resolve_providers_path

    obj = ctx.obj or {}
    path = resolve_providers_path(obj.get("config"))
    debug(f"Loading providers from {path}")
    providers = load_providers(path)
    adapter = HttpxAdapter(timeout=obj.get("timeout", 30.0))
    return AuthFlow(providers, http_adapter=adapter)


def _fail(exc: CodeflowError) -> NoReturn:
    error(str(exc))
    raise typer.Exit(code=exc.exit_code)


def _parse_params(params: list[str], url: Optional[str]) -> dict[str, str]:
    """Merge ``key=value`` pairs with the query string of *url*."""
    merged: dict[str, str] = {}
    if url:
        merged.update(parse_qsl(urlparse(url).query, keep_blank_values=True))
    for pair in params:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise InvalidUsageError(f"Invalid --param '{pair}', expected key=value")
        merged[key] = value
    return merged


def providers_command(ctx: typer.Context) -> None:
    """List configured providers and any configuration problems."""
    try:
        flow = _load_flow(ctx)
        rows: list[list[str]] = []
        for name in flow.available_providers():
            strategy, config = flow.get_provider(name)
            problems = strategy.validate_config(config)
            rows.append([name, strategy.strategy_name, "; ".join(problems) or "ok"])
    except CodeflowError as exc:
        _fail(exc)

    get_output().print_table(["provider", "strategy", "status"], rows, title="Providers")


def authorize_command(
    ctx: typer.Context,
    provider: str = typer.Argument(help="Configured provider name."),
    redirect_uri: str = typer.Option(
        ..., "--redirect-uri", "-r", help="Callback URL registered with the provider."
    ),
) -> None:
    """Print the authorization URL and state for a provider."""
    session: dict[str, dict[str, dict[str, str]]] = {}
    try:
        flow = _load_flow(ctx)
        url = flow.authenticate(session, provider, redirect_uri)
    except CodeflowError as exc:
        _fail(exc)

    state = session[flow.session_key][provider]["state"]
    get_output().print_mapping({"url": url, "state": state})


def callback_command(
    ctx: typer.Context,
    provider: str = typer.Argument(help="Configured provider name."),
    state: str = typer.Option(
        ..., "--state", "-s", help="State printed by 'codeflow authorize'."
    ),
    url: Optional[str] = typer.Option(
        None, "--url", "-u", help="Full callback URL the provider redirected to."
    ),
    param: Optional[list[str]] = typer.Option(
        None, "--param", "-P", help="Callback parameter as key=value (repeatable)."
    ),
    redirect_uri: Optional[str] = typer.Option(
        None, "--redirect-uri", "-r", help="Redirect URI sent with the token request."
    ),
) -> None:
    """Exchange callback parameters for a normalized user profile."""
    try:
        params = _parse_params(param or [], url)
        flow = _load_flow(ctx)
        session = {flow.session_key: {provider: {"state": state}}}
        result = flow.callback(session, provider, params, callback_url=redirect_uri)
    except CodeflowError as exc:
        _fail(exc)

    success(f"Authenticated with {provider}.")
    if isinstance(result.user, dict):
        get_output().print_mapping(result.user)
    else:
        get_output().print_data(str(result.user))
