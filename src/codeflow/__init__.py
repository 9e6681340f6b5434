"""codeflow -- OAuth2 authorization code flow as pluggable login strategies.

A strategy builds the provider redirect URL with an anti-forgery ``state``
and, on callback, exchanges the code for an access token, fetches the
user, and returns a normalized profile or a typed error.

Typical usage::

    from codeflow.models import ProviderConfig
    from codeflow.strategies import OAuth2Strategy

    strategy = OAuth2Strategy()
    request = strategy.authorize_url(config)
    ...
    result = strategy.callback(config.with_options(state=request.state), params)

Modules:
    strategies: Strategy interface, generic OAuth2 flow, provider strategies.
    flow: Session-backed helper for web applications.
    state: State generation and verification.
    normalizer: Canonical user profile mapping.
    client: HTTP adapter and JSON codec collaborators.
    models: Pydantic models shared across the package.
    config: Provider files and credential resolution.
    exceptions: Error taxonomy with exit-code mapping.
    app: Typer command line for exercising providers.
"""

__version__ = "0.1.0"
