"""Provider configuration files and credential resolution.

Strategies take a ready :class:`~codeflow.models.ProviderConfig`; this
module is how the command line (and applications that want it) build
those configs from disk.

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.codeflow/`` elsewhere. See :func:`get_config_dir`.
* **Provider files** -- JSON or YAML objects, either
  ``{"providers": {name: options}}`` or a bare ``{name: options}``
  mapping. Loaded by :func:`load_providers`.
* **Precedence** -- :func:`resolve_providers_path` picks the file from the
  CLI flag, the ``CODEFLOW_CONFIG`` environment variable, the working
  directory, and finally the config directory.
* **Credentials** -- ``client_id_source`` / ``client_secret_source``
  descriptors (``env:VAR`` or ``file:/path``) are resolved by
  :func:`resolve_credential` so secrets need not live in the file.

Example provider file::

    providers:
      github:
        strategy: github
        client_id_source: env:GITHUB_CLIENT_ID
        client_secret_source: env:GITHUB_CLIENT_SECRET
"""

from __future__ import annotations

import json
import logging
import os
import platform
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from codeflow.exceptions import ConfigurationError
from codeflow.models import ProviderConfig

logger = logging.getLogger(__name__)

_APP_NAME = "codeflow"
_ENV_CONFIG = "CODEFLOW_CONFIG"
_PROVIDER_FILENAMES = ("providers.json", "providers.yaml", "providers.yml")
_PROJECT_FILENAMES = ("codeflow.json", "codeflow.yaml", "codeflow.yml")
_CREDENTIAL_OPTIONS = {
    "client_id_source": "client_id",
    "client_secret_source": "client_secret",
}


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def get_config_dir() -> Path:
    """Return the configuration directory (not created).

    On Linux/BSD: ``$XDG_CONFIG_HOME/codeflow/`` (default ``~/.config/codeflow/``).
    Elsewhere: ``~/.codeflow/``.
    """
    if _is_xdg_platform():
        env_value = os.environ.get("XDG_CONFIG_HOME", "")
        base = Path(env_value) if env_value else Path.home() / ".config"
        return base / _APP_NAME
    return Path.home() / f".{_APP_NAME}"


def resolve_providers_path(cli_path: Optional[str] = None) -> Path:
    """Locate the provider file.

    Precedence (high to low):
        1. *cli_path* (``--config``)
        2. ``CODEFLOW_CONFIG`` environment variable
        3. ``./codeflow.json``, ``./codeflow.yaml``, ``./codeflow.yml``
        4. ``providers.json`` / ``.yaml`` / ``.yml`` in :func:`get_config_dir`

    Raises:
        ConfigurationError: If no candidate file exists.
    """
    if cli_path:
        return Path(cli_path).expanduser()

    env_path = os.environ.get(_ENV_CONFIG)
    if env_path:
        return Path(env_path).expanduser()

    candidates = [Path.cwd() / name for name in _PROJECT_FILENAMES]
    candidates += [get_config_dir() / name for name in _PROVIDER_FILENAMES]
    for candidate in candidates:
        if candidate.is_file():
            return candidate

    raise ConfigurationError(
        f"No provider configuration found. Pass --config, set {_ENV_CONFIG}, "
        f"or create {get_config_dir() / _PROVIDER_FILENAMES[0]}"
    )


# --- Provider files ---


def load_providers(path: Path | str) -> dict[str, ProviderConfig]:
    """Load and validate provider configs from a JSON or YAML file.

    Args:
        path: The provider file.

    Returns:
        Provider name to :class:`~codeflow.models.ProviderConfig`.

    Raises:
        ConfigurationError: If the file is missing, unparseable, or a
            provider entry fails validation or credential resolution.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise ConfigurationError(f"Provider file not found: {file_path}")
    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Cannot read provider file {file_path}: {exc}") from exc

    data = _parse_content(content, file_path)
    entries = data.get("providers", data)
    if not isinstance(entries, dict):
        raise ConfigurationError(f"'providers' in {file_path} must be an object")

    providers: dict[str, ProviderConfig] = {}
    for name, options in entries.items():
        if not isinstance(options, dict):
            raise ConfigurationError(f"Provider '{name}' in {file_path} must be an object")
        providers[str(name)] = build_provider_config(str(name), options)

    logger.debug("Loaded %d provider(s) from %s", len(providers), file_path)
    return providers


def build_provider_config(name: str, options: dict[str, Any]) -> ProviderConfig:
    """Validate *options* into a :class:`ProviderConfig`, resolving credential sources.

    Raises:
        ConfigurationError: On validation or credential resolution failure.
    """
    values = dict(options)
    for source_key, target_key in _CREDENTIAL_OPTIONS.items():
        source = values.pop(source_key, None)
        if source is not None and values.get(target_key) is None:
            values[target_key] = resolve_credential(str(source))
    try:
        return ProviderConfig.model_validate(values)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration for provider '{name}': {exc}") from exc


def _parse_content(content: str, path: Path) -> dict[str, Any]:
    """Parse *content* as JSON for ``.json`` files, YAML otherwise."""
    try:
        if path.suffix.lower() == ".json":
            result = json.loads(content)
        else:
            result = yaml.safe_load(content)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"Invalid provider file {path}: {exc}") from exc

    if not isinstance(result, dict):
        raise ConfigurationError(
            f"Provider file {path} must contain an object "
            f"(got {type(result).__name__ if result is not None else 'empty document'})"
        )
    return result


# --- Credential source resolution ---


def resolve_credential(source: str) -> str:
    """Resolve a credential from its source descriptor.

    Supported formats:
        - ``"env:VAR_NAME"`` -- reads ``os.environ["VAR_NAME"]``
        - ``"file:/path/to/file"`` -- reads file content, stripped of whitespace

    Raises:
        ConfigurationError: If the source can't be resolved.
    """
    if source.startswith("env:"):
        var_name = source[4:]
        value = os.environ.get(var_name)
        if value is None:
            raise ConfigurationError(
                f"Environment variable '{var_name}' is not set (source: {source})"
            )
        return value

    if source.startswith("file:"):
        path = Path(source[5:]).expanduser()
        if not path.is_file():
            raise ConfigurationError(f"Credential file not found: {path} (source: {source})")
        try:
            return path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise ConfigurationError(f"Cannot read credential file {path}: {exc}") from exc

    raise ConfigurationError(f"Unknown credential source format: {source}")
