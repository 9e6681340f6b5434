"""Tests for codeflow.config: XDG paths, provider files, credential sources."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from codeflow.config import (
    build_provider_config,
    get_config_dir,
    load_providers,
    resolve_credential,
    resolve_providers_path,
)
from codeflow.exceptions import ConfigurationError


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _write_json(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


# ---------------------------------------------------------------------------
# XDG path resolution
# ---------------------------------------------------------------------------


class TestConfigDir:
    def test_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("codeflow.config._is_xdg_platform", lambda: True)
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setattr(Path, "home", staticmethod(lambda: tmp_path))

        assert get_config_dir() == tmp_path / ".config" / "codeflow"

    def test_xdg_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("codeflow.config._is_xdg_platform", lambda: True)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))

        assert get_config_dir() == tmp_path / "xdg" / "codeflow"

    def test_non_xdg(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("codeflow.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", staticmethod(lambda: tmp_path))

        assert get_config_dir() == tmp_path / ".codeflow"


# ---------------------------------------------------------------------------
# Provider file precedence
# ---------------------------------------------------------------------------


class TestResolveProvidersPath:
    @pytest.fixture(autouse=True)
    def _isolate(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("CODEFLOW_CONFIG", raising=False)
        monkeypatch.setattr("codeflow.config.get_config_dir", lambda: tmp_path / "cfg")

    def test_cli_path_wins(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CODEFLOW_CONFIG", str(tmp_path / "env.yaml"))

        assert resolve_providers_path(str(tmp_path / "cli.yaml")) == tmp_path / "cli.yaml"

    def test_env_var(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CODEFLOW_CONFIG", str(tmp_path / "env.yaml"))
        (tmp_path / "codeflow.json").write_text("{}")

        assert resolve_providers_path() == tmp_path / "env.yaml"

    def test_project_file(self, tmp_path: Path) -> None:
        (tmp_path / "codeflow.yaml").write_text("{}")
        _write_json(tmp_path / "cfg" / "providers.json", {})

        assert resolve_providers_path() == tmp_path / "codeflow.yaml"

    def test_config_dir_file(self, tmp_path: Path) -> None:
        _write_json(tmp_path / "cfg" / "providers.json", {})

        assert resolve_providers_path() == tmp_path / "cfg" / "providers.json"

    def test_nothing_found(self) -> None:
        with pytest.raises(ConfigurationError, match="No provider configuration found"):
            resolve_providers_path()


# ---------------------------------------------------------------------------
# Provider files
# ---------------------------------------------------------------------------


class TestLoadProviders:
    def test_yaml_with_providers_key(self, tmp_path: Path) -> None:
        path = tmp_path / "providers.yaml"
        path.write_text(
            "providers:\n"
            "  github:\n"
            "    strategy: github\n"
            "    client_id: abc\n"
            "  example:\n"
            "    site: https://provider.example.com\n"
            "    user_url: /api/user\n"
            "    authorization_params:\n"
            "      prompt: consent\n",
            encoding="utf-8",
        )

        providers = load_providers(path)

        assert sorted(providers) == ["example", "github"]
        assert providers["github"].strategy == "github"
        assert providers["example"].strategy == "oauth2"
        assert providers["example"].authorization_params == {"prompt": "consent"}

    def test_bare_json_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "providers.json"
        _write_json(path, {"example": {"client_id": "abc", "site": "https://p.test"}})

        assert load_providers(path)["example"].client_id == "abc"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="not found"):
            load_providers(tmp_path / "missing.yaml")

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "providers.json"
        path.write_text("{", encoding="utf-8")

        with pytest.raises(ConfigurationError, match="Invalid provider file"):
            load_providers(path)

    @pytest.mark.parametrize("content", ["", "- a\n- b\n"])
    def test_not_an_object(self, tmp_path: Path, content: str) -> None:
        path = tmp_path / "providers.yaml"
        path.write_text(content, encoding="utf-8")

        with pytest.raises(ConfigurationError, match="must contain an object"):
            load_providers(path)

    def test_entry_not_an_object(self, tmp_path: Path) -> None:
        path = tmp_path / "providers.json"
        _write_json(path, {"providers": {"example": "oops"}})

        with pytest.raises(ConfigurationError, match="Provider 'example'"):
            load_providers(path)


class TestBuildProviderConfig:
    def test_resolves_credential_sources(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("EXAMPLE_CLIENT_ID", "from-env")
        secret = tmp_path / "secret"
        secret.write_text("from-file\n", encoding="utf-8")

        config = build_provider_config(
            "example",
            {"client_id_source": "env:EXAMPLE_CLIENT_ID", "client_secret_source": f"file:{secret}"},
        )

        assert config.client_id == "from-env"
        assert config.client_secret == "from-file"

    def test_explicit_value_beats_source(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("EXAMPLE_CLIENT_ID", "from-env")

        config = build_provider_config(
            "example", {"client_id": "inline", "client_id_source": "env:EXAMPLE_CLIENT_ID"}
        )

        assert config.client_id == "inline"

    def test_validation_error(self) -> None:
        with pytest.raises(ConfigurationError, match="Invalid configuration for provider 'example'"):
            build_provider_config("example", {"authorization_params": "not-a-dict"})


class TestResolveCredential:
    def test_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CF_SECRET", "s3cret")
        assert resolve_credential("env:CF_SECRET") == "s3cret"

    def test_env_missing(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("CF_SECRET", raising=False)
        with pytest.raises(ConfigurationError, match="CF_SECRET"):
            resolve_credential("env:CF_SECRET")

    def test_file_missing(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="Credential file not found"):
            resolve_credential(f"file:{tmp_path / 'nope'}")

    def test_unknown_format(self) -> None:
        with pytest.raises(ConfigurationError, match="Unknown credential source format"):
            resolve_credential("vault:secret/x")
