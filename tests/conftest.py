"""Shared test fixtures for codeflow.

Provider traffic is faked with :class:`tests.fakes.FakeProvider`; the
``config`` and ``callback_params`` fixtures match each other so that a
callback passes state verification unless a test changes one of them.
"""

from __future__ import annotations

import pytest

from codeflow.models import ProviderConfig
from codeflow.output import reset_output

from tests.fakes import SITE, FakeProvider


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Drop the global OutputManager so streams captured by CliRunner do not leak."""
    yield
    reset_output()


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def config() -> ProviderConfig:
    """Provider config pointing at the fake provider, with state ``test``."""
    return ProviderConfig(
        site=SITE,
        client_id="id",
        client_secret="secret",
        redirect_uri="test",
        state="test",
        user_url="/api/user",
    )


@pytest.fixture
def callback_params() -> dict[str, str]:
    return {"code": "test", "state": "test"}
