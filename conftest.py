"""Global test configuration and shared fixtures."""

from __future__ import annotations

import typing as t

import pytest

from client_mox.debug import CLIENT_MOX_DEBUG_ENV, DEFAULT_DEBUG_SETTINGS

pytest_plugins = ("client_mox.pytest_plugin", "pytester")


@pytest.fixture(autouse=True)
def reset_global_debug(
    monkeypatch: pytest.MonkeyPatch,
) -> t.Generator[None, None, None]:
    """Ensure each test starts with debug output off and no env override."""
    monkeypatch.delenv(CLIENT_MOX_DEBUG_ENV, raising=False)
    previous = DEFAULT_DEBUG_SETTINGS.default_enabled
    DEFAULT_DEBUG_SETTINGS.default_enabled = False
    yield
    DEFAULT_DEBUG_SETTINGS.default_enabled = previous
