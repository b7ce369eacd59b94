"""Pytest plugin providing the ``client_mox`` fixture."""

from __future__ import annotations

import logging
import typing as t

import pytest

from .controller import ClientMox
from .debug import DebugSettings, parse_flag

logger = logging.getLogger(__name__)


def pytest_addoption(parser: pytest.Parser) -> None:
    """Register command-line and ini options for the plugin."""
    group = parser.getgroup("client_mox")
    group.addoption(
        "--client-mox-debug",
        action="store_true",
        dest="client_mox_debug",
        default=None,
        help=(
            "Show client-mox trace output for stubs created by the client_mox "
            "fixture. Overrides the pytest.ini setting."
        ),
    )
    group.addoption(
        "--no-client-mox-debug",
        action="store_false",
        dest="client_mox_debug",
        default=None,
        help="Hide client-mox trace output. Overrides the pytest.ini setting.",
    )
    parser.addini(
        "client_mox_debug",
        (
            "Show client-mox trace output for stubs created by the client_mox "
            "fixture (true/false). Falls back to the process-wide default, seeded "
            "from CLIENT_MOX_DEBUG and changed by set_global_debug, when unset."
        ),
        default="",
    )


def pytest_configure(config: pytest.Config) -> None:
    """Register plugin-specific markers."""
    config.addinivalue_line(
        "markers",
        "client_mox(debug: bool): override client-mox trace output for one test.",
    )


def _debug_enabled(request: pytest.FixtureRequest) -> bool | None:
    """Return the debug default for the fixture, or ``None`` to stay global."""
    # Priority order: marker > CLI option > INI setting > process-wide default

    marker = request.node.get_closest_marker("client_mox")
    if marker is not None and "debug" in marker.kwargs:
        return bool(marker.kwargs["debug"])

    config = request.config
    cli_value = config.getoption("client_mox_debug")
    if cli_value is not None:
        return bool(cli_value)

    ini_value = str(config.getini("client_mox_debug")).strip()
    if ini_value:
        return parse_flag(ini_value)

    return None


@pytest.fixture
def client_mox(request: pytest.FixtureRequest) -> t.Generator[ClientMox, None, None]:
    """Provide a :class:`ClientMox` whose stubs are restored after the test."""
    enabled = _debug_enabled(request)
    settings = None if enabled is None else DebugSettings(enabled)
    mox = ClientMox(debug_settings=settings)
    try:
        yield mox
    except Exception:
        logger.exception("Error during client_mox fixture setup or test execution")
        raise
    finally:
        _teardown_client_mox(mox)


def _teardown_client_mox(mox: ClientMox) -> None:
    """Restore every stub created through *mox*."""
    try:
        mox.restore_all()
    except Exception:
        logger.exception("Error during client_mox fixture cleanup")
        pytest.fail("client_mox fixture cleanup failed")
