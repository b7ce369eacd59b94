"""Unit tests for the pytest plugin."""

from __future__ import annotations

import asyncio
import textwrap

import pytest

from client_mox.controller import ClientMox
from client_mox.debug import DEBUG_PREFIX, set_global_debug
from client_mox.unittests._clients import GetObject, StorageClient

pytest_plugins = ("client_mox.pytest_plugin", "pytester")

_DEBUG_REPORT = textwrap.dedent(
    """
    import pytest

    pytest_plugins = ("client_mox.pytest_plugin",)

    class Client:
        async def send(self, command):
            return "real"

    def test_report(client_mox):
        stub = client_mox.mock_client(Client)
        print("DEBUG_DEFAULT=" + str(stub.debug.enabled))
    """
)


def test_fixture_basic(client_mox: ClientMox) -> None:
    """Fixture yields a controller whose stubs are tracked."""
    stub = client_mox.mock_client(StorageClient)
    assert client_mox.stubs == (stub,)


def test_fixture_stubs_follow_global_debug(
    client_mox: ClientMox, capsys: pytest.CaptureFixture[str]
) -> None:
    """Without an override the fixture's stubs honour ``set_global_debug``."""
    stub = client_mox.mock_client(StorageClient)
    stub.on(GetObject).resolves("fake")
    set_global_debug(True)

    assert asyncio.run(StorageClient().send(GetObject())) == "fake"
    assert DEBUG_PREFIX in capsys.readouterr().err

    set_global_debug(False)
    asyncio.run(StorageClient().send(GetObject()))
    assert DEBUG_PREFIX not in capsys.readouterr().err


def test_fixture_restores_after_test(pytester: pytest.Pytester) -> None:
    """Stubs created through the fixture are removed during teardown."""
    pytester.makepyfile(
        """
        import asyncio

        pytest_plugins = ("client_mox.pytest_plugin",)

        class Client:
            async def send(self, command):
                return "real"

        class Ping:
            input = {}

        def test_stubbed(client_mox):
            client_mox.mock_client(Client).on(Ping).resolves("fake")
            assert asyncio.run(Client().send(Ping())) == "fake"

        def test_restored():
            assert asyncio.run(Client().send(Ping())) == "real"
        """
    )
    result = pytester.runpytest()
    result.assert_outcomes(passed=2)


def _debug_default(pytester: pytest.Pytester, *args: str) -> str:
    result = pytester.runpytest("-p", "client_mox.pytest_plugin", "-s", *args)
    result.assert_outcomes(passed=1)
    lines = [line for line in result.outlines if "DEBUG_DEFAULT=" in line]
    assert lines, result.outlines
    return lines[0].partition("DEBUG_DEFAULT=")[2].split()[0]


@pytest.mark.parametrize(
    ("ini_value", "cli_args", "global_value", "expected"),
    [
        (None, (), False, "False"),
        (None, (), True, "True"),
        ("true", (), False, "True"),
        ("false", (), True, "False"),
        ("false", ("--client-mox-debug",), False, "True"),
        ("true", ("--no-client-mox-debug",), False, "False"),
    ],
    ids=["default", "global", "ini", "ini-beats-global", "cli-on", "cli-off"],
)
def test_debug_precedence(
    pytester: pytest.Pytester,
    ini_value: str | None,
    cli_args: tuple[str, ...],
    global_value: bool,  # noqa: FBT001 - parametrized flag
    expected: str,
) -> None:
    """CLI flags beat ini settings, which beat the process-wide default."""
    set_global_debug(global_value)
    if ini_value is not None:
        pytester.makeini(f"[pytest]\nclient_mox_debug = {ini_value}\n")
    pytester.makepyfile(_DEBUG_REPORT)
    assert _debug_default(pytester, *cli_args) == expected


def test_environment_seeds_fixture_default(
    pytester: pytest.Pytester, monkeypatch: pytest.MonkeyPatch
) -> None:
    """``CLIENT_MOX_DEBUG`` applies when no option or marker overrides it."""
    monkeypatch.setenv("CLIENT_MOX_DEBUG", "1")
    pytester.makepyfile(_DEBUG_REPORT)
    result = pytester.runpytest_subprocess("-s")
    result.assert_outcomes(passed=1)
    result.stdout.fnmatch_lines(["*DEBUG_DEFAULT=True*"])


def test_marker_overrides_cli(pytester: pytest.Pytester) -> None:
    """The ``client_mox`` marker has the final say for its test."""
    pytester.makepyfile(
        """
        import pytest

        pytest_plugins = ("client_mox.pytest_plugin",)

        @pytest.mark.client_mox(debug=False)
        def test_report(client_mox):
            print("DEBUG_DEFAULT=" + str(client_mox.debug_settings.default_enabled))
        """
    )
    assert _debug_default(pytester, "--client-mox-debug") == "False"


def test_marker_is_registered(pytester: pytest.Pytester) -> None:
    """The marker is declared so ``--strict-markers`` accepts it."""
    pytester.makepyfile(
        """
        import pytest

        pytest_plugins = ("client_mox.pytest_plugin",)

        @pytest.mark.client_mox(debug=True)
        def test_marked(client_mox):
            assert client_mox.debug_settings.default_enabled
        """
    )
    result = pytester.runpytest("--strict-markers")
    result.assert_outcomes(passed=1)


def test_cleanup_failure_fails_test(
    pytester: pytest.Pytester,
) -> None:
    """A stub that cannot be restored fails the test during teardown."""
    pytester.makepyfile(
        """
        pytest_plugins = ("client_mox.pytest_plugin",)

        class Client:
            async def send(self, command):
                return "real"

        def test_broken_restore(client_mox):
            stub = client_mox.mock_client(Client)

            def fail():
                raise RuntimeError("cannot restore")

            stub.restore = fail
        """
    )
    result = pytester.runpytest()
    result.assert_outcomes(passed=1, errors=1)
    result.stdout.fnmatch_lines(["*client_mox fixture cleanup failed*"])
