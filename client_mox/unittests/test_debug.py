"""Unit tests for :mod:`client_mox.debug`."""

from __future__ import annotations

import asyncio
import io
import typing as t

import pytest

from client_mox.controller import mock_client
from client_mox.debug import (
    CLIENT_MOX_DEBUG_ENV,
    DEBUG_PREFIX,
    DEFAULT_DEBUG_SETTINGS,
    DebugLogger,
    DebugSettings,
    parse_flag,
    set_global_debug,
)
from client_mox.errors import UnconfiguredCommandError, UnmatchedInputError
from client_mox.unittests._clients import GetObject, StorageClient


@pytest.fixture
def restore_global_debug() -> t.Iterator[None]:
    """Reset the process-wide default after the test."""
    previous = DEFAULT_DEBUG_SETTINGS.default_enabled
    yield
    set_global_debug(previous)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("1", True), ("TRUE", True), (" yes ", True), ("on", True), ("0", False),
     ("", False), (None, False), ("nope", False)],
)
def test_parse_flag(raw: str | None, *, expected: bool) -> None:
    """Environment flags accept the usual truthy spellings."""
    assert parse_flag(raw) is expected


def test_settings_from_env() -> None:
    """CLIENT_MOX_DEBUG seeds the default visibility."""
    assert DebugSettings.from_env({CLIENT_MOX_DEBUG_ENV: "1"}).default_enabled
    assert not DebugSettings.from_env({}).default_enabled


def test_logger_follows_settings_until_overridden() -> None:
    """Explicit enable/disable wins over the settings default."""
    settings = DebugSettings(default_enabled=True)
    stream = io.StringIO()
    debug = DebugLogger(settings, stream=stream)
    assert debug.enabled
    assert not debug.explicitly_set

    debug.disable()
    settings.default_enabled = True
    debug.log("hidden")
    assert stream.getvalue() == ""

    debug.enable()
    settings.default_enabled = False
    debug.log("shown", {"Key": "a"})
    output = stream.getvalue()
    assert output.startswith(f"{DEBUG_PREFIX} shown\n")
    assert '"Key": "a"' in output


def test_logger_renders_unserialisable_data() -> None:
    """Data json cannot encode falls back to repr."""
    stream = io.StringIO()
    debug = DebugLogger(DebugSettings(default_enabled=True), stream=stream)
    circular: list[object] = []
    circular.append(circular)
    debug.log("circular", circular)
    debug.log("object", {"when": object()})
    output = stream.getvalue()
    assert "[[...]]" in output
    assert "<object object at" in output


def test_non_tty_stream_gets_no_colour() -> None:
    """Escape codes are only written to terminals."""
    stream = io.StringIO()
    debug = DebugLogger(DebugSettings(default_enabled=True), stream=stream)
    debug.log("plain")
    assert "\x1b[" not in stream.getvalue()


def test_global_default_applies_to_stubs_without_override(
    restore_global_debug: None,
) -> None:
    """set_global_debug affects stubs that never chose explicitly."""
    set_global_debug(True)
    stream = io.StringIO()
    stub = mock_client(StorageClient, debug_stream=stream)
    try:
        stub.on(GetObject).resolves({"Body": "x"})
        asyncio.run(StorageClient().send(GetObject({"Key": "a"})))
    finally:
        stub.restore()
    output = stream.getvalue()
    assert "Configured permanent resolves for GetObject" in output
    assert "Received command: GetObject" in output
    assert "Using mock at index 0 for GetObject" in output
    assert "Restored StorageClient.send" in output


def test_disable_debug_beats_global_default(restore_global_debug: None) -> None:
    """A stub-level disable suppresses output despite the global default."""
    set_global_debug(True)
    stream = io.StringIO()
    stub = mock_client(StorageClient, debug_stream=stream)
    try:
        stub.disable_debug()
        stub.on(GetObject).resolves({"Body": "x"})
        asyncio.run(StorageClient().send(GetObject()))
        stub.reset()
    finally:
        stub.restore()
    assert stream.getvalue() == ""


def test_enable_debug_survives_reset(restore_global_debug: None) -> None:
    """Explicit enablement is sticky across reset()."""
    set_global_debug(False)
    stream = io.StringIO()
    stub = mock_client(StorageClient, debug_stream=stream)
    try:
        stub.enable_debug()
        stub.reset()
        stub.on(GetObject).resolves_once({"Body": "x"})
        asyncio.run(StorageClient().send(GetObject()))
    finally:
        stub.restore()
    output = stream.getvalue()
    assert "Reset call history" in output
    assert "Removed one-time mock for GetObject" in output


def test_failures_are_traced(restore_global_debug: None) -> None:
    """Unconfigured and unmatched dispatches are explained in the trace."""
    stream = io.StringIO()
    stub = mock_client(
        StorageClient,
        debug_settings=DebugSettings(default_enabled=True),
        debug_stream=stream,
    )
    client = StorageClient()
    try:
        with pytest.raises(UnconfiguredCommandError):
            asyncio.run(client.send(GetObject()))
        stub.on(GetObject, {"Key": "a"}).resolves({})
        with pytest.raises(UnmatchedInputError):
            asyncio.run(client.send(GetObject({"Key": "b"})))
    finally:
        stub.restore()
    output = stream.getvalue()
    assert "No mocks configured for GetObject" in output
    assert "No matching mock found for GetObject among 1 mock(s)" in output


def test_debug_output_does_not_change_selection() -> None:
    """Trace output is a pure side effect."""
    results = []
    for enabled in (False, True):
        stub = mock_client(
            StorageClient,
            debug_settings=DebugSettings(default_enabled=enabled),
            debug_stream=io.StringIO(),
        )
        try:
            stub.on(GetObject).resolves_once("first").resolves("default")
            client = StorageClient()
            results.append(
                [asyncio.run(client.send(GetObject())) for _ in range(3)]
            )
        finally:
            stub.restore()
    assert results[0] == results[1] == ["first", "default", "default"]
