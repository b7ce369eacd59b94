"""Client stub: intercepts a dispatch method and answers from the registry."""

from __future__ import annotations

import functools
import inspect
import types  # noqa: TC003
import typing as t

from . import verifiers
from ._formatting import describe_entry, format_sections, format_value, numbered
from .debug import DebugLogger
from .errors import UnconfiguredCommandError, UnmatchedInputError
from .matching import MatchOutcome
from .models import CallRecord, command_input
from .registry import MockRegistry
from .stubs import CommandStub

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    from .debug import DebugSettings
    from .errors import NoMatchingMockError
    from .interception import StubTarget
    from .registry import Selection


class ClientStub:
    """Scripted stand-in for a client's outbound dispatch method.

    Create one with :func:`client_mox.mock_client` (every instance of a
    class) or :func:`client_mox.mock_client_instance` (a single object), then
    configure responses per command kind with :meth:`on`.
    """

    def __init__(
        self,
        target: StubTarget,
        *,
        debug_settings: DebugSettings | None = None,
        debug_stream: t.TextIO | None = None,
    ) -> None:
        self.target = target
        self._registry = MockRegistry()
        self._debug = DebugLogger(debug_settings, stream=debug_stream)

    def __repr__(self) -> str:
        """Return a debug representation."""
        state = "attached" if self.target.attached else "restored"
        return (
            f"ClientStub({self.target.describe()}.{self.target.method_name}, {state})"
        )

    # ------------------------------------------------------------------
    # Context manager protocol
    # ------------------------------------------------------------------
    def __enter__(self) -> ClientStub:
        """Return the stub; interception is already active."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: types.TracebackType | None,
    ) -> None:
        """Restore the original method."""
        self.restore()

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------
    @property
    def client(self) -> object | None:
        """Return the patched instance, or ``None`` for class-wide stubs."""
        return self.target.client

    @property
    def debug(self) -> DebugLogger:
        """Return the trace writer for this stub."""
        return self._debug

    @property
    def registry(self) -> MockRegistry:
        """Return the registry holding configured entries and calls."""
        return self._registry

    # ------------------------------------------------------------------
    # Interception
    # ------------------------------------------------------------------
    def attach(self) -> ClientStub:
        """Replace the target's dispatch method with the stub."""
        original = self.target.original_method()
        self.target.attach(self._make_replacement(original))
        return self

    def _make_replacement(
        self, original: t.Callable[..., t.Any]
    ) -> t.Callable[..., t.Awaitable[t.Any]]:
        stub = self

        @functools.wraps(original)
        async def dispatch(
            client: object, command: object, *args: t.Any, **kwargs: t.Any
        ) -> t.Any:
            return await stub._dispatch(client, command)

        return dispatch

    async def call(self, command: object, client: object | None = None) -> t.Any:
        """Dispatch *command* through the registry without the client.

        *client* defaults to the patched instance for instance-wide stubs.
        """
        return await self._dispatch(
            self.target.client if client is None else client, command
        )

    async def _dispatch(self, client: object, command: object) -> t.Any:
        kind = type(command)
        payload = command_input(command)
        self._debug.log(f"Received command: {kind.__name__}", payload)
        selection = self._registry.select(
            kind, payload, CallRecord(kind, payload, command)
        )
        if selection.entry is None:
            raise self._no_match_error(kind, payload, selection)

        self._debug.log(f"Found {selection.candidates} mock(s) for {kind.__name__}")
        self._debug.log(
            f"Using mock at index {selection.index} for {kind.__name__} "
            f"({selection.entry.description})"
        )
        if selection.consumed:
            self._debug.log(f"Removed one-time mock for {kind.__name__}")

        result = selection.entry.invoke(payload, client)
        if inspect.isawaitable(result):
            result = await result
        return result

    def _no_match_error(
        self, kind: type, payload: object, selection: Selection
    ) -> NoMatchingMockError:
        matchers = [describe_entry(entry) for entry in selection.configured]
        if selection.outcome is MatchOutcome.NO_ENTRIES:
            self._debug.log(f"No mocks configured for {kind.__name__}")
            error_type: type[NoMatchingMockError] = UnconfiguredCommandError
            title = f"No mock configured for command: {kind.__name__}"
        else:
            self._debug.log(
                f"No matching mock found for {kind.__name__} among "
                f"{selection.candidates} mock(s)",
                payload,
            )
            error_type = UnmatchedInputError
            title = f"No mock matched the input for command: {kind.__name__}"
        message = format_sections(
            title,
            [
                ("Configured matchers", numbered(matchers)),
                ("Received input", format_value(payload)),
            ],
        )
        return error_type(message, kind=kind, payload=payload, matchers=matchers)

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------
    def on(
        self,
        kind: type,
        matcher: t.Mapping[str, t.Any] | None = None,
        *,
        strict: bool = False,
    ) -> CommandStub:
        """Return a :class:`CommandStub` configuring responses for *kind*.

        With no *matcher* the responses apply to any input. A matcher is
        compared partially by default: only the keys it names must match.
        Pass ``strict=True`` to require the input to equal the matcher
        exactly.
        """
        if not isinstance(kind, type):
            msg = f"command kind must be a class, got {type(kind).__name__}"
            raise TypeError(msg)
        return CommandStub(
            self._registry, kind, matcher, strict=strict, debug=self._debug
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def reset(self) -> None:
        """Forget recorded calls, keeping every configured response."""
        self._registry.clear_calls()
        self._debug.log("Reset call history")

    def restore(self) -> None:
        """Put the original method back and drop all configuration."""
        self.target.detach()
        self._registry.clear()
        self._debug.log(
            f"Restored {self.target.describe()}.{self.target.method_name}"
        )

    def calls(self) -> list[CallRecord]:
        """Return the dispatched commands in invocation order."""
        return self._registry.calls()

    def enable_debug(self) -> None:
        """Show trace output for this stub regardless of the global default."""
        self._debug.enable()

    def disable_debug(self) -> None:
        """Hide trace output for this stub regardless of the global default."""
        self._debug.disable()

    # ------------------------------------------------------------------
    # Assertions
    # ------------------------------------------------------------------
    def assert_received_command(self, kind: type) -> None:
        """Assert *kind* was dispatched at least once."""
        verifiers.assert_received_command(self.calls(), kind)

    def assert_not_received_command(self, kind: type) -> None:
        """Assert *kind* was never dispatched."""
        verifiers.assert_not_received_command(self.calls(), kind)

    def assert_received_command_times(self, kind: type, times: int) -> None:
        """Assert *kind* was dispatched exactly *times* times."""
        verifiers.assert_received_command_times(self.calls(), kind, times)

    def assert_received_command_with(self, kind: type, expected_input: t.Any) -> None:
        """Assert some *kind* call carried exactly *expected_input*."""
        verifiers.assert_received_command_with(self.calls(), kind, expected_input)

    def assert_received_nth_command_with(
        self, n: int, kind: type, expected_input: t.Any
    ) -> None:
        """Assert call *n* (1-indexed) was *kind* with *expected_input*."""
        verifiers.assert_received_nth_command_with(
            self.calls(), n, kind, expected_input
        )

    def assert_received_no_other_commands(self, kinds: t.Iterable[type] = ()) -> None:
        """Assert every dispatched command is one of *kinds*."""
        verifiers.assert_received_no_other_commands(self.calls(), kinds)


__all__ = ["ClientStub"]
