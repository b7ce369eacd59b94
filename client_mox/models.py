"""Data types shared by the registry, the stubs and the interception layer."""

from __future__ import annotations

import dataclasses as dc
import inspect
import typing as t

Handler: t.TypeAlias = t.Callable[..., t.Any]


@dc.dataclass(slots=True)
class Command:
    """Minimal command object: the class is the kind, ``input`` the payload.

    Any object exposing an ``input`` attribute can be dispatched; subclassing
    this dataclass is merely a convenience for tests and examples.
    """

    input: dict[str, t.Any] = dc.field(default_factory=dict)


def command_input(command: object) -> t.Any:
    """Return the structured input carried by *command*."""
    payload = getattr(command, "input", None)
    return {} if payload is None else payload


@dc.dataclass(frozen=True, slots=True)
class CallRecord:
    """A single dispatched command, in invocation order."""

    kind: type
    input: t.Any
    command: object

    @property
    def kind_name(self) -> str:
        """Return the command class name."""
        return self.kind.__name__


def _accepts_client(handler: Handler) -> bool:
    """Return ``True`` when *handler* can be called as ``handler(input, client)``."""
    try:
        signature = inspect.signature(handler)
    except (TypeError, ValueError):
        return True
    try:
        signature.bind(None, None)
    except TypeError:
        return False
    return True


@dc.dataclass(slots=True)
class MockEntry:
    """A registered response rule for one command kind."""

    handler: Handler
    matcher: t.Mapping[str, t.Any] | None = None
    once: bool = False
    strict: bool = False
    description: str = "handler"
    pass_client: bool = dc.field(init=False)

    def __post_init__(self) -> None:
        """Work out whether the handler wants the calling client."""
        self.pass_client = _accepts_client(self.handler)

    def invoke(self, payload: t.Any, client: object) -> t.Any:
        """Call the handler with the input and, when accepted, the client."""
        if self.pass_client:
            return self.handler(payload, client)
        return self.handler(payload)

    @property
    def mode(self) -> str:
        """Return ``"strict"`` or ``"partial"``."""
        return "strict" if self.strict else "partial"


__all__ = ["CallRecord", "Command", "Handler", "MockEntry", "command_input"]
