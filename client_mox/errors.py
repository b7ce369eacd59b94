"""Exception types raised by client-mox."""

from __future__ import annotations

import typing as t


class ClientMoxError(Exception):
    """Base class for client-mox errors."""


class NoMatchingMockError(ClientMoxError):
    """Raised when a dispatched command has no entry to answer it.

    The message lists every configured matcher for the command kind together
    with the input that was received, so a failing test shows at a glance why
    nothing was selected.
    """

    def __init__(
        self,
        message: str,
        *,
        kind: type,
        payload: t.Any,
        matchers: t.Sequence[str] = (),
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.input = payload
        self.matchers = tuple(matchers)


class UnconfiguredCommandError(NoMatchingMockError):
    """Raised when no entries were registered for the command kind."""


class UnmatchedInputError(NoMatchingMockError):
    """Raised when entries exist but none accepts the command input."""


class InvalidPaginationTokenError(ClientMoxError):
    """Raised when a paginated request carries a token no page produced."""


__all__ = [
    "ClientMoxError",
    "InvalidPaginationTokenError",
    "NoMatchingMockError",
    "UnconfiguredCommandError",
    "UnmatchedInputError",
]
