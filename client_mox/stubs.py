"""Fluent configuration surface for a single command kind."""

from __future__ import annotations

import asyncio
import typing as t

from . import service_errors
from ._formatting import format_value
from ._validators import validate_delay
from .fixtures import load_fixture
from .models import MockEntry
from .pagination import PaginatedResponder, PaginatorOptions
from .streams import StreamInput, stream_factory

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    import os

    from .debug import DebugLogger
    from .models import Handler
    from .registry import MockRegistry

ErrorSpec: t.TypeAlias = BaseException | str


def _as_exception(error: ErrorSpec) -> BaseException:
    """Return *error*, wrapping plain messages in a fresh ``Exception``."""
    if isinstance(error, str):
        return Exception(error)
    return error


def _resolver(output: t.Any) -> Handler:
    def handler(payload: t.Any) -> t.Any:
        return output

    return handler


def _rejecter(error: ErrorSpec) -> Handler:
    def handler(payload: t.Any) -> t.NoReturn:
        raise _as_exception(error)

    return handler


def _factory_rejecter(factory: t.Callable[[], BaseException]) -> Handler:
    def handler(payload: t.Any) -> t.NoReturn:
        raise factory()

    return handler


class CommandStub:
    """Configure responses for one command kind and optional input matcher.

    Every configuration method returns the stub itself so calls chain::

        stub.on(PutObject).resolves_once({"ETag": "1"}).resolves({"ETag": "x"})

    Permanent responses answer every matching call once all one-shot
    responses for the kind are consumed; registering another permanent
    response with the same matcher replaces the earlier one.
    """

    def __init__(
        self,
        registry: MockRegistry,
        kind: type,
        matcher: t.Mapping[str, t.Any] | None = None,
        *,
        strict: bool = False,
        debug: DebugLogger | None = None,
    ) -> None:
        self.registry = registry
        self.kind = kind
        self.matcher = matcher
        self.strict = strict
        self._debug = debug

    def __repr__(self) -> str:
        """Return a debug representation."""
        return (
            f"CommandStub(kind={self.kind.__name__}, matcher={self.matcher!r}, "
            f"strict={self.strict!r})"
        )

    # ------------------------------------------------------------------
    # Registration primitive
    # ------------------------------------------------------------------
    def _add(self, handler: Handler, *, once: bool, description: str) -> CommandStub:
        entry = MockEntry(
            handler,
            matcher=self.matcher,
            once=once,
            strict=self.strict,
            description=description,
        )
        self.registry.register(self.kind, entry)
        if self._debug is not None:
            lifetime = "one-time" if once else "permanent"
            matcher_text = (
                "any input" if self.matcher is None else format_value(self.matcher)
            )
            self._debug.log(
                f"Configured {lifetime} {description} for {self.kind.__name__} "
                f"({entry.mode} match): {matcher_text}"
            )
        return self

    # ------------------------------------------------------------------
    # Basic responses
    # ------------------------------------------------------------------
    def resolves(self, output: t.Any) -> CommandStub:
        """Answer every matching call with *output*."""
        return self._add(_resolver(output), once=False, description="resolves")

    def resolves_once(self, output: t.Any) -> CommandStub:
        """Answer the next matching call with *output*."""
        return self._add(_resolver(output), once=True, description="resolves")

    def rejects(self, error: ErrorSpec) -> CommandStub:
        """Raise *error* for every matching call."""
        return self._add(_rejecter(error), once=False, description="rejects")

    def rejects_once(self, error: ErrorSpec) -> CommandStub:
        """Raise *error* for the next matching call."""
        return self._add(_rejecter(error), once=True, description="rejects")

    def calls_fake(self, handler: Handler) -> CommandStub:
        """Compute responses with *handler*.

        The handler receives the command input and, if it accepts a second
        positional argument, the client instance the call was made on. It may
        return a value, an awaitable, or raise.
        """
        return self._add(handler, once=False, description="calls fake")

    def calls_fake_once(self, handler: Handler) -> CommandStub:
        """Compute the next matching response with *handler*."""
        return self._add(handler, once=True, description="calls fake")

    # ------------------------------------------------------------------
    # Streams and delays
    # ------------------------------------------------------------------
    def _stream_handler(self, data: StreamInput, field: str) -> Handler:
        make_stream = stream_factory(data)

        def handler(payload: t.Any) -> dict[str, t.Any]:
            return {field: make_stream()}

        return handler

    def resolves_stream(self, data: StreamInput, *, field: str = "Body") -> CommandStub:
        """Answer with a fresh byte stream over *data* in ``field``."""
        return self._add(
            self._stream_handler(data, field), once=False, description="resolves stream"
        )

    def resolves_stream_once(
        self, data: StreamInput, *, field: str = "Body"
    ) -> CommandStub:
        """Answer the next matching call with a byte stream over *data*."""
        return self._add(
            self._stream_handler(data, field), once=True, description="resolves stream"
        )

    def resolves_with_delay(self, output: t.Any, delay: float) -> CommandStub:
        """Answer with *output* after sleeping *delay* seconds."""
        validate_delay(delay)

        async def handler(payload: t.Any) -> t.Any:
            await asyncio.sleep(delay)
            return output

        return self._add(
            handler, once=False, description=f"resolves after {delay}s"
        )

    def rejects_with_delay(self, error: ErrorSpec, delay: float) -> CommandStub:
        """Raise *error* after sleeping *delay* seconds."""
        validate_delay(delay)

        async def handler(payload: t.Any) -> t.NoReturn:
            await asyncio.sleep(delay)
            raise _as_exception(error)

        return self._add(handler, once=False, description=f"rejects after {delay}s")

    # ------------------------------------------------------------------
    # Canned service errors
    # ------------------------------------------------------------------
    def _rejects_with(
        self, factory: t.Callable[[], BaseException], name: str
    ) -> CommandStub:
        return self._add(
            _factory_rejecter(factory), once=False, description=f"rejects {name}"
        )

    def rejects_with_no_such_key(self, key: str | None = None) -> CommandStub:
        """Raise a ``NoSuchKey`` service error."""
        return self._rejects_with(
            lambda: service_errors.no_such_key_error(key), "NoSuchKey"
        )

    def rejects_with_no_such_bucket(self, bucket: str | None = None) -> CommandStub:
        """Raise a ``NoSuchBucket`` service error."""
        return self._rejects_with(
            lambda: service_errors.no_such_bucket_error(bucket), "NoSuchBucket"
        )

    def rejects_with_access_denied(self, resource: str | None = None) -> CommandStub:
        """Raise an ``AccessDenied`` service error."""
        return self._rejects_with(
            lambda: service_errors.access_denied_error(resource), "AccessDenied"
        )

    def rejects_with_resource_not_found(
        self, resource: str | None = None
    ) -> CommandStub:
        """Raise a ``ResourceNotFoundException`` service error."""
        return self._rejects_with(
            lambda: service_errors.resource_not_found_error(resource),
            "ResourceNotFoundException",
        )

    def rejects_with_conditional_check_failed(self) -> CommandStub:
        """Raise a ``ConditionalCheckFailedException`` service error."""
        return self._rejects_with(
            service_errors.conditional_check_failed_error,
            "ConditionalCheckFailedException",
        )

    def rejects_with_throttling(self) -> CommandStub:
        """Raise a retryable ``Throttling`` service error."""
        return self._rejects_with(service_errors.throttling_error, "Throttling")

    def rejects_with_internal_server_error(self) -> CommandStub:
        """Raise a retryable ``InternalServerError`` service error."""
        return self._rejects_with(
            service_errors.internal_server_error, "InternalServerError"
        )

    # ------------------------------------------------------------------
    # Pagination and fixtures
    # ------------------------------------------------------------------
    def resolves_paginated(
        self,
        items: t.Sequence[t.Any],
        options: PaginatorOptions | None = None,
        **option_values: t.Any,
    ) -> CommandStub:
        """Serve *items* page by page, following the request's token.

        Options may be given as a :class:`PaginatorOptions` or as keyword
        arguments (``page_size``, ``token_key``, ``input_token_key``,
        ``items_key``), not both.
        """
        if options is not None and option_values:
            msg = "pass either a PaginatorOptions instance or keyword options"
            raise TypeError(msg)
        if options is None:
            options = PaginatorOptions(**option_values)
        responder = PaginatedResponder(items, options)
        return self._add(
            responder,
            once=False,
            description=f"resolves paginated ({len(responder.pages)} page(s))",
        )

    def resolves_from_file(self, path: str | os.PathLike[str]) -> CommandStub:
        """Answer with the contents of *path*, read on every call."""

        def handler(payload: t.Any) -> t.Any:
            return load_fixture(path)

        return self._add(handler, once=False, description=f"resolves from {path}")


__all__ = ["CommandStub", "ErrorSpec"]
