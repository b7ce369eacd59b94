"""Byte stream bodies for streaming responses."""

from __future__ import annotations

import io
import typing as t

StreamInput: t.TypeAlias = str | bytes | bytearray | memoryview


def to_bytes(data: StreamInput) -> bytes:
    """Return *data* as an immutable byte string (text is UTF-8 encoded)."""
    if isinstance(data, str):
        return data.encode("utf-8")
    if isinstance(data, bytes | bytearray | memoryview):
        return bytes(data)
    msg = f"stream data must be str or bytes-like, got {type(data).__name__}"
    raise TypeError(msg)


def create_stream(data: StreamInput) -> io.BytesIO:
    """Return a new, unread binary stream over *data*."""
    return io.BytesIO(to_bytes(data))


def stream_factory(data: StreamInput) -> t.Callable[[], io.BytesIO]:
    """Return a callable producing a fresh stream over *data* on every call."""
    payload = to_bytes(data)

    def factory() -> io.BytesIO:
        return io.BytesIO(payload)

    return factory


__all__ = ["StreamInput", "create_stream", "stream_factory", "to_bytes"]
