"""Opt-in trace output describing how commands are matched.

Visibility is decided per stub: an explicit :meth:`DebugLogger.enable` or
:meth:`DebugLogger.disable` wins for the lifetime of the stub; otherwise the
stub follows the :class:`DebugSettings` it was created with, which by default
is the process-wide :data:`DEFAULT_DEBUG_SETTINGS`.
"""

from __future__ import annotations

import dataclasses as dc
import os
import sys
import typing as t

from ._colors import colorize, stream_supports_color
from ._formatting import format_value

CLIENT_MOX_DEBUG_ENV: t.Final[str] = "CLIENT_MOX_DEBUG"
DEBUG_PREFIX: t.Final[str] = "client-mox(debug):"

_TRUTHY: t.Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})
_MISSING: t.Final = object()


def parse_flag(raw: str | None) -> bool:
    """Return ``True`` for the usual truthy spellings of an env flag."""
    if raw is None:
        return False
    return raw.strip().casefold() in _TRUTHY


@dc.dataclass(slots=True)
class DebugSettings:
    """Default debug visibility for stubs without an explicit override."""

    default_enabled: bool = False

    @classmethod
    def from_env(cls, environ: t.Mapping[str, str] | None = None) -> DebugSettings:
        """Build settings from ``CLIENT_MOX_DEBUG`` in *environ*."""
        env = os.environ if environ is None else environ
        return cls(default_enabled=parse_flag(env.get(CLIENT_MOX_DEBUG_ENV)))


DEFAULT_DEBUG_SETTINGS: t.Final[DebugSettings] = DebugSettings.from_env()


def set_global_debug(enabled: bool) -> None:  # noqa: FBT001 - mirrors a toggle
    """Set the default debug visibility for every stub lacking an override."""
    DEFAULT_DEBUG_SETTINGS.default_enabled = bool(enabled)


class DebugLogger:
    """Trace writer owned by a single client stub."""

    def __init__(
        self,
        settings: DebugSettings | None = None,
        *,
        stream: t.TextIO | None = None,
    ) -> None:
        self.settings = DEFAULT_DEBUG_SETTINGS if settings is None else settings
        self._stream = stream
        self._enabled = False
        self._explicitly_set = False

    @property
    def explicitly_set(self) -> bool:
        """Return ``True`` once :meth:`enable` or :meth:`disable` was called."""
        return self._explicitly_set

    @property
    def enabled(self) -> bool:
        """Return the effective visibility."""
        if self._explicitly_set:
            return self._enabled
        return self.settings.default_enabled

    def enable(self) -> None:
        """Show trace output regardless of the default."""
        self._enabled = True
        self._explicitly_set = True

    def disable(self) -> None:
        """Hide trace output regardless of the default."""
        self._enabled = False
        self._explicitly_set = True

    def log(self, message: str, data: object = _MISSING) -> None:
        """Write *message* and an optional rendering of *data*."""
        if not self.enabled:
            return
        stream = self._stream if self._stream is not None else sys.stderr
        prefix = colorize(
            DEBUG_PREFIX, "magenta", enabled=stream_supports_color(stream)
        )
        text = f"{prefix} {message}"
        if data is not _MISSING:
            text = f"{text}\n{format_value(data)}"
        stream.write(text + "\n")
        stream.flush()


__all__ = [
    "CLIENT_MOX_DEBUG_ENV",
    "DEBUG_PREFIX",
    "DEFAULT_DEBUG_SETTINGS",
    "DebugLogger",
    "DebugSettings",
    "parse_flag",
    "set_global_debug",
]
