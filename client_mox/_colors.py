"""ANSI colour helpers for terminal output."""

from __future__ import annotations

import typing as t

_CODES: t.Final[dict[str, tuple[int, int]]] = {
    "red": (31, 39),
    "green": (32, 39),
    "yellow": (33, 39),
    "magenta": (35, 39),
    "cyan": (36, 39),
    "gray": (90, 39),
    "bold": (1, 22),
}


def colorize(text: str, color: str, *, enabled: bool = True) -> str:
    """Wrap *text* in the escape codes for *color* when *enabled*."""
    if not enabled:
        return text
    start, end = _CODES[color]
    return f"\x1b[{start}m{text}\x1b[{end}m"


def stream_supports_color(stream: t.TextIO) -> bool:
    """Return ``True`` when *stream* is an interactive terminal."""
    isatty = getattr(stream, "isatty", None)
    if isatty is None:
        return False
    try:
        return bool(isatty())
    except (OSError, ValueError):
        return False
