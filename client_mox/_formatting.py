"""Text helpers shared by diagnostics and assertion messages."""

from __future__ import annotations

import json
import typing as t
from textwrap import indent

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    from .models import CallRecord, MockEntry


def format_value(value: object) -> str:
    """Render *value* as indented JSON, falling back to ``repr``."""
    try:
        return json.dumps(value, indent=2, default=repr, ensure_ascii=False)
    except (TypeError, ValueError):
        # Circular references and keys json cannot represent.
        return repr(value)


def describe_entry(entry: MockEntry) -> str:
    """Return a readable one-block description of *entry*."""
    lifetime = "once" if entry.once else "permanent"
    head = f"{entry.description} [{lifetime}, {entry.mode}]"
    if entry.matcher is None:
        return f"{head}\nmatcher: (any input)"
    return f"{head}\nmatcher: {format_value(entry.matcher)}"


def describe_call(record: CallRecord) -> str:
    """Return a readable representation of *record*."""
    return f"{record.kind_name} {format_value(record.input)}"


def numbered(entries: t.Sequence[str], *, start: int = 1) -> str:
    """Number *entries*, indenting continuation lines under the first."""
    if not entries:
        return "(none)"
    lines: list[str] = []
    for index, entry in enumerate(entries, start=start):
        entry_lines = entry.splitlines() or [""]
        lines.append(f"{index}. {entry_lines[0]}")
        lines.extend(f"   {extra}" for extra in entry_lines[1:])
    return "\n".join(lines)


def format_sections(title: str, sections: list[tuple[str, str]]) -> str:
    """Join a title and labelled, indented sections into one message."""
    parts = [title]
    for label, body in sections:
        if not body:
            continue
        parts.append("")
        parts.append(f"{label}:")
        parts.append(indent(body, "  "))
    return "\n".join(parts)
