"""Per-target registry of response entries and call history."""

from __future__ import annotations

import dataclasses as dc
import threading
import typing as t

from .matching import MatchOutcome, find_match, same_pattern

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    from .models import CallRecord, MockEntry


@dc.dataclass(frozen=True, slots=True)
class Selection:
    """Result of :meth:`MockRegistry.select` for one dispatched command."""

    outcome: MatchOutcome
    candidates: int
    entry: MockEntry | None = None
    index: int | None = None
    consumed: bool = False
    configured: tuple[MockEntry, ...] = ()


class MockRegistry:
    """Ordered entry lists keyed by command kind.

    Within a kind, every once-entry precedes every permanent entry and both
    groups keep registration order. Selection scans oldest first and stops
    at the first entry whose matcher accepts the input.

    All mutation happens under one lock. :meth:`select` records the call,
    picks an entry and removes it when it is a once-entry in a single
    critical section, so two overlapping calls can never both consume the
    same once-entry.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: dict[type, list[MockEntry]] = {}
        self._calls: list[CallRecord] = []

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------
    def register_permanent(self, kind: type, entry: MockEntry) -> None:
        """Append *entry*, superseding a permanent entry with the same matcher."""
        with self._lock:
            entries = self._entries.setdefault(kind, [])
            entries[:] = [
                existing
                for existing in entries
                if existing.once or not self._same_signature(existing, entry)
            ]
            entries.append(entry)

    def register_once(self, kind: type, entry: MockEntry) -> None:
        """Queue *entry* after existing once-entries, before any permanent one."""
        with self._lock:
            entries = self._entries.setdefault(kind, [])
            position = next(
                (index for index, existing in enumerate(entries) if not existing.once),
                len(entries),
            )
            entries.insert(position, entry)

    def register(self, kind: type, entry: MockEntry) -> None:
        """Register *entry* according to its ``once`` flag."""
        if entry.once:
            self.register_once(kind, entry)
        else:
            self.register_permanent(kind, entry)

    @staticmethod
    def _same_signature(left: MockEntry, right: MockEntry) -> bool:
        return same_pattern(left.matcher, right.matcher)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------
    def select(self, kind: type, payload: object, record: CallRecord) -> Selection:
        """Record *record* and pick the entry that answers *payload*."""
        with self._lock:
            self._calls.append(record)
            entries = self._entries.get(kind, [])
            configured = tuple(entries)
            result = find_match(entries, payload)
            if not result.found or result.index is None:
                return Selection(
                    result.outcome, len(configured), configured=configured
                )
            entry = entries[result.index]
            if entry.once:
                del entries[result.index]
            return Selection(
                result.outcome,
                len(configured),
                entry=entry,
                index=result.index,
                consumed=entry.once,
                configured=configured,
            )

    # ------------------------------------------------------------------
    # Inspection and lifecycle
    # ------------------------------------------------------------------
    def snapshot(self, kind: type) -> tuple[MockEntry, ...]:
        """Return the entries currently queued for *kind*."""
        with self._lock:
            return tuple(self._entries.get(kind, ()))

    def kinds(self) -> tuple[type, ...]:
        """Return the command kinds that have at least one entry."""
        with self._lock:
            return tuple(kind for kind, entries in self._entries.items() if entries)

    def calls(self) -> list[CallRecord]:
        """Return a copy of the call history."""
        with self._lock:
            return list(self._calls)

    def clear_calls(self) -> None:
        """Forget the call history, keeping every entry."""
        with self._lock:
            self._calls.clear()

    def clear(self) -> None:
        """Forget every entry and the call history."""
        with self._lock:
            self._entries.clear()
            self._calls.clear()


__all__ = ["MockRegistry", "Selection"]
