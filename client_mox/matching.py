"""Structural matching of command input against stored patterns.

Command input is treated as a tree of plain values: ``None``, booleans,
numbers, strings, bytes, sequences and mappings. Two modes are supported:

partial
    Every key present in the pattern must exist in the input with a matching
    value. Keys absent from the pattern are ignored. Nested mappings recurse
    with the same rule; sequences and scalars must be structurally equal.
strict
    Input and pattern must have exactly the same keys at every level and
    every value must be structurally equal.

Sequences are compared element-wise and in order in both modes.
"""

from __future__ import annotations

import dataclasses as dc
import enum
import typing as t
from collections.abc import Mapping, Sequence

from .comparators import Comparator

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    from .models import MockEntry

_SCALAR_SEQUENCES: t.Final[tuple[type, ...]] = (str, bytes, bytearray, memoryview)


def _is_sequence(value: object) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, _SCALAR_SEQUENCES)


def _scalars_equal(expected: object, actual: object) -> bool:
    # ``True == 1`` in Python, but a boolean field never matches a number.
    if isinstance(expected, bool) or isinstance(actual, bool):
        return (
            isinstance(expected, bool)
            and isinstance(actual, bool)
            and expected is actual
        )
    try:
        return bool(expected == actual)
    except Exception:  # noqa: BLE001 - exotic __eq__ implementations
        return False


def _mappings_equal(
    expected: Mapping[t.Any, t.Any], actual: object
) -> bool:
    if not isinstance(actual, Mapping):
        return False
    if set(expected) != set(actual):
        return False
    return all(deep_equal(value, actual[key]) for key, value in expected.items())


def _sequences_equal(expected: Sequence[t.Any], actual: object) -> bool:
    if not _is_sequence(actual):
        return False
    actual_seq = t.cast("Sequence[t.Any]", actual)
    if len(expected) != len(actual_seq):
        return False
    return all(
        deep_equal(exp, act) for exp, act in zip(expected, actual_seq, strict=True)
    )


def deep_equal(expected: object, actual: object) -> bool:
    """Return ``True`` when *actual* is structurally equal to *expected*.

    Comparator objects inside *expected* are called with the value found at
    the same position in *actual*.
    """
    if isinstance(expected, Comparator):
        return bool(expected(actual))
    if isinstance(expected, Mapping):
        return _mappings_equal(expected, actual)
    if _is_sequence(expected):
        return _sequences_equal(t.cast("Sequence[t.Any]", expected), actual)
    if isinstance(actual, Mapping) or _is_sequence(actual):
        return False
    return _scalars_equal(expected, actual)


def matches_partial(pattern: object, actual: object) -> bool:
    """Return ``True`` if *actual* contains everything *pattern* describes."""
    if isinstance(pattern, Comparator):
        return bool(pattern(actual))
    if isinstance(pattern, Mapping):
        if not isinstance(actual, Mapping):
            return False
        return all(
            key in actual and matches_partial(value, actual[key])
            for key, value in pattern.items()
        )
    return deep_equal(pattern, actual)


def matches_strict(pattern: object, actual: object) -> bool:
    """Return ``True`` if *actual* has exactly the shape and values of *pattern*."""
    return deep_equal(pattern, actual)


def matches(pattern: object | None, actual: object, *, strict: bool = False) -> bool:
    """Match *actual* against *pattern*; a missing pattern matches anything."""
    if pattern is None:
        return True
    if strict:
        return matches_strict(pattern, actual)
    return matches_partial(pattern, actual)


def same_pattern(left: object, right: object) -> bool:
    """Return ``True`` when two stored patterns are deep-equal.

    Unlike :func:`deep_equal` this never calls comparators; they are compared
    by value so two ``StartsWith("a")`` patterns are considered identical.
    """
    if isinstance(left, Comparator) or isinstance(right, Comparator):
        return type(left) is type(right) and left == right
    if isinstance(left, Mapping):
        return (
            isinstance(right, Mapping)
            and set(left) == set(right)
            and all(same_pattern(value, right[key]) for key, value in left.items())
        )
    if _is_sequence(left):
        if not _is_sequence(right):
            return False
        left_seq = t.cast("Sequence[t.Any]", left)
        right_seq = t.cast("Sequence[t.Any]", right)
        return len(left_seq) == len(right_seq) and all(
            same_pattern(a, b) for a, b in zip(left_seq, right_seq, strict=True)
        )
    if isinstance(right, Mapping) or _is_sequence(right):
        return False
    return _scalars_equal(left, right)


class MatchOutcome(enum.StrEnum):
    """Result categories reported by :func:`find_match`."""

    FOUND = "found"
    NO_ENTRIES = "no-entries"
    NO_MATCH = "no-match"


@dc.dataclass(frozen=True, slots=True)
class MatchResult:
    """Outcome of scanning a list of entries for an input."""

    outcome: MatchOutcome
    index: int | None = None

    @property
    def found(self) -> bool:
        """Return ``True`` when an entry was selected."""
        return self.outcome is MatchOutcome.FOUND


def entry_matches(entry: MockEntry, payload: object) -> bool:
    """Return ``True`` if *entry* accepts *payload*."""
    return matches(entry.matcher, payload, strict=entry.strict)


def find_match(entries: t.Sequence[MockEntry], payload: object) -> MatchResult:
    """Return the first entry accepting *payload*, oldest first."""
    if not entries:
        return MatchResult(MatchOutcome.NO_ENTRIES)
    for index, entry in enumerate(entries):
        if entry_matches(entry, payload):
            return MatchResult(MatchOutcome.FOUND, index)
    return MatchResult(MatchOutcome.NO_MATCH)


__all__ = [
    "MatchOutcome",
    "MatchResult",
    "deep_equal",
    "entry_matches",
    "find_match",
    "matches",
    "matches_partial",
    "matches_strict",
    "same_pattern",
]
