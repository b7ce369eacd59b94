"""Assertion helpers over a stub's call history."""

from __future__ import annotations

import typing as t

from ._formatting import describe_call, format_sections, format_value, numbered
from .matching import deep_equal

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    from .models import CallRecord


def _calls_of(calls: t.Sequence[CallRecord], kind: type) -> list[CallRecord]:
    return [record for record in calls if issubclass(record.kind, kind)]


def _received_names(calls: t.Sequence[CallRecord]) -> str:
    if not calls:
        return "(none)"
    return ", ".join(record.kind_name for record in calls)


def assert_received_command(calls: t.Sequence[CallRecord], kind: type) -> None:
    """Raise ``AssertionError`` unless *kind* was dispatched at least once."""
    if _calls_of(calls, kind):
        return
    if not calls:
        msg = (
            f"Expected command {kind.__name__} to be received, "
            "but no commands were received"
        )
    else:
        msg = format_sections(
            f"Expected command {kind.__name__} to be received.",
            [("Received commands", _received_names(calls))],
        )
    raise AssertionError(msg)


def assert_not_received_command(calls: t.Sequence[CallRecord], kind: type) -> None:
    """Raise ``AssertionError`` if *kind* was dispatched."""
    matching = _calls_of(calls, kind)
    if not matching:
        return
    msg = format_sections(
        f"Expected command {kind.__name__} not to be received, "
        f"but it was received {len(matching)} time(s).",
        [("Recorded calls", numbered([describe_call(rec) for rec in matching]))],
    )
    raise AssertionError(msg)


def assert_received_command_times(
    calls: t.Sequence[CallRecord], kind: type, times: int
) -> None:
    """Raise ``AssertionError`` unless *kind* was dispatched exactly *times*."""
    actual = len(_calls_of(calls, kind))
    if actual == times:
        return
    msg = (
        f"Expected command {kind.__name__} to be received {times} time(s), "
        f"but it was received {actual} time(s)"
    )
    raise AssertionError(msg)


def assert_received_command_with(
    calls: t.Sequence[CallRecord], kind: type, expected_input: t.Any
) -> None:
    """Raise ``AssertionError`` unless some *kind* call had *expected_input*."""
    matching = _calls_of(calls, kind)
    if any(deep_equal(expected_input, record.input) for record in matching):
        return
    sections = [("Expected input", format_value(expected_input))]
    if matching:
        sections.append(
            ("Received inputs", numbered([format_value(rec.input) for rec in matching]))
        )
        title = f"Expected command {kind.__name__} to be received with matching input."
    else:
        title = (
            f"Expected command {kind.__name__} to be received with matching input, "
            f"but {kind.__name__} was never called."
        )
    raise AssertionError(format_sections(title, sections))


def assert_received_nth_command_with(
    calls: t.Sequence[CallRecord], n: int, kind: type, expected_input: t.Any
) -> None:
    """Raise ``AssertionError`` unless call *n* (1-indexed) was *kind* with input."""
    if n < 1:
        msg = "n is 1-indexed and must be >= 1"
        raise ValueError(msg)
    if n > len(calls):
        msg = (
            f"Expected at least {n} call(s), but only received {len(calls)} call(s)"
        )
        raise AssertionError(msg)
    record = calls[n - 1]
    if not issubclass(record.kind, kind):
        msg = (
            f"Expected call {n} to be {kind.__name__}, "
            f"but received {record.kind_name}"
        )
        raise AssertionError(msg)
    if deep_equal(expected_input, record.input):
        return
    msg = format_sections(
        f"Expected call {n} ({kind.__name__}) to have matching input.",
        [
            ("Expected input", format_value(expected_input)),
            ("Received input", format_value(record.input)),
        ],
    )
    raise AssertionError(msg)


def assert_received_no_other_commands(
    calls: t.Sequence[CallRecord], kinds: t.Iterable[type] = ()
) -> None:
    """Raise ``AssertionError`` if any call is not one of *kinds*."""
    allowed = tuple(kinds)
    unexpected = [
        record for record in calls if not issubclass(record.kind, allowed)
    ]
    if not unexpected:
        return
    expected_names = ", ".join(kind.__name__ for kind in allowed) or "(none)"
    msg = format_sections(
        "Expected no other commands to be received.",
        [
            ("Allowed commands", expected_names),
            ("Unexpected calls", numbered([describe_call(rec) for rec in unexpected])),
        ],
    )
    raise AssertionError(msg)


__all__ = [
    "assert_not_received_command",
    "assert_received_command",
    "assert_received_command_times",
    "assert_received_command_with",
    "assert_received_nth_command_with",
    "assert_received_no_other_commands",
]
