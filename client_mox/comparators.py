"""Comparator objects that can be embedded in input patterns.

A comparator placed anywhere inside a matcher mapping is called with the
actual value found at that position instead of being compared for equality::

    stub.on(GetObject, {"Key": StartsWith("reports/")}).resolves({...})
"""

from __future__ import annotations

import abc
import dataclasses as dc
import re
import typing as t


class Comparator(abc.ABC):
    """Base class for values that decide a match by being called."""

    __slots__ = ()

    @abc.abstractmethod
    def __call__(self, value: object) -> bool:
        """Return ``True`` if *value* satisfies the comparison."""


@dc.dataclass(frozen=True, slots=True)
class Any(Comparator):
    """Match any value."""

    def __call__(self, value: object) -> bool:
        """Return ``True`` for any input."""
        return True


@dc.dataclass(frozen=True, slots=True)
class IsA(Comparator):
    """Match values that are instances of ``typ``."""

    typ: type

    def __call__(self, value: object) -> bool:
        """Return ``True`` when ``value`` is an instance of ``typ``."""
        if self.typ in (int, float) and isinstance(value, bool):
            return False
        return isinstance(value, self.typ)


@dc.dataclass(frozen=True, slots=True)
class Regex(Comparator):
    """Match strings containing ``pattern``."""

    pattern: str
    _compiled: re.Pattern[str] = dc.field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        """Compile the pattern once."""
        object.__setattr__(self, "_compiled", re.compile(self.pattern))

    def __call__(self, value: object) -> bool:
        """Return ``True`` if the regex matches *value*."""
        if not isinstance(value, str):
            return False
        return bool(self._compiled.search(value))


@dc.dataclass(frozen=True, slots=True)
class Contains(Comparator):
    """Match if ``item`` is found in *value*."""

    item: object

    def __call__(self, value: object) -> bool:
        """Return ``True`` if ``item`` is in *value*."""
        try:
            return self.item in value  # type: ignore[operator]
        except TypeError:
            return False


@dc.dataclass(frozen=True, slots=True)
class StartsWith(Comparator):
    """Match if *value* begins with ``prefix``."""

    prefix: str

    def __call__(self, value: object) -> bool:
        """Return ``True`` if *value* starts with ``prefix``."""
        return isinstance(value, str) and value.startswith(self.prefix)


@dc.dataclass(frozen=True, slots=True)
class Predicate(Comparator):
    """Use a custom ``func`` to determine a match."""

    func: t.Callable[[t.Any], bool]

    def __call__(self, value: object) -> bool:
        """Return ``True`` if ``func(value)`` is truthy."""
        return bool(self.func(value))


__all__ = [
    "Any",
    "Comparator",
    "Contains",
    "IsA",
    "Predicate",
    "Regex",
    "StartsWith",
]
