"""Install and remove replacement dispatch methods.

Two binding granularities share one contract:

:class:`TypeTarget`
    Patches the attribute on a class, affecting every instance that does not
    define its own.
:class:`InstanceTarget`
    Stores a bound method in a single object's ``__dict__``.

Both remember exactly what was there before so :meth:`StubTarget.detach` can
put it back, including the case where the method was only inherited. Targets
stacked on the same attribute may be detached in any order: a target removed
from beneath another hands its saved attribute up the stack instead of
clobbering the replacement still installed above it.
"""

from __future__ import annotations

import abc
import logging
import threading
import types
import typing as t

logger = logging.getLogger(__name__)

_ABSENT: t.Final = object()

# Targets currently attached to each (owner, attribute), oldest first.
_STACKS: dict[tuple[int, str], list[StubTarget]] = {}
_STACKS_LOCK = threading.Lock()


class StubTarget(abc.ABC):
    """Object or class whose dispatch method is replaced."""

    def __init__(self, method_name: str) -> None:
        self.method_name = method_name
        self._previous: object = _ABSENT
        self._attached = False

    @property
    def attached(self) -> bool:
        """Return ``True`` while the replacement is installed."""
        return self._attached

    @property
    @abc.abstractmethod
    def owner(self) -> object:
        """Return the class or instance being patched."""

    @property
    @abc.abstractmethod
    def client(self) -> object | None:
        """Return the patched instance, or ``None`` for class-wide targets."""

    @abc.abstractmethod
    def original_method(self) -> t.Callable[..., t.Any]:
        """Return the method currently resolved for ``method_name``."""

    @abc.abstractmethod
    def _install(self, replacement: t.Callable[..., t.Any]) -> None: ...

    def _namespace(self) -> dict[str, t.Any]:
        namespace = getattr(self.owner, "__dict__", None)
        if namespace is None:
            msg = (
                f"cannot patch {self.method_name!r} on {self.describe()}: "
                "object has no __dict__"
            )
            raise TypeError(msg)
        return t.cast("dict[str, t.Any]", namespace)

    def attach(self, replacement: t.Callable[..., t.Any]) -> None:
        """Install *replacement*, remembering the current attribute."""
        if self._attached:
            msg = f"{self.describe()}.{self.method_name} is already patched"
            raise RuntimeError(msg)
        self.original_method()
        with _STACKS_LOCK:
            self._previous = self._namespace().get(self.method_name, _ABSENT)
            self._install(replacement)
            _STACKS.setdefault(self._stack_key(), []).append(self)
            self._attached = True
        logger.debug("Patched %s.%s", self.describe(), self.method_name)

    def detach(self) -> None:
        """Restore the attribute captured by :meth:`attach`; idempotent."""
        if not self._attached:
            return
        with _STACKS_LOCK:
            key = self._stack_key()
            stack = _STACKS[key]
            position = stack.index(self)
            if position < len(stack) - 1:
                # The target above now owns what this one saved.
                stack[position + 1]._previous = self._previous
            elif self._previous is _ABSENT:
                delattr(self.owner, self.method_name)
            else:
                setattr(self.owner, self.method_name, self._previous)
            del stack[position]
            if not stack:
                del _STACKS[key]
            self._previous = _ABSENT
            self._attached = False
        logger.debug("Restored %s.%s", self.describe(), self.method_name)

    def _stack_key(self) -> tuple[int, str]:
        return (id(self.owner), self.method_name)

    def describe(self) -> str:
        """Return a short label for log and error messages."""
        owner = self.owner
        if isinstance(owner, type):
            return owner.__qualname__
        return f"<{type(owner).__qualname__} instance>"


class TypeTarget(StubTarget):
    """Patch a method for every instance of a class."""

    def __init__(self, cls: type, method_name: str = "send") -> None:
        if not isinstance(cls, type):
            msg = f"expected a class, got {type(cls).__name__}"
            raise TypeError(msg)
        super().__init__(method_name)
        self.cls = cls

    @property
    def owner(self) -> type:
        """Return the patched class."""
        return self.cls

    @property
    def client(self) -> None:
        """Class-wide targets have no single client."""
        return None

    def original_method(self) -> t.Callable[..., t.Any]:
        """Return the function the class currently resolves."""
        method = getattr(self.cls, self.method_name, None)
        if method is None or not callable(method):
            msg = f"{self.cls.__qualname__} has no method {self.method_name!r}"
            raise AttributeError(msg)
        return t.cast("t.Callable[..., t.Any]", method)

    def _install(self, replacement: t.Callable[..., t.Any]) -> None:
        setattr(self.cls, self.method_name, replacement)


class InstanceTarget(StubTarget):
    """Patch a method on one object only."""

    def __init__(self, obj: object, method_name: str = "send") -> None:
        if isinstance(obj, type):
            msg = "use TypeTarget to patch a class"
            raise TypeError(msg)
        super().__init__(method_name)
        self.obj = obj

    @property
    def owner(self) -> object:
        """Return the patched instance."""
        return self.obj

    @property
    def client(self) -> object:
        """Return the patched instance."""
        return self.obj

    def original_method(self) -> t.Callable[..., t.Any]:
        """Return the bound method the instance currently resolves."""
        method = getattr(self.obj, self.method_name, None)
        if method is None or not callable(method):
            msg = f"{type(self.obj).__qualname__} has no method {self.method_name!r}"
            raise AttributeError(msg)
        return t.cast("t.Callable[..., t.Any]", method)

    def _install(self, replacement: t.Callable[..., t.Any]) -> None:
        self._namespace()[self.method_name] = types.MethodType(replacement, self.obj)


__all__ = ["InstanceTarget", "StubTarget", "TypeTarget"]
