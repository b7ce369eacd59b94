"""Aggregate pytest-bdd step definitions for client-mox features."""

from .client_stub import *  # noqa: F403
from .debug import *  # noqa: F403
from .pagination import *  # noqa: F403

# Re-export all imported step definitions so ``from tests.steps import *``
# makes them available to scenario modules during collection.
__all__ = [
    name
    for name in globals()
    if not name.startswith("_") and name != "annotations"
]
