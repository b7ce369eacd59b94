"""Sample clients and commands shared by the unit tests."""

from __future__ import annotations

import dataclasses as dc
import typing as t

from client_mox.models import Command


class RealNetworkCallError(RuntimeError):
    """Raised when a test accidentally reaches an unpatched client."""


class StorageClient:
    """Stand-in for a service client with an async ``send`` method."""

    def __init__(self, region: str = "eu-west-1") -> None:
        self.config = {"region": region}

    async def send(
        self, command: object, options: dict[str, t.Any] | None = None
    ) -> t.Any:
        """Pretend to perform a network round trip."""
        msg = f"real network call attempted for {type(command).__name__}"
        raise RealNetworkCallError(msg)


class ArchiveClient(StorageClient):
    """Subclass inheriting ``send`` from :class:`StorageClient`."""


@dc.dataclass(slots=True)
class GetObject(Command):
    """Fetch an object."""


@dc.dataclass(slots=True)
class PutObject(Command):
    """Store an object."""


@dc.dataclass(slots=True)
class ListObjects(Command):
    """List objects in a bucket."""


@dc.dataclass(slots=True)
class Query(Command):
    """Query a table."""
