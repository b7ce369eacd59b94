"""Shared helpers for the runnable examples."""

from __future__ import annotations

import asyncio
import dataclasses as dc
import typing as t

from client_mox import Command

_T = t.TypeVar("_T")


class BucketClient:
    """Minimal object-storage client; ``send`` would hit the network."""

    def __init__(self, region: str = "eu-west-1") -> None:
        self.config = {"region": region}

    async def send(self, command: Command) -> t.Any:
        """Perform the request."""
        msg = "examples must stub BucketClient.send"
        raise RuntimeError(msg)


@dc.dataclass(slots=True)
class GetObjectCommand(Command):
    """Download an object."""


@dc.dataclass(slots=True)
class PutObjectCommand(Command):
    """Upload an object."""


@dc.dataclass(slots=True)
class ListObjectsV2Command(Command):
    """List a page of keys."""


async def read_text(client: BucketClient, bucket: str, key: str) -> str:
    """Return the object body decoded as UTF-8."""
    response = await client.send(GetObjectCommand({"Bucket": bucket, "Key": key}))
    return response["Body"].read().decode("utf-8")


async def list_keys(client: BucketClient, bucket: str) -> list[str]:
    """Return every key in *bucket*, following continuation tokens."""
    keys: list[str] = []
    token = None
    while True:
        request: dict[str, t.Any] = {"Bucket": bucket}
        if token is not None:
            request["ContinuationToken"] = token
        page = await client.send(ListObjectsV2Command(request))
        keys.extend(item["Key"] for item in page["Contents"])
        token = page.get("NextContinuationToken")
        if token is None:
            return keys


def run(coro: t.Coroutine[t.Any, t.Any, _T]) -> _T:
    """Run *coro* to completion on a fresh event loop."""
    return asyncio.run(coro)
