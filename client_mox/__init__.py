"""Scripted responses for Python service clients.

client-mox replaces a client's dispatch method (``send`` by default) with an
async stand-in that records every command, matches its input against
configured rules and answers with canned results or errors::

    stub = mock_client(StorageClient)
    stub.on(GetObject, {"Bucket": "reports"}).resolves_once({"Body": b"v1"})
    stub.on(GetObject).rejects_with_no_such_key()
"""

from __future__ import annotations

from .client_stub import ClientStub
from .comparators import Any, Contains, IsA, Predicate, Regex, StartsWith
from .controller import ClientMox, mock_client, mock_client_instance
from .debug import DebugSettings, set_global_debug
from .errors import (
    ClientMoxError,
    InvalidPaginationTokenError,
    NoMatchingMockError,
    UnconfiguredCommandError,
    UnmatchedInputError,
)
from .fixtures import load_fixture
from .models import CallRecord, Command
from .pagination import PaginatorOptions, create_paginated_responses
from .service_errors import ServiceError
from .streams import create_stream
from .stubs import CommandStub

__all__ = [
    "Any",
    "CallRecord",
    "ClientMox",
    "ClientMoxError",
    "ClientStub",
    "Command",
    "CommandStub",
    "Contains",
    "DebugSettings",
    "InvalidPaginationTokenError",
    "IsA",
    "NoMatchingMockError",
    "PaginatorOptions",
    "Predicate",
    "Regex",
    "ServiceError",
    "StartsWith",
    "UnconfiguredCommandError",
    "UnmatchedInputError",
    "create_paginated_responses",
    "create_stream",
    "load_fixture",
    "mock_client",
    "mock_client_instance",
    "set_global_debug",
]
