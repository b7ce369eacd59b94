"""Entry points for creating client stubs and managing several at once."""

from __future__ import annotations

import logging
import types  # noqa: TC003
import typing as t

from .client_stub import ClientStub
from .interception import InstanceTarget, TypeTarget

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    from .debug import DebugSettings

logger = logging.getLogger(__name__)

DEFAULT_METHOD: t.Final[str] = "send"


def mock_client(
    cls: type,
    method: str = DEFAULT_METHOD,
    *,
    debug_settings: DebugSettings | None = None,
    debug_stream: t.TextIO | None = None,
) -> ClientStub:
    """Stub *method* on *cls*, affecting every instance of the class.

    Example::

        stub = mock_client(StorageClient)
        stub.on(GetObject, {"Bucket": "reports"}).resolves({"Body": b"..."})
    """
    stub = ClientStub(
        TypeTarget(cls, method),
        debug_settings=debug_settings,
        debug_stream=debug_stream,
    )
    return stub.attach()


def mock_client_instance(
    client: object,
    method: str = DEFAULT_METHOD,
    *,
    debug_settings: DebugSettings | None = None,
    debug_stream: t.TextIO | None = None,
) -> ClientStub:
    """Stub *method* on the single object *client*."""
    stub = ClientStub(
        InstanceTarget(client, method),
        debug_settings=debug_settings,
        debug_stream=debug_stream,
    )
    return stub.attach()


class ClientMox:
    """Create client stubs and restore all of them together.

    Stubs are restored most recent first so that stacked stubs on the same
    class unwind to the true original method::

        with ClientMox() as mox:
            storage = mox.mock_client(StorageClient)
            storage.on(GetObject).resolves({"Body": b"data"})
            ...
    """

    def __init__(
        self,
        *,
        debug_settings: DebugSettings | None = None,
        debug_stream: t.TextIO | None = None,
    ) -> None:
        self.debug_settings = debug_settings
        self.debug_stream = debug_stream
        self._stubs: list[ClientStub] = []

    @property
    def stubs(self) -> tuple[ClientStub, ...]:
        """Return the stubs created so far, oldest first."""
        return tuple(self._stubs)

    # ------------------------------------------------------------------
    # Context manager protocol
    # ------------------------------------------------------------------
    def __enter__(self) -> ClientMox:
        """Return the controller."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: types.TracebackType | None,
    ) -> None:
        """Restore every stub."""
        self.restore_all()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def mock_client(self, cls: type, method: str = DEFAULT_METHOD) -> ClientStub:
        """Create a class-wide stub tracked by this controller."""
        return self._track(
            mock_client(
                cls,
                method,
                debug_settings=self.debug_settings,
                debug_stream=self.debug_stream,
            )
        )

    def mock_client_instance(
        self, client: object, method: str = DEFAULT_METHOD
    ) -> ClientStub:
        """Create an instance stub tracked by this controller."""
        return self._track(
            mock_client_instance(
                client,
                method,
                debug_settings=self.debug_settings,
                debug_stream=self.debug_stream,
            )
        )

    def reset_all(self) -> None:
        """Clear the call history of every stub."""
        for stub in self._stubs:
            stub.reset()

    def restore_all(self) -> None:
        """Restore every stub, most recent first.

        Every stub is restored even if one fails; the first failure is
        re-raised afterwards.
        """
        first_error: Exception | None = None
        while self._stubs:
            stub = self._stubs.pop()
            try:
                stub.restore()
            except Exception as exc:
                logger.exception("Failed to restore %r", stub)
                if first_error is None:
                    first_error = exc
        if first_error is not None:
            raise first_error

    def _track(self, stub: ClientStub) -> ClientStub:
        self._stubs.append(stub)
        return stub


__all__ = ["DEFAULT_METHOD", "ClientMox", "mock_client", "mock_client_instance"]
