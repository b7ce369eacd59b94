# ruff: noqa: S101
"""pytest-bdd steps that configure client stubs and send commands."""

from __future__ import annotations

import io
import typing as t

import pytest
from pytest_bdd import given, parsers, then, when

from client_mox.controller import mock_client, mock_client_instance
from client_mox.unittests._clients import StorageClient
from tests.helpers.dispatch import DispatchLog, command_kind, send_command

if t.TYPE_CHECKING:  # pragma: no cover - typing only
    from client_mox.client_stub import ClientStub


@pytest.fixture
def client() -> StorageClient:
    """Default client used when a scenario does not create its own."""
    return StorageClient()


@pytest.fixture
def dispatch_log() -> DispatchLog:
    """Collect results and errors of sent commands."""
    return DispatchLog()


@pytest.fixture
def debug_buffer() -> io.StringIO:
    """Capture trace output written by stubs."""
    return io.StringIO()


@given("a class-wide stub on the storage client", target_fixture="stub")
def class_stub(request: pytest.FixtureRequest, debug_buffer: io.StringIO) -> ClientStub:
    """Stub ``send`` on every :class:`StorageClient`."""
    stub = mock_client(StorageClient, debug_stream=debug_buffer)
    request.addfinalizer(stub.restore)
    return stub


@given(
    parsers.cfparse('a storage client in region "{region}"'), target_fixture="client"
)
def regional_client(region: str) -> StorageClient:
    """Create a client configured for *region*."""
    return StorageClient(region)


@given("an instance stub on that client", target_fixture="stub")
def instance_stub(
    request: pytest.FixtureRequest, client: StorageClient, debug_buffer: io.StringIO
) -> ClientStub:
    """Stub ``send`` on the scenario's client only."""
    stub = mock_client_instance(client, debug_stream=debug_buffer)
    request.addfinalizer(stub.restore)
    return stub


@given(parsers.cfparse('a one-time {kind:w} response "{value:w}"'))
@when(parsers.cfparse('a one-time {kind:w} response "{value:w}"'))
def once_response(stub: ClientStub, kind: str, value: str) -> None:
    """Queue a one-shot response."""
    stub.on(command_kind(kind)).resolves_once(value)


@given(parsers.cfparse('a permanent {kind:w} response "{value:w}"'))
@when(parsers.cfparse('a permanent {kind:w} response "{value:w}"'))
def permanent_response(stub: ClientStub, kind: str, value: str) -> None:
    """Register a default response for any input."""
    stub.on(command_kind(kind)).resolves(value)


@given(parsers.cfparse('a permanent {kind:w} response "{value:w}" for key "{key:w}"'))
def keyed_response(stub: ClientStub, kind: str, value: str, key: str) -> None:
    """Register a response for inputs containing ``Key``."""
    stub.on(command_kind(kind), {"Key": key}).resolves(value)


@given(parsers.cfparse('a strict {kind:w} response "{value:w}" for key "{key:w}"'))
def strict_response(stub: ClientStub, kind: str, value: str, key: str) -> None:
    """Register a response for inputs exactly equal to ``{"Key": key}``."""
    stub.on(command_kind(kind), {"Key": key}, strict=True).resolves(value)


@given(parsers.cfparse("{kind:w} answers with the client region"))
def region_fake(stub: ClientStub, kind: str) -> None:
    """Answer with the region of the client the call was made on."""

    def handler(payload: object, client: StorageClient) -> str:
        return client.config["region"]

    stub.on(command_kind(kind)).calls_fake(handler)


@given(parsers.cfparse("{kind:w} rejects with a throttling error"))
def throttling(stub: ClientStub, kind: str) -> None:
    """Reject calls with a canned throttling error."""
    stub.on(command_kind(kind)).rejects_with_throttling()


@when(parsers.cfparse("{kind:w} is sent {count:d} times"))
def send_repeatedly(
    client: StorageClient, dispatch_log: DispatchLog, kind: str, count: int
) -> None:
    """Send *count* commands with empty input."""
    for _ in range(count):
        send_command(client, command_kind(kind)(), dispatch_log)


@when(parsers.cfparse('{kind:w} is sent with key "{key:w}"'))
def send_with_key(
    client: StorageClient, dispatch_log: DispatchLog, kind: str, key: str
) -> None:
    """Send one command carrying ``Key``."""
    send_command(client, command_kind(kind)({"Key": key}), dispatch_log)


@when(
    parsers.cfparse('{kind:w} is sent with key "{key:w}" and extra field "{field:w}"')
)
def send_with_extra(
    client: StorageClient, dispatch_log: DispatchLog, kind: str, key: str, field: str
) -> None:
    """Send one command carrying ``Key`` and an additional field."""
    payload = {"Key": key, field: "extra"}
    send_command(client, command_kind(kind)(payload), dispatch_log)


@when("the stub is reset")
def reset_stub(stub: ClientStub) -> None:
    """Clear the call history."""
    stub.reset()


@when("the stub is restored")
def restore_stub(stub: ClientStub) -> None:
    """Put the original dispatch method back."""
    stub.restore()


@then(parsers.cfparse('the results should be "{values}"'))
def check_results(dispatch_log: DispatchLog, values: str) -> None:
    """Compare the collected results with a comma separated list."""
    assert dispatch_log.error is None, dispatch_log.error
    assert dispatch_log.results == [value.strip() for value in values.split(",")]


@then(parsers.cfparse("the call should fail with {error:w}"))
def check_error_type(dispatch_log: DispatchLog, error: str) -> None:
    """Assert the last failure was an instance of the named class."""
    raised = dispatch_log.require_error()
    names = {cls.__name__ for cls in type(raised).__mro__}
    assert error in names, f"{type(raised).__name__} is not a {error}"


@then(parsers.cfparse('the error message should mention "{text}"'))
def check_error_message(dispatch_log: DispatchLog, text: str) -> None:
    """Assert the failure message contains *text*."""
    assert text in str(dispatch_log.require_error())


@then(parsers.cfparse("the recorded call count should be {count:d}"))
def check_call_count(stub: ClientStub, count: int) -> None:
    """Assert how many calls the stub recorded."""
    assert len(stub.calls()) == count


@then(parsers.cfparse("{kind:w} should have been received {count:d} times"))
def check_received_times(stub: ClientStub, kind: str, count: int) -> None:
    """Assert the number of calls of *kind*."""
    stub.assert_received_command_times(command_kind(kind), count)
