import threading

import pytest

from fake_backend import FakeTransport, connect, rejecting

from mod_deck.bridge.client import BridgeClient
from mod_deck.bridge.errors import (
    BridgeClosed,
    CommandRejected,
    CommandTimeout,
    ElevationRequired,
    NotFound,
)


def test_call_returns_result_and_sends_request_shape():
    backend, transport = connect({"get_setting": lambda args: f"value-of-{args['key']}"})
    assert backend.client.call("get_setting", {"key": "custom_url"}) == "value-of-custom_url"
    assert transport.calls == [("get_setting", {"key": "custom_url"})]
    backend.client.close()


def test_responses_correlate_by_id_even_when_out_of_order():
    transport = FakeTransport({"a": "first", "b": "second"})
    client = BridgeClient(transport, call_timeout=2.0)
    client.start()
    transport.hold_replies = True
    results: dict[str, object] = {}

    def _call(name: str) -> None:
        results[name] = client.call(name)

    threads = [threading.Thread(target=_call, args=(name,)) for name in ("a", "b")]
    for thread in threads:
        thread.start()
    while len(transport.held) < 2:
        threading.Event().wait(0.01)
    transport.held.reverse()
    transport.release_held()
    for thread in threads:
        thread.join(timeout=2)

    assert results == {"a": "first", "b": "second"}
    client.close()


def test_rejections_map_to_specific_subclasses():
    backend, _transport = connect(
        {
            "get_entity_details": rejecting("Entity not found: x"),
            "launch_executable": rejecting({"message": "Failed to launch (os error 740)"}),
            "delete_asset": rejecting("disk full"),
        }
    )
    with pytest.raises(NotFound):
        backend.get_entity_details("x")
    with pytest.raises(ElevationRequired, match="os error 740"):
        backend.launch_executable("C:/game.exe")
    with pytest.raises(CommandRejected) as exc_info:
        backend.delete_asset(3)
    assert type(exc_info.value) is CommandRejected
    assert exc_info.value.command == "delete_asset"
    assert str(exc_info.value) == "disk full"
    backend.client.close()


def test_unknown_command_rejection_and_null_error_payload():
    backend, transport = connect()
    with pytest.raises(CommandRejected, match="unknown command"):
        backend.client.call("nope")
    transport.handlers["weird"] = rejecting(None)
    with pytest.raises(CommandRejected, match="Unknown error"):
        backend.client.call("weird")
    backend.client.close()


def test_transport_close_fails_pending_calls():
    transport = FakeTransport({"slow": "never"})
    client = BridgeClient(transport)
    client.start()
    transport.hold_replies = True
    errors: list[BaseException] = []

    def _call() -> None:
        try:
            client.call("slow")
        except BridgeClosed as exc:
            errors.append(exc)

    thread = threading.Thread(target=_call)
    thread.start()
    while not transport.held:
        threading.Event().wait(0.01)
    transport.close()
    thread.join(timeout=2)

    assert len(errors) == 1
    assert "slow" in str(errors[0])
    assert client.closed
    with pytest.raises(BridgeClosed):
        client.call("slow")


def test_call_timeout_raises_command_timeout():
    transport = FakeTransport({"slow": "late"})
    client = BridgeClient(transport)
    client.start()
    transport.hold_replies = True
    with pytest.raises(CommandTimeout, match="slow"):
        client.call("slow", timeout=0.05)
    client.close()


def test_on_close_callbacks_receive_reason():
    backend, transport = connect()
    reasons: list[str] = []
    done = threading.Event()
    def _closed(reason: str) -> None:
        reasons.append(reason)
        done.set()

    backend.client.on_close(_closed)
    transport.close()
    assert done.wait(2)
    assert reasons == ["Backend connection closed"]


def test_malformed_reply_for_unknown_id_is_ignored():
    backend, transport = connect({"get_total_asset_count": 7})
    transport.inject({"id": 999, "ok": True, "result": "orphan"})
    assert backend.get_total_asset_count() == 7
    backend.client.close()
