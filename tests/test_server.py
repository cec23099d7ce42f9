import pytest
from fastapi.testclient import TestClient

from telepanel.core.channel import SenderSlot, create_channel
from telepanel.ui import create_app


def _client():
    slot = SenderSlot()
    sender, receiver = create_channel(8)
    slot.install(sender)
    return TestClient(create_app(slot)), receiver


def test_request_before_install_fails_not_ready() -> None:
    client = TestClient(create_app(SenderSlot()))

    response = client.get("/?t=1")

    assert response.status_code == 503
    assert response.text.startswith("not ready")


def test_query_is_enqueued_in_order_and_path_ignored() -> None:
    client, receiver = _client()

    response = client.get("/any/path?t=1,2,3&temp=10%2C20&t=4")

    assert response.status_code == 200
    assert response.content == b""
    assert receiver.drain() == [[("t", "1,2,3"), ("temp", "10,20"), ("t", "4")]]


def test_missing_query_enqueues_empty_record() -> None:
    client, receiver = _client()

    assert client.get("/").status_code == 200
    assert receiver.drain() == [[]]


def test_plus_decodes_to_space() -> None:
    client, receiver = _client()

    client.post("/push?v=1+2")

    assert receiver.drain() == [[("v", "1 2")]]


def test_closed_channel_fails_request() -> None:
    client, receiver = _client()
    receiver.close()

    response = client.get("/?t=1")

    assert response.status_code == 503
    assert response.text.startswith("channel closed")


@pytest.mark.parametrize("method", ["PATCH", "DELETE", "HEAD", "OPTIONS"])
def test_any_method_with_query_is_enqueued(method) -> None:
    client, receiver = _client()

    response = client.request(method, "/?t=1")

    assert response.status_code == 200
    assert receiver.drain() == [[("t", "1")]]
