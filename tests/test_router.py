from fastapi.testclient import TestClient

from geminirelay.router import create_app

from tests.fakes import FakeGenerator


def test_router_relays_hello_scenario(config):
    app = create_app(config, generator=FakeGenerator(["Hi", " there!"]))

    with TestClient(app) as client:
        with client.websocket_connect("/relay/ws") as websocket:
            assert websocket.receive_json() == {
                "role": "assistant",
                "content": "welcome",
                "type": "complete",
            }
            websocket.send_text("Hello")
            events = [websocket.receive_json() for _ in range(3)]

    assert events == [
        {"role": "assistant", "content": "Hi", "type": "chunk"},
        {"role": "assistant", "content": " there!", "type": "chunk"},
        {"role": "assistant", "content": "", "type": "complete"},
    ]


def test_router_relays_errors(config):
    app = create_app(config, generator=FakeGenerator(fail_after=0, error="offline"))

    with TestClient(app) as client:
        with client.websocket_connect("/relay/ws") as websocket:
            websocket.receive_json()
            websocket.send_text("Hello")
            event = websocket.receive_json()

    assert event == {"role": "assistant", "content": "failed: offline", "type": "error"}


def test_router_decodes_binary_frames(config):
    generator = FakeGenerator(["ok"])
    app = create_app(config, generator=generator)

    with TestClient(app) as client:
        with client.websocket_connect("/relay/ws") as websocket:
            websocket.receive_json()
            websocket.send_bytes("你好".encode())
            events = [websocket.receive_json() for _ in range(2)]

    assert [event["type"] for event in events] == ["chunk", "complete"]
    assert generator.prompts == ["你好"]


def test_router_keeps_connection_after_binary_frame(config):
    app = create_app(config, generator=FakeGenerator(["ok"]))

    with TestClient(app) as client:
        with client.websocket_connect("/relay/ws") as websocket:
            websocket.receive_json()
            websocket.send_bytes(b"first")
            websocket.receive_json()
            websocket.receive_json()
            websocket.send_text("second")
            events = [websocket.receive_json() for _ in range(2)]

    assert events == [
        {"role": "assistant", "content": "ok", "type": "chunk"},
        {"role": "assistant", "content": "", "type": "complete"},
    ]
