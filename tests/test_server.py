import asyncio

import pytest
from websockets.asyncio.client import connect
from websockets.asyncio.server import serve

from geminirelay.client import RelayClient
from geminirelay.errors import RelayResponseError, RelayTimeout
from geminirelay.relay import Relay
from geminirelay.server import RelayServer

from tests.fakes import FakeGenerator


@pytest.fixture
async def start_server(config):
    servers = []

    async def start(generator: FakeGenerator) -> tuple[RelayServer, str]:
        relay_server = RelayServer(Relay(generator, config))
        ws_server = await serve(relay_server.handle_connection, "127.0.0.1", 0)
        servers.append(ws_server)
        port = ws_server.sockets[0].getsockname()[1]
        return relay_server, f"ws://127.0.0.1:{port}"

    yield start

    for ws_server in servers:
        ws_server.close()
        await ws_server.wait_closed()


async def test_greeting_arrives_before_any_message(start_server):
    _, url = await start_server(FakeGenerator())

    async with RelayClient.connect(url, timeout=5) as client:
        assert client.greeting.type == "complete"
        assert client.greeting.content == "welcome"


async def test_hello_scenario(start_server):
    _, url = await start_server(FakeGenerator(["Hi", " there!"]))

    async with RelayClient.connect(url, timeout=5) as client:
        events = [event async for event in client.stream("Hello")]

    assert [(event.type, event.content) for event in events] == [
        ("chunk", "Hi"),
        ("chunk", " there!"),
        ("complete", ""),
    ]


async def test_ask_joins_chunks(start_server):
    _, url = await start_server(FakeGenerator(["Hi", " there!"]))

    async with RelayClient.connect(url, timeout=5) as client:
        assert await client.ask("Hello") == "Hi there!"
        assert await client.ask("Again") == "Hi there!"


async def test_failure_scenario(start_server):
    _, url = await start_server(FakeGenerator(["never"], fail_after=0, error="quota"))

    async with RelayClient.connect(url, timeout=5) as client:
        events = [event async for event in client.stream("Hello")]
        assert [event.type for event in events] == ["error"]
        assert "quota" in events[0].content

        with pytest.raises(RelayResponseError, match="quota"):
            await client.ask("Hello")


async def test_binary_message_is_relayed(start_server):
    generator = FakeGenerator(["ok"])
    _, url = await start_server(generator)

    async with connect(url) as websocket:
        await websocket.recv()
        await websocket.send("你好".encode())
        await websocket.recv()
        await websocket.recv()

    assert generator.prompts == ["你好"]


async def test_receive_times_out_without_events(start_server):
    _, url = await start_server(FakeGenerator())

    async with RelayClient.connect(url, timeout=5) as client:
        with pytest.raises(RelayTimeout):
            await client.receive(timeout=0.05)


async def test_active_connections_are_tracked(start_server):
    relay_server, url = await start_server(FakeGenerator())

    async with RelayClient.connect(url, timeout=5):
        assert len(relay_server.active_connections) == 1

    for _ in range(50):
        if not relay_server.active_connections:
            break
        await asyncio.sleep(0.01)
    assert relay_server.active_connections == []


async def test_disconnect_mid_stream_keeps_server_alive(start_server):
    _, url = await start_server(FakeGenerator(["a", "b", "c"], delay=0.05))

    async with connect(url) as websocket:
        await websocket.recv()
        await websocket.send("Hello")

    async with RelayClient.connect(url, timeout=5) as client:
        assert client.greeting.content == "welcome"
