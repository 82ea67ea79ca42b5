"""
Relay Server

Standalone WebSocket server built on the websockets library. Each connection
gets a greeting and then one streamed exchange per inbound message.

For FastAPI integration, use the router module instead.
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from websockets.asyncio.server import serve
from websockets.exceptions import ConnectionClosedError

if TYPE_CHECKING:
    from websockets.asyncio.server import ServerConnection

from geminirelay.config import RelayConfig
from geminirelay.generation import GeminiGenerator
from geminirelay.relay import Relay

LOG = logging.getLogger(__name__)


@dataclass
class RelayServer:
    """
    Connection handler for websockets.asyncio.server.serve.

    Usage:
        server = RelayServer(relay)
        async with serve(server.handle_connection, "0.0.0.0", 8080) as ws_server:
            await ws_server.serve_forever()
    """

    relay: Relay
    active_connections_set: set[str] = field(default_factory=set, init=False)

    @property
    def active_connections(self) -> list[str]:
        """List of currently active connection IDs."""
        return list(self.active_connections_set)

    async def handle_connection(self, websocket: "ServerConnection") -> None:
        """
        Handle a WebSocket connection lifecycle.

        This method blocks until the connection closes and every exchange
        started on it has finished.
        """
        connection_id = str(websocket.id)
        self.active_connections_set.add(connection_id)
        LOG.info("Client connected: %s from %s", connection_id, websocket.remote_address)

        try:
            await self.relay.serve(websocket.send, self.receive_messages(websocket))
        finally:
            self.active_connections_set.discard(connection_id)
            LOG.info("Client disconnected: %s", connection_id)

    async def receive_messages(self, websocket: "ServerConnection") -> AsyncIterator[str | bytes]:
        """Yield inbound messages until the connection closes."""
        try:
            async for message in websocket:
                yield message
        except ConnectionClosedError as exc:
            LOG.warning("WebSocket connection error on %s: %s", websocket.id, exc)


async def run(config: RelayConfig) -> None:
    """Build the relay from configuration and serve until cancelled."""
    relay = Relay(GeminiGenerator.from_config(config), config)
    server = RelayServer(relay)

    async with serve(server.handle_connection, config.host, config.port) as ws_server:
        LOG.info("WebSocket server listening on %s (model %s)", config.url, config.model)
        await ws_server.serve_forever()


def main(config: RelayConfig) -> None:
    """Run the server, logging start-up failures instead of raising them."""
    try:
        asyncio.run(run(config))
    except KeyboardInterrupt:
        LOG.info("Shutting down relay server")
    except Exception:
        LOG.exception("Error starting WebSocket server")
