"""
Relay Client

Connects to a relay, sends prompts and reads back the framed events.
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from websockets.asyncio.client import connect

if TYPE_CHECKING:
    from websockets.asyncio.client import ClientConnection

from geminirelay.errors import RelayResponseError, RelayTimeout
from geminirelay.models import RelayEvent

LOG = logging.getLogger(__name__)


@dataclass
class RelayClient:
    """
    Client for chatting through a relay.

    Usage:
        async with RelayClient.connect("ws://localhost:8080") as client:
            print(client.greeting.content)
            answer = await client.ask("Hello")
    """

    websocket: "ClientConnection"
    timeout: float = 60.0
    greeting: RelayEvent | None = field(default=None, init=False)

    @classmethod
    @asynccontextmanager
    async def connect(cls, url: str, *, timeout: float = 60.0) -> AsyncIterator["RelayClient"]:
        """Open a connection and read the greeting event."""
        async with connect(url) as websocket:
            client = cls(websocket, timeout=timeout)
            client.greeting = await client.receive()
            LOG.debug("Connected to %s: %s", url, client.greeting.content)
            yield client

    async def receive(self, timeout: float | None = None) -> RelayEvent:
        """
        Wait for the next event from the relay.

        Raises:
            RelayTimeout: If no event arrives within timeout
        """
        if timeout is None:
            timeout = self.timeout

        try:
            data = await asyncio.wait_for(self.websocket.recv(), timeout=timeout)
        except TimeoutError:
            LOG.warning("Timeout waiting for relay event")
            raise RelayTimeout(timeout) from None

        return RelayEvent.model_validate_json(data)

    async def stream(self, prompt: str) -> AsyncIterator[RelayEvent]:
        """Send a prompt and yield events up to and including the terminal one."""
        await self.websocket.send(prompt)

        while True:
            event = await self.receive()
            yield event
            if event.is_terminal:
                return

    async def ask(self, prompt: str) -> str:
        """
        Send a prompt and return the full streamed answer.

        Raises:
            RelayResponseError: If the exchange ends with an error event
            RelayTimeout: If the relay stops sending events
        """
        parts: list[str] = []
        async for event in self.stream(prompt):
            if event.type == "chunk":
                parts.append(event.content)
            elif event.type == "error":
                raise RelayResponseError(event.content)
        return "".join(parts)
