"""
Relay

Bridges inbound WebSocket messages to streamed generation and frames each
fragment as a JSON event. The relay is transport-agnostic: it only needs a
coroutine that sends one text frame and an async stream of inbound messages.
"""

import asyncio
import logging
from collections.abc import AsyncIterable, Awaitable, Callable
from dataclasses import dataclass, field

from geminirelay.config import RelayConfig
from geminirelay.errors import GenerationError
from geminirelay.generation import TextGenerator
from geminirelay.models import Exchange, RelayEvent

LOG = logging.getLogger(__name__)

SendText = Callable[[str], Awaitable[None]]


@dataclass
class Relay:
    """
    Per-connection message handling.

    Usage:
        relay = Relay(GeminiGenerator.from_config(config), config)
        await relay.serve(websocket.send, websocket)
    """

    generator: TextGenerator
    config: RelayConfig = field(default_factory=RelayConfig)

    async def serve(self, send: SendText, messages: AsyncIterable[str | bytes]) -> None:
        """
        Greet the client, then answer every inbound message.

        Returns when the message stream ends and every exchange it started
        has finished. In-flight exchanges are not cancelled on disconnect,
        nor when reading the message stream fails.
        """
        await self.greet(send)

        if self.config.serialize_exchanges:
            try:
                async for message in messages:
                    await self.handle_message(send, message)
            except Exception:
                LOG.warning("Stopped reading messages from client", exc_info=True)
            return

        async with asyncio.TaskGroup() as tg:
            try:
                async for message in messages:
                    tg.create_task(self.handle_message(send, message))
            except Exception:
                LOG.warning("Stopped reading messages from client", exc_info=True)

    async def greet(self, send: SendText) -> None:
        await send(RelayEvent.complete(self.config.greeting).model_dump_json())

    async def handle_message(self, send: SendText, message: str | bytes) -> Exchange:
        """Run one exchange, logging transport failures instead of raising them."""
        if isinstance(message, bytes):
            message = message.decode("utf-8", errors="replace")

        LOG.info("Received message (%d chars)", len(message))
        exchange = Exchange(input_text=message)

        try:
            await self.run_exchange(send, exchange)
        except Exception:
            LOG.warning("Failed to deliver response to client", exc_info=True)

        return exchange

    async def run_exchange(self, send: SendText, exchange: Exchange) -> None:
        """
        Stream fragments as chunk events and finish with one terminal event.

        Anything the generator raises ends the exchange with an error event.
        Failures of send itself propagate to the caller.
        """
        try:
            fragments = aiter(self.generator.stream(exchange.input_text))
        except Exception as exc:
            await self.fail_exchange(send, exchange, exc)
            return

        while True:
            try:
                fragment = await anext(fragments)
            except StopAsyncIteration:
                break
            except Exception as exc:
                await self.fail_exchange(send, exchange, exc)
                return

            exchange.fragments.append(fragment)
            await send(RelayEvent.chunk(fragment).model_dump_json())

        exchange.status = "complete"
        await send(RelayEvent.complete().model_dump_json())
        LOG.debug(
            "Exchange complete (%d fragments): %s",
            len(exchange.fragments),
            exchange.response_text,
        )

    async def fail_exchange(self, send: SendText, exchange: Exchange, exc: Exception) -> None:
        if not isinstance(exc, GenerationError):
            LOG.error("Generator raised %s", type(exc).__name__, exc_info=exc)
            exc = GenerationError(exc)

        exchange.status = "error"
        LOG.debug("Exchange failed after %d fragments: %s", len(exchange.fragments), exc)
        await send(RelayEvent.error(self.config.format_error(exc)).model_dump_json())
