"""
FastAPI Router for the Relay WebSocket Endpoint

Provides the relay as a WebSocket endpoint inside a FastAPI application.
Text and binary frames are both accepted; binary frames are decoded as UTF-8.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI, WebSocket

from geminirelay.config import RelayConfig
from geminirelay.generation import GeminiGenerator, TextGenerator
from geminirelay.relay import Relay

LOG = logging.getLogger(__name__)

router = APIRouter(prefix="/relay", tags=["relay"])


@router.websocket("/ws")
async def relay_websocket(websocket: WebSocket) -> None:
    """
    WebSocket endpoint for chat clients.

    The relay is read from app.extra["relay"]; see create_app.
    """
    await websocket.accept()
    client = websocket.client
    LOG.info("New relay connection: %s", client)

    relay: Relay = websocket.app.extra["relay"]

    try:
        await relay.serve(websocket.send_text, receive_messages(websocket))
    except Exception:
        LOG.exception("Error in relay connection: %s", client)
    finally:
        LOG.info("Relay connection closed: %s", client)


async def receive_messages(websocket: WebSocket) -> AsyncIterator[str | bytes]:
    """Yield text or binary frames until the client disconnects."""
    while True:
        message = await websocket.receive()
        if message["type"] == "websocket.disconnect":
            return
        text = message.get("text")
        yield text if text is not None else message["bytes"]


def create_app(config: RelayConfig | None = None, generator: TextGenerator | None = None) -> FastAPI:
    """
    Build a FastAPI app serving the relay at /relay/ws.

    The Gemini generator is built from configuration at startup unless one
    is supplied.
    """
    if config is None:
        config = RelayConfig()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if generator is None:
            relay = Relay(GeminiGenerator.from_config(config), config)
        else:
            relay = Relay(generator, config)
        app.extra["relay"] = relay
        LOG.info("Relay ready (model %s)", config.model)
        try:
            yield
        finally:
            app.extra.pop("relay", None)

    app = FastAPI(lifespan=lifespan)
    app.include_router(router)
    return app
