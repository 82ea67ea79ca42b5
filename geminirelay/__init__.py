"""
geminirelay - WebSocket relay for streamed Gemini completions

Accepts WebSocket connections, forwards each text message to the Gemini API
and streams the generated fragments back as JSON events.
"""

from geminirelay.client import RelayClient
from geminirelay.config import RelayConfig
from geminirelay.errors import (
    ConfigurationError,
    GenerationError,
    RelayError,
    RelayResponseError,
    RelayTimeout,
)
from geminirelay.generation import GeminiGenerator, TextGenerator
from geminirelay.models import Exchange, RelayEvent
from geminirelay.relay import Relay
from geminirelay.server import RelayServer

__all__ = [
    # Core
    "Relay",
    "RelayConfig",
    # Transports
    "RelayServer",
    "RelayClient",
    # Generation
    "GeminiGenerator",
    "TextGenerator",
    # Models
    "Exchange",
    "RelayEvent",
    # Errors
    "RelayError",
    "ConfigurationError",
    "GenerationError",
    "RelayResponseError",
    "RelayTimeout",
]

__version__ = "0.1.0"
