"""Minimal FastAPI app serving the relay at /relay/ws.

Run with: uvicorn examples.fastapi_app:app
"""

from geminirelay.config import RelayConfig
from geminirelay.router import create_app

app = create_app(RelayConfig())
