"""
Generation Capability

Opens streamed completions against the Gemini API and yields the text
fragments as they arrive. Every provider failure surfaces as GenerationError.
"""

import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Protocol

from google import genai

from geminirelay.config import RelayConfig
from geminirelay.errors import ConfigurationError, GenerationError

LOG = logging.getLogger(__name__)


class TextGenerator(Protocol):
    def stream(self, prompt: str) -> AsyncIterator[str]:
        """Yield text fragments for a prompt, raising GenerationError on failure."""
        ...


@dataclass
class GeminiGenerator:
    """
    Streams completions from a Gemini model.

    The client is created once and shared read-only by every exchange.

    Usage:
        generator = GeminiGenerator.from_config(RelayConfig())
        async for fragment in generator.stream("Hello"):
            ...
    """

    client: "genai.Client"
    model: str
    system_prompt: str

    @classmethod
    def from_config(cls, config: RelayConfig) -> "GeminiGenerator":
        if config.gemini_api_key is None:
            raise ConfigurationError("GEMINI_API_KEY is not set")

        client = genai.Client(api_key=config.gemini_api_key.get_secret_value())
        return cls(client=client, model=config.model, system_prompt=config.system_prompt)

    async def stream(self, prompt: str) -> AsyncIterator[str]:
        """
        Stream the model's answer to a prompt.

        The system prompt and the prompt are sent as two parts of one request,
        in that order. Fragments are yielded exactly as the provider produces
        them, including empty ones.

        Raises:
            GenerationError: If opening the stream or reading from it fails
        """
        try:
            response = await self.client.aio.models.generate_content_stream(
                model=self.model,
                contents=[self.system_prompt, prompt],
            )
            async for chunk in response:
                yield chunk.text or ""
        except Exception as exc:
            LOG.exception(
                "Gemini API error (model=%s, type=%s, code=%s, status=%s)",
                self.model,
                type(exc).__name__,
                getattr(exc, "code", None),
                getattr(exc, "status", None),
            )
            raise GenerationError(exc) from exc
