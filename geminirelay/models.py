"""Wire events and per-message exchange state."""

from dataclasses import dataclass, field
from typing import Literal

from pydantic import BaseModel

EventType = Literal["chunk", "complete", "error"]


class RelayEvent(BaseModel):
    """One JSON frame sent from the relay to a client."""

    role: Literal["assistant"] = "assistant"
    content: str
    type: EventType

    @classmethod
    def chunk(cls, fragment: str) -> "RelayEvent":
        return cls(content=fragment, type="chunk")

    @classmethod
    def complete(cls, content: str = "") -> "RelayEvent":
        return cls(content=content, type="complete")

    @classmethod
    def error(cls, content: str) -> "RelayEvent":
        return cls(content=content, type="error")

    @property
    def is_terminal(self) -> bool:
        return self.type != "chunk"


@dataclass
class Exchange:
    """A single inbound message and the fragments streamed back for it."""

    input_text: str
    fragments: list[str] = field(default_factory=list)
    status: Literal["complete", "error"] | None = None

    @property
    def response_text(self) -> str:
        return "".join(self.fragments)
