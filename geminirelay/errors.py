"""Exceptions raised by geminirelay components."""


class RelayError(Exception):
    """Base class for all geminirelay errors."""


class ConfigurationError(RelayError):
    """A required configuration value is missing or invalid."""


class GenerationError(RelayError):
    """The generation provider failed while opening or consuming a stream."""

    def __init__(self, cause: BaseException | str) -> None:
        self.cause = cause
        self.description = str(cause) or type(cause).__name__
        super().__init__(f"Generation failed: {self.description}")


class RelayTimeout(RelayError):
    def __init__(self, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(f"No event received from relay within {timeout}s")


class RelayResponseError(RelayError):
    """The relay answered an exchange with an error event."""

    def __init__(self, content: str) -> None:
        self.content = content
        super().__init__(content)
