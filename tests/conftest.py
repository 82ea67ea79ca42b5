import pytest

from geminirelay.config import RelayConfig

from tests.fakes import RecordingSend


@pytest.fixture
def config() -> RelayConfig:
    return RelayConfig(
        _env_file=None,
        gemini_api_key="test-key",
        greeting="welcome",
        error_template="failed: {error}",
    )


@pytest.fixture
def send() -> RecordingSend:
    return RecordingSend()
