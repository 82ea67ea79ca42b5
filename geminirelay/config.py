"""Configuration for geminirelay components."""

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from geminirelay.errors import GenerationError

DEFAULT_SYSTEM_PROMPT = "請使用繁體中文回答，不要使用簡體字。請保持友善、活潑的對話風格。"
DEFAULT_GREETING = "你好！我是 AI 助手，很高興為您服務。"
DEFAULT_ERROR_TEMPLATE = "抱歉，處理您的訊息時發生錯誤。錯誤類型：{error}"


class RelayConfig(BaseSettings):
    gemini_api_key: SecretStr | None = Field(default=None, validation_alias="GEMINI_API_KEY")
    model: str = "gemini-1.5-flash"

    host: str = "0.0.0.0"
    port: int = 8080

    system_prompt: str = DEFAULT_SYSTEM_PROMPT
    greeting: str = DEFAULT_GREETING
    error_template: str = DEFAULT_ERROR_TEMPLATE

    # Handle messages on one connection one at a time instead of interleaving.
    serialize_exchanges: bool = False

    client_timeout_seconds: float = 60.0

    model_config = SettingsConfigDict(
        env_prefix="relay_",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("error_template")
    @classmethod
    def check_error_template(cls, value: str) -> str:
        try:
            value.format(error="")
        except (IndexError, KeyError, ValueError) as exc:
            raise ValueError(f"error_template must only use the {{error}} placeholder: {exc!r}") from exc
        return value

    @property
    def url(self) -> str:
        return f"ws://{self.host}:{self.port}"

    def format_error(self, error: GenerationError) -> str:
        return self.error_template.format(error=error.description)
