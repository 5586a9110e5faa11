from functools import lru_cache

from pydantic import AliasChoices, Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOCAL_ENVIRONMENTS = frozenset({"development", "dev", "local", "test"})
SUPPORTED_INFERENCE_BACKENDS = frozenset({"workers_ai", "openai"})
TELEGRAM_HARD_MESSAGE_LIMIT = 4096
DEFAULT_INFERENCE_BASE_URLS = {
    "workers_ai": "https://api.cloudflare.com/client/v4",
    "openai": "https://api.openai.com/v1",
}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
    )

    app_name: str = Field(default="Telegram AI Bridge", validation_alias="APP_NAME")
    environment: str = Field(default="development", validation_alias="ENVIRONMENT")
    host: str = Field(default="127.0.0.1", validation_alias="HOST")
    port: int = Field(default=8000, validation_alias="PORT")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    telegram_bot_token: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("TELEGRAM_BOT_TOKEN", "TELEGRAM_TOKEN"),
    )
    telegram_bot_username: str | None = Field(
        default=None,
        validation_alias="TELEGRAM_BOT_USERNAME",
    )
    telegram_api_base_url: str = Field(
        default="https://api.telegram.org",
        validation_alias="TELEGRAM_API_BASE_URL",
    )
    telegram_timeout_seconds: float = Field(
        default=20.0,
        validation_alias="TELEGRAM_TIMEOUT_SECONDS",
        gt=0,
    )
    max_message_length: int = Field(
        default=4000,
        validation_alias="MAX_MESSAGE_LENGTH",
        ge=2,
        le=TELEGRAM_HARD_MESSAGE_LIMIT,
    )
    inference_backend: str = Field(
        default="workers_ai",
        validation_alias="INFERENCE_BACKEND",
    )
    inference_base_url: str | None = Field(
        default=None,
        validation_alias="INFERENCE_BASE_URL",
    )
    inference_api_key: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("INFERENCE_API_KEY", "CLOUDFLARE_API_TOKEN"),
    )
    inference_account_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("INFERENCE_ACCOUNT_ID", "CLOUDFLARE_ACCOUNT_ID"),
    )
    inference_model: str = Field(
        default="@cf/meta/llama-3.3-70b-instruct-fp8-fast",
        validation_alias="INFERENCE_MODEL",
    )
    inference_timeout_seconds: float = Field(
        default=30.0,
        validation_alias="INFERENCE_TIMEOUT_SECONDS",
        gt=0,
    )

    @field_validator("inference_backend", mode="before")
    @classmethod
    def normalize_inference_backend(cls, value: str) -> str:
        """Normalize INFERENCE_BACKEND to lowercase for stable comparisons."""
        return str(value).strip().lower()

    @field_validator("telegram_bot_token", "inference_api_key", "inference_account_id", mode="before")
    @classmethod
    def blank_as_missing(cls, value: object) -> object:
        """Treat empty secrets from the environment as not configured."""
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("telegram_bot_username", mode="before")
    @classmethod
    def normalize_bot_username(cls, value: str | None) -> str | None:
        """Store the bot username without a leading '@', lowercased."""
        if value is None:
            return None
        cleaned = str(value).strip().lstrip("@").lower()
        return cleaned or None

    @model_validator(mode="after")
    def validate_backends(self) -> "Settings":
        """Reject unknown backends and missing secrets outside local environments."""
        environment = self.environment.strip().lower()
        non_local_environment = environment not in LOCAL_ENVIRONMENTS

        if self.inference_backend not in SUPPORTED_INFERENCE_BACKENDS:
            options = ", ".join(sorted(SUPPORTED_INFERENCE_BACKENDS))
            raise ValueError(f"INFERENCE_BACKEND must be one of: {options}")
        if not self.inference_model.strip():
            raise ValueError("INFERENCE_MODEL must not be blank")
        if non_local_environment:
            if self.telegram_bot_token is None:
                raise ValueError("TELEGRAM_BOT_TOKEN is required outside development/local/test")
            if self.inference_api_key is None:
                raise ValueError("INFERENCE_API_KEY is required outside development/local/test")
            if self.inference_backend == "workers_ai" and not self.inference_account_id:
                raise ValueError(
                    "INFERENCE_ACCOUNT_ID is required when INFERENCE_BACKEND=workers_ai "
                    "outside development/local/test"
                )

        return self

    @property
    def effective_inference_base_url(self) -> str:
        """Configured inference base URL, or the backend's public default."""
        base_url = self.inference_base_url or DEFAULT_INFERENCE_BASE_URLS[self.inference_backend]
        return base_url.rstrip("/")


@lru_cache
def get_settings() -> Settings:
    """Build settings from environment variables."""
    return Settings()
