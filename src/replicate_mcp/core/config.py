"""Application configuration using Pydantic BaseSettings."""

import logging
import sys
from typing import Optional

import structlog
from pydantic import Field, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Replicate API
    replicate_api_token: str = Field(default="", alias="REPLICATE_API_TOKEN")
    replicate_api_base_url: str = Field(
        default="https://api.replicate.com", alias="REPLICATE_API_BASE_URL"
    )
    # Sent as the prediction "version"; empty string omits it from the request body
    replicate_model: str = Field(
        default="black-forest-labs/flux-1.1-pro-ultra", alias="REPLICATE_MODEL"
    )

    # Polling
    poll_interval_seconds: float = Field(default=2.0, gt=0, alias="POLL_INTERVAL_SECONDS")
    max_poll_attempts: int = Field(default=60, ge=1, alias="MAX_POLL_ATTEMPTS")
    request_timeout_seconds: float = Field(default=30.0, gt=0, alias="REQUEST_TIMEOUT_SECONDS")

    # Application Environment
    app_env: str = Field(default="development", alias="APP_ENV")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @model_validator(mode="after")
    def validate_required_config(self) -> "Settings":
        """Fail fast when the bearer credential is missing."""
        if not self.replicate_api_token.strip():
            raise ValueError("REPLICATE_API_TOKEN environment variable is required")
        return self


def load_settings(env_file: Optional[str] = ".env") -> Settings:
    """Load settings, exiting the process with a diagnostic on invalid configuration.

    Args:
        env_file: Optional dotenv file to read in addition to the environment

    Returns:
        Validated Settings instance

    Raises:
        SystemExit: With status 1 if configuration is missing or invalid
    """
    try:
        return Settings(_env_file=env_file)  # type: ignore[call-arg]
    except ValidationError as e:
        for error in e.errors():
            message = str(error["msg"]).removeprefix("Value error, ")
            location = ".".join(str(part) for part in error["loc"])
            if location:
                message = f"{location}: {message}"
            print(f"Error: {message}", file=sys.stderr)
        raise SystemExit(1) from e


def configure_logging(settings: Settings) -> None:
    """Configure structlog based on application environment.

    - Production: JSON output for log aggregation
    - Development: Console output for human readability

    Logs always go to stderr; stdout is reserved for the MCP stdio transport.
    """
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    if settings.app_env == "production":
        processors = [
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )
