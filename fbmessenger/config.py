"""Application configuration using Pydantic BaseSettings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from fbmessenger.constants import (
    FACEBOOK_API_TIMEOUT_SECONDS,
    FACEBOOK_GRAPH_API_VERSION,
    HANDLER_DRAIN_TIMEOUT_SECONDS,
    MAX_CONCURRENT_HANDLERS,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        # Later files override earlier ones, so .env.local takes precedence
        env_file=[".env", ".env.local"],
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Facebook Configuration
    facebook_page_access_token: str = Field(
        ..., description="Facebook Page access token"
    )
    facebook_verify_token: str = Field(..., description="Webhook verification token")
    facebook_page_id: str = Field(default="", description="Facebook Page ID")
    facebook_api_base_url: str | None = Field(
        default=None,
        description="Override for the Graph API base URL (mock servers, proxies)",
    )
    facebook_graph_api_version: str = Field(
        default=FACEBOOK_GRAPH_API_VERSION,
        description="Graph API version used to build the default base URL",
    )

    # Environment
    env: Literal["local", "railway", "prod"] = Field(
        default="local", description="Current environment"
    )

    # Sentry Configuration
    sentry_dsn: str | None = Field(
        default=None, description="Sentry DSN for error tracking (optional)"
    )
    sentry_traces_sample_rate: float = Field(
        default=1.0, description="Sentry traces sample rate (0.0 to 1.0)"
    )

    # Logfire Configuration
    logfire_token: str | None = Field(
        default=None, description="Pydantic Logfire token for observability"
    )
    log_level: str = Field(default="INFO", description="Python logging level")

    # ==========================================================================
    # Timeout Configuration
    # ==========================================================================

    facebook_api_timeout_seconds: float = Field(
        default=FACEBOOK_API_TIMEOUT_SECONDS,
        description="Timeout for Facebook Graph API calls (seconds)",
    )

    # ==========================================================================
    # Handler Dispatch
    # ==========================================================================

    max_concurrent_handlers: int = Field(
        default=MAX_CONCURRENT_HANDLERS,
        gt=0,
        description="Maximum number of webhook event handlers running at once",
    )
    handler_drain_timeout_seconds: float = Field(
        default=HANDLER_DRAIN_TIMEOUT_SECONDS,
        description="Time to wait for running handlers on shutdown (seconds)",
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
