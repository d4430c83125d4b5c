"""Configuration management for slack-rtm."""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from slack_rtm.errors import TokenNotConfiguredError

DEFAULT_API_BASE_URL = "https://slack.com/api"


class Settings(BaseSettings):
    """Client settings."""

    model_config = SettingsConfigDict(
        env_prefix="SLACK_RTM_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API Configuration
    token: str | None = Field(None, description="Slack API token (bot or user)")
    api_base_url: str = Field(default=DEFAULT_API_BASE_URL, description="Slack Web API base URL")
    connect_timeout: float = Field(default=10.0, description="Timeout for the rtm.start handshake in seconds")
    api_timeout: float | None = Field(
        default=None, description="Timeout for im.open calls in seconds; unset waits indefinitely"
    )

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Log level")
    log_profile: Literal["default", "console"] = Field(default="default", description="Log output profile")

    def require_token(self) -> str:
        if not self.token:
            raise TokenNotConfiguredError("Slack token is not configured; set SLACK_RTM_TOKEN or pass --token")
        return self.token


def get_settings(**overrides: object) -> Settings:
    """Get client settings, with explicit overrides taking precedence over the environment."""

    values = {key: value for key, value in overrides.items() if value is not None}
    return Settings(**values)
