"""Configuration management for the OAuth 2.0 client."""

import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .. import __version__


class Settings(BaseSettings):
    """Client settings loaded from OAUTH2_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="OAUTH2_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # HTTP transport
    http_timeout: float = Field(
        default=30.0, description="Timeout in seconds for token endpoint requests"
    )
    user_agent: str = Field(
        default=f"oauth2-core/{__version__}",
        description="User-Agent header sent with token endpoint requests",
    )

    # Interactive step
    redirect_timeout: float = Field(
        default=300.0,
        description="Seconds to wait for the user to complete the authorization page",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("http_timeout", "redirect_timeout")
    @classmethod
    def validate_positive_timeout(cls, v: float) -> float:
        """Reject zero or negative timeouts."""
        if v <= 0:
            raise ValueError("Timeout must be greater than zero")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize the log level and make sure logging knows it."""
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level
