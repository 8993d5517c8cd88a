"""Configuration management using pydantic-settings.

Key patterns:
1. Multiple env files (.env, .env.local) - local overrides shared
2. Credentials optional here; the stored config file fills the gaps
3. validation_alias for explicit env var names
4. Singleton instance for easy import

Usage:
    from shellchat.assistant.config import settings
    print(settings.model)
"""

import logging
from pathlib import Path
from typing import Self

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from shellchat.lib.transport import DEFAULT_BASE_URL, DEFAULT_BETA_HEADER

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    The API key uses the standard ``OPENAI_API_KEY`` name; everything else
    is prefixed with ``SHELLCHAT_``.
    """

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        extra="ignore",
        populate_by_name=True,
    )

    @model_validator(mode="after")
    def check_polling_bounds(self) -> Self:
        if self.poll_max_attempts is not None and self.poll_max_attempts < 1:
            raise ValueError("SHELLCHAT_POLL_MAX_ATTEMPTS must be at least 1")
        if self.poll_interval_seconds < 0:
            raise ValueError("SHELLCHAT_POLL_INTERVAL must not be negative")
        return self

    # ==========================================================================
    # CREDENTIALS (fall back to the stored config file)
    # ==========================================================================

    api_key: str | None = Field(
        default=None,
        validation_alias="OPENAI_API_KEY",
        description="OpenAI API key (overrides the stored one)",
    )

    assistant_id: str | None = Field(
        default=None,
        validation_alias="SHELLCHAT_ASSISTANT_ID",
        description="Existing assistant to talk to (overrides the stored one)",
    )

    # ==========================================================================
    # API
    # ==========================================================================

    base_url: str = Field(
        default=DEFAULT_BASE_URL,
        validation_alias="SHELLCHAT_BASE_URL",
    )

    beta_header: str = Field(
        default=DEFAULT_BETA_HEADER,
        validation_alias="SHELLCHAT_BETA_HEADER",
        description="Value of the OpenAI-Beta header",
    )

    http_timeout_seconds: float | None = Field(
        default=60.0,
        validation_alias="SHELLCHAT_HTTP_TIMEOUT",
    )

    strict_status: bool = Field(
        default=False,
        validation_alias="SHELLCHAT_STRICT_STATUS",
        description="Reject HTTP error statuses instead of parsing their body",
    )

    # ==========================================================================
    # ASSISTANT PERSONA (used only when creating the assistant)
    # ==========================================================================

    model: str = Field(
        default="gpt-4-1106-preview",
        validation_alias="SHELLCHAT_MODEL",
    )

    assistant_name: str = Field(
        default="Shell Assistant",
        validation_alias="SHELLCHAT_ASSISTANT_NAME",
    )

    # ==========================================================================
    # POLLING
    # ==========================================================================

    poll_interval_seconds: float = Field(
        default=1.0,
        validation_alias="SHELLCHAT_POLL_INTERVAL",
    )

    poll_max_attempts: int | None = Field(
        default=None,
        validation_alias="SHELLCHAT_POLL_MAX_ATTEMPTS",
        description="Maximum status polls per run (None = unlimited)",
    )

    poll_timeout_seconds: float | None = Field(
        default=None,
        validation_alias="SHELLCHAT_POLL_TIMEOUT",
        description="Deadline per run in seconds (None = unlimited)",
    )

    # ==========================================================================
    # PATHS / DISPLAY
    # ==========================================================================

    config_path: Path = Field(
        default=Path("/usr/local/etc/cli-chat-config.json"),
        validation_alias="SHELLCHAT_CONFIG_PATH",
    )

    history_path: Path = Field(
        default=Path("~/.shellchat_history"),
        validation_alias="SHELLCHAT_HISTORY_PATH",
    )

    color: bool = Field(
        default=True,
        validation_alias="SHELLCHAT_COLOR",
    )


# Singleton instance
settings = Settings.model_validate({})
