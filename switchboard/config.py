# switchboard/config.py
"""Application configuration using pydantic-settings.

Provides a centralized Settings class for all environment variables.
List-like values (owner ids, bot capabilities) are comma-separated strings
exposed as sets through properties.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


def _split_csv(raw: str) -> frozenset[str]:
    return frozenset(part.strip() for part in raw.split(",") if part.strip())


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings are loaded from .env file and environment variables.
    Environment variables take precedence over .env file values.
    """

    # Dispatch
    prefix: str = "!"
    owner_ids: str = ""  # Comma-separated user ids allowed through owner-only commands
    bot_author_policy: str = "all"  # "all" ignores every bot, "self" only ourselves
    default_category: str = "General"
    notice_ttl_seconds: float = 15.0

    # Logging
    log_level: str = "INFO"
    log_structured: bool = False

    # Slack Integration
    slack_bot_token: str = ""
    slack_app_token: str = ""
    bot_user_id: str = ""
    bot_capabilities: str = ""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore unknown env vars
        case_sensitive=False,  # Allow case-insensitive env var names
    )

    @property
    def owner_id_set(self) -> frozenset[str]:
        """Get the configured owner ids.

        Returns:
            Set of owner user ids, empty when none are configured.
        """
        return _split_csv(self.owner_ids)

    @property
    def bot_capability_set(self) -> frozenset[str]:
        """Get the capability flags granted to the bot's own member view."""
        return _split_csv(self.bot_capabilities)


# Singleton instance - import this in your code
settings = Settings()
