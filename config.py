"""Application configuration module.

Reads settings from environment variables with sane defaults so the portal
starts without any setup in development.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

# Load environment variables from .env file when present
load_dotenv()


def _get_bool(name: str, default: bool = False) -> bool:
    """Get boolean from environment variable."""
    value = os.getenv(name)
    if value is None:
        return default
    return value.lower() in {"1", "true", "yes", "on"}


def _get_int(name: str, default: int) -> int:
    """Get integer from environment variable with fallback."""
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _get_str(name: str, default: str = "") -> str:
    """Get string from environment variable."""
    return os.getenv(name, default)


def _parse_id_list(value: str) -> tuple[str, ...]:
    """Parse comma-separated Discord snowflakes.

    Snowflakes exceed 53 bits and are compared as strings everywhere, so
    they are kept as strings here too.
    """
    if not value:
        return ()
    return tuple(part.strip() for part in value.split(",") if part.strip())


@dataclass(frozen=True)
class Config:
    environment: str
    debug: bool
    web_host: str
    web_port: int
    secret_key: str
    admin_password: str
    log_folder: str
    max_content_length: int

    # Staff allow-list
    staff_user_ids: tuple[str, ...]

    # Discord OAuth
    discord_client_id: str
    discord_client_secret: str
    discord_guild_id: str
    discord_api_base: str
    guild_invite: str

    # Outbound webhooks
    webhook_gang_created: str
    webhook_ticket_created: str
    webhook_user_login: str
    webhook_user_blocked: str
    staff_role_mention: str
    webhook_timeout: float


def load_config() -> Config:
    """Load application configuration from environment variables.

    Returns:
        Config: Application configuration with validated values
    """
    config = Config(
        environment=_get_str("ENVIRONMENT", "development"),
        debug=_get_bool("DEBUG", False),
        web_host=_get_str("WEB_HOST", "0.0.0.0"),
        web_port=_get_int("WEB_PORT", 5000),
        secret_key=_get_str(
            "SECRET_KEY",
            "production_secret_key_must_be_changed_in_production_environment"
        ),
        admin_password=_get_str("ADMIN_PASSWORD", "change_me"),
        log_folder=_get_str("LOG_FOLDER", "logs"),
        max_content_length=_get_int("MAX_CONTENT_LENGTH", 1024 * 1024),
        staff_user_ids=_parse_id_list(_get_str("STAFF_USER_IDS", "")),
        discord_client_id=_get_str("DISCORD_CLIENT_ID", ""),
        discord_client_secret=_get_str("DISCORD_CLIENT_SECRET", ""),
        discord_guild_id=_get_str("DISCORD_GUILD_ID", ""),
        discord_api_base=_get_str("DISCORD_API_BASE", "https://discord.com/api"),
        guild_invite=_get_str("GUILD_INVITE", "discord.gg/south-central"),
        webhook_gang_created=_get_str("WEBHOOK_GANG_CREATED", ""),
        webhook_ticket_created=_get_str("WEBHOOK_TICKET_CREATED", ""),
        webhook_user_login=_get_str("WEBHOOK_USER_LOGIN", ""),
        webhook_user_blocked=_get_str("WEBHOOK_USER_BLOCKED", ""),
        staff_role_mention=_get_str("STAFF_ROLE_MENTION", ""),
        webhook_timeout=_get_float("WEBHOOK_TIMEOUT", 10.0),
    )

    return config
