"""
Ticket Bot - Configuration Module
=================================

Centralized configuration management with environment variable validation.

DESIGN:
    This module provides a single source of truth for all configuration,
    loaded from environment variables at startup. Only the bot token is
    required; every channel, role and category id is optional so that a
    misconfigured server degrades the affected feature instead of
    refusing to start.

    Key patterns:
    - Singleton pattern via get_config() ensures one Config instance
    - Validation happens once at load time, not on every access
    - Invalid ids are logged and treated as unset
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


# =============================================================================
# Timezone Configuration
# =============================================================================

def _load_timezone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return ZoneInfo("UTC")


BOT_TZ = _load_timezone(os.getenv("BOT_TIMEZONE", "America/New_York"))
"""
Timezone used for log lines and transcript timestamps.

DESIGN:
    Using a named zone instead of a fixed UTC offset ensures automatic
    handling of daylight saving transitions.
"""


# =============================================================================
# Defaults
# =============================================================================

DEFAULT_PREFIX = "!"
DEFAULT_COUNTER_FILE = "ticket_counter.json"
DEFAULT_TRANSCRIPTS_DIR = "transcripts"
DEFAULT_CLOSE_DELAY = 5
DEFAULT_TRANSCRIPT_LIMIT = 100


# =============================================================================
# Configuration Dataclass
# =============================================================================

@dataclass
class Config:
    """
    Bot configuration loaded from environment variables.

    Attributes:
        discord_token: Discord bot authentication token.
        support_role_id: Role that can see and close every ticket.
        ticket_category_id: Category new ticket channels are created under.
        tickets_log_channel_id: Channel that receives audit notifications.
        command_prefix: Prefix for text commands.
        counter_file: JSON file holding the persisted ticket counter.
        transcripts_dir: Directory for plain-text transcripts.
        close_delay: Seconds between closing a ticket and deleting its channel.
        transcript_limit: Most recent messages captured in a transcript.
        error_webhook_url: Optional webhook for error alerts.
    """

    # -------------------------------------------------------------------------
    # Required: Discord
    # -------------------------------------------------------------------------

    discord_token: str

    # -------------------------------------------------------------------------
    # Optional: Tickets
    # -------------------------------------------------------------------------

    support_role_id: Optional[int] = None
    ticket_category_id: Optional[int] = None
    tickets_log_channel_id: Optional[int] = None

    # -------------------------------------------------------------------------
    # Optional: Commands
    # -------------------------------------------------------------------------

    command_prefix: str = DEFAULT_PREFIX

    # -------------------------------------------------------------------------
    # Optional: Storage
    # -------------------------------------------------------------------------

    counter_file: Path = Path(DEFAULT_COUNTER_FILE)
    transcripts_dir: Path = Path(DEFAULT_TRANSCRIPTS_DIR)

    # -------------------------------------------------------------------------
    # Optional: Timing & Limits
    # -------------------------------------------------------------------------

    close_delay: int = DEFAULT_CLOSE_DELAY
    transcript_limit: int = DEFAULT_TRANSCRIPT_LIMIT

    # -------------------------------------------------------------------------
    # Optional: Webhooks
    # -------------------------------------------------------------------------

    error_webhook_url: Optional[str] = None


# =============================================================================
# Embed Colors
# =============================================================================

class EmbedColors:
    """Standardized color palette for ticket embeds."""

    BLUE = 0x3498DB     # Panels and welcome notices
    GREEN = 0x2ECC71    # Ticket created
    RED = 0xE74C3C      # Ticket closing / closed

    PANEL = BLUE
    WELCOME = BLUE
    CREATED = GREEN
    CLOSED = RED


# =============================================================================
# Validation
# =============================================================================

class ConfigValidationError(Exception):
    """
    Raised when required configuration is missing or invalid.

    DESIGN:
        Custom exception type allows callers to distinguish config
        errors from other startup failures.
    """

    pass


def _parse_id_optional(value: Optional[str], name: str) -> Optional[int]:
    """
    Parse an optional Discord snowflake, returning None on failure.

    Args:
        value: String value from environment variable, may be None.
        name: Variable name for warning messages.

    Returns:
        Parsed positive integer or None if unset or invalid.
    """
    if not value:
        return None
    try:
        parsed = int(value.strip())
    except ValueError:
        from src.core.logger import logger
        logger.warning(f"Config {name}='{value}' is not a valid id, ignoring")
        return None
    if parsed <= 0:
        from src.core.logger import logger
        logger.warning(f"Config {name}={parsed} is not a valid id, ignoring")
        return None
    return parsed


def _parse_int_with_default(value: Optional[str], default: int, name: str, min_val: int = None, max_val: int = None) -> int:
    """
    Parse optional integer with default and range validation.

    Args:
        value: String value from environment variable.
        default: Default value if not set or invalid.
        name: Variable name for warning messages.
        min_val: Minimum allowed value (inclusive).
        max_val: Maximum allowed value (inclusive).

    Returns:
        Parsed integer within valid range, or default.
    """
    if not value:
        return default
    try:
        parsed = int(value)
        if min_val is not None and parsed < min_val:
            from src.core.logger import logger
            logger.warning(f"Config {name}={parsed} below min {min_val}, using {min_val}")
            return min_val
        if max_val is not None and parsed > max_val:
            from src.core.logger import logger
            logger.warning(f"Config {name}={parsed} above max {max_val}, using {max_val}")
            return max_val
        return parsed
    except ValueError:
        from src.core.logger import logger
        logger.warning(f"Config {name}='{value}' invalid, using default {default}")
        return default


def _validate_url(value: Optional[str], name: str) -> Optional[str]:
    """
    Validate URL format for webhooks.

    Args:
        value: URL string to validate.
        name: Variable name for warning messages.

    Returns:
        URL if valid, None if invalid or empty.
    """
    if not value:
        return None
    if not value.startswith(("https://", "http://")):
        from src.core.logger import logger
        logger.warning(f"Config {name} invalid URL format, ignoring")
        return None
    return value


# =============================================================================
# Configuration Loading
# =============================================================================

def load_config() -> Config:
    """
    Load and validate configuration from environment variables.

    Returns:
        Validated Config object with all settings.

    Raises:
        ConfigValidationError: If DISCORD_TOKEN is missing.
    """
    discord_token = os.getenv("DISCORD_TOKEN")
    if not discord_token:
        raise ConfigValidationError("Missing required environment variables: DISCORD_TOKEN")

    prefix = os.getenv("PREFIX", "").strip() or DEFAULT_PREFIX

    return Config(
        discord_token=discord_token,
        support_role_id=_parse_id_optional(os.getenv("SUPPORT_ROLE_ID"), "SUPPORT_ROLE_ID"),
        ticket_category_id=_parse_id_optional(os.getenv("TICKET_CATEGORY_ID"), "TICKET_CATEGORY_ID"),
        tickets_log_channel_id=_parse_id_optional(
            os.getenv("TICKETS_LOG_CHANNEL_ID"), "TICKETS_LOG_CHANNEL_ID"
        ),
        command_prefix=prefix,
        counter_file=Path(os.getenv("TICKET_COUNTER_FILE") or DEFAULT_COUNTER_FILE),
        transcripts_dir=Path(os.getenv("TRANSCRIPTS_DIR") or DEFAULT_TRANSCRIPTS_DIR),
        close_delay=_parse_int_with_default(
            os.getenv("TICKET_CLOSE_DELAY"), DEFAULT_CLOSE_DELAY, "TICKET_CLOSE_DELAY", min_val=0, max_val=3600
        ),
        transcript_limit=_parse_int_with_default(
            os.getenv("TRANSCRIPT_MESSAGE_LIMIT"), DEFAULT_TRANSCRIPT_LIMIT, "TRANSCRIPT_MESSAGE_LIMIT",
            min_val=1, max_val=100,
        ),
        error_webhook_url=_validate_url(os.getenv("ERROR_WEBHOOK_URL"), "ERROR_WEBHOOK_URL"),
    )


# =============================================================================
# Global Config Instance
# =============================================================================

_config: Optional[Config] = None


def get_config() -> Config:
    """
    Get the global configuration instance, loading if needed.

    Returns:
        The global Config instance.

    Raises:
        ConfigValidationError: On first call if config is invalid.
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


# =============================================================================
# Config Validation & Logging
# =============================================================================

def validate_and_log_config() -> Config:
    """
    Validate configuration and log results at startup.

    Returns:
        The loaded Config.

    Raises:
        ConfigValidationError: If required configuration is missing.
    """
    from src.core.logger import logger

    config = get_config()

    missing_optional = []
    if not config.support_role_id:
        missing_optional.append("SUPPORT_ROLE_ID")
    if not config.ticket_category_id:
        missing_optional.append("TICKET_CATEGORY_ID")
    if not config.tickets_log_channel_id:
        missing_optional.append("TICKETS_LOG_CHANNEL_ID")

    for var in missing_optional:
        logger.info(f"Optional config not set: {var}")

    logger.tree("Configuration Validated", [
        ("Support Role ID", str(config.support_role_id)),
        ("Ticket Category ID", str(config.ticket_category_id)),
        ("Tickets Log Channel ID", str(config.tickets_log_channel_id)),
        ("Prefix", config.command_prefix),
        ("Close Delay", f"{config.close_delay}s"),
        ("Counter File", str(config.counter_file)),
    ], emoji="⚙️")

    return config


# =============================================================================
# Module Export
# =============================================================================

__all__ = [
    "Config",
    "ConfigValidationError",
    "EmbedColors",
    "BOT_TZ",
    "get_config",
    "load_config",
    "validate_and_log_config",
]
