"""
Ticket Bot - Core Package
=========================

Configuration and logging shared by every part of the bot.

DESIGN:
    Core modules are global instances so every module sees the same state:
    - get_config() returns the same Config instance
    - logger is a global TreeLogger instance
"""

# =============================================================================
# Core Imports
# =============================================================================

from .config import (
    Config,
    ConfigValidationError,
    EmbedColors,
    BOT_TZ,
    get_config,
    load_config,
    validate_and_log_config,
)

from .logger import logger, TreeLogger


# =============================================================================
# Module Export
# =============================================================================

__all__ = [
    # Config
    "Config",
    "ConfigValidationError",
    "EmbedColors",
    "BOT_TZ",
    "get_config",
    "load_config",
    "validate_and_log_config",
    # Logger
    "logger",
    "TreeLogger",
]
