#!/usr/bin/env python3
"""
Ticket Bot Entry Point
======================

Discord support-ticket bot.

Features:
- Ticket panel posted with !setup-tickets
- One private ticket channel per user
- Plain-text transcripts and audit notices on close
- Graceful error handling
"""

import asyncio
import sys

from dotenv import load_dotenv

# Timezone and log locations are read from the environment at import time
load_dotenv()

import discord

from src.bot import TicketBot
from src.core.config import ConfigValidationError, validate_and_log_config
from src.core.logger import logger
from src.utils.error_handler import ErrorHandler


async def main() -> None:
    """
    Main entry point for the ticket bot.

    Handles the complete bot lifecycle:
    1. Validates configuration (token required)
    2. Initializes the bot and ticket service
    3. Establishes connection to Discord
    4. Cleans up on shutdown

    Raises:
        SystemExit: If configuration is invalid or the bot fails to start
    """
    logger.tree("TICKET BOT STARTING", [
        ("Commands", "!setup-tickets, !close"),
    ], emoji="🎫")

    try:
        config = validate_and_log_config()
    except ConfigValidationError as e:
        logger.error("Invalid Configuration", [("Error", str(e))])
        sys.exit(1)

    if config.error_webhook_url:
        logger.set_webhook(config.error_webhook_url)

    bot = TicketBot(config)
    try:
        async with bot:
            await bot.start(config.discord_token)
    except discord.LoginFailure as e:
        logger.error("Discord Login Failed", [
            ("Error", str(e)),
            ("Hint", "Check DISCORD_TOKEN in your .env file"),
        ])
        sys.exit(1)
    except Exception as e:
        ErrorHandler.handle(e, location="main.main", critical=True)
        sys.exit(1)


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("🛑 Bot stopped by user (Ctrl+C)")
    except Exception as e:
        ErrorHandler.handle(e, location="main.__main__", critical=True)
        sys.exit(1)
