"""
Ticket Bot - Main Bot Class
===========================

Discord client that hosts the support ticket system.

Features:
- Ticket panel with a persistent "Create Ticket" button
- Private per-user ticket channels with a "Close Ticket" button
- Text commands: setup-tickets, close
- Transcripts and audit-channel notices on close
"""

from datetime import datetime
from typing import Optional

import discord
from discord.ext import commands

from src.core.config import Config, get_config
from src.core.logger import logger
from src.services.tickets import TicketService, setup_ticket_views


# =============================================================================
# TicketBot Class
# =============================================================================

class TicketBot(commands.Bot):
    """
    Main Discord bot class.

    DESIGN: Holds the single TicketService instance that every handler
    reaches through `bot.ticket_service`.

    INITIALIZATION ORDER:
    1. __init__: config, intents, ticket service
    2. setup_hook: event cogs, persistent buttons
    3. on_ready: startup summary
    """

    # =========================================================================
    # Initialization
    # =========================================================================

    def __init__(self, config: Optional[Config] = None) -> None:
        self.config = config or get_config()

        intents = discord.Intents.default()
        intents.message_content = True
        intents.members = True
        intents.guilds = True

        super().__init__(
            command_prefix=self.config.command_prefix,
            intents=intents,
            help_command=None,
        )

        self.start_time: datetime = datetime.now()
        self.ticket_service: Optional[TicketService] = TicketService(self, self.config)
        self._ready_initialized: bool = False

        logger.info("Bot Instance Created")

    # =========================================================================
    # Setup Hook
    # =========================================================================

    async def setup_hook(self) -> None:
        """Load event cogs and register persistent buttons before on_ready."""
        from src.events import EVENT_COGS
        for cog in EVENT_COGS:
            try:
                await self.load_extension(cog)
                logger.debug(f"Event Cog Loaded: {cog.split('.')[-1]}")
            except Exception as e:
                logger.error("Failed to Load Event Cog", [("Cog", cog), ("Error", str(e))])

        setup_ticket_views(self)
        logger.info("Ticket Buttons Registered")

    # =========================================================================
    # Events
    # =========================================================================

    async def on_ready(self) -> None:
        if self._ready_initialized:
            logger.info("Bot Reconnected (skipping re-initialization)")
            return

        self._ready_initialized = True

        if not self.user:
            return

        logger.tree("BOT ONLINE", [
            ("Name", self.user.name),
            ("ID", str(self.user.id)),
            ("Guilds", str(len(self.guilds))),
            ("Prefix", self.config.command_prefix),
        ], emoji="🚀")

    async def on_command_error(self, context: commands.Context, exception: commands.CommandError) -> None:
        # Ticket commands are routed from on_message, not the command framework
        if isinstance(exception, commands.CommandNotFound):
            return
        logger.error("Command Error", [
            ("Command", str(context.command)),
            ("Error Type", type(exception).__name__),
            ("Error", str(exception)[:200]),
        ])

    # =========================================================================
    # Shutdown
    # =========================================================================

    async def shutdown(self) -> None:
        """Graceful shutdown with proper cleanup."""
        logger.info("Initiating Graceful Shutdown")

        if self.ticket_service:
            await self.ticket_service.stop()

        await super().close()

        logger.tree("SHUTDOWN COMPLETE", [
            ("Uptime", str(datetime.now() - self.start_time)),
        ], emoji="🛑")

    async def close(self) -> None:
        """Override close to ensure proper shutdown."""
        await self.shutdown()


# =============================================================================
# Module Export
# =============================================================================

__all__ = ["TicketBot"]
