"""
Message Events
==============

Text commands for the ticket system, routed from on_message.

Commands:
    <prefix>setup-tickets  Post the ticket panel (administrators only)
    <prefix>close          Close the ticket this channel belongs to
"""

from typing import TYPE_CHECKING, List, Optional, Tuple

import discord
from discord.ext import commands

from src.core.logger import logger
from src.services.tickets import (
    CloseOutcome,
    build_panel_embed,
    build_panel_view,
)
from src.services.tickets.constants import (
    MSG_CLOSE_FAILED,
    MSG_NO_PERMISSION,
    MSG_NOT_TICKET_CHANNEL,
    MSG_SERVICE_UNAVAILABLE,
    MSG_SETUP_FAILED,
)
from src.utils.async_utils import safe_async_operation

if TYPE_CHECKING:
    from src.bot import TicketBot


SETUP_COMMAND = "setup-tickets"
CLOSE_COMMAND = "close"

CLOSE_REPLIES = {
    CloseOutcome.NOT_A_TICKET: MSG_NOT_TICKET_CHANNEL,
    CloseOutcome.FORBIDDEN: MSG_NO_PERMISSION,
    CloseOutcome.FAILED: MSG_CLOSE_FAILED,
}


def parse_command(content: str, prefix: str) -> Optional[Tuple[str, List[str]]]:
    """
    Split a prefixed message into a lowercased command name and its arguments.

    Returns:
        (command, args), or None if the message is not a command.
    """
    if not prefix or not content.startswith(prefix):
        return None
    parts = content[len(prefix):].split()
    if not parts:
        return None
    return parts[0].lower(), parts[1:]


class TicketCommands(commands.Cog):
    """Ticket text commands."""

    def __init__(self, bot: "TicketBot") -> None:
        self.bot = bot
        self.config = bot.config

    @commands.Cog.listener()
    async def on_message(self, message: discord.Message) -> None:
        if message.author.bot or message.guild is None:
            return

        parsed = parse_command(message.content, self.config.command_prefix)
        if parsed is None:
            return

        command, _ = parsed
        if command == SETUP_COMMAND:
            await self.setup_tickets(message)
        elif command == CLOSE_COMMAND:
            await self.close(message)

    # =========================================================================
    # Commands
    # =========================================================================

    async def setup_tickets(self, message: discord.Message) -> None:
        """Post the ticket panel in the invoking channel and remove the command."""
        permissions = getattr(message.author, "guild_permissions", None)
        if permissions is None or not permissions.administrator:
            logger.debug("Setup Ignored (Not Administrator)", [
                ("User", f"{message.author} ({message.author.id})"),
                ("Channel", str(message.channel.id)),
            ])
            return

        try:
            await message.channel.send(embed=build_panel_embed(), view=build_panel_view())
        except discord.HTTPException as e:
            logger.error("Ticket Panel Setup Failed", [
                ("Channel", str(message.channel.id)),
                ("User", f"{message.author} ({message.author.id})"),
                ("Error", str(e)[:200]),
            ])
            await safe_async_operation("Setup Error Reply", message.reply(MSG_SETUP_FAILED))
            return

        await safe_async_operation("Delete Setup Command", message.delete())

        logger.tree("Ticket Panel Posted", [
            ("Channel", f"#{getattr(message.channel, 'name', '?')} ({message.channel.id})"),
            ("By", f"{message.author} ({message.author.id})"),
        ], emoji="📋")

    async def close(self, message: discord.Message) -> None:
        service = getattr(self.bot, "ticket_service", None)
        if service is None:
            await safe_async_operation("Close Reply", message.reply(MSG_SERVICE_UNAVAILABLE))
            return

        result = await service.close_ticket(message.channel, message.author)
        reply = CLOSE_REPLIES.get(result.outcome)
        if reply:
            await safe_async_operation("Close Reply", message.reply(reply))


async def setup(bot: "TicketBot") -> None:
    await bot.add_cog(TicketCommands(bot))
    logger.debug("Ticket Commands Loaded")


__all__ = ["TicketCommands", "parse_command", "setup"]
