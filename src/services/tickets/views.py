"""
Ticket System Views
===================

Persistent buttons for the ticket panel and the in-ticket control panel.

Both buttons are DynamicItems keyed on a fixed custom id, so clicks on
messages posted before a restart are still routed after it.
"""

import re
from typing import TYPE_CHECKING, Optional

import discord

from src.core.logger import logger
from src.utils.async_utils import safe_async_operation

from .constants import (
    CLOSE_TICKET_ID,
    CREATE_TICKET_ID,
    MSG_CLOSE_FAILED,
    MSG_CREATE_FAILED,
    MSG_NO_PERMISSION,
    MSG_SERVICE_UNAVAILABLE,
    MSG_TICKET_NOT_OPEN,
    MSG_TICKET_PENDING,
)
from .models import CloseOutcome, CreateOutcome, CreateResult

if TYPE_CHECKING:
    from .service import TicketService


def _get_service(interaction: discord.Interaction) -> Optional["TicketService"]:
    return getattr(interaction.client, "ticket_service", None)


def create_reply(result: CreateResult) -> str:
    """Ephemeral reply text for a create-ticket click."""
    if result.outcome is CreateOutcome.CREATED:
        return f"Your ticket has been created: {result.channel.mention}"
    if result.outcome is CreateOutcome.EXISTING:
        return f"You already have an open ticket at {result.channel.mention}"
    if result.outcome is CreateOutcome.PENDING:
        return MSG_TICKET_PENDING
    return MSG_CREATE_FAILED


CLOSE_REPLIES = {
    CloseOutcome.NOT_A_TICKET: MSG_TICKET_NOT_OPEN,
    CloseOutcome.FORBIDDEN: MSG_NO_PERMISSION,
    CloseOutcome.FAILED: MSG_CLOSE_FAILED,
}


# =============================================================================
# Create Ticket Button
# =============================================================================

class CreateTicketButton(discord.ui.DynamicItem[discord.ui.Button], template=CREATE_TICKET_ID):
    """Panel button that opens a ticket for whoever clicks it."""

    def __init__(self) -> None:
        super().__init__(
            discord.ui.Button(
                label="Create Ticket",
                style=discord.ButtonStyle.primary,
                custom_id=CREATE_TICKET_ID,
                emoji="🎫",
            )
        )

    @classmethod
    async def from_custom_id(
        cls,
        interaction: discord.Interaction,
        item: discord.ui.Button,
        match: re.Match[str],
    ) -> "CreateTicketButton":
        return cls()

    async def callback(self, interaction: discord.Interaction) -> None:
        logger.tree("Create Ticket Clicked", [
            ("User", f"{interaction.user.name} ({interaction.user.id})"),
            ("Guild", str(interaction.guild_id)),
        ], emoji="🎫")

        service = _get_service(interaction)
        if service is None or interaction.guild is None:
            await interaction.response.send_message(MSG_SERVICE_UNAVAILABLE, ephemeral=True)
            return

        # Channel provisioning can outlast the 3s interaction window
        await interaction.response.defer(ephemeral=True, thinking=True)
        result = await service.create_ticket(interaction.guild, interaction.user)
        await safe_async_operation(
            "Create Ticket Reply",
            interaction.followup.send(create_reply(result), ephemeral=True),
        )


# =============================================================================
# Close Ticket Button
# =============================================================================

class CloseTicketButton(discord.ui.DynamicItem[discord.ui.Button], template=CLOSE_TICKET_ID):
    """Control-panel button that closes the ticket it was posted in."""

    def __init__(self) -> None:
        super().__init__(
            discord.ui.Button(
                label="Close Ticket",
                style=discord.ButtonStyle.danger,
                custom_id=CLOSE_TICKET_ID,
                emoji="🔒",
            )
        )

    @classmethod
    async def from_custom_id(
        cls,
        interaction: discord.Interaction,
        item: discord.ui.Button,
        match: re.Match[str],
    ) -> "CloseTicketButton":
        return cls()

    async def callback(self, interaction: discord.Interaction) -> None:
        logger.tree("Close Ticket Clicked", [
            ("User", f"{interaction.user.name} ({interaction.user.id})"),
            ("Channel", str(interaction.channel_id)),
        ], emoji="🔒")

        service = _get_service(interaction)
        if service is None:
            await interaction.response.send_message(MSG_SERVICE_UNAVAILABLE, ephemeral=True)
            return

        if interaction.channel_id not in service.registry:
            await interaction.response.send_message(MSG_TICKET_NOT_OPEN, ephemeral=True)
            return

        await interaction.response.defer()
        result = await service.close_ticket(interaction.channel, interaction.user)

        reply = CLOSE_REPLIES.get(result.outcome)
        if reply:
            await safe_async_operation(
                "Close Ticket Reply",
                interaction.followup.send(reply, ephemeral=True),
            )


# =============================================================================
# Views
# =============================================================================

def build_panel_view() -> discord.ui.View:
    """View for the ticket panel. Must be called with a running event loop."""
    view = discord.ui.View(timeout=None)
    view.add_item(CreateTicketButton())
    return view


def build_control_view() -> discord.ui.View:
    """View for the control panel posted in each ticket channel."""
    view = discord.ui.View(timeout=None)
    view.add_item(CloseTicketButton())
    return view


__all__ = [
    "CreateTicketButton",
    "CloseTicketButton",
    "build_panel_view",
    "build_control_view",
    "create_reply",
    "CLOSE_REPLIES",
]
