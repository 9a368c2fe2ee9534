"""
Ticket System Embeds
====================

Embed builder functions for the ticket panel, notices and audit log.
"""

from datetime import datetime, timezone
from typing import Union

import discord

from src.core.config import EmbedColors

from .models import format_ticket_id

Actor = Union[discord.User, discord.Member]


# =============================================================================
# Panel
# =============================================================================

def build_panel_embed() -> discord.Embed:
    return discord.Embed(
        title="🎫 Support Tickets",
        description="Need help? Click the button below to create a support ticket.",
        color=EmbedColors.PANEL,
    )


# =============================================================================
# In-Ticket Notices
# =============================================================================

def build_welcome_embed(ticket_id: int, owner: Actor) -> discord.Embed:
    """Greeting posted as the first message of a new ticket channel."""
    embed = discord.Embed(
        title=f"Ticket #{format_ticket_id(ticket_id)}",
        description=(
            f"Hello, {owner.mention}! Please describe your issue "
            "and a staff member will assist you shortly."
        ),
        color=EmbedColors.WELCOME,
        timestamp=datetime.now(timezone.utc),
    )
    embed.set_footer(text=f"Ticket created by {owner}")
    return embed


def build_closing_embed(closer: Actor, delay_seconds: int) -> discord.Embed:
    """Notice that the channel is about to be deleted."""
    embed = discord.Embed(
        title="Ticket Closing",
        description=f"This ticket will be closed in {delay_seconds} seconds.",
        color=EmbedColors.CLOSED,
        timestamp=datetime.now(timezone.utc),
    )
    embed.set_footer(text=f"Closed by {closer}")
    return embed


# =============================================================================
# Audit Log
# =============================================================================

def build_audit_embed(action: str, ticket_id: int, actor: Actor) -> discord.Embed:
    """
    Build the audit-channel notice for a lifecycle event.

    Args:
        action: "created" or "closed".
        ticket_id: Ticket number.
        actor: User who performed the action.
    """
    return discord.Embed(
        title=f"Ticket {action}",
        description=f"Ticket #{format_ticket_id(ticket_id)} was {action} by {actor}",
        color=EmbedColors.CREATED if action == "created" else EmbedColors.CLOSED,
        timestamp=datetime.now(timezone.utc),
    )


__all__ = [
    "build_panel_embed",
    "build_welcome_embed",
    "build_closing_embed",
    "build_audit_embed",
]
