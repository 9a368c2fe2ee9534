"""
Ticket Audit Notifier
=====================

Posts ticket lifecycle events to the configured audit channel.

DESIGN:
    Notifications are best-effort: a missing channel is a logged no-op and
    delivery failures are logged, never raised, so they can never change
    the outcome of the transition that triggered them.
"""

from typing import Optional, Union

import discord

from src.core.logger import logger

from .embeds import build_audit_embed
from .models import format_ticket_id

AUDIT_ACTIONS = ("created", "closed")


class AuditNotifier:
    """Sends "Ticket created/closed" notices to the audit channel."""

    def __init__(self, log_channel_id: Optional[int]) -> None:
        self.log_channel_id = log_channel_id

    def _resolve_channel(self, guild: discord.Guild) -> Optional[discord.abc.Messageable]:
        if not self.log_channel_id or guild is None:
            return None
        return guild.get_channel(self.log_channel_id)

    async def notify(
        self,
        guild: discord.Guild,
        action: str,
        ticket_id: int,
        actor: Union[discord.User, discord.Member],
    ) -> bool:
        """
        Post an audit notice.

        Args:
            guild: Guild the ticket belongs to.
            action: "created" or "closed".
            ticket_id: Ticket number.
            actor: User who performed the action.

        Returns:
            True if the notice was delivered.
        """
        if action not in AUDIT_ACTIONS:
            raise ValueError(f"Unknown audit action: {action}")

        channel = self._resolve_channel(guild)
        if channel is None:
            logger.warning("Audit Channel Not Found", [
                ("Channel ID", str(self.log_channel_id)),
                ("Action", action),
                ("Ticket", f"#{format_ticket_id(ticket_id)}"),
            ])
            return False

        try:
            await channel.send(embed=build_audit_embed(action, ticket_id, actor))
        except Exception as e:
            logger.warning("Audit Notification Failed", [
                ("Action", action),
                ("Ticket", f"#{format_ticket_id(ticket_id)}"),
                ("Error Type", type(e).__name__),
                ("Error", str(e)[:100]),
            ])
            return False

        logger.debug("Audit Notification Sent", [
            ("Action", action),
            ("Ticket", f"#{format_ticket_id(ticket_id)}"),
        ])
        return True


__all__ = ["AuditNotifier", "AUDIT_ACTIONS"]
