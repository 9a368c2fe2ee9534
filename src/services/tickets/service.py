"""
Ticket Service
==============

Lifecycle manager for support tickets: creation, closing, transcript
capture, audit notifications and deferred channel deletion.

DESIGN:
    One TicketService is built by the bot at startup and owns the registry,
    the counter store, the transcript writer and the audit notifier. Every
    handler reaches it through the bot instead of module-level state.

    Create: reserve owner -> allocate number -> provision channel ->
    permissions -> track -> welcome -> support ping -> audit.
    Close: authorize -> transcript -> audit -> closing notice ->
    untrack -> schedule deletion.

    Only channel provisioning can fail a create. Every other platform call
    is a best-effort step whose failure is logged and ignored.
"""

import asyncio
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Dict, Optional, Set, Union

import discord

from src.core.config import Config
from src.core.logger import logger
from src.utils.async_utils import create_safe_task, safe_async_operation
from src.utils.error_handler import ErrorHandler

from .constants import CHANNEL_NAME_PREFIX
from .counter import CounterStore
from .embeds import build_closing_embed, build_welcome_embed
from .models import (
    CloseOutcome,
    CloseResult,
    CreateOutcome,
    CreateResult,
    TicketRecord,
    TicketState,
    format_ticket_id,
)
from .notifier import AuditNotifier
from .registry import TicketRegistry
from .transcript import TranscriptWriter, collect_transcript_entries
from .views import build_control_view

if TYPE_CHECKING:
    from src.bot import TicketBot

Actor = Union[discord.User, discord.Member]

TICKET_ACCESS = {
    "view_channel": True,
    "send_messages": True,
    "read_message_history": True,
}


class TicketService:
    """
    Service for managing support tickets.

    DESIGN:
        Tickets are private text channels named ticket-0001, ticket-0002, ...
        At most one open ticket per user. State lives on this instance:
        - registry: open tickets by channel id
        - _pending_owners: owners with a create in flight
        - _closing: channels with a close in flight
        - _pending_deletions: scheduled channel deletions
    """

    def __init__(self, bot: "TicketBot", config: Config) -> None:
        self.bot = bot
        self.config = config
        self.registry = TicketRegistry()
        self.counter = CounterStore(config.counter_file)
        self.transcripts = TranscriptWriter(config.transcripts_dir)
        self.notifier = AuditNotifier(config.tickets_log_channel_id)
        self._pending_owners: Set[int] = set()
        self._closing: Set[int] = set()
        self._pending_deletions: Dict[int, asyncio.Task] = {}

        logger.tree("Ticket Service Initialized", [
            ("Next Ticket", f"#{format_ticket_id(self.counter.value)}"),
            ("Counter File", str(self.counter.path)),
            ("Transcripts", str(self.transcripts.directory)),
            ("Close Delay", f"{config.close_delay}s"),
        ], emoji="🎫")

    # =========================================================================
    # Lookups & Permissions
    # =========================================================================

    def state_of(self, channel_id: int) -> TicketState:
        """Lifecycle state of the ticket bound to a channel."""
        if channel_id in self._closing or channel_id in self._pending_deletions:
            return TicketState.CLOSING
        if channel_id in self.registry:
            return TicketState.OPEN
        return TicketState.NONE

    def is_support(self, member: Actor) -> bool:
        if not self.config.support_role_id:
            return False
        return any(role.id == self.config.support_role_id for role in getattr(member, "roles", []))

    def can_close(self, record: TicketRecord, member: Actor) -> bool:
        """Owner or support staff may close a ticket."""
        return member.id == record.owner_id or self.is_support(member)

    def _support_role(self, guild: discord.Guild) -> Optional[discord.Role]:
        if not self.config.support_role_id:
            return None
        return guild.get_role(self.config.support_role_id)

    def _ticket_category(self, guild: discord.Guild) -> Optional[discord.CategoryChannel]:
        if not self.config.ticket_category_id:
            return None
        category = guild.get_channel(self.config.ticket_category_id)
        if isinstance(category, discord.CategoryChannel):
            return category
        logger.warning("Ticket Category Not Found", [
            ("Category ID", str(self.config.ticket_category_id)),
            ("Fallback", "Creating uncategorized channel"),
        ])
        return None

    def _log_transition(self, record: TicketRecord, state: TicketState) -> None:
        logger.info(f"Ticket #{record.padded_id} -> {state.value}", [
            ("Channel", str(record.channel_id)),
            ("Owner", f"{record.owner_display_name} ({record.owner_id})"),
        ])

    # =========================================================================
    # Create Ticket
    # =========================================================================

    async def create_ticket(self, guild: discord.Guild, user: Actor) -> CreateResult:
        """
        Open a ticket for a user, or point them at their open one.

        Args:
            guild: Guild to create the ticket channel in.
            user: Member requesting the ticket.

        Returns:
            CreateResult describing which branch was taken.
        """
        # Everything up to the reservation runs without yielding, so two
        # concurrent requests from one owner cannot both get past it.
        if user.id in self._pending_owners:
            logger.tree("Ticket Creation Already Pending", [
                ("User", f"{user} ({user.id})"),
            ], emoji="⏳")
            return CreateResult(CreateOutcome.PENDING)

        existing = self.registry.find_by_owner(user.id)
        if existing:
            channel = guild.get_channel(existing.channel_id)
            if channel is not None:
                logger.tree("Ticket Already Open", [
                    ("User", f"{user} ({user.id})"),
                    ("Ticket", f"#{existing.padded_id}"),
                    ("Channel", str(existing.channel_id)),
                ], emoji="🎫")
                return CreateResult(CreateOutcome.EXISTING, channel, existing)

            logger.warning("Stale Ticket Dropped", [
                ("Ticket", f"#{existing.padded_id}"),
                ("Channel", f"{existing.channel_id} (missing)"),
                ("User", f"{user} ({user.id})"),
            ])
            self.registry.remove(existing.channel_id)

        self._pending_owners.add(user.id)
        try:
            return await self._provision_ticket(guild, user)
        except Exception as e:
            ErrorHandler.handle(e, "TicketService.create_ticket", user=user)
            return CreateResult(CreateOutcome.FAILED)
        finally:
            self._pending_owners.discard(user.id)

    async def _provision_ticket(self, guild: discord.Guild, user: Actor) -> CreateResult:
        # Persisted before any platform call; a failed provision leaves a gap
        ticket_id = self.counter.allocate()
        channel_name = f"{CHANNEL_NAME_PREFIX}-{format_ticket_id(ticket_id)}"
        category = self._ticket_category(guild)

        try:
            channel = await guild.create_text_channel(
                channel_name,
                category=category,
                reason=f"Support ticket for {user} ({user.id})",
            )
        except discord.HTTPException as e:
            logger.error("Ticket Channel Creation Failed", [
                ("Ticket", f"#{format_ticket_id(ticket_id)}"),
                ("User", f"{user} ({user.id})"),
                ("Error", str(e)[:200]),
            ])
            return CreateResult(CreateOutcome.FAILED)

        await self._apply_permissions(guild, channel, user)

        record = TicketRecord(
            id=ticket_id,
            owner_id=user.id,
            owner_display_name=str(user),
            channel_id=channel.id,
            created_at=datetime.now(timezone.utc),
        )
        self.registry.insert(record)
        self._log_transition(record, TicketState.OPEN)

        await self._send_welcome(channel, record, user)
        await self._ping_support(guild, channel)
        await self.notifier.notify(guild, "created", ticket_id, user)

        logger.tree("Ticket Created", [
            ("Ticket", f"#{record.padded_id}"),
            ("User", f"{user} ({user.id})"),
            ("Channel", f"#{channel.name} ({channel.id})"),
            ("Category", category.name if category else "None"),
        ], emoji="🎫")
        return CreateResult(CreateOutcome.CREATED, channel, record)

    async def _apply_permissions(
        self,
        guild: discord.Guild,
        channel: discord.TextChannel,
        user: Actor,
    ) -> None:
        """Hide the channel from everyone, then open it to the owner and support."""
        await safe_async_operation(
            "Hide Ticket From Everyone",
            channel.set_permissions(guild.default_role, view_channel=False),
        )
        await safe_async_operation(
            "Grant Owner Access",
            channel.set_permissions(user, **TICKET_ACCESS),
        )

        role = self._support_role(guild)
        if role is None:
            logger.warning("Support Role Not Found", [
                ("Role ID", str(self.config.support_role_id)),
                ("Channel", str(channel.id)),
            ])
            return
        await safe_async_operation(
            "Grant Support Access",
            channel.set_permissions(role, **TICKET_ACCESS),
        )

    async def _send_welcome(
        self,
        channel: discord.TextChannel,
        record: TicketRecord,
        user: Actor,
    ) -> None:
        sent = await safe_async_operation(
            "Welcome Notice",
            channel.send(
                embed=build_welcome_embed(record.id, user),
                view=build_control_view(),
            ),
        )
        if sent is None:
            await safe_async_operation(
                "Plain Welcome Notice",
                channel.send(f"Ticket created for {user}. Please describe your issue."),
            )

    async def _ping_support(self, guild: discord.Guild, channel: discord.TextChannel) -> None:
        role = self._support_role(guild)
        if role is not None:
            content = f"{role.mention} A new ticket has been created."
        else:
            content = "A new ticket has been created."
        await safe_async_operation("Support Ping", channel.send(content))

    # =========================================================================
    # Close Ticket
    # =========================================================================

    async def close_ticket(self, channel: discord.TextChannel, closer: Actor) -> CloseResult:
        """
        Close the ticket bound to a channel.

        Args:
            channel: Ticket channel.
            closer: Member closing the ticket.

        Returns:
            CloseResult describing which branch was taken.
        """
        record = self.registry.find_by_channel(channel.id)
        if record is None or channel.id in self._closing:
            logger.debug("Close Ignored (Not An Open Ticket)", [
                ("Channel", str(channel.id)),
                ("By", f"{closer} ({closer.id})"),
            ])
            return CloseResult(CloseOutcome.NOT_A_TICKET)

        if not self.can_close(record, closer):
            logger.tree("Ticket Close Denied", [
                ("Ticket", f"#{record.padded_id}"),
                ("By", f"{closer} ({closer.id})"),
                ("Owner", str(record.owner_id)),
            ], emoji="⛔")
            return CloseResult(CloseOutcome.FORBIDDEN, record)

        self._closing.add(channel.id)
        try:
            return await self._close_ticket(channel, closer, record)
        except Exception as e:
            ErrorHandler.handle(e, "TicketService.close_ticket", user=closer, channel=channel)
            return CloseResult(CloseOutcome.FAILED, record)
        finally:
            self._closing.discard(channel.id)

    async def _close_ticket(
        self,
        channel: discord.TextChannel,
        closer: Actor,
        record: TicketRecord,
    ) -> CloseResult:
        transcript_path = None
        entries = await safe_async_operation(
            "Fetch Transcript History",
            collect_transcript_entries(channel, self.config.transcript_limit),
        )
        if entries is not None:
            try:
                transcript_path = self.transcripts.write(record.id, entries)
            except Exception as e:
                logger.error("Transcript Write Failed", [
                    ("Ticket", f"#{record.padded_id}"),
                    ("Error Type", type(e).__name__),
                    ("Error", str(e)[:200]),
                ])

        await self.notifier.notify(channel.guild, "closed", record.id, closer)
        await safe_async_operation(
            "Closing Notice",
            channel.send(embed=build_closing_embed(closer, self.config.close_delay)),
        )

        self.registry.remove(channel.id)
        self._log_transition(record, TicketState.CLOSING)
        self._schedule_deletion(channel, record)

        logger.tree("Ticket Closed", [
            ("Ticket", f"#{record.padded_id}"),
            ("Closed By", f"{closer} ({closer.id})"),
            ("Transcript", str(transcript_path) if transcript_path else "None"),
            ("Deletion In", f"{self.config.close_delay}s"),
        ], emoji="🔒")
        return CloseResult(CloseOutcome.CLOSED, record, transcript_path)

    # =========================================================================
    # Deferred Deletion
    # =========================================================================

    def _schedule_deletion(self, channel: discord.TextChannel, record: TicketRecord) -> None:
        """Delete the channel after the close delay, unless cancelled."""
        self.cancel_deletion(channel.id)

        async def delete_after_delay() -> None:
            try:
                await asyncio.sleep(self.config.close_delay)
                if channel.id in self.registry:
                    logger.warning("Ticket Deletion Skipped", [
                        ("Ticket", f"#{record.padded_id}"),
                        ("Reason", "Channel is tracked as an open ticket again"),
                    ])
                    return
                try:
                    await channel.delete(reason=f"Ticket #{record.padded_id} closed")
                except discord.HTTPException as e:
                    logger.error("Ticket Channel Deletion Failed", [
                        ("Ticket", f"#{record.padded_id}"),
                        ("Channel", str(channel.id)),
                        ("Error", str(e)[:200]),
                    ])
                    return
                self._log_transition(record, TicketState.DELETED)
            finally:
                if self._pending_deletions.get(channel.id) is asyncio.current_task():
                    del self._pending_deletions[channel.id]

        self._pending_deletions[channel.id] = create_safe_task(
            delete_after_delay(), f"Delete {record.channel_name}"
        )

    def pending_deletion(self, channel_id: int) -> Optional[asyncio.Task]:
        return self._pending_deletions.get(channel_id)

    def cancel_deletion(self, channel_id: int) -> bool:
        """
        Cancel a scheduled channel deletion.

        Returns:
            True if a pending deletion was cancelled.
        """
        task = self._pending_deletions.pop(channel_id, None)
        if task is None or task.done():
            return False
        task.cancel()
        logger.debug("Ticket Deletion Cancelled", [("Channel", str(channel_id))])
        return True

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def stop(self) -> None:
        """Cancel every pending deletion."""
        tasks = list(self._pending_deletions.values())
        self._pending_deletions.clear()
        for task in tasks:
            if not task.done():
                task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

        logger.tree("Ticket Service Stopped", [
            ("Open Tickets (untracked)", str(len(self.registry))),
            ("Cancelled Deletions", str(len(tasks))),
        ], emoji="🛑")


__all__ = ["TicketService", "TICKET_ACCESS"]
