"""
Ticket Bot - Text Command Tests
===============================

Tests for prefix parsing and the setup-tickets / close commands.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.events.messages import TicketCommands, parse_command
from src.services.tickets import CloseOutcome, CloseResult
from src.services.tickets.constants import (
    MSG_CLOSE_FAILED,
    MSG_NO_PERMISSION,
    MSG_NOT_TICKET_CHANNEL,
    MSG_SETUP_FAILED,
)

from conftest import http_error


def make_command_message(content, administrator=False):
    message = MagicMock()
    message.content = content
    message.author.bot = False
    message.author.id = 123456789
    message.author.guild_permissions.administrator = administrator
    message.guild = MagicMock()
    message.channel.id = 555666777
    message.channel.send = AsyncMock()
    message.reply = AsyncMock()
    message.delete = AsyncMock()
    return message


@pytest.fixture
def cog(mock_bot):
    mock_bot.ticket_service = MagicMock()
    mock_bot.ticket_service.close_ticket = AsyncMock(return_value=CloseResult(CloseOutcome.CLOSED))
    return TicketCommands(mock_bot)


# =============================================================================
# Parsing
# =============================================================================

class TestParseCommand:
    """Tests for prefix command parsing."""

    def test_command_without_args(self):
        assert parse_command("!close", "!") == ("close", [])

    def test_command_is_lowercased(self):
        assert parse_command("!Setup-Tickets now", "!") == ("setup-tickets", ["now"])

    def test_extra_whitespace(self):
        assert parse_command("!close   please  ", "!") == ("close", ["please"])

    def test_custom_prefix(self):
        assert parse_command("?close", "?") == ("close", [])
        assert parse_command("!close", "?") is None

    @pytest.mark.parametrize("content", ["close", "!", "!   ", "", "hello !close"])
    def test_not_a_command(self, content):
        assert parse_command(content, "!") is None


# =============================================================================
# Routing
# =============================================================================

class TestRouting:
    """Tests for on_message routing."""

    @pytest.mark.asyncio
    async def test_ignores_bots(self, cog):
        message = make_command_message("!close")
        message.author.bot = True

        await cog.on_message(message)

        cog.bot.ticket_service.close_ticket.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_ignores_direct_messages(self, cog):
        message = make_command_message("!close")
        message.guild = None

        await cog.on_message(message)

        cog.bot.ticket_service.close_ticket.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_ignores_unknown_commands(self, cog):
        message = make_command_message("!help")

        await cog.on_message(message)

        message.reply.assert_not_awaited()
        message.channel.send.assert_not_awaited()


# =============================================================================
# setup-tickets
# =============================================================================

class TestSetupTickets:
    """Tests for posting the ticket panel."""

    @pytest.mark.asyncio
    async def test_admin_posts_panel_and_deletes_command(self, cog):
        message = make_command_message("!setup-tickets", administrator=True)

        await cog.on_message(message)

        kwargs = message.channel.send.call_args.kwargs
        assert kwargs["embed"].title == "🎫 Support Tickets"
        assert kwargs["view"].children[0].custom_id == "create_ticket"
        assert kwargs["view"].timeout is None
        message.delete.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_non_admin_is_ignored(self, cog):
        message = make_command_message("!setup-tickets", administrator=False)

        await cog.on_message(message)

        message.channel.send.assert_not_awaited()
        message.reply.assert_not_awaited()
        message.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_send_failure_replies_with_error(self, cog):
        message = make_command_message("!setup-tickets", administrator=True)
        message.channel.send = AsyncMock(side_effect=http_error("Missing Permissions"))

        await cog.on_message(message)

        message.reply.assert_awaited_once_with(MSG_SETUP_FAILED)
        message.delete.assert_not_awaited()


# =============================================================================
# close
# =============================================================================

class TestCloseCommand:
    """Tests for the close command."""

    @pytest.mark.asyncio
    async def test_successful_close_sends_no_reply(self, cog):
        message = make_command_message("!close")

        await cog.on_message(message)

        cog.bot.ticket_service.close_ticket.assert_awaited_once_with(message.channel, message.author)
        message.reply.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("outcome,reply", [
        (CloseOutcome.NOT_A_TICKET, MSG_NOT_TICKET_CHANNEL),
        (CloseOutcome.FORBIDDEN, MSG_NO_PERMISSION),
        (CloseOutcome.FAILED, MSG_CLOSE_FAILED),
    ])
    async def test_rejections_reply(self, cog, outcome, reply):
        cog.bot.ticket_service.close_ticket = AsyncMock(return_value=CloseResult(outcome))
        message = make_command_message("!close")

        await cog.on_message(message)

        message.reply.assert_awaited_once_with(reply)

    @pytest.mark.asyncio
    async def test_close_against_real_service(self, mock_bot, ticket_service, mock_discord_guild, mock_discord_member):
        """End to end: owner opens a ticket and closes it with the command."""
        opened = await ticket_service.create_ticket(mock_discord_guild, mock_discord_member)
        message = make_command_message("!close")
        message.author = mock_discord_member
        message.channel = opened.channel

        await TicketCommands(mock_bot).on_message(message)

        assert opened.channel.id not in ticket_service.registry
        message.reply.assert_not_awaited()
        await ticket_service.pending_deletion(opened.channel.id)
        opened.channel.delete.assert_awaited_once()
