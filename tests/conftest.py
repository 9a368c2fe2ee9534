"""
Ticket Bot - Test Fixtures
==========================

Shared fixtures for all tests.
"""

import os
import sys
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

# Set up test environment before importing modules
os.environ.setdefault("LOGS_DIR", tempfile.mkdtemp(prefix="ticketbot-logs-"))

import discord

from src.core.config import Config


GUILD_ID = 987654321
SUPPORT_ROLE_ID = 222333444
CATEGORY_ID = 333444555
LOG_CHANNEL_ID = 444555666


# =============================================================================
# Helpers
# =============================================================================

class AsyncIter:
    """Async iterator over a fixed list, standing in for channel.history()."""

    def __init__(self, items):
        self._items = list(items)

    def __aiter__(self):
        return self

    async def __anext__(self):
        if not self._items:
            raise StopAsyncIteration
        return self._items.pop(0)


def http_error(message: str = "boom") -> discord.HTTPException:
    return discord.HTTPException(MagicMock(status=500, reason="Internal Server Error"), message)


def make_member(member_id: int = 123456789, name: str = "testuser", roles=None) -> MagicMock:
    member = MagicMock()
    member.id = member_id
    member.name = name
    member.display_name = name.title()
    member.mention = f"<@{member_id}>"
    member.bot = False
    member.roles = roles or []
    member.__str__.return_value = name
    return member


def make_message(author: str, content: str, created_at: datetime) -> MagicMock:
    message = MagicMock()
    message.author = MagicMock()
    message.author.__str__.return_value = author
    message.content = content
    message.created_at = created_at
    return message


def make_channel(guild, channel_id: int, name: str = "ticket-0001", history=None) -> MagicMock:
    channel = MagicMock()
    channel.id = channel_id
    channel.name = name
    channel.mention = f"<#{channel_id}>"
    channel.guild = guild
    channel.send = AsyncMock(return_value=MagicMock(id=channel_id + 1))
    channel.set_permissions = AsyncMock()
    channel.delete = AsyncMock()
    messages = history or []
    channel.history = MagicMock(side_effect=lambda limit=100: AsyncIter(messages[:limit]))
    return channel


def make_guild() -> MagicMock:
    """
    Mock guild whose get_channel/create_text_channel share one channel map.

    guild.channels_by_id can be edited directly to simulate channels that
    were deleted out from under the bot.
    """
    guild = MagicMock()
    guild.id = GUILD_ID
    guild.name = "Test Server"
    guild.default_role = MagicMock(name="@everyone")
    guild.channels_by_id = {}

    support_role = MagicMock()
    support_role.id = SUPPORT_ROLE_ID
    support_role.mention = f"<@&{SUPPORT_ROLE_ID}>"
    guild.support_role = support_role
    guild.get_role = MagicMock(side_effect=lambda rid: support_role if rid == SUPPORT_ROLE_ID else None)

    category = MagicMock(spec=discord.CategoryChannel)
    category.id = CATEGORY_ID
    category.name = "Tickets"
    guild.channels_by_id[CATEGORY_ID] = category

    log_channel = MagicMock()
    log_channel.id = LOG_CHANNEL_ID
    log_channel.send = AsyncMock()
    guild.channels_by_id[LOG_CHANNEL_ID] = log_channel
    guild.log_channel = log_channel

    guild.get_channel = MagicMock(side_effect=lambda cid: guild.channels_by_id.get(cid))

    next_id = [900000001]

    async def create_text_channel(name, category=None, reason=None, **kwargs):
        channel = make_channel(guild, next_id[0], name=name)
        next_id[0] += 1
        guild.channels_by_id[channel.id] = channel
        return channel

    guild.create_text_channel = AsyncMock(side_effect=create_text_channel)
    return guild


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def config(tmp_path):
    """Real Config pointing its files at a temp directory."""
    return Config(
        discord_token="test-token",
        support_role_id=SUPPORT_ROLE_ID,
        ticket_category_id=CATEGORY_ID,
        tickets_log_channel_id=LOG_CHANNEL_ID,
        command_prefix="!",
        counter_file=tmp_path / "ticket_counter.json",
        transcripts_dir=tmp_path / "transcripts",
        close_delay=0,
        transcript_limit=100,
    )


@pytest.fixture
def mock_bot(config):
    bot = MagicMock()
    bot.config = config
    return bot


@pytest.fixture
def mock_discord_guild():
    return make_guild()


@pytest.fixture
def mock_discord_member():
    return make_member()


@pytest.fixture
def mock_support_member():
    role = MagicMock()
    role.id = SUPPORT_ROLE_ID
    return make_member(111222333, "supportuser", roles=[role])


@pytest.fixture
def mock_stranger():
    return make_member(555666777, "stranger")


@pytest.fixture
def ticket_service(mock_bot, config):
    from src.services.tickets import TicketService
    service = TicketService(mock_bot, config)
    mock_bot.ticket_service = service
    return service


@pytest.fixture
def sample_history():
    """Three messages in fetch order (newest first)."""
    return [
        make_message("carol", "third", datetime(2024, 1, 2, 15, 4, 7, tzinfo=timezone.utc)),
        make_message("bob", "second", datetime(2024, 1, 2, 15, 4, 6, tzinfo=timezone.utc)),
        make_message("alice", "first", datetime(2024, 1, 2, 15, 4, 5, tzinfo=timezone.utc)),
    ]


@pytest.fixture
def mock_discord_interaction(mock_discord_member, mock_discord_guild):
    interaction = MagicMock()
    interaction.user = mock_discord_member
    interaction.guild = mock_discord_guild
    interaction.guild_id = GUILD_ID
    interaction.channel = make_channel(mock_discord_guild, 555666777)
    interaction.channel_id = 555666777
    interaction.client = MagicMock()
    interaction.response = MagicMock()
    interaction.response.defer = AsyncMock()
    interaction.response.send_message = AsyncMock()
    interaction.response.is_done = MagicMock(return_value=False)
    interaction.followup = MagicMock()
    interaction.followup.send = AsyncMock()
    return interaction
