"""
Ticket Transcript Writer
========================

Plain-text transcripts of a ticket channel, captured at close time.

DESIGN:
    The platform returns history newest-first; the transcript reads
    oldest-first, one `[timestamp] author: content` line per message.
    Content is written verbatim, line breaks included. Each closed ticket
    produces one write-once file named `ticket-<id>.txt`.
"""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Sequence, Union

import discord

from src.core.config import BOT_TZ
from src.core.logger import logger

from .constants import CHANNEL_NAME_PREFIX, MAX_TRANSCRIPT_MESSAGES


@dataclass(frozen=True)
class TranscriptEntry:
    """One message as it appears in a transcript."""

    timestamp: datetime
    author: str
    content: str

    @classmethod
    def from_message(cls, message: discord.Message) -> "TranscriptEntry":
        return cls(
            timestamp=message.created_at,
            author=str(message.author),
            content=message.content or "",
        )


def format_timestamp(timestamp: datetime) -> str:
    if timestamp.tzinfo is not None:
        timestamp = timestamp.astimezone(BOT_TZ)
    # month, day and hour are not zero-padded: 1/2/2024, 3:04:05 PM
    hour = timestamp.hour % 12 or 12
    return (
        f"{timestamp.month}/{timestamp.day}/{timestamp.year}, "
        f"{hour}:{timestamp:%M:%S} {timestamp:%p}"
    )


def render(entries: Sequence[TranscriptEntry]) -> str:
    """
    Render newest-first entries as oldest-first transcript text.

    Args:
        entries: Messages in the platform's fetch order (newest first).

    Returns:
        One `[timestamp] author: content` line per message, oldest first.
    """
    return "\n".join(
        f"[{format_timestamp(entry.timestamp)}] {entry.author}: {entry.content}"
        for entry in reversed(entries)
    )


async def collect_transcript_entries(
    channel: discord.TextChannel,
    limit: int = MAX_TRANSCRIPT_MESSAGES,
) -> List[TranscriptEntry]:
    """
    Fetch the most recent messages of a channel, newest first.

    Raises:
        discord.HTTPException: If the history cannot be fetched.
    """
    return [
        TranscriptEntry.from_message(message)
        async for message in channel.history(limit=min(limit, MAX_TRANSCRIPT_MESSAGES))
    ]


class TranscriptWriter:
    """Writes rendered transcripts into a directory, one file per ticket."""

    def __init__(self, directory: Union[str, Path]) -> None:
        self.directory = Path(directory)

    def path_for(self, ticket_id: int) -> Path:
        return self.directory / f"{CHANNEL_NAME_PREFIX}-{ticket_id}.txt"

    def write(self, ticket_id: int, entries: Sequence[TranscriptEntry]) -> Path:
        """
        Render and persist a transcript, creating the directory if needed.

        Characters that cannot be encoded (lone surrogates) are written as "?".

        Returns:
            Path of the written transcript.

        Raises:
            OSError: If the directory or file cannot be written.
        """
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.path_for(ticket_id)
        path.write_text(render(entries), encoding="utf-8", errors="replace")

        logger.tree("Transcript Saved", [
            ("Ticket", f"#{ticket_id}"),
            ("Messages", str(len(entries))),
            ("Path", str(path)),
        ], emoji="📜")
        return path


__all__ = [
    "TranscriptEntry",
    "TranscriptWriter",
    "collect_transcript_entries",
    "format_timestamp",
    "render",
]
