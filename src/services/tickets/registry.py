"""
Ticket Registry
===============

In-memory mapping from channel id to open ticket record.

DESIGN:
    Entirely volatile: a restart forgets every open ticket. All access
    happens on the bot's event loop between awaits, so no locking is
    needed. Owner lookup is a linear scan; the registry only ever holds
    the currently open tickets.
"""

from typing import Dict, Iterator, Optional

from .models import TicketRecord


class TicketRegistry:
    """Open tickets keyed by their channel id."""

    def __init__(self) -> None:
        self._tickets: Dict[int, TicketRecord] = {}

    def find_by_channel(self, channel_id: int) -> Optional[TicketRecord]:
        return self._tickets.get(channel_id)

    def find_by_owner(self, owner_id: int) -> Optional[TicketRecord]:
        for record in self._tickets.values():
            if record.owner_id == owner_id:
                return record
        return None

    def insert(self, record: TicketRecord) -> None:
        """Track a new ticket. Caller guarantees the channel id is unused."""
        self._tickets[record.channel_id] = record

    def remove(self, channel_id: int) -> Optional[TicketRecord]:
        """Stop tracking a channel. No-op if it is not tracked."""
        return self._tickets.pop(channel_id, None)

    def __contains__(self, channel_id: object) -> bool:
        return channel_id in self._tickets

    def __len__(self) -> int:
        return len(self._tickets)

    def __iter__(self) -> Iterator[TicketRecord]:
        return iter(list(self._tickets.values()))


__all__ = ["TicketRegistry"]
