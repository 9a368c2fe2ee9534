"""
Ticket System Models
====================

Records, lifecycle states and transition results for the ticket system.

DESIGN:
    A ticket moves none -> open -> closing -> deleted. "none" is the
    absence of a record, "open" means the registry holds it, "closing"
    means the record is gone but the channel deletion is still scheduled,
    and "deleted" is terminal. Records are immutable: closing removes
    the record rather than flipping a status field.

    Transitions return a result object whose outcome says which branch
    was taken. Best-effort side effects never change the outcome.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional

import discord

from .constants import CHANNEL_NAME_PREFIX, TICKET_ID_WIDTH


def format_ticket_id(ticket_id: int) -> str:
    """Zero-pad a ticket number for display ("7" -> "0007")."""
    return str(ticket_id).zfill(TICKET_ID_WIDTH)


# =============================================================================
# States
# =============================================================================

class TicketState(Enum):
    NONE = "none"
    OPEN = "open"
    CLOSING = "closing"
    DELETED = "deleted"


# =============================================================================
# Ticket Record
# =============================================================================

@dataclass(frozen=True)
class TicketRecord:
    """
    One open support ticket.

    Attributes:
        id: Monotonic ticket number, never reused.
        owner_id: User who opened the ticket.
        owner_display_name: Owner label captured at creation time.
        channel_id: Private channel provisioned for the ticket.
        created_at: Creation timestamp.
    """

    id: int
    owner_id: int
    owner_display_name: str
    channel_id: int
    created_at: datetime

    @property
    def padded_id(self) -> str:
        return format_ticket_id(self.id)

    @property
    def channel_name(self) -> str:
        return f"{CHANNEL_NAME_PREFIX}-{self.padded_id}"


# =============================================================================
# Transition Results
# =============================================================================

class CreateOutcome(Enum):
    CREATED = "created"     # new channel provisioned and tracked
    EXISTING = "existing"   # owner already has an open ticket
    PENDING = "pending"     # another create for this owner is in flight
    FAILED = "failed"       # provisioning or unexpected failure


class CloseOutcome(Enum):
    CLOSED = "closed"
    NOT_A_TICKET = "not_a_ticket"
    FORBIDDEN = "forbidden"
    FAILED = "failed"


@dataclass(frozen=True)
class CreateResult:
    outcome: CreateOutcome
    channel: Optional[discord.abc.GuildChannel] = None
    record: Optional[TicketRecord] = None

    @property
    def ok(self) -> bool:
        return self.outcome is CreateOutcome.CREATED


@dataclass(frozen=True)
class CloseResult:
    outcome: CloseOutcome
    record: Optional[TicketRecord] = None
    transcript_path: Optional[Path] = None

    @property
    def ok(self) -> bool:
        return self.outcome is CloseOutcome.CLOSED


__all__ = [
    "format_ticket_id",
    "TicketState",
    "TicketRecord",
    "CreateOutcome",
    "CloseOutcome",
    "CreateResult",
    "CloseResult",
]
