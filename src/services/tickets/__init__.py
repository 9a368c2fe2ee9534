"""
Ticket System
=============

Support tickets: private per-user channels opened from a panel button,
closed with a transcript and deleted after a short delay.
"""

from typing import TYPE_CHECKING

from .counter import CounterStore
from .embeds import build_audit_embed, build_closing_embed, build_panel_embed, build_welcome_embed
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
from .service import TicketService
from .transcript import TranscriptEntry, TranscriptWriter, collect_transcript_entries
from .views import CloseTicketButton, CreateTicketButton, build_control_view, build_panel_view

if TYPE_CHECKING:
    from src.bot import TicketBot


def setup_ticket_views(bot: "TicketBot") -> None:
    """Register the persistent ticket buttons."""
    bot.add_dynamic_items(CreateTicketButton, CloseTicketButton)


__all__ = [
    # Service
    "TicketService",
    "setup_ticket_views",
    # Components
    "CounterStore",
    "TicketRegistry",
    "TranscriptWriter",
    "TranscriptEntry",
    "collect_transcript_entries",
    "AuditNotifier",
    # Models
    "TicketRecord",
    "TicketState",
    "CreateOutcome",
    "CreateResult",
    "CloseOutcome",
    "CloseResult",
    "format_ticket_id",
    # Views
    "CreateTicketButton",
    "CloseTicketButton",
    "build_panel_view",
    "build_control_view",
    # Embeds
    "build_panel_embed",
    "build_welcome_embed",
    "build_closing_embed",
    "build_audit_embed",
]
