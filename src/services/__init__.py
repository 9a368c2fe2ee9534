"""
Ticket Bot - Services Package
=============================

Stateful services owned by the bot.

DESIGN:
    Services are plain classes constructed once by the bot and reached
    through it (e.g. `bot.ticket_service`). They should:
    - Be async-compatible for non-blocking I/O
    - Handle their own error cases gracefully
    - Report transition outcomes as result objects instead of raising

Available Services:
    TicketService: Support ticket lifecycle (create, close, transcripts, audit)
"""

# =============================================================================
# Service Imports
# =============================================================================

from .tickets import TicketService


# =============================================================================
# Module Export
# =============================================================================

__all__ = [
    "TicketService",
]
