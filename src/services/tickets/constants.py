"""
Ticket System Constants
=======================

Custom ids, limits and user-facing messages for the ticket system.
"""


# =============================================================================
# Button Custom IDs
# =============================================================================

CREATE_TICKET_ID = "create_ticket"
CLOSE_TICKET_ID = "close_ticket"


# =============================================================================
# Naming
# =============================================================================

TICKET_ID_WIDTH = 4             # ticket 7 -> "0007"
CHANNEL_NAME_PREFIX = "ticket"  # channel "ticket-0007", transcript "ticket-7.txt"


# =============================================================================
# Limits & Timeouts
# =============================================================================

MAX_TRANSCRIPT_MESSAGES = 100   # Platform cap for one history fetch
FIRST_TICKET_ID = 1


# =============================================================================
# User-Facing Messages
# =============================================================================

MSG_NOT_TICKET_CHANNEL = "This command can only be used in ticket channels."
MSG_NO_PERMISSION = "You do not have permission to close this ticket."
MSG_CREATE_FAILED = "There was an error creating your ticket. Please try again later."
MSG_CLOSE_FAILED = "There was an error closing this ticket. Please try again later."
MSG_SETUP_FAILED = (
    "An error occurred while setting up the ticket system. "
    "Please check the bot permissions."
)
MSG_TICKET_PENDING = "Your ticket is already being created. Please wait a moment."
MSG_TICKET_NOT_OPEN = "This ticket is no longer open."
MSG_SERVICE_UNAVAILABLE = "Ticket system is not available."


__all__ = [
    "CREATE_TICKET_ID",
    "CLOSE_TICKET_ID",
    "TICKET_ID_WIDTH",
    "CHANNEL_NAME_PREFIX",
    "MAX_TRANSCRIPT_MESSAGES",
    "FIRST_TICKET_ID",
    "MSG_NOT_TICKET_CHANNEL",
    "MSG_NO_PERMISSION",
    "MSG_CREATE_FAILED",
    "MSG_CLOSE_FAILED",
    "MSG_SETUP_FAILED",
    "MSG_TICKET_PENDING",
    "MSG_TICKET_NOT_OPEN",
    "MSG_SERVICE_UNAVAILABLE",
]
