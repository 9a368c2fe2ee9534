"""
Ticket Bot - Utils Package
==========================

Utility modules for the ticket bot.

DESIGN:
    Utils are stateless helper functions and classes that can be
    used anywhere in the codebase. They should not depend on bot state.

Available Utilities:
    Async: Best-effort awaits and safe background tasks
    Errors: Categorised error logging with recovery hints
"""

# =============================================================================
# Utility Imports
# =============================================================================

from .async_utils import create_safe_task, safe_async_operation
from .error_handler import ErrorContext, ErrorHandler


# =============================================================================
# Module Export
# =============================================================================

__all__ = [
    # Async
    "create_safe_task",
    "safe_async_operation",
    # Errors
    "ErrorContext",
    "ErrorHandler",
]
