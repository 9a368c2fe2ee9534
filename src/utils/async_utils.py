"""
Ticket Bot - Async Utilities
============================

Utilities for handling async operations with proper error logging.
Best-effort steps and background tasks log their failures instead of
letting them disappear or abort the caller.

Usage:
    from src.utils.async_utils import safe_async_operation, create_safe_task

    # A step whose failure must not abort the caller:
    sent = await safe_async_operation("Welcome Notice", channel.send("Hi"))

    # Fire-and-forget work that can still be cancelled:
    task = create_safe_task(delete_later(), "Delete ticket-0001")
"""

import asyncio
from typing import Coroutine, Any

from src.core.logger import logger


async def safe_async_operation(
    name: str,
    coro: Coroutine[Any, Any, Any],
    default: Any = None,
    log_level: str = "warning",
) -> Any:
    """
    Run a single async operation with error handling.

    Args:
        name: Name of the operation for logging.
        coro: The coroutine to run.
        default: Value to return if operation fails.
        log_level: Log level for errors ("debug", "warning", "error").

    Returns:
        Result of the coroutine, or default if it fails.
    """
    try:
        return await coro
    except Exception as e:
        error_details = [
            ("Operation", name),
            ("Error Type", type(e).__name__),
            ("Error", str(e)[:100]),
        ]

        if log_level == "debug":
            logger.debug("Async Operation Failed", error_details)
        elif log_level == "error":
            logger.error("Async Operation Failed", error_details)
        else:
            logger.warning("Async Operation Failed", error_details)

        return default


# =============================================================================
# Safe Background Tasks
# =============================================================================

def create_safe_task(
    coro: Coroutine[Any, Any, Any],
    name: str = "Background Task",
) -> asyncio.Task:
    """
    Create a background task with automatic error logging.

    Unlike raw asyncio.create_task(), this catches and logs any exceptions
    instead of letting them silently disappear. Cancellation is silent.

    Args:
        coro: The coroutine to run as a background task.
        name: Name for logging purposes.

    Returns:
        The created asyncio.Task.
    """
    async def wrapped():
        try:
            await coro
        except asyncio.CancelledError:
            logger.debug("Background Task Cancelled", [("Task", name)])
        except Exception as e:
            logger.error("Background Task Failed", [
                ("Task", name),
                ("Error Type", type(e).__name__),
                ("Error", str(e)[:200]),
            ])

    return asyncio.create_task(wrapped(), name=name)


# =============================================================================
# Module Export
# =============================================================================

__all__ = [
    "safe_async_operation",
    "create_safe_task",
]
