"""
Ticket Bot - Error Handler
==========================

Provides detailed error context and categorised logging for failures
that escape a ticket transition or the startup sequence.

Features:
- Detailed error context with stack traces
- Error categorization (Discord, filesystem, general)
- Recovery suggestions in the log line
- Discord-specific context capture
- Critical error file logging

Internal detail only ever reaches the logs; chat users get a short
generic message from the caller.
"""

import json
import sys
import traceback
from datetime import datetime
from pathlib import Path
from typing import Dict, Any

import discord

from src.core.logger import logger, LOGS_DIR


class ErrorContext:
    """Captures and formats detailed error context"""

    @staticmethod
    def get_full_context(e: Exception, location: str, **kwargs) -> Dict[str, Any]:
        """
        Get comprehensive error context.

        Args:
            e: The exception
            location: Where the error occurred
            **kwargs: Additional context (user, channel, etc.)

        Returns:
            Dictionary with full error context
        """
        context = {
            'timestamp': datetime.now().isoformat(),
            'location': location,
            'error_type': type(e).__name__,
            'error_message': str(e),
            'traceback': ''.join(traceback.format_exception(type(e), e, e.__traceback__)),
            'python_version': sys.version,
            'additional_context': {k: str(v) for k, v in kwargs.items()},
        }

        user = kwargs.get('user')
        if user is not None and hasattr(user, 'id'):
            context['user_context'] = {
                'name': str(user),
                'id': user.id,
            }

        channel = kwargs.get('channel')
        if channel is not None and hasattr(channel, 'id'):
            context['channel_context'] = {
                'name': getattr(channel, 'name', str(channel)),
                'id': channel.id,
            }

        return context


class ErrorHandler:
    """Categorised error handling with context"""

    ERROR_CATEGORIES = {
        'discord': (discord.DiscordException,),
        'filesystem': (OSError,),
    }

    SUGGESTIONS = {
        discord.Forbidden: "Check bot permissions in server settings",
        discord.NotFound: "Resource not found - check configured ids and channels",
        discord.HTTPException: "Discord API issue - try the action again",
        PermissionError: "Check file permissions for the counter and transcript paths",
        OSError: "System resource issue - check disk space and paths",
    }

    @classmethod
    def categorize_error(cls, e: Exception) -> str:
        """
        Categorize the error type.

        Args:
            e: The exception

        Returns:
            Error category string
        """
        for category, error_types in cls.ERROR_CATEGORIES.items():
            if isinstance(e, error_types):
                return category
        return 'general'

    @classmethod
    def get_recovery_suggestion(cls, e: Exception) -> str:
        """
        Get recovery suggestion based on error type.

        Args:
            e: The exception

        Returns:
            Recovery suggestion string
        """
        # Most specific class first
        for error_type in type(e).__mro__:
            if error_type in cls.SUGGESTIONS:
                return cls.SUGGESTIONS[error_type]
        return "Unexpected error - check logs for details"

    @classmethod
    def handle(cls, e: Exception, location: str, critical: bool = False, **context) -> None:
        """
        Handle an error with full context.

        Args:
            e: The exception
            location: Where the error occurred
            critical: Whether this error stops the process
            **context: Additional context
        """
        category = cls.categorize_error(e)
        suggestion = cls.get_recovery_suggestion(e)
        full_context = ErrorContext.get_full_context(e, location, **context)

        details = [
            ("Location", location),
            ("Category", category.upper()),
            ("Error Type", full_context['error_type']),
            ("Error", full_context['error_message'][:200]),
            ("Recovery", suggestion),
        ]
        for key, value in context.items():
            details.append((key.replace('_', ' ').title(), str(value)[:100]))

        if critical:
            logger.error("💥 CRITICAL ERROR", details)
            logger.info(f"Traceback:\n{full_context['traceback']}")
            cls._store_critical_error(full_context)
        else:
            logger.error("Unexpected Error", details)
            logger.debug(f"Traceback:\n{full_context['traceback']}")

    @staticmethod
    def _store_critical_error(context: Dict[str, Any]) -> None:
        """
        Store critical error for later analysis.

        Args:
            context: Full error context
        """
        try:
            error_dir = Path(LOGS_DIR) / 'errors'
            error_dir.mkdir(exist_ok=True, parents=True)

            timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
            error_file = error_dir / f"error_{timestamp}.json"

            with open(error_file, 'w', encoding='utf-8') as f:
                json.dump(context, f, indent=2, default=str)

            logger.info(f"Critical error saved to {error_file}")
        except OSError as save_error:
            logger.warning(f"Failed to save error details: {save_error}")


__all__ = [
    "ErrorContext",
    "ErrorHandler",
]
