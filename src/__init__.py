"""
Ticket Bot - Source Package
===========================

Support-ticket bot: a panel button opens a private channel per user,
the owner or support staff close it, and the channel's history is kept
as a plain-text transcript before the channel is deleted.

Package Structure:
- bot.py: Main Discord bot class and lifecycle
- core/: Configuration and logging
- events/: Event cogs (text commands)
- services/tickets/: Ticket lifecycle, registry, counter, transcripts, audit log
- utils/: Async helpers and error handling

Version: v1.0.0
"""
