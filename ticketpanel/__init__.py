"""
Ticket panel backend.

Multi-tenant configuration and coordination service for Discord ticket-panel bots:
admin-provisioned bot credentials, guild ownership, per-guild panel configuration,
and a poll-based publish signal between the web panel and the bot processes.
"""

__version__ = "1.0.0"
