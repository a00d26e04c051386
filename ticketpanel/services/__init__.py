"""
Domain services: credentials, authorization chain, publish handshake, seeding, backup.

Everything here raises ticketpanel.errors exceptions and knows nothing about HTTP.
"""

from .authz import ensure_admin, ensure_bot_owner, ensure_guild_owner, visible_bots, visible_guilds
from .identity import SessionClaims, authenticate_bot, authenticate_session, login_admin, login_user
from .publish import PublishCoordinator
from .seed import seed_admin
from .transfer import export_documents, import_documents

__all__ = [
    "ensure_admin",
    "ensure_bot_owner",
    "ensure_guild_owner",
    "visible_bots",
    "visible_guilds",
    "SessionClaims",
    "authenticate_bot",
    "authenticate_session",
    "login_admin",
    "login_user",
    "PublishCoordinator",
    "seed_admin",
    "export_documents",
    "import_documents",
]
