# ticketpanel/models/__init__.py
# Records stored inside documents, plus the one SQLModel table used by the table backend.

from .base import Payload, Record, now_ms
from .bot_credential import BotCredential, BotCredentialView, strip_secrets
from .document import Document
from .guild import GuildBinding
from .guild_config import GuildConfig, default_guild_config
from .publish_flag import PublishFlag
from .user import User, UserView

__all__ = [
    "Payload",
    "Record",
    "now_ms",
    "BotCredential",
    "BotCredentialView",
    "strip_secrets",
    "Document",
    "GuildBinding",
    "GuildConfig",
    "default_guild_config",
    "PublishFlag",
    "User",
    "UserView",
]
