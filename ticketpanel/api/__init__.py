"""
HTTP routers. Each module owns one resource surface; main.create_app mounts them
under the configured API prefix.
"""

from .admin import router as admin_router
from .bot_credentials import router as bot_credentials_router
from .bots import router as bots_router
from .guilds import router as guilds_router
from .me import router as me_router
from .sessions import router as sessions_router
from .users import router as users_router

ROUTERS = [
    sessions_router,
    me_router,
    users_router,
    bot_credentials_router,
    bots_router,
    guilds_router,
    admin_router,
]

__all__ = ["ROUTERS"]
