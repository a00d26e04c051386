from __future__ import annotations

import logging

from ..config import Settings
from ..models import User
from ..storage import USERS, DocumentStore, default_for
from .identity import ADMIN_SUBJECT_ID
from .security import hash_password, new_id

logger = logging.getLogger(__name__)


def seed_admin(store: DocumentStore, settings: Settings) -> bool:
    """
    Idempotently create the configured admin User.

    Returns True when a user was created, False when one with the admin
    username already exists (no write in that case).
    """
    with store.lock(USERS):
        users = store.read(USERS, default_for(USERS))
        if any(u.get("username") == settings.admin_user for u in users):
            return False

        taken = {u.get("id") for u in users}
        user = User(
            id=ADMIN_SUBJECT_ID if ADMIN_SUBJECT_ID not in taken else new_id(),
            username=settings.admin_user,
            password_hash=hash_password(settings.admin_pass, rounds=settings.bcrypt_rounds),
            is_admin=True,
        )
        users.append(user.to_doc())
        store.write(USERS, users)

    logger.info("Seeded admin user %r", settings.admin_user)
    return True
