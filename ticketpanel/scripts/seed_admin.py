from __future__ import annotations

import logging

from ticketpanel.config import settings
from ticketpanel.services import seed_admin
from ticketpanel.storage import build_store


def main() -> None:
    """
    Run with:
      python -m ticketpanel.scripts.seed_admin

    Same idempotent seed the API runs on startup, against the configured backend.
    """
    logging.basicConfig(level=getattr(logging, settings.log_level, logging.INFO))
    store = build_store(settings)
    try:
        created = seed_admin(store, settings)
    finally:
        store.close()

    if created:
        print(f"Admin user '{settings.admin_user}' created ({settings.storage_backend} backend)")
    else:
        print(f"Admin user '{settings.admin_user}' already exists; nothing to do")


if __name__ == "__main__":
    main()
