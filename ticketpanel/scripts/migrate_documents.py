from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from ticketpanel.config import settings
from ticketpanel.services import import_documents
from ticketpanel.storage import (
    BOT_CREDENTIALS,
    DOCUMENT_DEFAULTS,
    GUILD_BINDINGS,
    GUILD_CHANNELS,
    GUILD_CONFIGS,
    GUILD_ROLES,
    PUBLISH_FLAGS,
    USERS,
    DocumentStore,
    FileDocumentStore,
    TableDocumentStore,
    default_for,
)

# File names used by the old single-process JSON deployment.
LEGACY_FILES: Dict[str, str] = {
    USERS: "users.json",
    BOT_CREDENTIALS: "bots.json",
    GUILD_BINDINGS: "guilds.json",
    GUILD_ROLES: "guild_roles.json",
    GUILD_CHANNELS: "guild_channels.json",
    GUILD_CONFIGS: "guild_configs.json",
    PUBLISH_FLAGS: "publish_flags.json",
}


def read_legacy_dir(folder: Path) -> Dict[str, Any]:
    """
    Load whatever legacy files exist; missing or empty files are skipped.
    """
    docs: Dict[str, Any] = {}
    for name, filename in LEGACY_FILES.items():
        path = folder / filename
        if not path.exists():
            continue
        raw = path.read_text(encoding="utf-8").strip()
        if raw:
            docs[name] = json.loads(raw)
    return docs


def read_store(store: DocumentStore) -> Dict[str, Any]:
    return {name: store.read(name, default_for(name)) for name in DOCUMENT_DEFAULTS}


def migrate(source: Dict[str, Any], target: DocumentStore) -> List[str]:
    """
    Validate + write every source document into target (see import_documents).
    """
    return import_documents(target, source)


def _build(kind: str, *, data_dir: str, database_url: str) -> DocumentStore:
    if kind == "table":
        return TableDocumentStore(database_url=database_url)
    return FileDocumentStore(data_dir)


def main(argv: Optional[List[str]] = None) -> None:
    """
    Run with:
      python -m ticketpanel.scripts.migrate_documents --to table
      python -m ticketpanel.scripts.migrate_documents --to file
      python -m ticketpanel.scripts.migrate_documents --to table --legacy-dir ./old-data
    """
    parser = argparse.ArgumentParser(description="Copy every document between storage backends.")
    parser.add_argument("--to", choices=("file", "table"), required=True, help="target backend")
    parser.add_argument("--legacy-dir", default=None, help="read old-deployment JSON files from this folder")
    parser.add_argument("--data-dir", default=settings.data_dir)
    parser.add_argument("--database-url", default=settings.resolved_database_url)
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, settings.log_level, logging.INFO))

    target = _build(args.to, data_dir=args.data_dir, database_url=args.database_url)
    source_store: Optional[DocumentStore] = None
    try:
        if args.legacy_dir:
            source = read_legacy_dir(Path(args.legacy_dir))
        else:
            source_kind = "file" if args.to == "table" else "table"
            source_store = _build(source_kind, data_dir=args.data_dir, database_url=args.database_url)
            source = read_store(source_store)

        written = migrate(source, target)
    finally:
        target.close()
        if source_store is not None:
            source_store.close()

    print(f"Migrated {len(written)} document(s) into the {args.to} backend: {', '.join(written) or '-'}")


if __name__ == "__main__":
    main()
