"""
Admin backup/restore of every document.

Export strips bot secrets. Import validates every provided document before the
first write; the writes themselves are per document, so a storage failure midway
can leave earlier documents replaced and later ones untouched.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List

from pydantic import TypeAdapter, ValidationError

from ..errors import InvalidInput
from ..models import BotCredential, GuildBinding, GuildConfig, PublishFlag, User, strip_secrets
from ..storage import (
    BOT_CREDENTIALS,
    DOCUMENT_DEFAULTS,
    GUILD_BINDINGS,
    GUILD_CHANNELS,
    GUILD_CONFIGS,
    GUILD_ROLES,
    PUBLISH_FLAGS,
    USERS,
    DocumentStore,
    default_for,
)

logger = logging.getLogger(__name__)

# Keys used by dumps taken from the previous JSON-file deployment.
LEGACY_KEYS: Dict[str, str] = {
    "bots": BOT_CREDENTIALS,
    "guilds": GUILD_BINDINGS,
    "roles": GUILD_ROLES,
    "channels": GUILD_CHANNELS,
    "configs": GUILD_CONFIGS,
    "publish_flags": PUBLISH_FLAGS,
}

_ROSTER = TypeAdapter(Dict[str, List[Dict[str, Any]]])

_NORMALIZERS: Dict[str, Callable[[Any], Any]] = {
    USERS: lambda v: [u.to_doc() for u in TypeAdapter(List[User]).validate_python(v)],
    BOT_CREDENTIALS: lambda v: [b.to_doc() for b in TypeAdapter(List[BotCredential]).validate_python(v)],
    GUILD_BINDINGS: lambda v: [g.to_doc() for g in TypeAdapter(List[GuildBinding]).validate_python(v)],
    GUILD_ROLES: _ROSTER.validate_python,
    GUILD_CHANNELS: _ROSTER.validate_python,
    GUILD_CONFIGS: lambda v: {k: c.to_stored() for k, c in TypeAdapter(Dict[str, GuildConfig]).validate_python(v).items()},
    PUBLISH_FLAGS: lambda v: {k: f.to_doc() for k, f in TypeAdapter(Dict[str, PublishFlag]).validate_python(v).items()},
}


def export_documents(store: DocumentStore) -> Dict[str, Any]:
    dump = {name: store.read(name, default_for(name)) for name in DOCUMENT_DEFAULTS}
    dump[BOT_CREDENTIALS] = [strip_secrets(b) for b in dump[BOT_CREDENTIALS]]
    return dump


def _keep_stored_tokens(store: DocumentStore, incoming: List[Dict[str, Any]], raw: List[Any]) -> None:
    """
    Exports never contain tokens, so re-importing one must not wipe them:
    a credential whose imported record has no "token" key keeps the stored one.
    """
    stored = {b.get("id"): b.get("token") for b in store.read(BOT_CREDENTIALS, default_for(BOT_CREDENTIALS))}
    for doc, original in zip(incoming, raw):
        if "token" not in original and stored.get(doc["id"]):
            doc["token"] = stored[doc["id"]]


def import_documents(store: DocumentStore, payload: Any) -> List[str]:
    """
    Wholesale-overwrite each named document in `payload`.
    Returns the document names written, in write order.
    """
    if not isinstance(payload, dict):
        raise InvalidInput("import payload must be an object of documents")

    prepared: Dict[str, Any] = {}
    for key, value in payload.items():
        name = LEGACY_KEYS.get(key, key)
        if name not in _NORMALIZERS:
            raise InvalidInput(f"unknown document: {key}")
        if name in prepared:
            raise InvalidInput(f"document given twice: {name}")
        try:
            prepared[name] = _NORMALIZERS[name](value)
        except ValidationError as exc:
            errors = [{"loc": list(e["loc"]), "msg": e["msg"]} for e in exc.errors()]
            raise InvalidInput(f"invalid document: {name}", extra={"errors": errors}) from exc

    if BOT_CREDENTIALS in prepared:
        raw = payload.get(BOT_CREDENTIALS, payload.get("bots"))
        _keep_stored_tokens(store, prepared[BOT_CREDENTIALS], raw)

    written: List[str] = []
    for name, value in prepared.items():
        with store.lock(name):
            store.write(name, value)
        written.append(name)
        logger.info("Imported document %s", name)
    return written
