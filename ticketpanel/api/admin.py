from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends

from ..services import export_documents, import_documents
from ..storage import DocumentStore
from .deps import get_store, require_admin

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


@router.get("/export")
def export_all(store: DocumentStore = Depends(get_store)) -> Dict[str, Any]:
    """
    Full dump of every document, keyed by document name. Bot tokens are stripped.
    """
    return export_documents(store)


@router.post("/import")
def import_all(
    payload: Dict[str, Any] = Body(...),
    store: DocumentStore = Depends(get_store),
) -> Dict[str, Any]:
    """
    Overwrite each named document from a dump (export format, or the legacy
    bots/guilds/roles/channels/configs/publish_flags keys).
    """
    return {"ok": True, "imported": import_documents(store, payload)}
