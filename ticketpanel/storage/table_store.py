from __future__ import annotations

import copy
import json
import logging
from typing import Any, Optional

from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session

from ..database import get_engine, init_db
from ..errors import StorageError
from ..models.document import Document, utcnow
from .base import DocumentStore, check_document_name

logger = logging.getLogger(__name__)


def _encode(name: str, value: Any) -> str:
    try:
        return json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError) as exc:
        raise StorageError(f"document {name} is not JSON-serializable") from exc


def _decode(name: str, raw: str) -> Any:
    try:
        return json.loads(raw)
    except ValueError as exc:
        raise StorageError(f"document {name} is not valid JSON") from exc


class TableDocumentStore(DocumentStore):
    """
    Key-value table backend: one `documents` row per logical document.

    - first read inserts the default; losing an insert race is a no-op (re-read)
    - write upserts the row (last write wins, no optimistic concurrency)
    """

    def __init__(self, engine: Optional[Engine] = None, *, database_url: Optional[str] = None) -> None:
        super().__init__()
        self.engine = engine or get_engine(database_url)
        init_db(self.engine)

    def read(self, name: str, default: Any) -> Any:
        check_document_name(name)
        try:
            with Session(self.engine) as session:
                row = session.get(Document, name)
                if row is not None:
                    return _decode(name, row.value)

                session.add(Document(name=name, value=_encode(name, default)))
                try:
                    session.commit()
                except IntegrityError:
                    # Another writer materialized it first; keep theirs.
                    session.rollback()
                    row = session.get(Document, name)
                    if row is None:
                        raise StorageError(f"document {name} vanished during first read")
                    return _decode(name, row.value)

                logger.info("Materialized document %s with default content", name)
                return copy.deepcopy(default)
        except SQLAlchemyError as exc:
            raise StorageError(f"cannot read document {name}") from exc

    def write(self, name: str, value: Any) -> None:
        check_document_name(name)
        payload = _encode(name, value)
        try:
            with Session(self.engine) as session:
                row = session.get(Document, name)
                if row is None:
                    session.add(Document(name=name, value=payload, updated_at=utcnow()))
                else:
                    row.value = payload
                    row.updated_at = utcnow()
                    session.add(row)
                try:
                    session.commit()
                except IntegrityError:
                    # Concurrent first insert; overwrite it (last write wins).
                    session.rollback()
                    row = session.get(Document, name)
                    if row is None:
                        raise StorageError(f"document {name} vanished during write")
                    row.value = payload
                    row.updated_at = utcnow()
                    session.add(row)
                    session.commit()
        except SQLAlchemyError as exc:
            raise StorageError(f"cannot write document {name}") from exc

    def close(self) -> None:
        self.engine.dispose()
