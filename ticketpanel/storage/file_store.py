from __future__ import annotations

import copy
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Union

from ..errors import StorageError
from .base import DocumentStore, check_document_name

logger = logging.getLogger(__name__)


class FileDocumentStore(DocumentStore):
    """
    One pretty-printed JSON file per document: <data_dir>/<name>.json
    """

    def __init__(self, data_dir: Union[str, Path]) -> None:
        super().__init__()
        self.data_dir = Path(data_dir)

    def path_for(self, name: str) -> Path:
        return self.data_dir / f"{check_document_name(name)}.json"

    def read(self, name: str, default: Any) -> Any:
        path = self.path_for(name)
        try:
            if not path.exists():
                self._dump(path, default)
                logger.info("Materialized document %s with default content", name)
            raw = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"cannot read document {name}") from exc

        if not raw.strip():
            return copy.deepcopy(default)

        try:
            return json.loads(raw)
        except ValueError as exc:
            raise StorageError(f"document {name} is not valid JSON") from exc

    def write(self, name: str, value: Any) -> None:
        path = self.path_for(name)
        try:
            self._dump(path, value)
        except OSError as exc:
            raise StorageError(f"cannot write document {name}") from exc

    def _dump(self, path: Path, value: Any) -> None:
        """
        Write to a temp file in the same folder, then rename over the target so a
        reader never sees a half-written document.
        """
        try:
            payload = json.dumps(value, indent=2, ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            raise StorageError(f"document {path.stem} is not JSON-serializable") from exc

        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.stem}.", suffix=".tmp", dir=str(path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
