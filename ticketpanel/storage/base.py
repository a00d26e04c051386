from __future__ import annotations

import re
import threading
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, TypeVar

from ..errors import StorageError

T = TypeVar("T")

_NAME_RE = re.compile(r"^[a-z0-9][a-z0-9_-]{0,63}$")


def check_document_name(name: str) -> str:
    """
    Document names double as file names and primary keys; keep them boring.
    """
    if not isinstance(name, str) or not _NAME_RE.match(name):
        raise StorageError(f"invalid document name: {name!r}")
    return name


class DocumentStore(ABC):
    """
    Keyed mapping of document names to JSON values.

    Contract shared by every backend:
    - read(name, default) materializes and persists `default` the first time a
      document is read before it exists; afterwards it never returns absence
    - write(name, value) fully replaces the document (no merge, last write wins)
    - update(name, default, fn) is a read-modify-write under a per-document lock;
      the lock is process-local, so writers in other processes still race
    """

    def __init__(self) -> None:
        self._locks: Dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()

    @abstractmethod
    def read(self, name: str, default: Any) -> Any:
        raise NotImplementedError

    @abstractmethod
    def write(self, name: str, value: Any) -> None:
        raise NotImplementedError

    def lock(self, name: str) -> threading.RLock:
        with self._locks_guard:
            lock = self._locks.get(name)
            if lock is None:
                lock = threading.RLock()
                self._locks[name] = lock
            return lock

    def update(self, name: str, default: Any, fn: Callable[[Any], T]) -> T:
        """
        Read `name`, let `fn` mutate the loaded value in place, write it back.

        If `fn` raises, nothing is written and the exception propagates.
        Returns whatever `fn` returned.
        """
        with self.lock(name):
            doc = self.read(name, default)
            result = fn(doc)
            self.write(name, doc)
            return result

    def close(self) -> None:
        """Release backend resources (no-op by default)."""
