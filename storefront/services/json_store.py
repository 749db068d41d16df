"""File-backed collection store: one JSON array per collection."""

from __future__ import annotations

import json
import logging
import os
import re
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List


logger = logging.getLogger(__name__)

_COLLECTION_NAME = re.compile(r"^[a-z_]+$")


class StoreError(RuntimeError):
    """Raised when a collection file exists but cannot be used."""


class JsonStore:
    """Reads and rewrites whole collections.

    Every collection has its own lock, so read-modify-write cycles that go
    through :meth:`update` are serialized within the process. Writes go to a
    temporary file that replaces the collection file, so readers never see a
    half-written array.
    """

    def __init__(self, data_dir: Path) -> None:
        self._data_dir = Path(data_dir)
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._locks: Dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()

    def path_for(self, collection: str) -> Path:
        if not _COLLECTION_NAME.match(collection or ""):
            raise ValueError(f"invalid collection name: {collection!r}")
        return self._data_dir / f"{collection}.json"

    def read_all(self, collection: str) -> List[Dict[str, Any]]:
        """Return every entity in the collection; a missing file is an empty collection."""

        path = self.path_for(collection)
        with self._lock(collection):
            if not path.exists():
                return []
            text = path.read_text(encoding="utf-8")
        if not text.strip():
            return []
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            raise StoreError(f"{path.name} is not valid JSON") from exc
        if not isinstance(payload, list):
            raise StoreError(f"{path.name} must contain a JSON array")
        return payload

    def write_all(self, collection: str, entities: List[Dict[str, Any]]) -> None:
        path = self.path_for(collection)
        content = json.dumps(list(entities), ensure_ascii=False, indent=2)
        with self._lock(collection):
            fd, tmp_name = tempfile.mkstemp(prefix=f".{collection}.", suffix=".tmp", dir=self._data_dir)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(content + "\n")
                os.replace(tmp_name, path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        logger.debug("wrote %d entities to %s", len(entities), path.name)

    @contextmanager
    def update(self, collection: str) -> Iterator[List[Dict[str, Any]]]:
        """Hold the collection lock across a read-modify-write cycle.

        The yielded list is written back when the block exits without an
        exception; on error nothing is written.
        """

        with self._lock(collection):
            entities = self.read_all(collection)
            yield entities
            self.write_all(collection, entities)

    def _lock(self, collection: str) -> threading.RLock:
        with self._locks_guard:
            lock = self._locks.get(collection)
            if lock is None:
                lock = self._locks[collection] = threading.RLock()
            return lock
