from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Tuple

from ..core.exceptions import PersistenceError

logger = logging.getLogger(__name__)

# never equal to a real file signature, forces the next read to reload
_STALE = (-1, -1, -1)


class JsonDocumentStore:
    """Device-local document store kept in a single JSON file.

    The file holds one list of documents per collection. The file is the
    source of truth: every mutation re-reads it under the lock, applies the
    change and writes it back with an atomic replace, so edits made by
    another process (e.g. scripts/set_role.py) are never reverted.
    """

    def __init__(self, path: str | Path):
        self._path = Path(path)
        self._lock = threading.RLock()
        self._open = False
        self._data: dict[str, list[dict]] = {}
        self._signature: Optional[Tuple[int, int, int]] = None

    @classmethod
    def open(cls, path: str | Path) -> "JsonDocumentStore":
        store = cls(path)
        with store._lock:
            store._load()
            store._open = True
        return store

    @property
    def path(self) -> Path:
        return self._path

    @property
    def is_open(self) -> bool:
        return self._open

    def close(self) -> None:
        """Release the store; every write has already been saved."""
        with self._lock:
            self._open = False
            self._data = {}
            self._signature = None

    def __enter__(self) -> "JsonDocumentStore":
        if not self.is_open:
            with self._lock:
                self._load()
                self._open = True
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def read(self, collection: str) -> list[dict]:
        with self._lock:
            self._require_open()
            if self._disk_signature() != self._signature:
                self._load()
            return [dict(doc) for doc in self._data.get(collection, [])]

    @contextmanager
    def write(self, collection: str) -> Iterator[list[dict]]:
        """Mutate a fresh copy of a collection; saved when the block exits cleanly."""
        with self._lock:
            self._require_open()
            self._load()
            docs = self._data.setdefault(collection, [])
            try:
                yield docs
                self._save()
            except BaseException:
                # the cached copy may hold an unsaved change
                self._signature = _STALE
                raise

    def _require_open(self) -> None:
        if not self._open:
            raise PersistenceError("Local store is closed")

    def _disk_signature(self) -> Optional[Tuple[int, int, int]]:
        # os.replace gives every save a new inode, so this also catches
        # rewrites within one mtime tick
        try:
            st = self._path.stat()
            return st.st_ino, st.st_mtime_ns, st.st_size
        except FileNotFoundError:
            return None
        except OSError as e:
            raise PersistenceError("Local store cannot be read") from e

    def _load(self) -> None:
        signature = self._disk_signature()
        if signature is None:
            self._data = {}
            self._signature = None
            return
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8") or "{}")
        except (OSError, ValueError) as e:
            logger.error("Cannot read local store %s: %s", self._path, e)
            raise PersistenceError("Local store cannot be read") from e
        if not isinstance(raw, dict):
            raise PersistenceError("Local store has an unexpected layout")
        self._data = {name: list(docs) for name, docs in raw.items() if isinstance(docs, list)}
        self._signature = signature

    def _save(self) -> None:
        tmp = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self._path.parent, prefix=".timeclock-", suffix=".json")
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(self._data, fh, ensure_ascii=False, indent=2)
            os.replace(tmp, self._path)
            tmp = None
        except (OSError, TypeError, ValueError) as e:
            logger.error("Cannot write local store %s: %s", self._path, e)
            raise PersistenceError("Local store cannot be written") from e
        finally:
            if tmp is not None:
                try:
                    os.unlink(tmp)
                except OSError:
                    logger.warning("Cannot remove temp file %s", tmp)
        self._signature = self._disk_signature()
