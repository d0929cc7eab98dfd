"""
JSON File Document Store

DESIGN DECISION: Each storage key maps to one UTF-8 JSON file in a data
directory. This keeps the on-disk layout identical to the logical one:
one file per entity kind, plus the settings record and the marker.

TRADEOFFS:
- Every write rewrites the whole collection (fine for personal use)
- No cross-key transactions (each file is replaced atomically on its own)
- No locking: concurrent writers to the same key get last-write-wins
"""

import os
import re
import tempfile
from pathlib import Path
from typing import Iterable, Optional

from moneynote.audit import AuditLogger
from moneynote.services.storage.interface import (
    DocumentStore,
    StorageUnavailableError,
)


_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9@._-]")


class JsonFileDocumentStore(DocumentStore):
    """
    File-backed implementation of the document store.

    Writes go to a temporary file in the same directory which then
    replaces the target, so a crash never leaves half a collection.
    """

    def __init__(self, data_dir: Path, audit: Optional[AuditLogger] = None):
        super().__init__(audit)
        self._data_dir = Path(data_dir)

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def path_for(self, key: str) -> Path:
        """File holding the value of a key."""
        return self._data_dir / f"{_UNSAFE_CHARS.sub('_', key)}.json"

    async def read(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        try:
            # Undecodable bytes surface later as corrupt JSON, not as a medium failure
            return path.read_text(encoding="utf-8", errors="replace")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageUnavailableError(f"Failed to read {path}: {e}") from e

    async def write(self, key: str, text: str) -> None:
        path = self.path_for(key)
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._data_dir, prefix=f".{path.stem}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(text)
                    handle.flush()
                    os.fsync(handle.fileno())
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageUnavailableError(f"Failed to write {path}: {e}") from e

    async def remove_many(self, keys: Iterable[str]) -> None:
        for key in keys:
            path = self.path_for(key)
            try:
                path.unlink(missing_ok=True)
            except OSError as e:
                raise StorageUnavailableError(f"Failed to remove {path}: {e}") from e
