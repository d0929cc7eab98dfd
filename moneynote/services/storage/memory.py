"""
In-Memory Document Store

Keeps every key's text in a dict. Used by tests and by the "memory"
backend for throwaway sessions; nothing survives the process.
"""

from typing import Iterable, Optional

from moneynote.audit import AuditLogger
from moneynote.services.storage.interface import DocumentStore


class InMemoryDocumentStore(DocumentStore):
    """Dict-backed implementation of the document store."""

    def __init__(
        self,
        initial: Optional[dict[str, str]] = None,
        audit: Optional[AuditLogger] = None,
    ):
        super().__init__(audit)
        self._data: dict[str, str] = dict(initial or {})

    async def read(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def write(self, key: str, text: str) -> None:
        self._data[key] = text

    async def remove_many(self, keys: Iterable[str]) -> None:
        for key in keys:
            self._data.pop(key, None)

    def keys(self) -> list[str]:
        """Keys currently holding a value."""
        return list(self._data)
