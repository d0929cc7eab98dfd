"""
Abstract Document Store Interface

DESIGN DECISION: Storage is a plain key-value store of UTF-8 text.
Each entity kind lives under one key as a whole serialized collection.
This allows us to:
1. Swap the file backend for any other medium that can hold text by key
2. Use in-memory storage for testing
3. Keep (de)serialization in one place, independent of the medium

The interface is intentionally tiny: read, write, remove. Typed access
(get/set) is built once on top of it using pydantic TypeAdapters.
"""

from abc import ABC, abstractmethod
from typing import Iterable, Optional, TypeVar

from pydantic import TypeAdapter, ValidationError

from moneynote.audit import AuditLogger


T = TypeVar("T")


class StorageKeys:
    """Stable storage keys, one per entity kind plus the bootstrap marker."""

    def __init__(self, prefix: str = "@moneyNote_"):
        self.prefix = prefix
        self.transactions = f"{prefix}transactions"
        self.categories = f"{prefix}categories"
        self.notes = f"{prefix}notes"
        self.budgets = f"{prefix}budgets"
        self.settings = f"{prefix}settings"
        self.initialized = f"{prefix}initialized"

    def all(self) -> list[str]:
        return [
            self.transactions,
            self.categories,
            self.notes,
            self.budgets,
            self.settings,
            self.initialized,
        ]


class DocumentStore(ABC):
    """
    Abstract interface for the persistence medium.

    Backends implement read/write/remove_many over raw text.
    Failures of the medium are raised as StorageUnavailableError and
    are never retried here.
    """

    def __init__(self, audit: Optional[AuditLogger] = None):
        self._audit = audit or AuditLogger()

    @abstractmethod
    async def read(self, key: str) -> Optional[str]:
        """
        Read the raw text stored under a key.

        Returns:
            The stored text, or None if the key is absent

        Raises:
            StorageUnavailableError: If the medium cannot be read
        """
        pass

    @abstractmethod
    async def write(self, key: str, text: str) -> None:
        """
        Replace the text stored under a key.

        A single-key write either fully succeeds or leaves the old value.

        Raises:
            StorageUnavailableError: If the medium cannot be written
        """
        pass

    @abstractmethod
    async def remove_many(self, keys: Iterable[str]) -> None:
        """
        Remove several keys. Keys that are already absent are ignored.

        Raises:
            StorageUnavailableError: If the medium cannot be written
        """
        pass

    async def get(self, key: str, schema: TypeAdapter[T]) -> Optional[T]:
        """
        Read and decode the value under a key.

        Returns:
            The decoded value, or None if the key is absent or its
            content is corrupt

        Raises:
            StorageUnavailableError: If the medium cannot be read
        """
        text = await self.read(key)
        if text is None:
            return None

        try:
            return self.decode(key, text, schema)
        except CorruptDataError as e:
            self._audit.log_corrupt_data(key, e)
            return None

    async def set(self, key: str, value: T, schema: TypeAdapter[T]) -> None:
        """
        Encode a value as JSON and store it under a key.

        Raises:
            StorageUnavailableError: If the medium cannot be written
        """
        await self.write(key, self.encode(value, schema))

    @staticmethod
    def encode(value: T, schema: TypeAdapter[T]) -> str:
        """Serialize with camelCase keys, ISO-8601 dates and numeric amounts."""
        return schema.dump_json(value, by_alias=True).decode("utf-8")

    @staticmethod
    def decode(key: str, text: str, schema: TypeAdapter[T]) -> T:
        try:
            return schema.validate_json(text)
        except ValidationError as e:
            raise CorruptDataError(f"Corrupt data under {key!r}: {e}") from e


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageUnavailableError(StorageError):
    """The backing medium could not be read or written."""
    pass


class CorruptDataError(StorageError):
    """Stored text could not be decoded into the expected shape."""
    pass
