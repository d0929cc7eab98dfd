"""Services package."""

from moneynote.services.ids import IdentifierGenerator
from moneynote.services.storage import (
    CorruptDataError,
    DocumentStore,
    InMemoryDocumentStore,
    JsonFileDocumentStore,
    StorageError,
    StorageKeys,
    StorageUnavailableError,
)

__all__ = [
    "IdentifierGenerator",
    # Storage services
    "CorruptDataError",
    "DocumentStore",
    "InMemoryDocumentStore",
    "JsonFileDocumentStore",
    "StorageError",
    "StorageKeys",
    "StorageUnavailableError",
]
