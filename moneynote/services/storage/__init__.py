"""
Storage Services Package

Provides the abstract document store and its concrete backends.
Currently implements JSON files and memory, but designed to be swappable.
"""

from moneynote.services.storage.interface import (
    CorruptDataError,
    DocumentStore,
    StorageError,
    StorageKeys,
    StorageUnavailableError,
)
from moneynote.services.storage.file_store import JsonFileDocumentStore
from moneynote.services.storage.memory import InMemoryDocumentStore

__all__ = [
    # Interface
    "DocumentStore",
    "StorageKeys",
    # Exceptions
    "CorruptDataError",
    "StorageError",
    "StorageUnavailableError",
    # Backends
    "InMemoryDocumentStore",
    "JsonFileDocumentStore",
]
