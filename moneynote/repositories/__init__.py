"""Repository package: typed CRUD over the document store."""

from moneynote.repositories.base import CollectionRepository
from moneynote.repositories.bootstrap import BootstrapInitializer
from moneynote.repositories.entities import (
    BudgetRepository,
    CategoryRepository,
    NoteRepository,
    SettingsRepository,
    TransactionRepository,
)

__all__ = [
    "BootstrapInitializer",
    "BudgetRepository",
    "CategoryRepository",
    "CollectionRepository",
    "NoteRepository",
    "SettingsRepository",
    "TransactionRepository",
]
