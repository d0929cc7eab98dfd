"""
First-Run Bootstrap

Seeds the default categories and settings the first time a store is used.
The "initialized" marker is written last; once present, nothing is ever
reseeded, even if the user later deletes every category.
"""

from typing import Optional

from moneynote.audit import AuditLogger
from moneynote.models.finance import (
    DEFAULT_APP_SETTINGS,
    DEFAULT_EXPENSE_CATEGORIES,
    DEFAULT_INCOME_CATEGORIES,
    Category,
)
from moneynote.repositories.entities import CategoryRepository, SettingsRepository
from moneynote.services.ids import IdentifierGenerator
from moneynote.services.storage import DocumentStore


INITIALIZED_VALUE = "true"


class BootstrapInitializer:
    """Idempotent one-time seeding, invoked explicitly at startup."""

    def __init__(
        self,
        store: DocumentStore,
        marker_key: str,
        categories: CategoryRepository,
        settings: SettingsRepository,
        ids: IdentifierGenerator,
        audit: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._marker_key = marker_key
        self._categories = categories
        self._settings = settings
        self._ids = ids
        self._audit = audit or AuditLogger()

    async def is_initialized(self) -> bool:
        return bool(await self._store.read(self._marker_key))

    async def initialize(self) -> bool:
        """
        Seed defaults unless the store is already marked.

        Returns:
            True if defaults were written, False if already initialized

        Raises:
            StorageError: If the marker cannot be read or a seed write fails
        """
        if await self.is_initialized():
            self._audit.log_bootstrap(seeded=False)
            return False

        defaults = [
            Category(id=self._ids.next(), **draft.model_dump())
            for draft in (*DEFAULT_INCOME_CATEGORIES, *DEFAULT_EXPENSE_CATEGORIES)
        ]
        await self._categories.replace_all(defaults)
        await self._settings.save(DEFAULT_APP_SETTINGS.model_copy())
        await self._store.write(self._marker_key, INITIALIZED_VALUE)

        self._audit.log_bootstrap(seeded=True, categories=len(defaults))
        return True
