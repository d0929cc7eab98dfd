"""
Entity Repositories

One repository per entity kind, each bound to its own storage key.
Transactions and notes are time-tracked; categories and budgets are not.
Settings is a singleton record with get/save instead of CRUD.
"""

from datetime import datetime
from typing import Any, Mapping, Optional

from pydantic import TypeAdapter

from moneynote.audit import AuditLogger
from moneynote.models.finance import (
    AppSettings,
    Budget,
    BudgetDraft,
    Category,
    CategoryDraft,
    CategoryKind,
    Note,
    NoteDraft,
    Transaction,
    TransactionDraft,
)
from moneynote.repositories.base import CollectionRepository
from moneynote.services.storage import DocumentStore, StorageError


class TransactionRepository(CollectionRepository[TransactionDraft, Transaction]):
    draft_type = TransactionDraft
    entity_type = Transaction
    kind = "transaction"
    time_tracked = True

    async def list_between(self, start: datetime, end: datetime) -> list[Transaction]:
        """Transactions dated within [start, end], inclusive."""
        return [t for t in await self.list() if start <= t.date <= end]


class CategoryRepository(CollectionRepository[CategoryDraft, Category]):
    """
    Categories are edited and deleted by rewriting the whole set
    (replace_all), as well as through the usual CRUD calls.
    """

    draft_type = CategoryDraft
    entity_type = Category
    kind = "category"

    async def find_by_name(self, name: str) -> Optional[Category]:
        """
        Look up a category by name, the way transactions refer to it.

        Names are not unique: the first stored match wins.
        """
        for category in await self.list():
            if category.name == name:
                return category
        return None

    async def list_by_kind(self, kind: CategoryKind) -> list[Category]:
        return [c for c in await self.list() if c.kind == kind]


class NoteRepository(CollectionRepository[NoteDraft, Note]):
    draft_type = NoteDraft
    entity_type = Note
    kind = "note"
    time_tracked = True

    async def list_for_transaction(self, transaction_id: str) -> list[Note]:
        """Notes referring to a transaction id (which may no longer exist)."""
        return [n for n in await self.list() if n.transaction_id == transaction_id]


class BudgetRepository(CollectionRepository[BudgetDraft, Budget]):
    draft_type = BudgetDraft
    entity_type = Budget
    kind = "budget"

    async def list_for_category(self, category_id: str) -> list[Budget]:
        return [b for b in await self.list() if b.category_id == category_id]


class SettingsRepository:
    """
    Access to the singleton AppSettings record.

    There is no id and no collection: get() returns the record or None,
    save() replaces it.
    """

    _schema = TypeAdapter(AppSettings)
    _field_names = CollectionRepository._build_field_names(AppSettings)

    def __init__(
        self,
        store: DocumentStore,
        key: str,
        audit: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._key = key
        self._audit = audit or AuditLogger()

    @property
    def key(self) -> str:
        return self._key

    async def get(self) -> Optional[AppSettings]:
        """The stored settings, or None if absent, corrupt or unreadable."""
        try:
            return await self._store.get(self._key, self._schema)
        except StorageError as e:
            self._audit.log_read_failed(self._key, e)
            return None

    async def save(self, settings: AppSettings) -> None:
        """
        Replace the stored settings.

        Raises:
            StorageError: If the record cannot be written
        """
        try:
            await self._store.set(self._key, settings, self._schema)
        except StorageError as e:
            self._audit.log_write_failed(self._key, e)
            raise
        self._audit.log_settings_saved()

    async def update(
        self,
        changes: Optional[Mapping[str, Any]] = None,
        **fields: Any,
    ) -> Optional[AppSettings]:
        """
        Change some settings in place.

        Returns the new record, or None (writing nothing) when no
        settings are stored yet.
        """
        current = await self.get()
        if current is None:
            return None

        data = current.model_dump()
        for name, value in {**(changes or {}), **fields}.items():
            field_name = self._field_names.get(name)
            if field_name is not None:
                data[field_name] = value
        updated = AppSettings.model_validate(data)
        await self.save(updated)
        return updated
