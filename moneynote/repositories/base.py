"""
Collection Repository

DESIGN DECISION: A repository never edits records in place on the medium.
Every mutation is one cycle of:

    load full collection -> pure transform -> persist full collection

There is no compare-and-swap. Two mutations of the same kind started
before either has written will both read the same collection, and the
second write silently replaces the first (last write wins). The core runs
in a single cooperative context with low write rates, so this is accepted
rather than engineered around.

Error policy:
- list() never raises: medium failures degrade to an empty list (logged)
- create/update/delete/replace_all raise StorageError on medium failure
- update/delete of an unknown id are silent no-ops
"""

# The list() method shadows the builtin inside the class body
from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Callable, ClassVar, Generic, Mapping, Optional, Sequence, TypeVar, Union

from pydantic import BaseModel, TypeAdapter

from moneynote.audit import AuditLogger
from moneynote.services.ids import IdentifierGenerator
from moneynote.services.storage import DocumentStore, StorageError


DraftT = TypeVar("DraftT", bound=BaseModel)
EntityT = TypeVar("EntityT", bound=BaseModel)

Changes = Union[Mapping[str, Any], BaseModel]

# Assigned by the repository, never by an update
PROTECTED_FIELDS = frozenset({"id", "created_at"})


class CollectionRepository(Generic[DraftT, EntityT]):
    """
    CRUD over one entity kind stored as a single collection.

    Subclasses set draft_type, entity_type and kind; time-tracked kinds
    also set time_tracked so createdAt/updatedAt are managed.
    """

    draft_type: ClassVar[type[BaseModel]]
    entity_type: ClassVar[type[BaseModel]]
    kind: ClassVar[str] = "record"
    time_tracked: ClassVar[bool] = False

    def __init__(
        self,
        store: DocumentStore,
        key: str,
        ids: IdentifierGenerator,
        audit: Optional[AuditLogger] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._store = store
        self._key = key
        self._ids = ids
        self._audit = audit or AuditLogger()
        self._clock = clock or datetime.now
        self._schema = TypeAdapter(list[self.entity_type])
        self._field_names = self._build_field_names(self.entity_type)

    @property
    def key(self) -> str:
        return self._key

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    async def list(self) -> list[EntityT]:
        """
        Load the whole collection.

        Returns an empty list if the key is absent, corrupt or unreadable.
        """
        try:
            return await self._load()
        except StorageError as e:
            self._audit.log_read_failed(self._key, e)
            return []

    async def get(self, entity_id: str) -> Optional[EntityT]:
        """Find one entity by id (None if absent)."""
        for entity in await self.list():
            if entity.id == entity_id:
                return entity
        return None

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    async def create(self, draft: Union[DraftT, Mapping[str, Any]]) -> EntityT:
        """
        Append a new entity with a fresh id (and timestamps).

        Raises:
            pydantic.ValidationError: If the draft is missing required fields
            StorageError: If the collection cannot be read or written
        """
        draft = self._coerce_draft(draft)
        entities = await self._load()

        entity = self._build(draft)
        entities.append(entity)

        await self._persist(entities)
        self._audit.log_entity_created(self.kind, entity.id)
        return entity

    async def update(
        self,
        entity_id: str,
        changes: Optional[Changes] = None,
        **fields: Any,
    ) -> Optional[EntityT]:
        """
        Merge changes into the entity with this id.

        Changes may be a mapping, a (partial) model or keyword arguments,
        keyed by field name or by stored (camelCase) name. id and
        createdAt cannot be changed.

        Returns:
            The updated entity, or None if no entity has this id
            (nothing is written in that case)
        """
        updates = self._normalize_changes(changes, fields)
        entities = await self._load()

        for index, current in enumerate(entities):
            if current.id == entity_id:
                break
        else:
            self._audit.log_update_target_missing(self.kind, entity_id)
            return None

        data = current.model_dump()
        data.update(updates)
        if self.time_tracked:
            data["updated_at"] = self._touch(current.updated_at)

        updated = self.entity_type.model_validate(data)
        entities[index] = updated

        await self._persist(entities)
        self._audit.log_entity_updated(self.kind, entity_id, sorted(updates))
        return updated

    async def delete(self, entity_id: str) -> None:
        """Remove every entity with this id; no-op if none match."""
        entities = await self._load()
        remaining = [entity for entity in entities if entity.id != entity_id]
        removed = len(entities) - len(remaining)

        # Nothing matched: leave the medium untouched (an absent key stays absent)
        if removed:
            await self._persist(remaining)
        self._audit.log_entity_deleted(self.kind, entity_id, removed=removed)

    async def replace_all(self, entities: Sequence[EntityT]) -> None:
        """Persist the given collection verbatim, replacing what is stored."""
        collection = list(entities)
        await self._persist(collection)
        self._audit.log_collection_replaced(self.kind, len(collection))

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    async def _load(self) -> list[EntityT]:
        entities = await self._store.get(self._key, self._schema)
        return list(entities) if entities else []

    async def _persist(self, entities: list[EntityT]) -> None:
        try:
            await self._store.set(self._key, entities, self._schema)
        except StorageError as e:
            self._audit.log_write_failed(self._key, e)
            raise

    def _coerce_draft(self, draft: Union[DraftT, Mapping[str, Any]]) -> DraftT:
        if isinstance(draft, self.draft_type):
            return draft
        if isinstance(draft, BaseModel):
            draft = draft.model_dump()
        return self.draft_type.model_validate(draft)

    def _build(self, draft: DraftT) -> EntityT:
        data = draft.model_dump(include=set(self.draft_type.model_fields))
        data["id"] = self._ids.next()
        if self.time_tracked:
            now = self._clock()
            data["created_at"] = now
            data["updated_at"] = now
        return self.entity_type.model_validate(data)

    def _touch(self, previous: datetime) -> datetime:
        """A timestamp strictly after the previous one."""
        now = self._clock()
        if now <= previous:
            return previous + timedelta(microseconds=1)
        return now

    def _normalize_changes(
        self,
        changes: Optional[Changes],
        fields: Mapping[str, Any],
    ) -> dict[str, Any]:
        if isinstance(changes, BaseModel):
            raw = changes.model_dump(exclude_unset=True)
        else:
            raw = dict(changes or {})
        raw.update(fields)

        updates = {}
        for name, value in raw.items():
            field_name = self._field_names.get(name)
            if field_name is None or field_name in PROTECTED_FIELDS:
                continue
            if field_name == "updated_at":
                continue
            updates[field_name] = value
        return updates

    @staticmethod
    def _build_field_names(model: type[BaseModel]) -> dict[str, str]:
        """Map both field names and stored aliases to field names."""
        generator = model.model_config.get("alias_generator")
        names = {}
        for name, info in model.model_fields.items():
            names[name] = name
            alias = info.alias or (generator(name) if callable(generator) else None)
            if alias:
                names[alias] = name
        return names
