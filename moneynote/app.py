"""
Application Context for MoneyNote

This module wires the core together: one document store, one identifier
generator and one audit logger shared by the five repositories, the
analytics engine and the first-run bootstrap.

DESIGN DECISION: There is no module-level state. Screens and background
collaborators receive a MoneyNoteApp handle and reach settings,
repositories and analytics through it. Bootstrap is an explicit startup
step, not an import side effect.
"""

from datetime import datetime
from typing import Optional

from moneynote.analytics import AnalyticsEngine
from moneynote.audit import AuditLogger, configure_logging
from moneynote.config import Settings, get_settings
from moneynote.models.analytics import BudgetStatus, FinancialReport, Period
from moneynote.repositories import (
    BootstrapInitializer,
    BudgetRepository,
    CategoryRepository,
    NoteRepository,
    SettingsRepository,
    TransactionRepository,
)
from moneynote.services.ids import IdentifierGenerator
from moneynote.services.storage import (
    DocumentStore,
    InMemoryDocumentStore,
    JsonFileDocumentStore,
    StorageKeys,
)


class MoneyNoteApp:
    """
    Process-scoped handle on the persistence and analytics core.

    Created once at startup; lives for the whole process.
    """

    def __init__(
        self,
        store: DocumentStore,
        keys: StorageKeys,
        analytics: AnalyticsEngine,
        audit: AuditLogger,
        ids: Optional[IdentifierGenerator] = None,
    ):
        self.store = store
        self.keys = keys
        self.analytics = analytics
        self._audit = audit
        ids = ids or IdentifierGenerator()

        self.transactions = TransactionRepository(store, keys.transactions, ids, audit)
        self.categories = CategoryRepository(store, keys.categories, ids, audit)
        self.notes = NoteRepository(store, keys.notes, ids, audit)
        self.budgets = BudgetRepository(store, keys.budgets, ids, audit)
        self.settings = SettingsRepository(store, keys.settings, audit)

        self.bootstrap = BootstrapInitializer(
            store=store,
            marker_key=keys.initialized,
            categories=self.categories,
            settings=self.settings,
            ids=ids,
            audit=audit,
        )

    async def startup(self) -> bool:
        """Run first-run seeding. Returns True if defaults were written."""
        return await self.bootstrap.initialize()

    async def build_report(
        self,
        period: Period = Period.MONTH,
        now: Optional[datetime] = None,
    ) -> FinancialReport:
        """Load transactions and categories and compute the dashboard report."""
        transactions = await self.transactions.list()
        categories = await self.categories.list()
        return self.analytics.build_report(
            transactions, categories, period, now or datetime.now()
        )

    async def pending_budget_alerts(
        self,
        now: Optional[datetime] = None,
    ) -> list[BudgetStatus]:
        """
        Budgets at warning or exceeded level, for the notification side.

        Empty when notifications or budget alerts are switched off in the
        stored settings (or no settings exist yet). Nothing is scheduled here.
        """
        settings = await self.settings.get()
        if settings is None or not (settings.notifications_enabled and settings.budget_alerts):
            return []

        transactions = await self.transactions.list()
        categories = await self.categories.list()
        return self.analytics.budget_alerts(transactions, categories, now)

    async def clear_all(self) -> None:
        """
        Remove every record and the bootstrap marker.

        The next startup() seeds the defaults again.

        Raises:
            StorageError: If the keys cannot be removed
        """
        keys = self.keys.all()
        await self.store.remove_many(keys)
        self._audit.log_store_cleared(keys)


def create_store(settings: Settings, audit: AuditLogger) -> DocumentStore:
    storage = settings.storage
    if storage.backend == "memory":
        return InMemoryDocumentStore(audit=audit)
    return JsonFileDocumentStore(storage.data_dir, audit=audit)


def create_app_components(
    settings: Optional[Settings] = None,
    store: Optional[DocumentStore] = None,
) -> MoneyNoteApp:
    """
    Factory function to create the application context.

    Args:
        settings: Configuration; loaded from the environment if omitted
        store: Document store to use instead of the configured backend
               (tests pass an InMemoryDocumentStore)

    Returns:
        A MoneyNoteApp; call startup() before first use
    """
    settings = settings or get_settings()
    configure_logging(settings.runtime)

    audit = AuditLogger()
    store = store or create_store(settings, audit)

    return MoneyNoteApp(
        store=store,
        keys=StorageKeys(settings.storage.key_prefix),
        analytics=AnalyticsEngine(settings.analytics),
        audit=audit,
    )
