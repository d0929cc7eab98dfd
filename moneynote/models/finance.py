"""
Core Data Models for MoneyNote

These models define the schemas of every record kept in the document store.
They are designed to:
1. Serialize to the same JSON shapes the app has always persisted
   (camelCase keys, ISO-8601 dates, amounts as JSON numbers)
2. Separate what a caller supplies (drafts) from what the store assigns
   (id, createdAt, updatedAt)
3. Stay permissive where callers own validation (amounts)

DESIGN DECISION: Transaction.category holds a category NAME, not an id.
Categories and transactions are joined by string equality, so renaming a
category orphans its historical transactions. This is inherited behavior.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Optional, Union

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel


def as_local_naive(value: datetime) -> datetime:
    """Convert aware datetimes (e.g. persisted '...Z' stamps) to naive local time."""
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


LocalDateTime = Annotated[datetime, AfterValidator(as_local_naive)]


def money_to_number(value: Decimal) -> Union[int, float]:
    """Whole amounts stay integers on disk (50, not 50.0)."""
    if value.is_finite() and value == value.to_integral_value():
        return int(value)
    return float(value)


# Decimal in Python, a plain JSON number in the store
Money = Annotated[
    Decimal,
    PlainSerializer(money_to_number, return_type=Union[int, float], when_used="json"),
]


class RecordModel(BaseModel):
    """Base for persisted records: camelCase on disk, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


# =============================================================================
# ENUMS
# =============================================================================

class TransactionKind(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


# Categories are classified the same way as the transactions they group
CategoryKind = TransactionKind


class BudgetPeriod(str, Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class ThemePreference(str, Enum):
    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


# =============================================================================
# TRANSACTIONS
# =============================================================================

class TransactionDraft(RecordModel):
    """
    A transaction as supplied by a caller, before the store assigns
    identity and timestamps.

    amount is not range-checked: callers enforce amount > 0.
    """

    kind: TransactionKind = Field(
        ...,
        alias="type",
        description="Income or expense"
    )
    amount: Money = Field(
        ...,
        description="Amount in the user's currency"
    )
    category: str = Field(
        ...,
        description="Name of the category (joined to Category.name)"
    )
    description: str = ""
    notes: str = ""
    photos: list[str] = Field(
        default_factory=list,
        description="References to attached receipt photos"
    )
    tags: list[str] = Field(default_factory=list)
    date: LocalDateTime = Field(
        ...,
        description="When the transaction occurred"
    )


class Transaction(TransactionDraft):
    """A stored transaction."""

    id: str
    created_at: LocalDateTime
    updated_at: LocalDateTime


# =============================================================================
# CATEGORIES
# =============================================================================

class CategoryDraft(RecordModel):
    """
    A category as supplied by a caller.

    Names are not unique; two categories may share a name.
    """

    name: str
    kind: CategoryKind = Field(..., alias="type")
    color: str = Field(
        ...,
        description="Display color, e.g. '#dc2626'"
    )
    icon: str = Field(
        ...,
        description="Icon identifier"
    )
    budget_limit: Money = Field(
        default=Decimal("0"),
        ge=0,
        description="Monthly budget limit, 0 meaning no budget"
    )


class Category(CategoryDraft):
    """A stored category."""

    id: str


# =============================================================================
# NOTES
# =============================================================================

class NoteDraft(RecordModel):
    title: str
    content: str = ""
    tags: list[str] = Field(default_factory=list)
    attachments: list[str] = Field(default_factory=list)
    transaction_id: Optional[str] = Field(
        default=None,
        description="Weak reference to a transaction; may point to nothing"
    )


class Note(NoteDraft):
    """A stored note."""

    id: str
    created_at: LocalDateTime
    updated_at: LocalDateTime


# =============================================================================
# BUDGETS
# =============================================================================

class BudgetDraft(RecordModel):
    category_id: str = Field(
        ...,
        description="Weak reference to a category id"
    )
    amount: Money
    period: BudgetPeriod = BudgetPeriod.MONTHLY
    start_date: LocalDateTime
    notifications: bool = True


class Budget(BudgetDraft):
    """A stored budget."""

    id: str


# =============================================================================
# SETTINGS
# =============================================================================

class AppSettings(RecordModel):
    """
    The singleton user settings record.

    No id: exactly one instance exists per store.
    """

    currency: str = "USD"
    date_format: str = "MM/DD/YYYY"
    theme: ThemePreference = ThemePreference.SYSTEM
    notifications_enabled: bool = True
    budget_alerts: bool = True
    daily_summary: bool = True


# =============================================================================
# DEFAULTS (seeded on first run)
# =============================================================================

DEFAULT_INCOME_CATEGORIES: tuple[CategoryDraft, ...] = (
    CategoryDraft(name="Salary", kind="income", color="#16a34a", icon="briefcase"),
    CategoryDraft(name="Freelance", kind="income", color="#059669", icon="laptop"),
    CategoryDraft(name="Investment", kind="income", color="#0d9488", icon="trending-up"),
    CategoryDraft(name="Gift", kind="income", color="#0891b2", icon="gift"),
    CategoryDraft(name="Other", kind="income", color="#0284c7", icon="plus-circle"),
)

DEFAULT_EXPENSE_CATEGORIES: tuple[CategoryDraft, ...] = (
    CategoryDraft(name="Food & Dining", kind="expense", color="#dc2626", icon="utensils", budget_limit=500),
    CategoryDraft(name="Transportation", kind="expense", color="#ea580c", icon="car", budget_limit=200),
    CategoryDraft(name="Shopping", kind="expense", color="#d97706", icon="shopping-bag", budget_limit=300),
    CategoryDraft(name="Entertainment", kind="expense", color="#ca8a04", icon="film", budget_limit=150),
    CategoryDraft(name="Bills & Utilities", kind="expense", color="#65a30d", icon="file-text", budget_limit=400),
    CategoryDraft(name="Healthcare", kind="expense", color="#16a34a", icon="heart", budget_limit=200),
    CategoryDraft(name="Education", kind="expense", color="#0891b2", icon="book", budget_limit=100),
    CategoryDraft(name="Travel", kind="expense", color="#0284c7", icon="map-pin", budget_limit=300),
    CategoryDraft(name="Other", kind="expense", color="#7c3aed", icon="more-horizontal", budget_limit=100),
)

DEFAULT_APP_SETTINGS = AppSettings()
