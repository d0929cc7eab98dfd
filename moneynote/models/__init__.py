"""
Data Models Package

This package contains all Pydantic models used by MoneyNote.
Every record stored or derived by the core conforms to these schemas.
"""

from moneynote.models.finance import (
    DEFAULT_APP_SETTINGS,
    DEFAULT_EXPENSE_CATEGORIES,
    DEFAULT_INCOME_CATEGORIES,
    AppSettings,
    Budget,
    BudgetDraft,
    BudgetPeriod,
    Category,
    CategoryDraft,
    CategoryKind,
    Note,
    NoteDraft,
    ThemePreference,
    Transaction,
    TransactionDraft,
    TransactionKind,
)
from moneynote.models.analytics import (
    BudgetLevel,
    BudgetStatus,
    CategoryBreakdownItem,
    DateWindow,
    FinancialReport,
    Period,
    PeriodTotals,
    TrendPoint,
)

__all__ = [
    # Record models
    "AppSettings",
    "Budget",
    "BudgetDraft",
    "BudgetPeriod",
    "Category",
    "CategoryDraft",
    "CategoryKind",
    "Note",
    "NoteDraft",
    "ThemePreference",
    "Transaction",
    "TransactionDraft",
    "TransactionKind",
    # Defaults
    "DEFAULT_APP_SETTINGS",
    "DEFAULT_EXPENSE_CATEGORIES",
    "DEFAULT_INCOME_CATEGORIES",
    # Analytics models
    "BudgetLevel",
    "BudgetStatus",
    "CategoryBreakdownItem",
    "DateWindow",
    "FinancialReport",
    "Period",
    "PeriodTotals",
    "TrendPoint",
]
