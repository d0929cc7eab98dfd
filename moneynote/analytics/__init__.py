"""Analytics package."""

from moneynote.analytics.engine import (
    MONTH_LABELS,
    TOP_CATEGORY_COUNT,
    TREND_MONTHS,
    AnalyticsEngine,
)

__all__ = ["AnalyticsEngine", "MONTH_LABELS", "TOP_CATEGORY_COUNT", "TREND_MONTHS"]
