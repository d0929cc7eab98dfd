"""
Audit Logger

DESIGN DECISION: Every mutation of the store is logged.
This provides:
1. Traceability of what was written and when
2. Visibility into reads that degraded to an empty result
3. Debugging capability for lost writes

The audit logger:
- Only logs locally (structured, one event per line)
- Never raises into the repository that called it
"""

import logging
from typing import Optional

import structlog

from moneynote.config import RuntimeSettings


_SHARED_PROCESSORS = [
    structlog.stdlib.filter_by_level,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.stdlib.PositionalArgumentsFormatter(),
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    structlog.processors.UnicodeDecoder(),
]


# Configure structlog for local logging
structlog.configure(
    processors=[*_SHARED_PROCESSORS, structlog.processors.JSONRenderer()],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(runtime: Optional[RuntimeSettings] = None) -> None:
    """
    Apply runtime logging settings.

    Sets the stdlib level that filter_by_level checks and switches
    between JSON and console rendering.
    """
    runtime = runtime or RuntimeSettings()
    logging.basicConfig(format="%(message)s", level=runtime.log_level)
    logging.getLogger("moneynote").setLevel(runtime.log_level)

    renderer = (
        structlog.processors.JSONRenderer()
        if runtime.log_json
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[*_SHARED_PROCESSORS, renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str = "moneynote", **initial_values):
    """Get a bound structlog logger."""
    return structlog.get_logger(name, **initial_values)


class AuditLogger:
    """
    Central audit logging service for repository and store events.

    One instance is shared by all repositories of an application
    context; each call names the entity kind it concerns.
    """

    def __init__(self, name: str = "moneynote.audit"):
        self._logger = get_logger(name)

    def log_entity_created(self, kind: str, entity_id: str) -> None:
        self._safe("info", "entity_created", kind=kind, entity_id=entity_id)

    def log_entity_updated(
        self,
        kind: str,
        entity_id: str,
        fields: list[str],
    ) -> None:
        self._safe(
            "info", "entity_updated", kind=kind, entity_id=entity_id, fields=fields
        )

    def log_update_target_missing(self, kind: str, entity_id: str) -> None:
        """Update of an unknown id; a no-op, logged for visibility."""
        self._safe("debug", "update_target_missing", kind=kind, entity_id=entity_id)

    def log_entity_deleted(self, kind: str, entity_id: str, removed: int) -> None:
        self._safe(
            "info", "entity_deleted", kind=kind, entity_id=entity_id, removed=removed
        )

    def log_collection_replaced(self, kind: str, count: int) -> None:
        self._safe("info", "collection_replaced", kind=kind, count=count)

    def log_settings_saved(self) -> None:
        self._safe("info", "settings_saved")

    def log_read_failed(self, key: str, error: Exception) -> None:
        """A read degraded to an empty result."""
        self._safe(
            "error",
            "storage_read_failed",
            key=key,
            error=str(error),
            error_type=type(error).__name__,
        )

    def log_corrupt_data(self, key: str, error: Exception) -> None:
        self._safe("warning", "storage_corrupt_data", key=key, error=str(error))

    def log_write_failed(self, key: str, error: Exception) -> None:
        self._safe(
            "error",
            "storage_write_failed",
            key=key,
            error=str(error),
            error_type=type(error).__name__,
        )

    def log_bootstrap(self, seeded: bool, categories: int = 0) -> None:
        if seeded:
            self._safe("info", "bootstrap_completed", categories=categories)
        else:
            self._safe("debug", "bootstrap_skipped")

    def log_store_cleared(self, keys: list[str]) -> None:
        self._safe("warning", "store_cleared", keys=keys)

    def _safe(self, level: str, event: str, **fields) -> None:
        try:
            getattr(self._logger, level)(event, **fields)
        except Exception as e:
            # Logging must not break a storage operation
            logging.getLogger(__name__).warning("audit log failed: %s", e)
