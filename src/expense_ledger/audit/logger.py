"""
Audit Logger

DESIGN DECISION: Every change to a ledger is logged.
This provides:
1. Complete traceability within a session
2. Debugging capability
3. A history the UI can show the user

The audit logger:
- Is synchronous; ledger operations never wait on anything
- Keeps a bounded in-memory history, nothing is persisted
- Tags every event with the session's correlation ID
"""

import logging
import sys
from collections import deque
from typing import Optional
from uuid import UUID, uuid4

import structlog

from expense_ledger.config import get_settings
from expense_ledger.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


def configure_logging(
    level: Optional[str] = None,
    json_logs: Optional[bool] = None,
) -> None:
    """
    Configure stdlib logging and structlog.

    Args:
        level: Log level name. Defaults to LEDGER_LOG_LEVEL.
        json_logs: Render JSON lines. Defaults to LEDGER_LOG_JSON.
    """
    settings = get_settings()
    level = (level or settings.log_level).upper()
    if json_logs is None:
        json_logs = settings.log_json

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level)
    logging.getLogger("expense_ledger").setLevel(level)

    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class AuditLogger:
    """
    Session-scoped audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An in-memory history (for the current session only)
    """

    def __init__(
        self,
        correlation_id: Optional[UUID] = None,
        history_size: Optional[int] = None,
    ):
        """
        Initialize audit logger.

        Args:
            correlation_id: ID shared by every event of this session.
                            A new one is created if None.
            history_size: How many events to keep in memory.
                          Defaults to LEDGER_AUDIT_HISTORY_SIZE.
        """
        if history_size is None:
            history_size = get_settings().audit_history_size
        self._correlation_id = correlation_id or create_correlation_id()
        self._history: deque[AuditEvent] = deque(maxlen=history_size)
        self._logger = structlog.get_logger("expense_ledger.audit")

    @property
    def correlation_id(self) -> UUID:
        return self._correlation_id

    @property
    def events(self) -> list[AuditEvent]:
        """Events of this session, oldest first."""
        return list(self._history)

    def log(self, event: AuditEvent) -> None:
        """
        Log an audit event and append it to the history.
        """
        log_dict = event.to_log_dict()

        if event.severity == AuditSeverity.ERROR:
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        self._history.append(event)

    def log_expense_added(
        self,
        expense_id: int,
        name: str,
        amount: str,
        category: str,
    ) -> None:
        """Log an accepted expense."""
        event = AuditEventBuilder.expense_added(
            expense_id=expense_id,
            name=name,
            amount=amount,
            category=category,
            correlation_id=self._correlation_id,
        )
        self.log(event)

    def log_expense_rejected(self, invalid_fields: list[str]) -> None:
        """Log a draft that failed validation."""
        event = AuditEventBuilder.expense_rejected(
            invalid_fields=invalid_fields,
            correlation_id=self._correlation_id,
        )
        self.log(event)

    def log_expense_removed(
        self,
        expense_id: int,
        name: str,
        amount: str,
    ) -> None:
        """Log a deleted expense."""
        event = AuditEventBuilder.expense_removed(
            expense_id=expense_id,
            name=name,
            amount=amount,
            correlation_id=self._correlation_id,
        )
        self.log(event)

    def log_expense_remove_missed(self, expense_id: int) -> None:
        """Log a delete for an id that is not in the ledger."""
        event = AuditEventBuilder.expense_remove_missed(
            expense_id=expense_id,
            correlation_id=self._correlation_id,
        )
        self.log(event)


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this once per session (e.g., when the form is mounted).
    """
    return uuid4()
