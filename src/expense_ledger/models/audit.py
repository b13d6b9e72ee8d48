"""
Audit Models for the Expense Ledger

Every change to a ledger (and every rejected attempt) is recorded as an
AuditEvent. This provides:
1. A readable history of the session
2. Debugging information when a form behaves unexpectedly
3. Structured log lines with a correlation ID per session

DESIGN DECISION: Audit events are append-only and live only as long as
the session. They are logged, never persisted.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """Types of events we audit."""
    EXPENSE_ADDED = "expense_added"
    EXPENSE_REJECTED = "expense_rejected"
    EXPENSE_REMOVED = "expense_removed"
    EXPENSE_REMOVE_MISSED = "expense_remove_missed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of the audit trail.
    Every ledger mutation creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # Context - which record is this about?
    entity_id: Optional[int] = Field(
        default=None,
        description="ID of the expense record this event relates to"
    )
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="Session ID shared by all events of one ledger"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.expense_added(
            expense_id=1, name="Lunch", amount="20", category="Food",
            correlation_id=correlation_id,
        )
        event = AuditEventBuilder.expense_remove_missed(7, correlation_id)
    """

    @staticmethod
    def expense_added(
        expense_id: int,
        name: str,
        amount: str,
        category: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_ADDED,
            entity_id=expense_id,
            correlation_id=correlation_id,
            description=f"Expense added: {name} - {amount}",
            details={
                "name": name,
                "amount": amount,
                "category": category,
            },
        )

    @staticmethod
    def expense_rejected(
        invalid_fields: list[str],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_REJECTED,
            severity=AuditSeverity.WARNING,
            correlation_id=correlation_id,
            description=f"Expense rejected with {len(invalid_fields)} invalid fields",
            details={
                "invalid_fields": invalid_fields,
            },
        )

    @staticmethod
    def expense_removed(
        expense_id: int,
        name: str,
        amount: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_REMOVED,
            entity_id=expense_id,
            correlation_id=correlation_id,
            description=f"Expense removed: {name} - {amount}",
            details={
                "name": name,
                "amount": amount,
            },
        )

    @staticmethod
    def expense_remove_missed(
        expense_id: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_REMOVE_MISSED,
            severity=AuditSeverity.DEBUG,
            entity_id=expense_id,
            correlation_id=correlation_id,
            description=f"No expense with id {expense_id} to remove",
        )

