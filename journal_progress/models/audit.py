"""
Audit Models for Journal Progress

Every streak transition and badge award is logged for audit purposes.
This provides:
1. Traceability of how a streak reached its current value
2. Debugging information when a streak drifts
3. A history the repair tooling can compare against

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

import json
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """
    Types of events we audit.
    """
    # Entry intake
    ENTRY_RECORDED = "entry_recorded"

    # Streak transitions
    STREAK_UPDATED = "streak_updated"
    STREAK_RESET = "streak_reset"
    STREAK_RECALCULATED = "streak_recalculated"
    STREAK_DRIFT_DETECTED = "streak_drift_detected"

    # Milestones
    MILESTONE_EARNED = "milestone_earned"
    BADGE_CELEBRATED = "badge_celebrated"

    # Rejected input
    DATE_PARSE_FAILED = "date_parse_failed"
    CONTRACT_VIOLATION = "contract_violation"

    # Persistence and system
    SAVE_FAILED = "save_failed"
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every significant action creates one of these.
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
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - whose progress, which namespace, which entity
    user_id: Optional[str] = Field(
        default=None,
        description="User whose progress changed"
    )
    journal_type: Optional[str] = Field(
        default=None,
        description="Journal type the event concerns"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="Badge id or entry id the event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., one recorded entry)"
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

    error_code: Optional[str] = None
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "user_id": self.user_id,
            "journal_type": self.journal_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_code": self.error_code,
            "error_message": self.error_message,
        }

    def to_record(self) -> str:
        """Serialise as one JSON line for append-only storage."""
        return json.dumps(self.model_dump(mode="json"), ensure_ascii=False)

    @classmethod
    def from_record(cls, line: str) -> "AuditEvent":
        return cls.model_validate_json(line)


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.entry_recorded(user_id, "mood", "2026-02-10", cid)
        event = AuditEventBuilder.milestone_earned(user_id, badge, cid)
    """

    @staticmethod
    def entry_recorded(
        user_id: str,
        journal_type: str,
        local_date: str,
        correlation_id: UUID,
        entry_id: Optional[str] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTRY_RECORDED,
            user_id=user_id,
            journal_type=journal_type,
            entity_id=entry_id,
            correlation_id=correlation_id,
            description=f"{journal_type.capitalize()} entry recorded for {local_date}",
            details={"local_date": local_date},
        )

    @staticmethod
    def streak_updated(
        user_id: str,
        journal_type: str,
        old_streak: int,
        new_streak: int,
        last_entry_date: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        # A drop to 1 from anything above 1 is a reset, not an update
        is_reset = new_streak == 1 and old_streak > 1
        return AuditEvent(
            event_type=(
                AuditEventType.STREAK_RESET if is_reset
                else AuditEventType.STREAK_UPDATED
            ),
            user_id=user_id,
            journal_type=journal_type,
            correlation_id=correlation_id,
            description=(
                f"{journal_type.capitalize()} streak "
                f"{'reset' if is_reset else 'updated'}: {old_streak} -> {new_streak}"
            ),
            details={
                "old_streak": old_streak,
                "new_streak": new_streak,
                "last_entry_date": last_entry_date,
            },
        )

    @staticmethod
    def streak_recalculated(
        user_id: str,
        journal_type: str,
        stored_streak: int,
        recalculated_streak: int,
        date_count: int,
        correlation_id: UUID,
    ) -> AuditEvent:
        drifted = stored_streak != recalculated_streak
        return AuditEvent(
            event_type=(
                AuditEventType.STREAK_DRIFT_DETECTED if drifted
                else AuditEventType.STREAK_RECALCULATED
            ),
            severity=AuditSeverity.WARNING if drifted else AuditSeverity.INFO,
            user_id=user_id,
            journal_type=journal_type,
            correlation_id=correlation_id,
            description=(
                f"{journal_type.capitalize()} streak recalculated from "
                f"{date_count} dates: stored {stored_streak}, actual {recalculated_streak}"
            ),
            details={
                "stored_streak": stored_streak,
                "recalculated_streak": recalculated_streak,
                "date_count": date_count,
            },
        )

    @staticmethod
    def milestone_earned(
        user_id: str,
        badge_id: str,
        journal_type: str,
        threshold: int,
        earned_date: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.MILESTONE_EARNED,
            user_id=user_id,
            journal_type=journal_type,
            entity_id=badge_id,
            correlation_id=correlation_id,
            description=f"Milestone earned: {threshold}-day {journal_type} streak",
            details={
                "threshold": threshold,
                "earned_date": earned_date,
            },
        )

    @staticmethod
    def badge_celebrated(
        user_id: str,
        badge_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BADGE_CELEBRATED,
            user_id=user_id,
            entity_id=badge_id,
            correlation_id=correlation_id,
            description=f"Badge celebrated: {badge_id}",
        )

    @staticmethod
    def date_parse_failed(
        user_id: str,
        journal_type: str,
        value: str,
        error_message: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DATE_PARSE_FAILED,
            severity=AuditSeverity.WARNING,
            user_id=user_id,
            journal_type=journal_type,
            correlation_id=correlation_id,
            description="Entry date could not be parsed; streak left unchanged",
            details={"value": value},
            error_code="date_parse_error",
            error_message=error_message,
        )

    @staticmethod
    def contract_violation(
        user_id: str,
        journal_type: str,
        error_message: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CONTRACT_VIOLATION,
            severity=AuditSeverity.WARNING,
            user_id=user_id,
            journal_type=journal_type,
            correlation_id=correlation_id,
            description="Streak computation rejected its input",
            error_code="contract_violation",
            error_message=error_message,
        )

    @staticmethod
    def save_failed(
        user_id: str,
        operation: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            user_id=user_id,
            correlation_id=correlation_id,
            description=f"Failed to persist progress: {operation}",
            details={"operation": operation},
            error_message=error_message,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
