"""
Audit Logger

DESIGN DECISION: Every streak transition and badge award is logged.
This provides:
1. Traceability of how a streak reached its value
2. Evidence for the repair tooling when drift is suspected
3. Debugging capability

The audit logger:
- Is async so it sits naturally inside the tracker's flows
- Gracefully handles failures (a lost audit write never blocks progress)
- Supports correlation IDs to trace related events
"""

from typing import Optional
from uuid import UUID, uuid4

import structlog

from journal_progress.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from journal_progress.models.progress import EarnedBadge, JournalType
from journal_progress.services.storage import AuditStorageInterface


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. Audit storage (for persistence), when configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger(__name__)

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return await self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    async def log_entry_recorded(
        self,
        user_id: str,
        journal_type: JournalType,
        local_date: str,
        correlation_id: UUID,
        entry_id: Optional[str] = None,
    ) -> None:
        event = AuditEventBuilder.entry_recorded(
            user_id=user_id,
            journal_type=journal_type.value,
            local_date=local_date,
            correlation_id=correlation_id,
            entry_id=entry_id,
        )
        await self.log(event)

    async def log_streak_updated(
        self,
        user_id: str,
        journal_type: JournalType,
        old_streak: int,
        new_streak: int,
        last_entry_date: str,
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.streak_updated(
            user_id=user_id,
            journal_type=journal_type.value,
            old_streak=old_streak,
            new_streak=new_streak,
            last_entry_date=last_entry_date,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_streak_recalculated(
        self,
        user_id: str,
        journal_type: JournalType,
        stored_streak: int,
        recalculated_streak: int,
        date_count: int,
        correlation_id: UUID,
    ) -> None:
        """Log a repair run; drift is logged at warning level."""
        event = AuditEventBuilder.streak_recalculated(
            user_id=user_id,
            journal_type=journal_type.value,
            stored_streak=stored_streak,
            recalculated_streak=recalculated_streak,
            date_count=date_count,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_milestones_earned(
        self,
        user_id: str,
        badges: list[EarnedBadge],
        correlation_id: UUID,
    ) -> None:
        """Log one event per newly earned badge."""
        for badge in badges:
            event = AuditEventBuilder.milestone_earned(
                user_id=user_id,
                badge_id=badge.id,
                journal_type=badge.journal_type.value,
                threshold=badge.threshold.value,
                earned_date=badge.earned_date,
                correlation_id=correlation_id,
            )
            await self.log(event)

    async def log_badge_celebrated(
        self,
        user_id: str,
        badge_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.badge_celebrated(
            user_id=user_id,
            badge_id=badge_id,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_date_parse_failed(
        self,
        user_id: str,
        journal_type: JournalType,
        value: str,
        error_message: str,
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.date_parse_failed(
            user_id=user_id,
            journal_type=journal_type.value,
            value=value,
            error_message=error_message,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_contract_violation(
        self,
        user_id: str,
        journal_type: JournalType,
        error_message: str,
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.contract_violation(
            user_id=user_id,
            journal_type=journal_type.value,
            error_message=error_message,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_save_failed(
        self,
        user_id: str,
        operation: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.save_failed(
            user_id=user_id,
            operation=operation,
            error_message=error_message,
            correlation_id=correlation_id,
        )
        await self.log(event)


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new host action (e.g., recording an entry).
    Pass it through all subsequent operations.
    """
    return uuid4()
