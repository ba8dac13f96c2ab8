"""
Abstract Storage Interface

DESIGN DECISION: The engine never stores anything. Streak state and
badges are owned by the host, which persists them through this
interface. This allows us to:
1. Use in-memory storage for tests
2. Use a JSON document for a single-device install
3. Swap in a document database later without touching the engine

The interface is intentionally small: just the reads and writes the
record-entry transaction needs.
"""

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from journal_progress.models.audit import AuditEvent
from journal_progress.models.progress import EarnedBadge, JournalType, StreakState


class ProgressStorageInterface(ABC):
    """
    Abstract interface for per-user streaks and badges.

    Badges are append-only; only their `celebrated` flag may be updated.
    """

    @abstractmethod
    async def get_streak_state(
        self,
        user_id: str,
        journal_type: JournalType,
    ) -> Optional[StreakState]:
        """
        Load the streak for one journal type.

        Returns:
            The stored state, or None if the user has no entries of that type
        """
        pass

    @abstractmethod
    async def save_streak_state(self, user_id: str, state: StreakState) -> bool:
        """
        Create or replace the streak for state.journal_type.

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def list_streak_states(self, user_id: str) -> list[StreakState]:
        """All stored streaks for a user, in JournalType order."""
        pass

    @abstractmethod
    async def get_badges(self, user_id: str) -> list[EarnedBadge]:
        """All badges the user holds, across journal types."""
        pass

    @abstractmethod
    async def append_badges(self, user_id: str, badges: list[EarnedBadge]) -> bool:
        """
        Append newly earned badges.

        Raises:
            DuplicateError: If any badge id is already stored (nothing is written)
        """
        pass

    @abstractmethod
    async def update_badge(self, user_id: str, badge: EarnedBadge) -> bool:
        """
        Replace a stored badge with an updated copy.

        Raises:
            NotFoundError: If no badge with that id exists
            StorageError: If anything other than `celebrated` changed
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """
        Get all events for a correlation ID (e.g., one recorded entry).

        Returns:
            List of related events in chronological order
        """
        pass

    @abstractmethod
    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Returns:
            List of recent events (newest first)
        """
        pass


def check_badge_update(stored: EarnedBadge, updated: EarnedBadge) -> None:
    """Raise StorageError if an update touches more than `celebrated`."""
    frozen_fields = ("journal_type", "threshold", "earned_date")
    changed = [
        name for name in frozen_fields
        if getattr(stored, name) != getattr(updated, name)
    ]
    if changed:
        raise StorageError(
            f"Badge {stored.id} is immutable apart from 'celebrated' "
            f"(attempted to change: {', '.join(changed)})"
        )


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass


class StorageUnavailableError(StorageError):
    """Could not reach the storage backend."""
    pass
