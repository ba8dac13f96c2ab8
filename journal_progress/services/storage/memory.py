"""
In-Memory Storage Implementation

Each instance owns its own dictionaries; nothing is shared at module
level. Used by the test suite and as the default backend when no data
path is configured.
"""

from typing import Optional
from uuid import UUID

from journal_progress.models.audit import AuditEvent
from journal_progress.models.progress import EarnedBadge, JournalType, StreakState
from journal_progress.services.storage.interface import (
    AuditStorageInterface,
    DuplicateError,
    NotFoundError,
    ProgressStorageInterface,
    check_badge_update,
)


class InMemoryProgressStorage(ProgressStorageInterface):
    """Streaks and badges held in per-instance dictionaries."""

    def __init__(self):
        self._streaks: dict[str, dict[JournalType, StreakState]] = {}
        self._badges: dict[str, dict[str, EarnedBadge]] = {}

    async def get_streak_state(
        self,
        user_id: str,
        journal_type: JournalType,
    ) -> Optional[StreakState]:
        state = self._streaks.get(user_id, {}).get(JournalType(journal_type))
        return state.model_copy() if state is not None else None

    async def save_streak_state(self, user_id: str, state: StreakState) -> bool:
        self._streaks.setdefault(user_id, {})[state.journal_type] = state.model_copy()
        return True

    async def list_streak_states(self, user_id: str) -> list[StreakState]:
        stored = self._streaks.get(user_id, {})
        return [stored[t].model_copy() for t in JournalType if t in stored]

    async def get_badges(self, user_id: str) -> list[EarnedBadge]:
        return list(self._badges.get(user_id, {}).values())

    async def append_badges(self, user_id: str, badges: list[EarnedBadge]) -> bool:
        stored = self._badges.setdefault(user_id, {})
        incoming_ids = [badge.id for badge in badges]
        duplicates = [
            badge_id for badge_id in incoming_ids
            if badge_id in stored or incoming_ids.count(badge_id) > 1
        ]
        if duplicates:
            raise DuplicateError(f"Badges already earned: {sorted(set(duplicates))}")

        for badge in badges:
            stored[badge.id] = badge
        return True

    async def update_badge(self, user_id: str, badge: EarnedBadge) -> bool:
        stored = self._badges.get(user_id, {})
        if badge.id not in stored:
            raise NotFoundError(f"Badge not found: {badge.id}")
        check_badge_update(stored[badge.id], badge)
        stored[badge.id] = badge
        return True


class InMemoryAuditStorage(AuditStorageInterface):
    """Audit events kept in insertion order."""

    def __init__(self):
        self._events: list[AuditEvent] = []

    async def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        return [e for e in self._events if e.correlation_id == correlation_id]

    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        return list(reversed(self._events))[:limit]
