"""
Progress Tracker - host-side orchestration around the engine

This module ties the pure engine to storage and auditing and defines the
end-to-end flows for:
1. Recording an entry (read streak → compute → detect milestones → save badges → save streak)
2. Repairing a streak from full entry history (import / drift correction)
3. Celebrating badges and projecting the achievements screen

DESIGN DECISION: The tracker enforces the boundaries the engine relies on:
- Each user's read → compute → write cycle runs under a per-user lock,
  so milestone detection always sees genuine forward progress
- All streak updates for an entry are computed before anything is
  written; a rejected date leaves stored progress untouched
- A computation failure never escapes record_entry; the journal entry
  itself was already saved by the caller and must not be undone
- Badges are appended before the streak that earned them is saved, so
  a failed write leaves the old streak in place and a retry re-detects
  the crossing
"""

import asyncio
import weakref
from datetime import date, datetime, tzinfo
from typing import Callable, Iterable, Optional, Union
from uuid import UUID

import structlog

from journal_progress.audit import AuditLogger, create_correlation_id
from journal_progress.config import get_settings
from journal_progress.engine import (
    DateParseError,
    StreakContractError,
    calculate_updated_streak,
    check_for_new_milestones,
    get_milestones_for_type,
    get_uncelebrated_badges,
    mark_celebrated,
    normalize_to_date_only,
    recalculate_streak_from_dates,
    summarize_badges,
    to_local_date_string,
)
from journal_progress.models.progress import (
    AchievementsOverview,
    EarnedBadge,
    EntryProgressResult,
    EntrySubmission,
    JournalType,
    StreakState,
    StreakUpdate,
)
from journal_progress.services.storage import (
    AuditStorageInterface,
    InMemoryAuditStorage,
    InMemoryProgressStorage,
    JsonFileProgressStorage,
    JsonLinesAuditStorage,
    NotFoundError,
    ProgressStorageInterface,
    StorageError,
)


DATE_PARSE_NOTICE = (
    "We couldn't read the date of this entry, so your streak wasn't updated. "
    "Your entry is saved."
)
CONTRACT_NOTICE = (
    "Your streak couldn't be updated for this entry. Your entry is saved."
)
NO_ENTRY_TODAY_NOTICE = (
    "No entry for today in the supplied history; stored streak kept."
)


class ProgressTracker:
    """
    Orchestrates streak and milestone bookkeeping for journal entries.

    Flow for one entry:
    1. Lock the user
    2. Load prior streaks for the entry's type and for 'overall'
    3. Compute every transition (pure; may reject the date)
    4. Per type: detect milestones, append new badges, then save the streak
    5. Audit each step under one correlation id
    """

    def __init__(
        self,
        storage: Optional[ProgressStorageInterface] = None,
        audit_logger: Optional[AuditLogger] = None,
        tz: Optional[tzinfo] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Args:
            storage: Where streaks and badges live (in-memory if omitted)
            audit_logger: Audit sink; auditing is skipped when None
            tz: Zone that defines the user's local day (system zone if None)
            clock: Returns "now"; lets callers pin today's date
        """
        self._storage = storage or InMemoryProgressStorage()
        self._audit_logger = audit_logger
        self._tz = tz
        self._clock = clock
        # A lock lives only while some flow holds or awaits it
        self._user_locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = (
            weakref.WeakValueDictionary()
        )
        self._logger = structlog.get_logger(__name__)

    @property
    def storage(self) -> ProgressStorageInterface:
        return self._storage

    def _lock_for(self, user_id: str) -> asyncio.Lock:
        lock = self._user_locks.get(user_id)
        if lock is None:
            lock = asyncio.Lock()
            self._user_locks[user_id] = lock
        return lock

    def _today(self) -> str:
        now = self._clock() if self._clock else None
        return to_local_date_string(now, self._tz)

    @staticmethod
    def _affected_types(journal_type: JournalType) -> list[JournalType]:
        if journal_type == JournalType.OVERALL:
            return [JournalType.OVERALL]
        return [journal_type, JournalType.OVERALL]

    async def _load_state(self, user_id: str, journal_type: JournalType) -> StreakState:
        stored = await self._storage.get_streak_state(user_id, journal_type)
        return stored or StreakState(journal_type=journal_type)

    async def _save_state(
        self,
        user_id: str,
        state: StreakState,
        correlation_id: UUID,
    ) -> None:
        try:
            await self._storage.save_streak_state(user_id, state)
        except StorageError as e:
            if self._audit_logger:
                await self._audit_logger.log_save_failed(
                    user_id=user_id,
                    operation=f"save_streak:{state.journal_type.value}",
                    error_message=str(e),
                    correlation_id=correlation_id,
                )
            raise

    async def _award(
        self,
        user_id: str,
        journal_type: JournalType,
        old_streak: int,
        new_streak: int,
        existing_badges: list[EarnedBadge],
        today: str,
        correlation_id: UUID,
    ) -> list[EarnedBadge]:
        """Detect and append new badges. Auditing is left to the caller."""
        new_badges = check_for_new_milestones(
            journal_type,
            old_streak,
            new_streak,
            existing_badges,
            today,
            tz=self._tz,
        )
        if not new_badges:
            return []

        try:
            await self._storage.append_badges(user_id, new_badges)
        except StorageError as e:
            if self._audit_logger:
                await self._audit_logger.log_save_failed(
                    user_id=user_id,
                    operation=f"append_badges:{journal_type.value}",
                    error_message=str(e),
                    correlation_id=correlation_id,
                )
            raise

        return new_badges

    async def record_entry(
        self,
        submission: EntrySubmission,
        correlation_id: Optional[UUID] = None,
    ) -> EntryProgressResult:
        """
        Apply a saved journal entry to the user's streaks and badges.

        Never raises for bad dates or rejected streak values; those come
        back as `result.notice`. Storage errors propagate.
        """
        correlation_id = correlation_id or create_correlation_id()
        user_id = submission.user_id
        journal_type = submission.journal_type

        result = EntryProgressResult(
            correlation_id=correlation_id,
            user_id=user_id,
            journal_type=journal_type,
        )

        async with self._lock_for(user_id):
            if self._audit_logger:
                await self._audit_logger.log_entry_recorded(
                    user_id=user_id,
                    journal_type=journal_type,
                    local_date=submission.local_date,
                    correlation_id=correlation_id,
                    entry_id=submission.entry_id,
                )

            priors = {
                t: await self._load_state(user_id, t)
                for t in self._affected_types(journal_type)
            }
            result.previous_streak = priors[journal_type].current_streak

            # Compute everything before writing anything
            try:
                updates: dict[JournalType, StreakUpdate] = {
                    t: calculate_updated_streak(
                        prior.current_streak,
                        prior.last_entry_date,
                        submission.local_date,
                        tz=self._tz,
                    )
                    for t, prior in priors.items()
                }
            except DateParseError as e:
                self._logger.warning(
                    "entry_date_rejected",
                    user_id=user_id,
                    journal_type=journal_type.value,
                    value=submission.local_date,
                )
                if self._audit_logger:
                    await self._audit_logger.log_date_parse_failed(
                        user_id=user_id,
                        journal_type=journal_type,
                        value=submission.local_date,
                        error_message=str(e),
                        correlation_id=correlation_id,
                    )
                result.notice = DATE_PARSE_NOTICE
                return result
            except StreakContractError as e:
                self._logger.warning(
                    "streak_contract_violation",
                    user_id=user_id,
                    journal_type=journal_type.value,
                    error=str(e),
                )
                if self._audit_logger:
                    await self._audit_logger.log_contract_violation(
                        user_id=user_id,
                        journal_type=journal_type,
                        error_message=str(e),
                        correlation_id=correlation_id,
                    )
                result.notice = CONTRACT_NOTICE
                return result

            today = self._today()
            badges = await self._storage.get_badges(user_id)

            for t, update in updates.items():
                prior = priors[t]
                new_state = StreakState(
                    journal_type=t,
                    current_streak=update.new_streak,
                    last_entry_date=update.last_entry_date,
                )

                # Badges before the streak: a retry after a failed append
                # must still see the threshold crossing
                earned = await self._award(
                    user_id,
                    t,
                    prior.current_streak,
                    update.new_streak,
                    badges,
                    today,
                    correlation_id,
                )
                badges.extend(earned)
                await self._save_state(user_id, new_state, correlation_id)

                if self._audit_logger:
                    await self._audit_logger.log_streak_updated(
                        user_id=user_id,
                        journal_type=t,
                        old_streak=prior.current_streak,
                        new_streak=update.new_streak,
                        last_entry_date=update.last_entry_date,
                        correlation_id=correlation_id,
                    )
                    await self._audit_logger.log_milestones_earned(
                        user_id=user_id,
                        badges=earned,
                        correlation_id=correlation_id,
                    )
                result.new_badges.extend(earned)

                if t == journal_type:
                    result.streak = new_state
                if t == JournalType.OVERALL:
                    result.overall = new_state

        return result

    async def repair_streak(
        self,
        user_id: str,
        journal_type: JournalType,
        entry_dates: Iterable[Union[str, date, datetime]],
        today: Optional[Union[str, date]] = None,
        correlation_id: Optional[UUID] = None,
    ) -> EntryProgressResult:
        """
        Rebuild one streak from the full history of entry dates.

        Dates may be unordered and repeated; they are normalised, deduped
        and sorted here. When the history has no entry for today the
        recalculation cannot say anything about a running streak, so the
        stored state is kept. A higher repaired streak is checked for
        milestones, which is how an imported backlog earns its badges.

        Raises:
            DateParseError: If any supplied date is unrecognisable
        """
        correlation_id = correlation_id or create_correlation_id()
        journal_type = JournalType(journal_type)

        async with self._lock_for(user_id):
            normalized = sorted(
                {normalize_to_date_only(d, self._tz) for d in entry_dates},
                reverse=True,
            )
            today_str = (
                normalize_to_date_only(today, self._tz)
                if today is not None
                else self._today()
            )

            stored = await self._load_state(user_id, journal_type)
            recalculated = recalculate_streak_from_dates(
                normalized, today=today_str, tz=self._tz
            )

            if self._audit_logger:
                await self._audit_logger.log_streak_recalculated(
                    user_id=user_id,
                    journal_type=journal_type,
                    stored_streak=stored.current_streak,
                    recalculated_streak=recalculated,
                    date_count=len(normalized),
                    correlation_id=correlation_id,
                )

            result = EntryProgressResult(
                correlation_id=correlation_id,
                user_id=user_id,
                journal_type=journal_type,
                previous_streak=stored.current_streak,
                streak=stored,
            )

            if recalculated == 0:
                if normalized:
                    result.notice = NO_ENTRY_TODAY_NOTICE
                return result

            repaired = StreakState(
                journal_type=journal_type,
                current_streak=recalculated,
                last_entry_date=normalized[0],
            )

            badges = await self._storage.get_badges(user_id)
            result.new_badges = await self._award(
                user_id,
                journal_type,
                stored.current_streak,
                recalculated,
                badges,
                today_str,
                correlation_id,
            )

            if repaired != stored:
                await self._save_state(user_id, repaired, correlation_id)
            result.streak = repaired

            if self._audit_logger:
                await self._audit_logger.log_milestones_earned(
                    user_id=user_id,
                    badges=result.new_badges,
                    correlation_id=correlation_id,
                )

        return result

    async def celebrate_badge(
        self,
        user_id: str,
        badge_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> EarnedBadge:
        """
        Flip a badge's `celebrated` flag after the UI has shown it.

        Raises:
            NotFoundError: If the user holds no badge with that id
        """
        async with self._lock_for(user_id):
            badges = await self._storage.get_badges(user_id)
            badge = next((b for b in badges if b.id == badge_id), None)
            if badge is None:
                raise NotFoundError(f"Badge not found: {badge_id}")

            if badge.celebrated:
                return badge

            updated = mark_celebrated(badge)
            await self._storage.update_badge(user_id, updated)

            if self._audit_logger:
                await self._audit_logger.log_badge_celebrated(
                    user_id=user_id,
                    badge_id=badge_id,
                    correlation_id=correlation_id,
                )
            return updated

    async def get_pending_celebrations(self, user_id: str) -> list[EarnedBadge]:
        badges = await self._storage.get_badges(user_id)
        return get_uncelebrated_badges(badges)

    async def get_achievements(self, user_id: str) -> AchievementsOverview:
        """Milestone status per journal type, current streaks and totals."""
        badges = await self._storage.get_badges(user_id)
        states = await self._storage.list_streak_states(user_id)

        current_streaks = {t: 0 for t in JournalType}
        for state in states:
            current_streaks[state.journal_type] = state.current_streak

        return AchievementsOverview(
            user_id=user_id,
            milestones={t: get_milestones_for_type(t, badges) for t in JournalType},
            current_streaks=current_streaks,
            summary=summarize_badges(badges),
        )


def create_app_components(
    storage_backend: Optional[str] = None,
) -> tuple[ProgressTracker, Optional[AuditLogger]]:
    """
    Factory function to create the tracker and its collaborators.

    Args:
        storage_backend: 'memory' or 'json'; overrides the configured backend

    Returns:
        (progress_tracker, audit_logger)
    """
    settings = get_settings()
    storage_settings = settings.storage
    app_settings = settings.app

    backend = storage_backend or storage_settings.backend

    audit_storage: AuditStorageInterface
    if backend == "json":
        storage = JsonFileProgressStorage(storage_settings.data_path)
        audit_storage = JsonLinesAuditStorage(storage_settings.audit_path)
    elif backend == "memory":
        storage = InMemoryProgressStorage()
        audit_storage = InMemoryAuditStorage()
    else:
        raise ValueError(f"Unknown storage backend: {backend}")

    audit_logger = AuditLogger(audit_storage) if app_settings.audit_enabled else None

    tracker = ProgressTracker(
        storage=storage,
        audit_logger=audit_logger,
        tz=app_settings.tzinfo,
    )
    return tracker, audit_logger
