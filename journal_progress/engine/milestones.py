"""
Milestone Detection

Awards one-time badges when a streak crosses a fixed threshold.

Rules:
- Only fires on forward progress (new_streak > old_streak)
- A threshold T is crossed when old_streak < T <= new_streak, so one jump
  can cross several thresholds; all are returned, ascending
- Thresholds whose badge id is already earned are skipped, which makes a
  second call with the first call's output folded in return nothing

⚠️ Covered by tests/test_milestones.py. Update them with any rule change.
"""

from collections.abc import Iterable
from datetime import tzinfo
from typing import Optional

from journal_progress.engine.dates import DateInput, normalize_to_date_only
from journal_progress.engine.errors import require_non_negative
from journal_progress.models.progress import (
    MILESTONE_THRESHOLDS,
    BadgeCollectionSummary,
    EarnedBadge,
    JournalType,
    MilestoneStatus,
    MilestoneThreshold,
    make_badge_id,
)


TOTAL_BADGES = len(JournalType) * len(MILESTONE_THRESHOLDS)


def check_for_new_milestones(
    journal_type: JournalType,
    old_streak: int,
    new_streak: int,
    existing_badges: Iterable[EarnedBadge],
    today_date: DateInput,
    tz: Optional[tzinfo] = None,
) -> list[EarnedBadge]:
    """
    Return badges newly earned by moving from old_streak to new_streak.

    Args:
        journal_type: Namespace the streak belongs to
        old_streak: Streak before the update (>= 0)
        new_streak: Streak after the update (>= 0)
        existing_badges: Every badge the user already holds, any type
        today_date: Local date stamped onto new badges

    Returns:
        New badges in ascending threshold order (possibly empty)
    """
    journal_type = JournalType(journal_type)
    require_non_negative("old_streak", old_streak)
    require_non_negative("new_streak", new_streak)

    if new_streak <= old_streak:
        return []

    earned_date = normalize_to_date_only(today_date, tz)
    existing_ids = {badge.id for badge in existing_badges}

    new_badges: list[EarnedBadge] = []
    for threshold in MILESTONE_THRESHOLDS:
        if not old_streak < threshold <= new_streak:
            continue
        if make_badge_id(journal_type, threshold) in existing_ids:
            continue
        new_badges.append(EarnedBadge.create(journal_type, threshold, earned_date))

    return new_badges


def get_milestones_for_type(
    journal_type: JournalType,
    earned_badges: Iterable[EarnedBadge],
) -> list[MilestoneStatus]:
    """Earned/locked status of all five thresholds, ascending."""
    journal_type = JournalType(journal_type)
    by_id = {badge.id: badge for badge in earned_badges}

    statuses = []
    for threshold in MILESTONE_THRESHOLDS:
        badge = by_id.get(make_badge_id(journal_type, threshold))
        statuses.append(
            MilestoneStatus(threshold=threshold, earned=badge is not None, badge=badge)
        )
    return statuses


def get_next_milestone(current_streak: int) -> Optional[MilestoneThreshold]:
    """The next threshold above the streak, or None past the last one."""
    require_non_negative("current_streak", current_streak)
    for threshold in MILESTONE_THRESHOLDS:
        if threshold > current_streak:
            return threshold
    return None


def days_until_next_milestone(current_streak: int) -> Optional[int]:
    threshold = get_next_milestone(current_streak)
    if threshold is None:
        return None
    return threshold.value - current_streak


def summarize_badges(badges: Iterable[EarnedBadge]) -> BadgeCollectionSummary:
    """Count distinct earned badges, overall and per journal type."""
    unique = {badge.id: badge for badge in badges}
    by_type = {journal_type: 0 for journal_type in JournalType}
    for badge in unique.values():
        by_type[badge.journal_type] += 1

    return BadgeCollectionSummary(
        earned_count=len(unique),
        total_available=TOTAL_BADGES,
        by_type=by_type,
    )


def get_uncelebrated_badges(badges: Iterable[EarnedBadge]) -> list[EarnedBadge]:
    """Celebration queue: oldest first, lower thresholds first within a day."""
    pending = [badge for badge in badges if not badge.celebrated]
    return sorted(pending, key=lambda b: (b.earned_date, b.threshold.value))


def mark_celebrated(badge: EarnedBadge) -> EarnedBadge:
    return badge.mark_celebrated()
