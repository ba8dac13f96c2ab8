"""
Streak Calculation

Calendar-based streak tracking. Pure functions; the caller owns and
persists the streak state.

Transition rules (new entry vs. last entry date):
- No previous entry → streak starts at 1
- Same local day → streak stays (floored at 1)
- Next local day → streak continues (+1)
- Any other gap, including a backdated entry → streak resets to 1

⚠️ Covered by tests/test_streaks.py. Update them with any rule change.
"""

from datetime import timedelta, tzinfo
from typing import Optional, Sequence

import structlog

from journal_progress.engine.dates import (
    DateInput,
    local_today,
    normalize_to_date_only,
    parse_local_date,
)
from journal_progress.engine.errors import require_non_negative
from journal_progress.models.progress import StreakUpdate


logger = structlog.get_logger(__name__)


def calculate_updated_streak(
    current_streak: int,
    last_entry_date: Optional[str],
    new_entry_date: DateInput,
    tz: Optional[tzinfo] = None,
) -> StreakUpdate:
    """
    Apply one new entry to a streak.

    Args:
        current_streak: Streak before this entry (>= 0)
        last_entry_date: Local date of the previous entry, or None if none yet
        new_entry_date: Date-only string or ISO timestamp of the new entry
        tz: Zone used to localise timestamps (system local when None)

    Returns:
        StreakUpdate with the new streak and the normalised entry date

    Raises:
        StreakContractError: If current_streak is negative
        DateParseError: If either date is unrecognisable
    """
    require_non_negative("current_streak", current_streak)

    new_day = parse_local_date(new_entry_date, tz)
    new_date_str = new_day.isoformat()

    if not last_entry_date:
        logger.debug("streak_started", new_streak=1, entry_date=new_date_str)
        return StreakUpdate(new_streak=1, last_entry_date=new_date_str)

    diff = (new_day - parse_local_date(last_entry_date, tz)).days

    if diff == 0:
        new_streak = max(current_streak, 1)
        logger.debug("streak_same_day", new_streak=new_streak, entry_date=new_date_str)
    elif diff == 1:
        new_streak = current_streak + 1
        logger.debug("streak_continued", new_streak=new_streak, entry_date=new_date_str)
    else:
        new_streak = 1
        logger.debug(
            "streak_reset",
            previous_streak=current_streak,
            gap_days=diff,
            entry_date=new_date_str,
        )

    return StreakUpdate(new_streak=new_streak, last_entry_date=new_date_str)


def recalculate_streak_from_dates(
    sorted_dates_desc: Sequence[str],
    today: Optional[DateInput] = None,
    tz: Optional[tzinfo] = None,
) -> int:
    """
    Rebuild a streak from full entry history.

    Walks back from today one day at a time, counting while each date
    matches. Stops at the first mismatch, so the result is 0 when the
    newest date is not today.

    Args:
        sorted_dates_desc: Distinct local dates, most recent first.
            Deduplication and ordering are the caller's responsibility.
        today: Host clock's local date (defaults to the current local date)
        tz: Zone used to localise timestamps
    """
    cursor = parse_local_date(today, tz) if today is not None else local_today(tz)

    streak = 0
    for entry_date in sorted_dates_desc:
        if normalize_to_date_only(entry_date, tz) != cursor.isoformat():
            break
        streak += 1
        cursor -= timedelta(days=1)

    return streak
