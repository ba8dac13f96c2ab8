"""
Streak & Milestone Engine

Pure, synchronous functions. No I/O, no module-level state: streak state
and badges always arrive as arguments and leave as return values.
"""

from journal_progress.engine.catalog import (
    BADGE_CATALOG,
    TYPE_LABELS,
    get_badge_definition,
    get_badge_display_info,
    get_type_label,
)
from journal_progress.engine.dates import (
    days_between,
    local_today,
    normalize_to_date_only,
    parse_local_date,
    to_local_date_string,
)
from journal_progress.engine.errors import (
    DateParseError,
    ProgressEngineError,
    StreakContractError,
)
from journal_progress.engine.milestones import (
    TOTAL_BADGES,
    check_for_new_milestones,
    days_until_next_milestone,
    get_milestones_for_type,
    get_next_milestone,
    get_uncelebrated_badges,
    mark_celebrated,
    summarize_badges,
)
from journal_progress.engine.streaks import (
    calculate_updated_streak,
    recalculate_streak_from_dates,
)

__all__ = [
    # Catalog
    "BADGE_CATALOG",
    "TYPE_LABELS",
    "get_badge_definition",
    "get_badge_display_info",
    "get_type_label",
    # Dates
    "days_between",
    "local_today",
    "normalize_to_date_only",
    "parse_local_date",
    "to_local_date_string",
    # Errors
    "DateParseError",
    "ProgressEngineError",
    "StreakContractError",
    # Milestones
    "TOTAL_BADGES",
    "check_for_new_milestones",
    "days_until_next_milestone",
    "get_milestones_for_type",
    "get_next_milestone",
    "get_uncelebrated_badges",
    "mark_celebrated",
    "summarize_badges",
    # Streaks
    "calculate_updated_streak",
    "recalculate_streak_from_dates",
]
