"""
Data Models Package

This package contains all Pydantic models used by the progress engine
and the host layer around it.
"""

from journal_progress.models.progress import (
    MILESTONE_THRESHOLDS,
    AchievementsOverview,
    BadgeCollectionSummary,
    BadgeDefinition,
    BadgeDisplayInfo,
    EarnedBadge,
    EntryProgressResult,
    EntrySubmission,
    JournalType,
    MilestoneStatus,
    MilestoneThreshold,
    StreakState,
    StreakUpdate,
    make_badge_id,
)
from journal_progress.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Progress models
    "MILESTONE_THRESHOLDS",
    "AchievementsOverview",
    "BadgeCollectionSummary",
    "BadgeDefinition",
    "BadgeDisplayInfo",
    "EarnedBadge",
    "EntryProgressResult",
    "EntrySubmission",
    "JournalType",
    "MilestoneStatus",
    "MilestoneThreshold",
    "StreakState",
    "StreakUpdate",
    "make_badge_id",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
