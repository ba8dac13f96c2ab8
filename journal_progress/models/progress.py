"""
Core Data Models for Journal Progress

These models define the records that flow between the host application
and the streak & milestone engine:
1. Streak state per journal type (owned and persisted by the host)
2. Earned badges (append-only, keyed by a deterministic id)
3. Display and status projections for the achievements screens

DESIGN DECISION: Persisted records serialise with camelCase aliases so
documents written by the web client load unchanged. Python code always
uses the snake_case field names.
"""

import re
from datetime import date
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel


_DATE_ONLY_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _check_date_only(value: str) -> str:
    """Reject anything that is not a real YYYY-MM-DD calendar date."""
    if not _DATE_ONLY_PATTERN.match(value):
        raise ValueError(f"Expected a YYYY-MM-DD date, got {value!r}")
    try:
        date.fromisoformat(value)
    except ValueError:
        raise ValueError(f"Not a calendar date: {value!r}")
    return value


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class JournalType(str, Enum):
    """
    Independent streak counting namespaces.

    OVERALL advances on an entry of any type; the others only on their own.
    """
    JOURNEY = "journey"
    MOOD = "mood"
    FLIP = "flip"
    OVERALL = "overall"


class MilestoneThreshold(int, Enum):
    """Streak lengths that award a one-time badge."""
    SEVEN_DAYS = 7
    FOURTEEN_DAYS = 14
    THIRTY_DAYS = 30
    SIXTY_DAYS = 60
    NINETY_DAYS = 90


MILESTONE_THRESHOLDS: tuple[MilestoneThreshold, ...] = tuple(
    sorted(MilestoneThreshold, key=lambda t: t.value)
)


def make_badge_id(journal_type: JournalType, threshold: MilestoneThreshold) -> str:
    """Deterministic badge id, e.g. ``mood-14``."""
    return f"{JournalType(journal_type).value}-{MilestoneThreshold(threshold).value}"


# =============================================================================
# STREAK MODELS
# =============================================================================

class StreakState(BaseModel):
    """
    Streak bookkeeping for one journal type.

    The engine never stores these; it only computes transitions.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    journal_type: JournalType
    current_streak: int = Field(
        default=0,
        ge=0,
        description="Consecutive local days with at least one entry"
    )
    last_entry_date: Optional[str] = Field(
        default=None,
        description="Local date (YYYY-MM-DD) of the most recent entry"
    )

    @field_validator("last_entry_date")
    @classmethod
    def validate_last_entry_date(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return _check_date_only(v)

    @property
    def has_entries(self) -> bool:
        return self.last_entry_date is not None


class StreakUpdate(BaseModel):
    """Result of applying one entry to a streak."""
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    new_streak: int = Field(..., ge=1)
    last_entry_date: str

    @field_validator("last_entry_date")
    @classmethod
    def validate_last_entry_date(cls, v: str) -> str:
        return _check_date_only(v)


# =============================================================================
# BADGE MODELS
# =============================================================================

class EarnedBadge(BaseModel):
    """
    Record that a journal type crossed a threshold.

    CRITICAL: Created exactly once per (journal_type, threshold).
    Only `celebrated` ever changes afterwards, via mark_celebrated().
    """
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: str = Field(
        ...,
        description="Deterministic id: '{journal_type}-{threshold}'"
    )
    journal_type: JournalType
    threshold: MilestoneThreshold
    earned_date: str = Field(
        ...,
        description="Local date (YYYY-MM-DD) the badge was earned"
    )
    celebrated: bool = Field(
        default=False,
        description="Set once the celebration has been shown"
    )

    @field_validator("earned_date")
    @classmethod
    def validate_earned_date(cls, v: str) -> str:
        return _check_date_only(v)

    @model_validator(mode="after")
    def validate_id(self) -> "EarnedBadge":
        expected = make_badge_id(self.journal_type, self.threshold)
        if self.id != expected:
            raise ValueError(
                f"Badge id {self.id!r} does not match its type and threshold "
                f"(expected {expected!r})"
            )
        return self

    @classmethod
    def create(
        cls,
        journal_type: JournalType,
        threshold: MilestoneThreshold,
        earned_date: str,
    ) -> "EarnedBadge":
        return cls(
            id=make_badge_id(journal_type, threshold),
            journal_type=journal_type,
            threshold=threshold,
            earned_date=earned_date,
            celebrated=False,
        )

    def mark_celebrated(self) -> "EarnedBadge":
        """Return a copy with the celebration flag set."""
        if self.celebrated:
            return self
        return self.model_copy(update={"celebrated": True})


class BadgeDefinition(BaseModel):
    """Static catalog copy for one (journal type, threshold) pair."""
    model_config = ConfigDict(frozen=True)

    title: str = Field(..., min_length=1)
    icon: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    reflective: bool = Field(
        default=False,
        description="Render contemplatively rather than celebratorily"
    )


class BadgeDisplayInfo(BadgeDefinition):
    """Catalog copy annotated with a human-readable journal type label."""

    type_label: str


class MilestoneStatus(BaseModel):
    """Locked/unlocked projection of one threshold for one journal type."""
    model_config = ConfigDict(frozen=True)

    threshold: MilestoneThreshold
    earned: bool
    badge: Optional[EarnedBadge] = None


class BadgeCollectionSummary(BaseModel):
    """Counts behind the 'N of 20 badges earned' header."""

    earned_count: int = Field(..., ge=0)
    total_available: int = Field(..., ge=0)
    by_type: dict[JournalType, int] = Field(default_factory=dict)

    @property
    def is_complete(self) -> bool:
        return self.earned_count >= self.total_available


# =============================================================================
# HOST FLOW MODELS
# =============================================================================

class EntrySubmission(BaseModel):
    """
    Raised by a journaling flow once an entry has been saved.

    local_date may be a YYYY-MM-DD string or a full ISO timestamp.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    user_id: str = Field(..., min_length=1, max_length=128)
    journal_type: JournalType
    local_date: str = Field(..., min_length=1)
    entry_id: Optional[str] = None


class EntryProgressResult(BaseModel):
    """What the host gets back after recording an entry."""

    correlation_id: UUID = Field(default_factory=uuid4)
    user_id: str
    journal_type: JournalType
    previous_streak: int = Field(default=0, ge=0)
    streak: Optional[StreakState] = None
    overall: Optional[StreakState] = None
    new_badges: list[EarnedBadge] = Field(default_factory=list)
    notice: Optional[str] = Field(
        default=None,
        description="Non-fatal message when progress could not be computed"
    )

    @property
    def has_new_badges(self) -> bool:
        return bool(self.new_badges)


class AchievementsOverview(BaseModel):
    """Everything the achievements screen needs for one user."""

    user_id: str
    milestones: dict[JournalType, list[MilestoneStatus]]
    current_streaks: dict[JournalType, int]
    summary: BadgeCollectionSummary
