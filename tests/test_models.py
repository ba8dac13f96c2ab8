"""
Tests for Journal Progress models

Test strategy:
1. Unit tests for individual models and validators
2. Engine and orchestration flows are covered in their own modules
3. No real files or clocks in model tests
"""

import json

import pytest
from uuid import uuid4

from pydantic import ValidationError

from journal_progress.models.progress import (
    BadgeCollectionSummary,
    EarnedBadge,
    EntryProgressResult,
    EntrySubmission,
    JournalType,
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


class TestStreakModels:
    """Tests for streak-related Pydantic models."""

    def test_streak_state_defaults(self):
        """A fresh state has no entries."""
        state = StreakState(journal_type=JournalType.MOOD)
        assert state.current_streak == 0
        assert state.last_entry_date is None
        assert state.has_entries is False

    def test_streak_state_from_camel_case(self):
        """Documents written by the web client load unchanged."""
        state = StreakState.model_validate({
            "journalType": "flip",
            "currentStreak": 4,
            "lastEntryDate": "2026-02-10",
        })
        assert state.journal_type == JournalType.FLIP
        assert state.current_streak == 4
        assert state.has_entries is True

    def test_streak_state_dumps_camel_case(self):
        state = StreakState(journal_type="journey", current_streak=2, last_entry_date="2026-02-10")
        dumped = state.model_dump(mode="json", by_alias=True)
        assert dumped == {
            "journalType": "journey",
            "currentStreak": 2,
            "lastEntryDate": "2026-02-10",
        }

    def test_streak_state_rejects_negative(self):
        with pytest.raises(ValueError):
            StreakState(journal_type=JournalType.MOOD, current_streak=-1)

    @pytest.mark.parametrize("value", ["2026-02-30", "2026-2-1", "2026-02-10T08:00:00Z", ""])
    def test_streak_state_rejects_non_dates(self, value):
        """Stored dates are always YYYY-MM-DD."""
        with pytest.raises(ValueError):
            StreakState(journal_type=JournalType.MOOD, last_entry_date=value)

    def test_streak_update_is_frozen(self):
        update = StreakUpdate(new_streak=3, last_entry_date="2026-02-10")
        with pytest.raises(ValidationError):
            update.new_streak = 4

    def test_streak_update_requires_positive(self):
        """A transition always leaves at least one day on the streak."""
        with pytest.raises(ValueError):
            StreakUpdate(new_streak=0, last_entry_date="2026-02-10")


class TestBadgeModels:
    """Tests for badge records."""

    def test_make_badge_id(self):
        assert make_badge_id(JournalType.MOOD, MilestoneThreshold.FOURTEEN_DAYS) == "mood-14"
        assert make_badge_id("overall", 90) == "overall-90"

    def test_create(self):
        badge = EarnedBadge.create(JournalType.JOURNEY, MilestoneThreshold.SEVEN_DAYS, "2026-02-10")
        assert badge.id == "journey-7"
        assert badge.celebrated is False

    def test_id_must_match_type_and_threshold(self):
        with pytest.raises(ValueError, match="does not match"):
            EarnedBadge(
                id="mood-7",
                journal_type=JournalType.JOURNEY,
                threshold=MilestoneThreshold.SEVEN_DAYS,
                earned_date="2026-02-10",
            )

    def test_threshold_must_be_known(self):
        with pytest.raises(ValueError):
            EarnedBadge(
                id="mood-21",
                journal_type=JournalType.MOOD,
                threshold=21,
                earned_date="2026-02-10",
            )

    def test_badge_is_frozen(self):
        badge = EarnedBadge.create(JournalType.MOOD, MilestoneThreshold.SEVEN_DAYS, "2026-02-10")
        with pytest.raises(ValidationError):
            badge.celebrated = True

    def test_mark_celebrated_returns_copy(self):
        badge = EarnedBadge.create(JournalType.MOOD, MilestoneThreshold.SEVEN_DAYS, "2026-02-10")
        celebrated = badge.mark_celebrated()
        assert celebrated.celebrated is True
        assert badge.celebrated is False
        assert celebrated.earned_date == badge.earned_date
        assert celebrated.mark_celebrated() is celebrated

    def test_badge_round_trips_through_camel_case(self):
        badge = EarnedBadge.create(JournalType.FLIP, MilestoneThreshold.SIXTY_DAYS, "2026-04-01")
        dumped = badge.model_dump(mode="json", by_alias=True)
        assert dumped["journalType"] == "flip"
        assert dumped["earnedDate"] == "2026-04-01"
        assert EarnedBadge.model_validate(dumped) == badge

    def test_summary_complete(self):
        summary = BadgeCollectionSummary(earned_count=20, total_available=20)
        assert summary.is_complete is True


class TestFlowModels:
    """Tests for host-facing request/response models."""

    def test_submission_strips_whitespace(self):
        submission = EntrySubmission(
            user_id="  user-1  ",
            journal_type="mood",
            local_date=" 2026-02-10 ",
        )
        assert submission.user_id == "user-1"
        assert submission.local_date == "2026-02-10"

    def test_submission_requires_user(self):
        with pytest.raises(ValueError):
            EntrySubmission(user_id="", journal_type="mood", local_date="2026-02-10")

    def test_submission_rejects_unknown_type(self):
        with pytest.raises(ValueError):
            EntrySubmission(user_id="u", journal_type="gratitude", local_date="2026-02-10")

    def test_result_has_new_badges(self):
        result = EntryProgressResult(user_id="u", journal_type=JournalType.MOOD)
        assert result.has_new_badges is False
        result.new_badges.append(
            EarnedBadge.create(JournalType.MOOD, MilestoneThreshold.SEVEN_DAYS, "2026-02-10")
        )
        assert result.has_new_badges is True


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.ENTRY_RECORDED,
            description="Mood entry recorded",
        )
        assert event.event_type == AuditEventType.ENTRY_RECORDED
        assert event.severity == AuditSeverity.INFO
        assert event.timestamp.tzinfo is not None

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEvent(
            event_type=AuditEventType.MILESTONE_EARNED,
            description="Milestone earned",
            details={"threshold": 7},
        )
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "milestone_earned"
        assert log_dict["details"]["threshold"] == 7

    def test_audit_event_record_round_trip(self):
        """A JSON line reads back as the same event."""
        event = AuditEventBuilder.milestone_earned(
            user_id="u",
            badge_id="mood-7",
            journal_type="mood",
            threshold=7,
            earned_date="2026-02-10",
            correlation_id=uuid4(),
        )
        line = event.to_record()
        assert "\n" not in line
        assert json.loads(line)["event_type"] == "milestone_earned"

        restored = AuditEvent.from_record(line)
        assert restored.event_id == event.event_id
        assert restored.timestamp == event.timestamp
        assert restored.correlation_id == event.correlation_id
        assert restored.entity_id == "mood-7"
        assert restored.details == event.details

    def test_builder_streak_updated(self):
        correlation_id = uuid4()
        event = AuditEventBuilder.streak_updated(
            user_id="u",
            journal_type="journey",
            old_streak=3,
            new_streak=4,
            last_entry_date="2026-02-10",
            correlation_id=correlation_id,
        )
        assert event.event_type == AuditEventType.STREAK_UPDATED
        assert event.correlation_id == correlation_id
        assert event.details["new_streak"] == 4

    def test_builder_detects_reset(self):
        """Falling back to 1 from a longer streak is audited as a reset."""
        event = AuditEventBuilder.streak_updated(
            user_id="u",
            journal_type="journey",
            old_streak=12,
            new_streak=1,
            last_entry_date="2026-02-10",
            correlation_id=uuid4(),
        )
        assert event.event_type == AuditEventType.STREAK_RESET

    def test_builder_first_entry_is_not_reset(self):
        event = AuditEventBuilder.streak_updated(
            user_id="u",
            journal_type="journey",
            old_streak=0,
            new_streak=1,
            last_entry_date="2026-02-10",
            correlation_id=uuid4(),
        )
        assert event.event_type == AuditEventType.STREAK_UPDATED

    def test_builder_recalculated_drift(self):
        """A stored streak that disagrees with history is a warning."""
        drifted = AuditEventBuilder.streak_recalculated(
            user_id="u",
            journal_type="mood",
            stored_streak=9,
            recalculated_streak=4,
            date_count=4,
            correlation_id=uuid4(),
        )
        assert drifted.event_type == AuditEventType.STREAK_DRIFT_DETECTED
        assert drifted.severity == AuditSeverity.WARNING

        consistent = AuditEventBuilder.streak_recalculated(
            user_id="u",
            journal_type="mood",
            stored_streak=4,
            recalculated_streak=4,
            date_count=4,
            correlation_id=uuid4(),
        )
        assert consistent.event_type == AuditEventType.STREAK_RECALCULATED
        assert consistent.severity == AuditSeverity.INFO

    def test_builder_date_parse_failed(self):
        event = AuditEventBuilder.date_parse_failed(
            user_id="u",
            journal_type="flip",
            value="tomorrow",
            error_message="Unrecognised date",
            correlation_id=uuid4(),
        )
        assert event.severity == AuditSeverity.WARNING
        assert event.error_code == "date_parse_error"
        assert event.details["value"] == "tomorrow"


class TestJournalTypes:
    """Tests for the journal type enum."""

    def test_all_types_exist(self):
        for value in ["journey", "mood", "flip", "overall"]:
            assert JournalType(value) is not None

    def test_thresholds(self):
        assert [t.value for t in MilestoneThreshold] == [7, 14, 30, 60, 90]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
