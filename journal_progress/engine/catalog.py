"""
Badge Catalog

Static display copy for every (journal type, threshold) pair.

Each journal type has its own copy. The 90-day badge of every type is
reflective: it closes a long stretch of practice, so it is worded to be
read quietly rather than cheered.

CRITICAL: The catalog is total over JournalType x MilestoneThreshold.
_check_catalog() runs at import, so a missing entry fails loudly when
the package loads rather than when a user earns that badge.
"""

from journal_progress.models.progress import (
    MILESTONE_THRESHOLDS,
    BadgeDefinition,
    BadgeDisplayInfo,
    EarnedBadge,
    JournalType,
    MilestoneThreshold,
)


TYPE_LABELS: dict[JournalType, str] = {
    JournalType.JOURNEY: "Journey",
    JournalType.MOOD: "Mood",
    JournalType.FLIP: "Flip",
    JournalType.OVERALL: "Overall",
}


BADGE_CATALOG: dict[JournalType, dict[MilestoneThreshold, BadgeDefinition]] = {
    JournalType.JOURNEY: {
        MilestoneThreshold.SEVEN_DAYS: BadgeDefinition(
            title="Trailhead",
            icon="🧭",
            description="A full week on your guided journey",
        ),
        MilestoneThreshold.FOURTEEN_DAYS: BadgeDefinition(
            title="Steady Stride",
            icon="🥾",
            description="Two weeks of daily steps along the path",
        ),
        MilestoneThreshold.THIRTY_DAYS: BadgeDefinition(
            title="Pathfinder",
            icon="🗺️",
            description="A month of finding your way, one prompt at a time",
        ),
        MilestoneThreshold.SIXTY_DAYS: BadgeDefinition(
            title="Summit Seeker",
            icon="⛰️",
            description="Sixty days of climbing toward who you want to be",
        ),
        MilestoneThreshold.NINETY_DAYS: BadgeDefinition(
            title="You showed up for yourself.",
            icon="🪞",
            description=(
                "Ninety days. This wasn't luck, it was commitment. "
                "Take a moment to recognize what you built."
            ),
            reflective=True,
        ),
    },
    JournalType.MOOD: {
        MilestoneThreshold.SEVEN_DAYS: BadgeDefinition(
            title="Weather Watcher",
            icon="🌤️",
            description="Seven days of noticing how you feel",
        ),
        MilestoneThreshold.FOURTEEN_DAYS: BadgeDefinition(
            title="Tide Reader",
            icon="🌊",
            description="Two weeks of tracking your highs and lows",
        ),
        MilestoneThreshold.THIRTY_DAYS: BadgeDefinition(
            title="Feelings Cartographer",
            icon="🌈",
            description="A month of mapping your emotional landscape",
        ),
        MilestoneThreshold.SIXTY_DAYS: BadgeDefinition(
            title="Inner Barometer",
            icon="🌡️",
            description="Sixty days of listening to yourself closely",
        ),
        MilestoneThreshold.NINETY_DAYS: BadgeDefinition(
            title="You learned your own weather.",
            icon="🌙",
            description=(
                "Ninety days of checking in with yourself. Every mood you named "
                "made the next one a little easier to hold."
            ),
            reflective=True,
        ),
    },
    JournalType.FLIP: {
        MilestoneThreshold.SEVEN_DAYS: BadgeDefinition(
            title="First Flips",
            icon="🔄",
            description="A week of turning hard thoughts around",
        ),
        MilestoneThreshold.FOURTEEN_DAYS: BadgeDefinition(
            title="Perspective Shifter",
            icon="🪄",
            description="Two weeks of finding another way to see it",
        ),
        MilestoneThreshold.THIRTY_DAYS: BadgeDefinition(
            title="Silver Lining Seeker",
            icon="✨",
            description="A month of reframing what weighs on you",
        ),
        MilestoneThreshold.SIXTY_DAYS: BadgeDefinition(
            title="Mindset Alchemist",
            icon="⚗️",
            description="Sixty days of turning heavy into hopeful",
        ),
        MilestoneThreshold.NINETY_DAYS: BadgeDefinition(
            title="You changed the story you tell yourself.",
            icon="🦋",
            description=(
                "Ninety days of flipping the script. The voice in your head "
                "sounds a little more like a friend now."
            ),
            reflective=True,
        ),
    },
    JournalType.OVERALL: {
        MilestoneThreshold.SEVEN_DAYS: BadgeDefinition(
            title="Week Warrior",
            icon="🔥",
            description="7 days of consistent journaling",
        ),
        MilestoneThreshold.FOURTEEN_DAYS: BadgeDefinition(
            title="Two-Week Titan",
            icon="⚡",
            description="14 days of dedicated reflection",
        ),
        MilestoneThreshold.THIRTY_DAYS: BadgeDefinition(
            title="Monthly Master",
            icon="👑",
            description="30 days of building your practice",
        ),
        MilestoneThreshold.SIXTY_DAYS: BadgeDefinition(
            title="Sixty-Day Sage",
            icon="🌟",
            description="60 days of deep transformation",
        ),
        MilestoneThreshold.NINETY_DAYS: BadgeDefinition(
            title="Ninety days, one day at a time.",
            icon="💎",
            description=(
                "You showed up every single day for ninety days. "
                "Sit with that for a moment."
            ),
            reflective=True,
        ),
    },
}


def _check_catalog() -> None:
    for journal_type in JournalType:
        if journal_type not in TYPE_LABELS:
            raise RuntimeError(f"No type label for {journal_type.value}")
        entries = BADGE_CATALOG.get(journal_type, {})
        for threshold in MILESTONE_THRESHOLDS:
            if threshold not in entries:
                raise RuntimeError(
                    f"Badge catalog is missing {journal_type.value}-{threshold.value}"
                )
        if not entries[MilestoneThreshold.NINETY_DAYS].reflective:
            raise RuntimeError(
                f"The 90-day {journal_type.value} badge must be reflective"
            )


_check_catalog()


def get_type_label(journal_type: JournalType) -> str:
    return TYPE_LABELS[JournalType(journal_type)]


def get_badge_definition(
    journal_type: JournalType,
    threshold: MilestoneThreshold,
) -> BadgeDefinition:
    return BADGE_CATALOG[JournalType(journal_type)][MilestoneThreshold(threshold)]


def get_badge_display_info(badge: EarnedBadge) -> BadgeDisplayInfo:
    """Catalog copy for an earned badge, with its journal type label."""
    definition = get_badge_definition(badge.journal_type, badge.threshold)
    return BadgeDisplayInfo(
        **definition.model_dump(),
        type_label=get_type_label(badge.journal_type),
    )
