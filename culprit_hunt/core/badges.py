"""
Badge catalog: cumulative achievements held by at most one player each.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional


class BadgeKind(Enum):
    """Badge kinds, in the order they are evaluated after a round."""
    BEST_INVESTIGATOR = "best_investigator"
    WORST_INVESTIGATOR = "worst_investigator"
    BEST_ESCAPEE = "best_escapee"
    WORST_ESCAPEE = "worst_escapee"
    BEST_FIXER = "best_fixer"


BADGE_THRESHOLD = 3


@dataclass(frozen=True)
class BadgeInfo:
    """Display data for one badge."""
    kind: BadgeKind
    title: str
    flavor_key: str
    flavor_text: str
    description: str
    stat: str  # PlayerStats attribute the badge is ranked by


BADGE_CATALOG: Dict[BadgeKind, BadgeInfo] = {
    BadgeKind.BEST_INVESTIGATOR: BadgeInfo(
        kind=BadgeKind.BEST_INVESTIGATOR,
        title="Best Investigator in Town",
        flavor_key="badge.best_investigator",
        flavor_text="The whole town is looking for you.",
        description="Awarded to the Investigator with the most correct accusations (3+)",
        stat="investigator_correct",
    ),
    BadgeKind.WORST_INVESTIGATOR: BadgeInfo(
        kind=BadgeKind.WORST_INVESTIGATOR,
        title="Worst Investigator in Town",
        flavor_key="badge.worst_investigator",
        flavor_text="So what now, should I just quit the job?",
        description="Awarded to the Investigator with the most wrong accusations or timeouts (3+)",
        stat="investigator_wrong",
    ),
    BadgeKind.BEST_ESCAPEE: BadgeInfo(
        kind=BadgeKind.BEST_ESCAPEE,
        title="Best Escapee in Town",
        flavor_key="badge.best_escapee",
        flavor_text="I can come back from touching death itself.",
        description="Awarded to the live culprit who escaped the most (3+)",
        stat="culprit_escaped",
    ),
    BadgeKind.WORST_ESCAPEE: BadgeInfo(
        kind=BadgeKind.WORST_ESCAPEE,
        title="Worst Escapee in Town",
        flavor_key="badge.worst_escapee",
        flavor_text="Why does this misery never end?",
        description="Awarded to the live culprit who was caught the most (3+)",
        stat="culprit_caught",
    ),
    BadgeKind.BEST_FIXER: BadgeInfo(
        kind=BadgeKind.BEST_FIXER,
        title="Best Fixer in Town",
        flavor_key="badge.best_fixer",
        flavor_text="One look at you and everyone knows you are well connected.",
        description="Awarded to the player who played the Fixer the most (3+)",
        stat="fixer_role_count",
    ),
}

# Awarded for STREAK_BONUS_LENGTH consecutive correct accusations
GRAND_TITLE = "Jewel of the Nation"
GRAND_TITLE_FLAVOR_KEY = "streak.grand_title"


def empty_badge_holders() -> Dict[BadgeKind, Optional[int]]:
    """A fresh badge table with no holders."""
    return {kind: None for kind in BadgeKind}


def badges_held_by(badges: Dict[BadgeKind, Optional[int]], player_id: int) -> List[BadgeKind]:
    """All badges a player currently holds."""
    return [kind for kind, holder in badges.items() if holder == player_id]
