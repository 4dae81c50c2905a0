"""
Scoring table for resolved rounds.
"""

from .roles import Role, RoundType

FIXER_POINTS = 100
INVESTIGATOR_CORRECT_POINTS = 80
CULPRIT_A_ESCAPE_POINTS = 40
CULPRIT_B_ESCAPE_POINTS = 60

STREAK_BONUS_POINTS = 100
STREAK_BONUS_LENGTH = 3  # Bonus fires when the streak reaches exactly this

_ESCAPE_POINTS = {
    Role.CULPRIT_A: CULPRIT_A_ESCAPE_POINTS,
    Role.CULPRIT_B: CULPRIT_B_ESCAPE_POINTS,
}


def score(role: Role, round_type: RoundType, investigator_correct: bool) -> int:
    """
    Points earned by a role in a resolved round.

    The Fixer always takes the flat maximum. The Investigator scores only on a
    correct accusation. A culprit scores nothing when it is the live culprit
    and gets caught; otherwise (escaped, or not hunted this round) it keeps
    its escape points. Timeouts are scored as incorrect accusations.
    """
    if role is Role.FIXER:
        return FIXER_POINTS

    if role is Role.INVESTIGATOR:
        return INVESTIGATOR_CORRECT_POINTS if investigator_correct else 0

    if role in _ESCAPE_POINTS:
        if role is round_type.culprit_role and investigator_correct:
            return 0
        return _ESCAPE_POINTS[role]

    raise ValueError(f"Unknown role: {role!r}")
