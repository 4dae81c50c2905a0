"""
Role definitions and round types for the Culprit Hunt game.
"""

from enum import Enum
from typing import List


class Role(Enum):
    """Player role types. Exactly one player holds each role per round."""
    INVESTIGATOR = "investigator"
    FIXER = "fixer"  # Always fully revealed, always scores the flat maximum
    CULPRIT_A = "culprit_a"
    CULPRIT_B = "culprit_b"

    def __str__(self) -> str:
        return ROLE_TITLES[self]

    @property
    def is_culprit(self) -> bool:
        """Check if role is one of the two culprit roles."""
        return self in (Role.CULPRIT_A, Role.CULPRIT_B)


class RoundType(Enum):
    """Which culprit role is live (guessable) this round."""
    TYPE_A = "type_a"
    TYPE_B = "type_b"

    @property
    def culprit_role(self) -> Role:
        """The culprit role the investigator is hunting this round."""
        return Role.CULPRIT_A if self is RoundType.TYPE_A else Role.CULPRIT_B


ROLE_TITLES = {
    Role.INVESTIGATOR: "Investigator",
    Role.FIXER: "Fixer",
    Role.CULPRIT_A: "Culprit A",
    Role.CULPRIT_B: "Culprit B",
}

PLAYER_COUNT = 4
PLAYER_IDS = range(PLAYER_COUNT)


def get_role_distribution() -> List[Role]:
    """
    Get the fixed role set for a round, one of each role.
    Callers shuffle the returned list; a fresh list is built every call.
    """
    return [
        Role.INVESTIGATOR,
        Role.FIXER,
        Role.CULPRIT_A,
        Role.CULPRIT_B,
    ]


def get_round_type(round_number: int) -> RoundType:
    """Odd rounds hunt Culprit A, even rounds hunt Culprit B."""
    if round_number < 1:
        raise ValueError(f"Round numbers start at 1, got {round_number}")
    return RoundType.TYPE_A if round_number % 2 == 1 else RoundType.TYPE_B


def is_valid_player_id(player_id: int) -> bool:
    """Check if player id is one of the four seats."""
    return isinstance(player_id, int) and not isinstance(player_id, bool) and player_id in PLAYER_IDS
