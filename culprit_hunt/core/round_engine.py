"""
Round engine: role dealing, the private-view gate, and accusation resolution.

Every operation takes a RoundState and returns a new one. The input is
never mutated, so a rejected command leaves the caller's state untouched.
"""

import copy
import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence, Set, Tuple

from .exceptions import InvalidPhaseError, InvalidPlayerError, InvalidRoleError
from .player import PlayerRoundRecord
from .roles import (
    PLAYER_COUNT, Role, RoundType, get_role_distribution, get_round_type, is_valid_player_id,
)
from .scoring import score

logger = logging.getLogger(__name__)


class RoundPhase(Enum):
    """Where a round is in its lifecycle."""
    PENDING = "pending"  # Scaffolded, roles not dealt yet
    VIEWING = "viewing"  # Gathering private role acknowledgments
    ACCUSING = "accusing"  # All four viewed, waiting for one resolution event
    RESOLVED = "resolved"


@dataclass
class RoundState:
    """One round's data."""
    round_number: int
    players: List[PlayerRoundRecord] = field(default_factory=list)
    revealed_viewers: Set[int] = field(default_factory=set)
    accusation: Optional[int] = None
    resolved: bool = False
    roles_assigned: bool = False
    timed_out: bool = False
    round_type: RoundType = field(init=False)

    def __post_init__(self):
        self.round_type = get_round_type(self.round_number)

    @property
    def phase(self) -> RoundPhase:
        if self.resolved:
            return RoundPhase.RESOLVED
        if not self.roles_assigned:
            return RoundPhase.PENDING
        if self.all_viewed:
            return RoundPhase.ACCUSING
        return RoundPhase.VIEWING

    @property
    def all_viewed(self) -> bool:
        """The viewing -> accusing transition depends on this alone."""
        return len(self.revealed_viewers) == PLAYER_COUNT

    def get_player(self, player_id: int) -> Optional[PlayerRoundRecord]:
        """Get player record by id."""
        for player in self.players:
            if player.player_id == player_id:
                return player
        return None

    def find_role_holder(self, role: Role) -> int:
        """Return the id of the single player holding `role`."""
        holders = [p.player_id for p in self.players if p.role is role]
        if len(holders) != 1:
            raise InvalidRoleError(role, holders)
        return holders[0]

    @property
    def live_culprit_id(self) -> int:
        return self.find_role_holder(self.round_type.culprit_role)

    @property
    def investigator_id(self) -> int:
        return self.find_role_holder(Role.INVESTIGATOR)

    @property
    def fixer_id(self) -> int:
        return self.find_role_holder(Role.FIXER)

    def get_suspects(self) -> List[int]:
        """The two unrevealed players the investigator chooses between."""
        return [p.player_id for p in self.players if p.has_role and p.role.is_culprit]

    def get_round_scores(self) -> Dict[int, int]:
        return {p.player_id: p.round_score for p in self.players}


@dataclass
class ResolutionSummary:
    """
    What the driver shows when a round is resolved.

    The summary returned by RoundEngine scores the round from the table
    alone. The streak bonus is added later by SeasonTracker.apply_resolution,
    so only the summary carried by its RoundResolved event includes it.
    """
    round_number: int
    round_type: RoundType
    correct: bool
    accused_id: Optional[int]  # None when the accusation timer ran out
    culprit_id: int
    investigator_id: int
    timed_out: bool = False
    round_scores: Dict[int, int] = field(default_factory=dict)

    @property
    def culprit_role(self) -> Role:
        return self.round_type.culprit_role


def build_summary(round_state: RoundState) -> ResolutionSummary:
    """Summarise a resolved round from its stored state."""
    if not round_state.resolved:
        raise InvalidPhaseError("summarise round", f"Round {round_state.round_number} is not resolved")
    culprit_id = round_state.live_culprit_id
    return ResolutionSummary(
        round_number=round_state.round_number,
        round_type=round_state.round_type,
        correct=round_state.accusation is not None and round_state.accusation == culprit_id,
        accused_id=round_state.accusation,
        culprit_id=culprit_id,
        investigator_id=round_state.investigator_id,
        timed_out=round_state.timed_out,
        round_scores=round_state.get_round_scores(),
    )


class RoundEngine:
    """Deals roles and resolves rounds."""

    def __init__(self, random_seed: Optional[int] = None, rng: Optional[random.Random] = None):
        # Use seeded random if seed is provided
        if rng is not None:
            self.rng = rng
        elif random_seed is not None:
            self.rng = random.Random(random_seed)
        else:
            self.rng = random.Random()

    def new_round(self, round_number: int, player_names: Sequence[str],
                  starting_totals: Optional[Sequence[int]] = None) -> RoundState:
        """
        Scaffold a round with unassigned roles.
        `starting_totals` seeds each seat's cumulative score from the previous round.
        """
        if len(player_names) != PLAYER_COUNT:
            raise InvalidPlayerError(len(player_names), f"Expected {PLAYER_COUNT} players, got {len(player_names)}")
        totals = list(starting_totals) if starting_totals is not None else [0] * PLAYER_COUNT
        players = [
            PlayerRoundRecord(player_id=idx, name=name, cumulative_score=totals[idx])
            for idx, name in enumerate(player_names)
        ]
        return RoundState(round_number=round_number, players=players)

    def assign_roles(self, round_state: RoundState) -> RoundState:
        """Deal a uniformly random permutation of the four roles."""
        if round_state.resolved:
            raise InvalidPhaseError("assign roles", f"Round {round_state.round_number} is already resolved")
        if len(round_state.players) != PLAYER_COUNT:
            raise InvalidPlayerError(
                len(round_state.players),
                f"Expected {PLAYER_COUNT} players, got {len(round_state.players)}",
            )

        roles = get_role_distribution()
        self.rng.shuffle(roles)

        updated = copy.deepcopy(round_state)
        for player, role in zip(updated.players, roles):
            player.role = role
            player.round_score = 0
        updated.roles_assigned = True
        updated.revealed_viewers = set()
        updated.accusation = None
        updated.timed_out = False
        logger.debug("Round %d roles dealt", updated.round_number)
        return updated

    def mark_viewed(self, round_state: RoundState, player_id: int) -> RoundState:
        """Record that a player has privately seen their role. Idempotent."""
        if not is_valid_player_id(player_id):
            raise InvalidPlayerError(player_id)
        if player_id in round_state.revealed_viewers:
            return round_state
        if not round_state.roles_assigned or round_state.resolved:
            raise InvalidPhaseError("view role")

        updated = copy.deepcopy(round_state)
        updated.revealed_viewers.add(player_id)
        logger.debug("Round %d: player %d viewed role (%d/%d)",
                     updated.round_number, player_id, len(updated.revealed_viewers), PLAYER_COUNT)
        return updated

    def resolve_accusation(self, round_state: RoundState,
                           accused_player_id: int) -> Tuple[RoundState, ResolutionSummary]:
        """Resolve the round with the investigator's accusation."""
        self._check_can_resolve(round_state, "accuse")
        if not is_valid_player_id(accused_player_id):
            raise InvalidPlayerError(accused_player_id)
        if accused_player_id not in round_state.get_suspects():
            raise InvalidPlayerError(
                accused_player_id,
                f"Player {accused_player_id} is not one of the suspects {round_state.get_suspects()}",
            )
        correct = accused_player_id == round_state.live_culprit_id
        return self._resolve(round_state, accused_player_id, correct, timed_out=False)

    def resolve_timeout(self, round_state: RoundState) -> Tuple[RoundState, ResolutionSummary]:
        """Resolve the round as if nobody was accused. Always incorrect."""
        self._check_can_resolve(round_state, "time out accusation")
        return self._resolve(round_state, None, False, timed_out=True)

    def _check_can_resolve(self, round_state: RoundState, action: str) -> None:
        if round_state.resolved:
            raise InvalidPhaseError(action, f"Round {round_state.round_number} is already resolved")
        if not round_state.roles_assigned or not round_state.all_viewed:
            raise InvalidPhaseError(
                action,
                f"Only {len(round_state.revealed_viewers)}/{PLAYER_COUNT} players have viewed their role",
            )

    def _resolve(self, round_state: RoundState, accused: Optional[int], correct: bool,
                 timed_out: bool) -> Tuple[RoundState, ResolutionSummary]:
        """Shared scoring path for both exits of the accusation phase."""
        updated = copy.deepcopy(round_state)
        for player in updated.players:
            player.round_score = score(player.role, updated.round_type, correct)
        updated.accusation = accused
        updated.timed_out = timed_out
        updated.resolved = True

        summary = build_summary(updated)
        logger.info("Round %d resolved: %s", updated.round_number,
                    "timeout" if timed_out else ("correct" if correct else "incorrect"))
        return updated, summary
