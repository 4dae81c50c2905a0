"""
Season tracking: running totals, cumulative statistics, streaks and badges.

SeasonTracker works as a reducer. Each call takes a SeasonState and
returns a new one; the driver owns the single mutable reference.
"""

import copy
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from .badges import BADGE_CATALOG, BADGE_THRESHOLD, GRAND_TITLE, GRAND_TITLE_FLAVOR_KEY, BadgeKind, empty_badge_holders
from .events import BadgeAwarded, GameEvent, RoundResolved, StreakBonusAwarded
from .exceptions import InvalidPhaseError, InvalidPlayerError
from .player import PlayerRoundRecord
from .round_engine import RoundEngine, RoundState, build_summary
from .roles import PLAYER_COUNT, PLAYER_IDS
from .scoring import STREAK_BONUS_LENGTH, STREAK_BONUS_POINTS

logger = logging.getLogger(__name__)

DEFAULT_INITIAL_ROUNDS = 10
MIN_DISPLAY_ROUNDS = 10


@dataclass
class PlayerStats:
    """Cumulative per-player statistics."""
    investigator_correct: int = 0
    investigator_wrong: int = 0  # Timeouts count as wrong
    culprit_escaped: int = 0  # Only counted for the live culprit
    culprit_caught: int = 0
    fixer_role_count: int = 0


@dataclass
class SeasonState:
    """Cross-round aggregate for one game."""
    player_names: List[str] = field(default_factory=list)
    rounds: List[RoundState] = field(default_factory=list)  # Index 0 is round 1
    current_round_index: int = 0
    investigator_streak: Dict[int, int] = field(default_factory=dict)
    stats: Dict[int, PlayerStats] = field(default_factory=dict)
    badges: Dict[BadgeKind, Optional[int]] = field(default_factory=empty_badge_holders)
    started: bool = False
    ended: bool = False

    @property
    def current_round(self) -> Optional[RoundState]:
        if not self.started or self.current_round_index >= len(self.rounds):
            return None
        return self.rounds[self.current_round_index]

    @property
    def current_round_number(self) -> int:
        return self.current_round_index + 1 if self.started else 0

    def last_resolved_round(self) -> Optional[RoundState]:
        """Most recently resolved round, or None before the first resolution."""
        for round_state in reversed(self.rounds):
            if round_state.resolved:
                return round_state
        return None

    def get_totals(self) -> Dict[int, int]:
        """Cumulative totals as of the last resolved round."""
        last = self.last_resolved_round()
        if last is None:
            return {player_id: 0 for player_id in PLAYER_IDS}
        return {p.player_id: p.cumulative_score for p in last.players}

    def get_rounds_to_display(self) -> List[RoundState]:
        """Score-sheet rows: at least the scaffolded ten, more once play runs past them."""
        return self.rounds[:max(MIN_DISPLAY_ROUNDS, self.current_round_number)]


def normalize_player_names(names: Sequence[str]) -> List[str]:
    """Strip names; blank names fall back to 'Player N'."""
    if len(names) != PLAYER_COUNT:
        raise InvalidPlayerError(len(names), f"Expected {PLAYER_COUNT} player names, got {len(names)}")
    normalized = []
    for idx, name in enumerate(names):
        trimmed = (name or "").strip()
        normalized.append(trimmed or f"Player {idx + 1}")
    return normalized


class SeasonTracker:
    """Folds resolved rounds into season totals, statistics and badges."""

    def __init__(self, engine: Optional[RoundEngine] = None, initial_rounds: int = DEFAULT_INITIAL_ROUNDS):
        self.engine = engine or RoundEngine()
        self.initial_rounds = initial_rounds

    def start_season(self, player_names: Sequence[str]) -> SeasonState:
        """Scaffold the opening rounds and deal roles for round 1."""
        names = normalize_player_names(player_names)
        rounds = [self.engine.new_round(n, names) for n in range(1, self.initial_rounds + 1)]
        rounds[0] = self.engine.assign_roles(rounds[0])

        season = SeasonState(
            player_names=names,
            rounds=rounds,
            current_round_index=0,
            investigator_streak={player_id: 0 for player_id in PLAYER_IDS},
            stats={player_id: PlayerStats() for player_id in PLAYER_IDS},
            started=True,
        )
        logger.info("Season started with players %s", names)
        return season

    def advance(self, season: SeasonState) -> SeasonState:
        """Move to the next round, scaffolding it if play has run past the existing rows."""
        self._check_active(season, "advance round")
        current = season.current_round
        if current is None or not current.resolved:
            raise InvalidPhaseError("advance round", "The current round has not been resolved")

        updated = copy.deepcopy(season)
        next_index = updated.current_round_index + 1
        totals = [p.cumulative_score for p in current.players]
        if next_index >= len(updated.rounds):
            updated.rounds.append(self.engine.new_round(next_index + 1, updated.player_names, totals))
        else:
            # Pre-scaffolded rows start at zero; carry the running totals forward
            for player, total in zip(updated.rounds[next_index].players, totals):
                player.cumulative_score = total

        updated.rounds[next_index] = self.engine.assign_roles(updated.rounds[next_index])
        updated.current_round_index = next_index
        logger.info("Round %d started (%s)", next_index + 1, updated.rounds[next_index].round_type.value)
        return updated

    def update_current_round(self, season: SeasonState, round_state: RoundState) -> SeasonState:
        """
        Store role/phase bookkeeping (view acknowledgments) for the active round.
        Resolved rounds must go through apply_resolution instead.
        """
        self._check_active(season, "update round")
        current = season.current_round
        if current is None or round_state.round_number != current.round_number:
            raise InvalidPhaseError("update round", f"Round {round_state.round_number} is not the active round")
        if current.resolved or round_state.resolved:
            raise InvalidPhaseError("update round", "Resolved rounds are immutable")
        updated = copy.deepcopy(season)
        updated.rounds[updated.current_round_index] = copy.deepcopy(round_state)
        return updated

    def apply_resolution(self, season: SeasonState,
                         resolved_round: RoundState) -> Tuple[SeasonState, List[GameEvent]]:
        """
        Fold a resolved round into the season.

        Updates statistics, the investigator streak (adding the streak bonus to
        the round score when it reaches exactly STREAK_BONUS_LENGTH), cumulative
        totals and badges. Returns the new season and the events to surface.
        Applying the same round twice is rejected.
        """
        self._check_active(season, "apply resolution")
        current = season.current_round
        if not resolved_round.resolved:
            raise InvalidPhaseError("apply resolution", f"Round {resolved_round.round_number} is not resolved")
        if current is None or current.round_number != resolved_round.round_number:
            raise InvalidPhaseError("apply resolution", f"Round {resolved_round.round_number} is not the active round")
        if current.resolved:
            raise InvalidPhaseError("apply resolution", f"Round {current.round_number} was already applied")
        if [p.role for p in current.players] != [p.role for p in resolved_round.players]:
            raise InvalidPhaseError("apply resolution", "Resolved round does not match the dealt roles")

        updated = copy.deepcopy(season)
        round_state = copy.deepcopy(resolved_round)
        index = updated.current_round_index

        investigator_id = round_state.investigator_id
        culprit_id = round_state.live_culprit_id
        fixer_id = round_state.fixer_id
        correct = round_state.accusation is not None and round_state.accusation == culprit_id

        # Statistics
        stats = updated.stats
        if correct:
            stats[investigator_id].investigator_correct += 1
            stats[culprit_id].culprit_caught += 1
        else:
            stats[investigator_id].investigator_wrong += 1
            stats[culprit_id].culprit_escaped += 1
        stats[fixer_id].fixer_role_count += 1

        # Streak
        events: List[GameEvent] = []
        streak_bonus: Optional[StreakBonusAwarded] = None
        if correct:
            streak = updated.investigator_streak.get(investigator_id, 0) + 1
            updated.investigator_streak[investigator_id] = streak
            if streak == STREAK_BONUS_LENGTH:
                round_state.get_player(investigator_id).round_score += STREAK_BONUS_POINTS
                streak_bonus = StreakBonusAwarded(
                    round_number=round_state.round_number,
                    player_id=investigator_id,
                    bonus_points=STREAK_BONUS_POINTS,
                    streak=streak,
                    title=GRAND_TITLE,
                    flavor_key=GRAND_TITLE_FLAVOR_KEY,
                )
                logger.info("Player %d earned the streak bonus in round %d",
                            investigator_id, round_state.round_number)
        else:
            updated.investigator_streak[investigator_id] = 0

        # Totals
        for player in round_state.players:
            previous = updated.rounds[index - 1].get_player(player.player_id).cumulative_score if index > 0 else 0
            player.cumulative_score = previous + player.round_score
        updated.rounds[index] = round_state

        events.append(RoundResolved(summary=build_summary(round_state)))
        if streak_bonus is not None:
            events.append(streak_bonus)

        # Badges, evaluated only for the players whose counters moved
        if correct:
            candidates = [
                (BadgeKind.BEST_INVESTIGATOR, investigator_id),
                (BadgeKind.WORST_ESCAPEE, culprit_id),
            ]
        else:
            candidates = [
                (BadgeKind.WORST_INVESTIGATOR, investigator_id),
                (BadgeKind.BEST_ESCAPEE, culprit_id),
            ]
        candidates.append((BadgeKind.BEST_FIXER, fixer_id))
        candidates.sort(key=lambda item: list(BadgeKind).index(item[0]))

        for kind, player_id in candidates:
            award = self._evaluate_badge(updated, kind, player_id, round_state.round_number)
            if award is not None:
                events.append(award)

        return updated, events

    def _evaluate_badge(self, season: SeasonState, kind: BadgeKind, player_id: int,
                        round_number: int) -> Optional[BadgeAwarded]:
        """
        Award `kind` to `player_id` if they crossed the threshold and strictly
        beat the current holder. Equal counts keep the badge where it is.
        """
        info = BADGE_CATALOG[kind]
        count = getattr(season.stats[player_id], info.stat)
        if count < BADGE_THRESHOLD:
            return None

        holder = season.badges.get(kind)
        if holder is not None and count <= getattr(season.stats[holder], info.stat):
            return None

        season.badges[kind] = player_id
        logger.info("Player %d awarded %s (%d)", player_id, kind.value, count)
        return BadgeAwarded(
            round_number=round_number,
            badge=kind,
            player_id=player_id,
            previous_holder=holder,
            count=count,
            title=info.title,
            flavor_key=info.flavor_key,
        )

    def end_season(self, season: SeasonState) -> SeasonState:
        """Freeze play; totals and badges stay queryable."""
        self._check_active(season, "end season")
        updated = copy.deepcopy(season)
        updated.ended = True
        return updated

    def resume_season(self, season: SeasonState) -> SeasonState:
        if not season.started or not season.ended:
            raise InvalidPhaseError("resume season", "The season has not been ended")
        updated = copy.deepcopy(season)
        updated.ended = False
        return updated

    @staticmethod
    def winner(season: SeasonState) -> List[PlayerRoundRecord]:
        """
        Players with the highest cumulative total as of the most recently
        resolved round. Ties are all co-winners; empty before any resolution.
        """
        last = season.last_resolved_round()
        if last is None:
            return []
        top = max(p.cumulative_score for p in last.players)
        return [copy.deepcopy(p) for p in last.players if p.cumulative_score == top]

    @staticmethod
    def _check_active(season: SeasonState, action: str) -> None:
        if not season.started:
            raise InvalidPhaseError(action, "The season has not started")
        if season.ended:
            raise InvalidPhaseError(action, "The season has ended")
