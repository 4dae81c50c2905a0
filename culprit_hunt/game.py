"""
Game controller: the single writer of the season state.

The rendering layer calls the commands below with player actions, polls
tick() so timers can fire, and renders whatever the queries return plus
the events delivered through the EventEmitter.
"""

import copy
import functools
import logging
import random
import threading
from typing import Callable, Dict, List, Optional, Sequence

from .config.game_config import GameConfig, default_config
from .core import (
    AccusationOpened, BadgeKind, GameEvent, InvalidPhaseError, InvalidPlayerError, PlayerRoundRecord,
    ResolutionSummary, Role, RoleViewed, RoundEngine, RoundPhase, RoundResolved, RoundStarted,
    RoundState, SeasonEnded, SeasonReset, SeasonResumed, SeasonStarted, SeasonState, SeasonTracker,
)
from .core.badges import badges_held_by
from .core.roles import is_valid_player_id
from .event_emitter import EventEmitter
from .phases import AccusationPhaseHandler, TimerScheduler, ViewingPhaseHandler

logger = logging.getLogger(__name__)


def command(method):
    """
    Run a controller method under the lock, then deliver the events it queued.

    Listeners only see events once the method has finished reading and
    writing state, so a listener may safely issue further commands.
    """
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            try:
                return method(self, *args, **kwargs)
            finally:
                self._flush_events()
    return wrapper


class CulpritHuntGame:
    """Main game controller."""

    def __init__(self, config: Optional[GameConfig] = None, event_emitter: Optional[EventEmitter] = None,
                 clock: Optional[Callable[[], float]] = None, rng: Optional[random.Random] = None):
        self.config = config or default_config
        logging.getLogger("culprit_hunt").setLevel(self.config.log_level.upper())

        self.event_emitter = event_emitter or EventEmitter()
        self.engine = RoundEngine(random_seed=self.config.random_seed, rng=rng)
        self.tracker = SeasonTracker(self.engine, initial_rounds=self.config.initial_rounds)

        self.scheduler = TimerScheduler(clock) if clock else TimerScheduler()
        self.viewing_handler = ViewingPhaseHandler(self.scheduler, self._on_view_expired, self.config)
        self.accusation_handler = AccusationPhaseHandler(self.scheduler, self._on_accusation_expired, self.config)

        self.announcements: List[str] = []
        self._season: Optional[SeasonState] = None
        self._pending_events: List[GameEvent] = []
        # Commands, queries and timer callbacks are serialised; tick() re-enters through callbacks
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @command
    def start_season(self, player_names: Optional[Sequence[str]] = None) -> SeasonState:
        """Start a new season, replacing any existing one."""
        names = list(player_names) if player_names is not None else list(self.config.default_player_names)
        season = self.tracker.start_season(names)
        self._stop_timers()
        self._season = season
        self.announcements = []
        self._publish(SeasonStarted(player_names=list(season.player_names)))
        self._announce_round_start()
        return self.season

    @command
    def open_role_view(self, player_id: int) -> Optional[Role]:
        """
        Show a player their role privately and start the auto-close timer.
        Returns the role, or None if the player has already seen it.
        """
        round_state = self._require_round("view role")
        if not is_valid_player_id(player_id):
            raise InvalidPlayerError(player_id)
        if player_id in round_state.revealed_viewers:
            return None
        if round_state.phase != RoundPhase.VIEWING:
            raise InvalidPhaseError("view role")
        if self.viewing_handler.is_viewing() and self.viewing_handler.viewing_player != player_id:
            raise InvalidPhaseError(
                "view role", f"Player {self.viewing_handler.viewing_player} is still viewing their role"
            )
        self.viewing_handler.open_view(round_state.round_number, player_id)
        return round_state.get_player(player_id).role

    @command
    def view_role(self, player_id: int, by_timer: bool = False) -> RoundState:
        """Acknowledge that a player has seen their role. Repeats are no-ops."""
        round_state = self._require_round("view role")
        updated = self.engine.mark_viewed(round_state, player_id)
        self.viewing_handler.close_view(player_id)
        if updated is round_state:
            return copy.deepcopy(round_state)

        self._season = self.tracker.update_current_round(self._season, updated)
        self._publish(RoleViewed(
            round_number=updated.round_number, player_id=player_id, by_timer=by_timer,
        ))
        if updated.all_viewed:
            self._open_accusation(updated)
        return copy.deepcopy(updated)

    @command
    def accuse(self, player_id: int) -> ResolutionSummary:
        """The investigator accuses one of the two suspects."""
        round_state = self._require_round("accuse")
        return self._resolve(lambda: self.engine.resolve_accusation(round_state, player_id))

    @command
    def timeout_accusation(self) -> ResolutionSummary:
        """Resolve the round as if the accusation window ran out."""
        round_state = self._require_round("time out accusation")
        return self._resolve(lambda: self.engine.resolve_timeout(round_state))

    @command
    def advance_round(self) -> RoundState:
        """Move on to the next round once the current one is resolved."""
        self._season = self.tracker.advance(self._require_season("advance round"))
        self._stop_timers()
        self._announce_round_start()
        return self.current_round

    @command
    def end_season(self) -> SeasonState:
        """Stop play and show final standings. Timers are cancelled."""
        self._season = self.tracker.end_season(self._require_season("end season"))
        self._stop_timers()
        self._publish(SeasonEnded(round_number=self._season.current_round_number))
        self.announce("The season is over.")
        return self.season

    @command
    def resume_season(self) -> SeasonState:
        """Reopen an ended season where it left off."""
        if self._season is None:
            raise InvalidPhaseError("resume season", "No season to resume")
        self._season = self.tracker.resume_season(self._season)
        self._publish(SeasonResumed(round_number=self._season.current_round_number))
        round_state = self._season.current_round
        if round_state is not None and round_state.phase == RoundPhase.ACCUSING:
            self._open_accusation(round_state)
        return self.season

    @command
    def reset_season(self) -> None:
        """Discard the season entirely and cancel every timer."""
        self._stop_timers()
        self._season = None
        self.announcements = []
        self._publish(SeasonReset())
        logger.info("Season reset")

    @command
    def tick(self, now: Optional[float] = None) -> List:
        """Fire any expired timers. Returns the keys of the timers that fired."""
        return self.scheduler.tick(now)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def season(self) -> Optional[SeasonState]:
        """Read-only snapshot of the season."""
        with self._lock:
            return copy.deepcopy(self._season) if self._season is not None else None

    @property
    def current_round(self) -> Optional[RoundState]:
        with self._lock:
            if self._season is None or self._season.current_round is None:
                return None
            return copy.deepcopy(self._season.current_round)

    @property
    def phase(self) -> Optional[RoundPhase]:
        with self._lock:
            round_state = self._season.current_round if self._season else None
            return round_state.phase if round_state else None

    def winner(self) -> List[PlayerRoundRecord]:
        with self._lock:
            if self._season is None:
                return []
            return self.tracker.winner(self._season)

    def badge_holders(self) -> Dict[BadgeKind, Optional[int]]:
        with self._lock:
            if self._season is None:
                return {kind: None for kind in BadgeKind}
            return dict(self._season.badges)

    def badges_for(self, player_id: int) -> List[BadgeKind]:
        """Badges a player currently holds."""
        with self._lock:
            if self._season is None:
                return []
            return badges_held_by(self._season.badges, player_id)

    def totals(self) -> Dict[int, int]:
        with self._lock:
            if self._season is None:
                return {}
            return self._season.get_totals()

    def public_roles(self) -> Dict[int, Role]:
        """Roles everyone may see: the Investigator and Fixer once all four have viewed."""
        with self._lock:
            round_state = self._season.current_round if self._season else None
            if round_state is None or round_state.phase == RoundPhase.PENDING:
                return {}
            if round_state.phase == RoundPhase.RESOLVED:
                return {p.player_id: p.role for p in round_state.players}
            if round_state.phase == RoundPhase.ACCUSING:
                return {
                    round_state.investigator_id: Role.INVESTIGATOR,
                    round_state.fixer_id: Role.FIXER,
                }
            return {}

    def suspects(self) -> List[int]:
        """The players the investigator may accuse, once the accusation window is open."""
        with self._lock:
            round_state = self._season.current_round if self._season else None
            if round_state is None or round_state.phase != RoundPhase.ACCUSING:
                return []
            return round_state.get_suspects()

    def view_time_left(self) -> Optional[float]:
        with self._lock:
            return self.viewing_handler.time_left()

    def accusation_time_left(self) -> Optional[float]:
        with self._lock:
            return self.accusation_handler.time_left()

    def announce(self, message: str) -> None:
        """Make a moderator announcement."""
        if self.config.use_announcements:
            self.announcements.append(message)
            logger.info("[MODERATOR] %s", message)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _publish(self, event: GameEvent) -> None:
        """Queue an event for delivery once the running command finishes."""
        self._pending_events.append(event)

    def _flush_events(self) -> None:
        # A listener may issue a command that flushes too; popping keeps delivery in order
        while self._pending_events:
            self.event_emitter.emit(self._pending_events.pop(0))

    def _require_season(self, action: str) -> SeasonState:
        if self._season is None:
            raise InvalidPhaseError(action, "No season has been started")
        if self._season.ended:
            raise InvalidPhaseError(action, "The season has ended")
        return self._season

    def _require_round(self, action: str) -> RoundState:
        season = self._require_season(action)
        round_state = season.current_round
        if round_state is None:
            raise InvalidPhaseError(action, "No active round")
        return round_state

    def _resolve(self, resolve_fn) -> ResolutionSummary:
        """Commit a resolution through the engine and the tracker, or change nothing."""
        resolved_round, _ = resolve_fn()
        season, events = self.tracker.apply_resolution(self._season, resolved_round)
        self._season = season
        self.accusation_handler.close()

        # The stored summary includes any streak bonus
        summary = next(event.summary for event in events if isinstance(event, RoundResolved))
        for event in events:
            self._publish(event)
        self._announce_resolution(summary)
        return summary

    def _open_accusation(self, round_state: RoundState) -> None:
        seconds = self.accusation_handler.open(round_state.round_number)
        self._publish(AccusationOpened(
            round_number=round_state.round_number,
            investigator_id=round_state.investigator_id,
            fixer_id=round_state.fixer_id,
            seconds=seconds,
        ))
        investigator = round_state.get_player(round_state.investigator_id)
        self.announce(f"{investigator.name}, it's your turn to accuse!")

    def _stop_timers(self) -> None:
        self.viewing_handler.reset()
        self.accusation_handler.close()
        self.scheduler.cancel_all()

    def _announce_round_start(self) -> None:
        round_state = self._season.current_round
        self._publish(RoundStarted(
            round_number=round_state.round_number, round_type=round_state.round_type,
        ))
        self.announce(
            f"Round {round_state.round_number} begins. "
            f"The Investigator is hunting {round_state.round_type.culprit_role}."
        )

    def _announce_resolution(self, summary: ResolutionSummary) -> None:
        culprit = self._season.player_names[summary.culprit_id]
        if summary.correct:
            accused = self._season.player_names[summary.accused_id]
            self.announce(f"Correct! {accused} was {summary.culprit_role}.")
        elif summary.timed_out:
            self.announce(f"Time ran out! {culprit} was {summary.culprit_role}.")
        else:
            self.announce(f"Incorrect. {culprit} was {summary.culprit_role}.")

    def _on_view_expired(self, round_number: int, player_id: int) -> None:
        """The private view timer ran out: treat it as an acknowledgment."""
        if not self._is_current(round_number):
            return
        try:
            self.view_role(player_id, by_timer=True)
        except InvalidPhaseError as e:
            logger.warning("View timer for player %d ignored: %s", player_id, e)

    def _on_accusation_expired(self, round_number: int) -> None:
        """The accusation window ran out without a manual accusation."""
        if not self._is_current(round_number):
            return
        try:
            self.timeout_accusation()
        except InvalidPhaseError as e:
            # A manual accusation got there first
            logger.warning("Accusation timer for round %d ignored: %s", round_number, e)

    def _is_current(self, round_number: int) -> bool:
        season = self._season
        if season is None or season.ended or season.current_round is None:
            return False
        return season.current_round.round_number == round_number
