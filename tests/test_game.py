"""
Integration tests for the game controller: commands, timers and events.
"""

import threading

import pytest
from unittest.mock import Mock

from culprit_hunt import CulpritHuntGame, EventEmitter
from culprit_hunt.config.game_config import GameConfig
from culprit_hunt.core import (
    AccusationOpened, BadgeKind, InvalidPhaseError, InvalidPlayerError, Role, RoleViewed,
    RoundPhase, RoundResolved, RoundStarted, SeasonStarted, StreakBonusAwarded,
)

from conftest import STANDARD_ROLES, FixedRoleDealer


@pytest.fixture
def game(game_config, clock):
    """Game that always deals P0 Investigator, P1 Fixer, P2 Culprit A, P3 Culprit B."""
    game = CulpritHuntGame(game_config, clock=clock, rng=FixedRoleDealer(STANDARD_ROLES))
    game.start_season(["Ana", "Bo", "Cy", "Di"])
    return game


def view_everyone(game):
    for player_id in range(4):
        game.view_role(player_id)


def kinds(game):
    return [event.kind for event in game.event_emitter.get_history()]


def test_start_season(game):
    season = game.season
    assert season.player_names == ["Ana", "Bo", "Cy", "Di"]
    assert game.phase == RoundPhase.VIEWING
    assert game.current_round.round_number == 1
    assert kinds(game) == [SeasonStarted.kind, RoundStarted.kind]


def test_start_season_uses_default_names(game_config, clock):
    game = CulpritHuntGame(game_config, clock=clock)
    game.start_season()
    assert game.season.player_names == ["Player 1", "Player 2", "Player 3", "Player 4"]


def test_commands_before_start_are_rejected(game_config):
    game = CulpritHuntGame(game_config)
    with pytest.raises(InvalidPhaseError):
        game.view_role(0)
    with pytest.raises(InvalidPhaseError):
        game.accuse(2)
    assert game.season is None
    assert game.winner() == []
    assert all(holder is None for holder in game.badge_holders().values())


def test_season_snapshot_is_read_only(game):
    snapshot = game.season
    snapshot.rounds[0].revealed_viewers.add(0)
    assert game.current_round.revealed_viewers == set()


def test_end_to_end_correct_accusation(game):
    """Round 1 (Type A): P0 accuses P2 correctly."""
    view_everyone(game)
    assert game.phase == RoundPhase.ACCUSING
    assert game.suspects() == [2, 3]
    assert game.public_roles() == {0: Role.INVESTIGATOR, 1: Role.FIXER}

    summary = game.accuse(2)

    assert summary.correct
    assert summary.round_scores == {0: 80, 1: 100, 2: 0, 3: 60}
    assert game.totals() == {0: 80, 1: 100, 2: 0, 3: 60}
    assert game.phase == RoundPhase.RESOLVED
    assert game.accusation_time_left() is None
    assert [w.player_id for w in game.winner()] == [1]


def test_end_to_end_accusation_timeout(game, clock):
    """Nobody accuses: the accusation timer resolves the round as a timeout."""
    view_everyone(game)
    assert game.accusation_time_left() == pytest.approx(25.0)

    clock.advance(24.9)
    game.tick()
    assert game.phase == RoundPhase.ACCUSING

    clock.advance(0.1)
    game.tick()

    round_state = game.current_round
    assert round_state.resolved
    assert round_state.timed_out
    assert round_state.accusation is None
    assert round_state.get_round_scores() == {0: 0, 1: 100, 2: 40, 3: 60}
    season = game.season
    assert season.stats[2].culprit_escaped == 1
    assert season.stats[0].investigator_wrong == 1
    resolved = game.event_emitter.get_history(RoundResolved.kind)
    assert len(resolved) == 1
    assert resolved[0].summary.timed_out


def test_accusation_timer_starts_on_fourth_view(game):
    for player_id in range(3):
        game.view_role(player_id)
        assert game.accusation_time_left() is None
    game.view_role(3)
    opened = game.event_emitter.get_history(AccusationOpened.kind)
    assert len(opened) == 1
    assert opened[0].investigator_id == 0
    assert opened[0].fixer_id == 1
    assert opened[0].seconds == 25.0


def test_duplicate_view_is_noop(game):
    game.view_role(1)
    game.view_role(1)
    assert game.current_round.revealed_viewers == {1}
    assert len(game.event_emitter.get_history(RoleViewed.kind)) == 1


def test_view_invalid_player(game):
    with pytest.raises(InvalidPlayerError):
        game.view_role(7)
    with pytest.raises(InvalidPlayerError):
        game.open_role_view(-1)


def test_accuse_before_all_viewed(game):
    game.view_role(0)
    with pytest.raises(InvalidPhaseError):
        game.accuse(2)
    with pytest.raises(InvalidPhaseError):
        game.timeout_accusation()
    assert game.current_round.accusation is None


def test_private_view_auto_closes(game, clock):
    """An elapsed view timer counts as the player's acknowledgment."""
    role = game.open_role_view(2)
    assert role == Role.CULPRIT_A
    assert game.view_time_left() == pytest.approx(3.0)

    clock.advance(3.0)
    game.tick()

    assert game.current_round.revealed_viewers == {2}
    viewed = game.event_emitter.get_history(RoleViewed.kind)
    assert viewed[-1].by_timer


def test_dismissing_view_cancels_its_timer(game, clock):
    game.open_role_view(0)
    game.view_role(0)
    assert game.view_time_left() is None
    clock.advance(10)
    assert game.tick() == []
    assert len(game.event_emitter.get_history(RoleViewed.kind)) == 1


def test_one_private_view_at_a_time(game):
    game.open_role_view(0)
    with pytest.raises(InvalidPhaseError):
        game.open_role_view(1)
    game.view_role(0)
    assert game.open_role_view(1) == Role.FIXER


def test_reopening_a_seen_role_is_noop(game):
    game.view_role(3)
    assert game.open_role_view(3) is None
    assert game.view_time_left() is None


def test_views_by_timer_open_accusation(game, clock):
    for player_id in range(4):
        game.open_role_view(player_id)
        clock.advance(3.0)
        game.tick()
    assert game.phase == RoundPhase.ACCUSING
    assert game.accusation_time_left() == pytest.approx(25.0)


def test_manual_accusation_cancels_timer(game, clock):
    view_everyone(game)
    game.accuse(3)
    clock.advance(60)
    assert game.tick() == []
    assert len(game.event_emitter.get_history(RoundResolved.kind)) == 1
    assert game.season.stats[0].investigator_wrong == 1


def test_timer_losing_race_does_not_double_score(game):
    """A timeout that arrives after a manual accusation changes nothing."""
    view_everyone(game)
    game.accuse(2)
    totals = game.totals()

    game._on_accusation_expired(1)

    assert game.totals() == totals
    assert len(game.event_emitter.get_history(RoundResolved.kind)) == 1
    with pytest.raises(InvalidPhaseError):
        game.timeout_accusation()
    with pytest.raises(InvalidPhaseError):
        game.accuse(2)


def test_stale_timer_from_previous_round_is_ignored(game):
    view_everyone(game)
    game.accuse(2)
    game.advance_round()
    view_everyone(game)

    game._on_accusation_expired(1)

    assert game.phase == RoundPhase.ACCUSING


def test_advance_round(game):
    with pytest.raises(InvalidPhaseError):
        game.advance_round()
    view_everyone(game)
    game.accuse(2)

    round_state = game.advance_round()

    assert round_state.round_number == 2
    assert round_state.phase == RoundPhase.VIEWING
    assert [p.cumulative_score for p in round_state.players] == [80, 100, 0, 60]
    assert kinds(game).count(RoundStarted.kind) == 2


def test_streak_bonus_event(game):
    for round_number in range(1, 4):
        view_everyone(game)
        summary = game.accuse(game.current_round.live_culprit_id)
        if round_number < 3:
            game.advance_round()

    assert summary.round_scores[0] == 180
    bonus = game.event_emitter.get_history(StreakBonusAwarded.kind)
    assert len(bonus) == 1
    assert bonus[0].player_id == 0
    assert game.badge_holders()[BadgeKind.BEST_INVESTIGATOR] == 0
    assert game.badge_holders()[BadgeKind.BEST_FIXER] == 1
    assert game.badges_for(0) == [BadgeKind.BEST_INVESTIGATOR]
    assert game.badges_for(2) == []


def test_end_season_freezes_play(game, clock):
    view_everyone(game)
    game.end_season()

    clock.advance(60)
    assert game.tick() == []
    with pytest.raises(InvalidPhaseError):
        game.accuse(2)
    with pytest.raises(InvalidPhaseError):
        game.advance_round()
    assert not game.current_round.resolved


def test_resume_restarts_accusation_timer(game, clock):
    view_everyone(game)
    game.end_season()
    game.resume_season()

    assert game.accusation_time_left() == pytest.approx(25.0)
    clock.advance(25)
    game.tick()
    assert game.current_round.timed_out


def test_reset_season(game, clock):
    game.open_role_view(0)
    game.reset_season()

    assert game.season is None
    assert game.phase is None
    clock.advance(10)
    assert game.tick() == []
    assert kinds(game)[-1] == "season_reset"


def test_new_season_replaces_old(game):
    view_everyone(game)
    game.accuse(2)
    game.start_season(["W", "X", "Y", "Z"])

    assert game.totals() == {0: 0, 1: 0, 2: 0, 3: 0}
    assert game.season.stats[0].investigator_correct == 0
    assert game.accusation_time_left() is None


def test_listener_receives_events(game_config, clock):
    emitter = EventEmitter()
    listener = Mock()
    emitter.subscribe(listener)
    game = CulpritHuntGame(game_config, event_emitter=emitter, clock=clock,
                           rng=FixedRoleDealer(STANDARD_ROLES))

    game.start_season()
    view_everyone(game)
    game.accuse(2)

    received = [call.args[0].kind for call in listener.call_args_list]
    assert received[:2] == [SeasonStarted.kind, RoundStarted.kind]
    assert received[-1] == RoundResolved.kind


def test_failing_listener_does_not_break_game(game_config, clock):
    emitter = EventEmitter()
    emitter.subscribe(Mock(side_effect=RuntimeError("render failed")))
    game = CulpritHuntGame(game_config, event_emitter=emitter, clock=clock,
                           rng=FixedRoleDealer(STANDARD_ROLES))

    game.start_season()
    view_everyone(game)
    summary = game.accuse(2)
    assert summary.correct


def test_announcements(clock):
    game = CulpritHuntGame(GameConfig(use_announcements=True), clock=clock,
                           rng=FixedRoleDealer(STANDARD_ROLES))
    game.start_season(["Ana", "Bo", "Cy", "Di"])
    view_everyone(game)
    game.accuse(3)

    assert game.announcements[0].startswith("Round 1 begins")
    assert "Ana, it's your turn to accuse!" in game.announcements
    assert game.announcements[-1] == "Incorrect. Cy was Culprit A."


def listening_game(clock, on_event):
    """Game whose emitter calls `on_event(game, event)` for every event."""
    emitter = EventEmitter()
    game = CulpritHuntGame(GameConfig(use_announcements=True), event_emitter=emitter, clock=clock,
                           rng=FixedRoleDealer(STANDARD_ROLES))
    emitter.subscribe(lambda event: on_event(game, event))
    return game


def test_listener_can_reset_after_resolution(clock):
    """A listener starting over on round_resolved must not break the accusation."""
    def on_event(game, event):
        if isinstance(event, RoundResolved):
            game.reset_season()

    game = listening_game(clock, on_event)
    game.start_season(["Ana", "Bo", "Cy", "Di"])
    view_everyone(game)

    summary = game.accuse(2)

    assert summary.correct
    assert game.season is None
    assert kinds(game)[-2:] == [RoundResolved.kind, "season_reset"]


def test_listener_can_advance_after_resolution(clock):
    """The result is announced before the next round, whoever triggers it."""
    def on_event(game, event):
        if isinstance(event, RoundResolved):
            game.advance_round()

    game = listening_game(clock, on_event)
    game.start_season(["Ana", "Bo", "Cy", "Di"])
    view_everyone(game)

    game.accuse(3)

    assert game.current_round.round_number == 2
    assert game.announcements[-2:] == [
        "Incorrect. Cy was Culprit A.",
        "Round 2 begins. The Investigator is hunting Culprit B.",
    ]
    started = game.event_emitter.get_history(RoundStarted.kind)
    assert [event.round_number for event in started] == [1, 2]
    assert kinds(game)[-2:] == [RoundResolved.kind, RoundStarted.kind]


def test_listener_can_reset_on_season_start(clock):
    def on_event(game, event):
        if isinstance(event, SeasonStarted):
            game.reset_season()

    game = listening_game(clock, on_event)
    season = game.start_season(["Ana", "Bo", "Cy", "Di"])

    assert season.player_names == ["Ana", "Bo", "Cy", "Di"]
    assert game.season is None
    assert kinds(game) == [SeasonStarted.kind, RoundStarted.kind, "season_reset"]


def test_queries_wait_for_the_controller_lock(game):
    """Queries from another thread are serialised with commands."""
    results = []
    with game._lock:
        reader = threading.Thread(target=lambda: results.append(game.totals()))
        reader.start()
        reader.join(timeout=0.2)
        assert reader.is_alive()
        assert results == []
    reader.join(timeout=5)
    assert results == [{0: 0, 1: 0, 2: 0, 3: 0}]
