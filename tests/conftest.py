"""
Pytest fixtures for Culprit Hunt tests.
"""

import pytest
from typing import List, Optional, Sequence

from culprit_hunt.core import Role, RoundEngine, SeasonTracker
from culprit_hunt.config.game_config import GameConfig


# P0 Investigator, P1 Fixer, P2 Culprit A, P3 Culprit B
STANDARD_ROLES = [Role.INVESTIGATOR, Role.FIXER, Role.CULPRIT_A, Role.CULPRIT_B]


class FixedRoleDealer:
    """
    Stand-in for random.Random whose shuffle deals a scripted sequence of
    role orders, one per call. The last order repeats once the script runs out.
    """

    def __init__(self, *orders: Sequence[Role]):
        self.orders: List[List[Role]] = [list(order) for order in (orders or [STANDARD_ROLES])]
        self.calls = 0

    def shuffle(self, roles: list) -> None:
        order = self.orders[min(self.calls, len(self.orders) - 1)]
        self.calls += 1
        roles[:] = order


class FakeClock:
    """Manually advanced clock for deterministic timers."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now


@pytest.fixture
def game_config():
    """Test game configuration."""
    return GameConfig(
        random_seed=1234,
        use_announcements=False  # Disable for cleaner test output
    )


@pytest.fixture
def engine():
    """Seeded round engine."""
    return RoundEngine(random_seed=42)


@pytest.fixture
def standard_engine():
    """Round engine that always deals STANDARD_ROLES."""
    return RoundEngine(rng=FixedRoleDealer(STANDARD_ROLES))


@pytest.fixture
def tracker(standard_engine):
    return SeasonTracker(standard_engine)


@pytest.fixture
def season(tracker):
    return tracker.start_season(["Ana", "Bo", "Cy", "Di"])


@pytest.fixture
def clock():
    return FakeClock()


def view_all(engine: RoundEngine, round_state):
    """Mark all four players as having viewed their role."""
    for player_id in range(4):
        round_state = engine.mark_viewed(round_state, player_id)
    return round_state


def wrong_suspect(round_state) -> int:
    """The suspect who is not this round's live culprit."""
    return next(pid for pid in round_state.get_suspects() if pid != round_state.live_culprit_id)


def play_round(tracker: SeasonTracker, season, correct: Optional[bool]):
    """
    Play the season's current round to resolution and fold it in.
    correct=None resolves by timeout. Returns (season, events).
    """
    engine = tracker.engine
    round_state = view_all(engine, season.current_round)
    if correct is None:
        resolved, _ = engine.resolve_timeout(round_state)
    elif correct:
        resolved, _ = engine.resolve_accusation(round_state, round_state.live_culprit_id)
    else:
        resolved, _ = engine.resolve_accusation(round_state, wrong_suspect(round_state))
    return tracker.apply_resolution(season, resolved)
