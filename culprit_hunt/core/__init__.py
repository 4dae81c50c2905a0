"""
Core game components: roles, scoring, the round engine and season tracking.
"""

from .roles import Role, RoundType, PLAYER_COUNT, get_role_distribution, get_round_type
from .exceptions import GameRuleError, InvalidPlayerError, InvalidPhaseError, InvalidRoleError
from .player import PlayerRoundRecord
from .scoring import score, STREAK_BONUS_POINTS, STREAK_BONUS_LENGTH
from .round_engine import RoundEngine, RoundState, RoundPhase, ResolutionSummary, build_summary
from .badges import BadgeKind, BadgeInfo, BADGE_CATALOG, BADGE_THRESHOLD
from .events import (
    GameEvent, SeasonStarted, RoundStarted, RoleViewed, AccusationOpened, RoundResolved,
    StreakBonusAwarded, BadgeAwarded, SeasonEnded, SeasonResumed, SeasonReset,
)
from .season import SeasonTracker, SeasonState, PlayerStats, normalize_player_names

__all__ = [
    'Role',
    'RoundType',
    'PLAYER_COUNT',
    'get_role_distribution',
    'get_round_type',
    'GameRuleError',
    'InvalidPlayerError',
    'InvalidPhaseError',
    'InvalidRoleError',
    'PlayerRoundRecord',
    'score',
    'STREAK_BONUS_POINTS',
    'STREAK_BONUS_LENGTH',
    'RoundEngine',
    'RoundState',
    'RoundPhase',
    'ResolutionSummary',
    'build_summary',
    'BadgeKind',
    'BadgeInfo',
    'BADGE_CATALOG',
    'BADGE_THRESHOLD',
    'GameEvent',
    'SeasonStarted',
    'RoundStarted',
    'RoleViewed',
    'AccusationOpened',
    'RoundResolved',
    'StreakBonusAwarded',
    'BadgeAwarded',
    'SeasonEnded',
    'SeasonResumed',
    'SeasonReset',
    'SeasonTracker',
    'SeasonState',
    'PlayerStats',
    'normalize_player_names',
]
