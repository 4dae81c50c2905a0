"""
Notification records the game hands to its driver.
"""

from dataclasses import asdict, dataclass
from typing import Any, ClassVar, Dict, Optional

from .badges import BadgeKind
from .roles import RoundType
from .round_engine import ResolutionSummary


@dataclass
class GameEvent:
    """Base class for all emitted events."""
    kind: ClassVar[str] = "event"

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["kind"] = self.kind
        return data


@dataclass
class SeasonStarted(GameEvent):
    kind: ClassVar[str] = "season_started"
    player_names: list


@dataclass
class RoundStarted(GameEvent):
    kind: ClassVar[str] = "round_started"
    round_number: int
    round_type: RoundType


@dataclass
class RoleViewed(GameEvent):
    kind: ClassVar[str] = "role_viewed"
    round_number: int
    player_id: int
    by_timer: bool = False


@dataclass
class AccusationOpened(GameEvent):
    kind: ClassVar[str] = "accusation_opened"
    round_number: int
    investigator_id: int
    fixer_id: int
    seconds: float


@dataclass
class RoundResolved(GameEvent):
    kind: ClassVar[str] = "round_resolved"
    summary: ResolutionSummary


@dataclass
class StreakBonusAwarded(GameEvent):
    kind: ClassVar[str] = "streak_bonus"
    round_number: int
    player_id: int
    bonus_points: int
    streak: int
    title: str
    flavor_key: str


@dataclass
class BadgeAwarded(GameEvent):
    kind: ClassVar[str] = "badge_awarded"
    round_number: int
    badge: BadgeKind
    player_id: int
    previous_holder: Optional[int]
    count: int
    title: str
    flavor_key: str


@dataclass
class SeasonEnded(GameEvent):
    kind: ClassVar[str] = "season_ended"
    round_number: int


@dataclass
class SeasonResumed(GameEvent):
    kind: ClassVar[str] = "season_resumed"
    round_number: int


@dataclass
class SeasonReset(GameEvent):
    kind: ClassVar[str] = "season_reset"
