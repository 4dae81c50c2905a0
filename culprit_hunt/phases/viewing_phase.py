"""
Viewing phase handler: the one-at-a-time private role view.
"""

import logging
from typing import Callable, Optional

from ..config.game_config import GameConfig, default_config
from .timers import TimerScheduler

logger = logging.getLogger(__name__)


def view_timer_key(player_id: int) -> tuple:
    return ("view", player_id)


class ViewingPhaseHandler:
    """
    Tracks which player currently has their role on screen and runs the
    short auto-close timer. An elapsed timer counts as an acknowledgment.
    """

    def __init__(self, scheduler: TimerScheduler, on_expired: Callable[[int, int], None],
                 config: GameConfig = default_config):
        self.scheduler = scheduler
        self.on_expired = on_expired  # Called with (round_number, player_id)
        self.config = config
        self.viewing_player: Optional[int] = None

    def open_view(self, round_number: int, player_id: int) -> None:
        """Put a player's role on screen and start its auto-close timer."""
        self.viewing_player = player_id
        self.scheduler.schedule(
            view_timer_key(player_id),
            self.config.role_view_seconds,
            lambda: self.on_expired(round_number, player_id),
        )
        logger.debug("Round %d: player %d is viewing their role", round_number, player_id)

    def close_view(self, player_id: int) -> None:
        """The player dismissed the view (or it timed out)."""
        self.scheduler.cancel(view_timer_key(player_id))
        if self.viewing_player == player_id:
            self.viewing_player = None

    def is_viewing(self) -> bool:
        return self.viewing_player is not None

    def time_left(self) -> Optional[float]:
        if self.viewing_player is None:
            return None
        return self.scheduler.remaining(view_timer_key(self.viewing_player))

    def reset(self) -> None:
        if self.viewing_player is not None:
            self.scheduler.cancel(view_timer_key(self.viewing_player))
        self.viewing_player = None
