"""
Accusation phase handler: the investigator's countdown.
"""

import logging
from typing import Callable, Optional

from ..config.game_config import GameConfig, default_config
from .timers import TimerScheduler

logger = logging.getLogger(__name__)

ACCUSATION_TIMER_KEY = "accusation"


class AccusationPhaseHandler:
    """
    Runs the accusation timer. It starts when the fourth role view is
    acknowledged and is cancelled by a manual accusation; if it elapses,
    `on_expired(round_number)` is called to time the round out.
    """

    def __init__(self, scheduler: TimerScheduler, on_expired: Callable[[int], None],
                 config: GameConfig = default_config):
        self.scheduler = scheduler
        self.on_expired = on_expired
        self.config = config
        self.round_number: Optional[int] = None

    def open(self, round_number: int) -> float:
        """Start the countdown for `round_number`. Returns its length in seconds."""
        self.round_number = round_number
        self.scheduler.schedule(
            ACCUSATION_TIMER_KEY,
            self.config.accusation_seconds,
            lambda: self.on_expired(round_number),
        )
        logger.debug("Round %d: accusation window open for %.1fs", round_number, self.config.accusation_seconds)
        return self.config.accusation_seconds

    def close(self) -> None:
        self.scheduler.cancel(ACCUSATION_TIMER_KEY)
        self.round_number = None

    def is_open(self) -> bool:
        return self.scheduler.is_active(ACCUSATION_TIMER_KEY)

    def time_left(self) -> Optional[float]:
        return self.scheduler.remaining(ACCUSATION_TIMER_KEY)
