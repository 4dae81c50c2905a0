"""
Phase handlers for the viewing and accusation phases, and the timers behind them.
"""

from .timers import TimerScheduler, PhaseTimer
from .viewing_phase import ViewingPhaseHandler
from .accusation_phase import AccusationPhaseHandler

__all__ = ['TimerScheduler', 'PhaseTimer', 'ViewingPhaseHandler', 'AccusationPhaseHandler']
