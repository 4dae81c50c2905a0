"""
Culprit Hunt: a four-player, same-room hidden-role deduction game core.
"""

from .game import CulpritHuntGame
from .event_emitter import EventEmitter
from .config import GameConfig, default_config, load_config

__all__ = ['CulpritHuntGame', 'EventEmitter', 'GameConfig', 'default_config', 'load_config']
