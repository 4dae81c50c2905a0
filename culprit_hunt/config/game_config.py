"""
Game configuration and constants.
"""

from dataclasses import dataclass, field
from typing import List, Optional


def _default_player_names() -> List[str]:
    return [f"Player {n}" for n in range(1, 5)]


@dataclass
class GameConfig:
    """Configuration for game parameters."""

    # Time limits
    role_view_seconds: float = 3.0  # Private role view auto-closes after this
    accusation_seconds: float = 25.0  # Investigator must accuse within this

    # Game settings
    initial_rounds: int = 10  # Rounds scaffolded when a season starts
    random_seed: Optional[int] = None  # Random seed for reproducible role dealing
    default_player_names: List[str] = field(default_factory=_default_player_names)

    # Logging
    log_level: str = "INFO"
    use_announcements: bool = True  # Log moderator-style announcements

    def __post_init__(self):
        if self.role_view_seconds <= 0:
            raise ValueError(f"role_view_seconds must be positive, got {self.role_view_seconds}")
        if self.accusation_seconds <= 0:
            raise ValueError(f"accusation_seconds must be positive, got {self.accusation_seconds}")
        if self.initial_rounds < 1:
            raise ValueError(f"initial_rounds must be at least 1, got {self.initial_rounds}")
        if len(self.default_player_names) != 4:
            raise ValueError("default_player_names must hold exactly 4 names")


# Default configuration instance
default_config = GameConfig()
