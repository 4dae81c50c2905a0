"""
Per-round player record.
"""

from dataclasses import dataclass
from typing import Optional

from .roles import Role


@dataclass
class PlayerRoundRecord:
    """One player's seat in one round."""
    player_id: int
    name: str
    role: Optional[Role] = None  # None until roles are assigned
    round_score: int = 0
    cumulative_score: int = 0  # Running total as of the end of this round

    def __str__(self) -> str:
        role_name = str(self.role) if self.role else "unassigned"
        return f"{self.name} ({role_name})"

    @property
    def has_role(self) -> bool:
        """Check if a role has been dealt to this seat."""
        return self.role is not None
