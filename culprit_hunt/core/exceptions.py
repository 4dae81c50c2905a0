"""
Exceptions for rejected game commands.

Every command validates before it mutates anything, so catching one of
these means the state the caller holds is exactly as it was.
"""

from typing import Optional


class GameRuleError(Exception):
    """Base class for all rejected game commands."""


class InvalidPlayerError(GameRuleError):
    """Raised when a player id is outside 0..3 or not a legal target."""

    def __init__(self, player_id: object, message: str = ""):
        self.player_id = player_id
        self.message = message or f"Invalid player id: {player_id!r}"
        super().__init__(self.message)


class InvalidPhaseError(GameRuleError):
    """Raised when an action is attempted before its precondition holds."""

    def __init__(self, action: str, message: str = ""):
        self.action = action
        self.message = message or f"Cannot {action} in the current phase"
        super().__init__(self.message)


class InvalidRoleError(GameRuleError):
    """
    Raised when a role lookup finds zero or several holders.
    Unreachable while role assignment stays a permutation; signals a defect.
    """

    def __init__(self, role: object, holders: Optional[list] = None, message: str = ""):
        self.role = role
        self.holders = holders or []
        self.message = message or f"Expected exactly one holder of {role}, found {self.holders}"
        super().__init__(self.message)
