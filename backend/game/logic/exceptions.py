"""Typed domain exceptions for player state and attack handling.

Domain-level contract violations use subclasses of GameRuleError rather
than raw ValueError, so the match orchestration layer can catch and
convert them at its boundary. Misses and hits on sunk ships are attack
results, never exceptions.
"""


class GameRuleError(Exception):
    """Base exception for game rule and state contract violations."""


class InvalidBoardError(GameRuleError):
    """Ship placement cannot be expanded into a consistent board (wrong cell count, unknown ship)."""


class InvalidPlayerStateError(GameRuleError):
    """A persisted player snapshot failed validation and cannot be rehydrated."""


class UnsupportedSettingsError(GameRuleError):
    """Game settings contain values the engine cannot work with."""


class AttackAlreadyMadeError(GameRuleError):
    """Raised when a player attacks an origin they have already attacked.

    Attributes:
        uuid: The uuid of the attacking player.
        origin: The repeated (x, y) origin.

    """

    def __init__(self, *, uuid: str, origin: tuple[int, int]) -> None:
        self.uuid = uuid
        self.origin = origin
        super().__init__(f"player {uuid} has already attacked {list(origin)}")
