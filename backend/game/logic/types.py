"""
Pydantic models for player board state, attacks and their results.

Contains the persisted player record, the redacted opponent view, and the
tagged attack result union that cross component boundaries.
"""

from __future__ import annotations

import math
from typing import Any, Literal, NamedTuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from game.logic.enums import Orientation, ShipType


class CellPosition(NamedTuple):
    """A single grid cell. Serialized as ``[x, y]``."""

    x: int
    y: int


class ShipPlacement(BaseModel):
    """Validated placement input for one ship: where it starts and which way it extends."""

    model_config = ConfigDict(extra="forbid")

    origin: CellPosition
    orientation: Orientation


# exactly one placement per ship type
ShipPositionData = dict[ShipType, ShipPlacement]


class ShipCell(BaseModel):
    """One cell covered by a ship, tracked individually for hits."""

    model_config = ConfigDict(extra="forbid")

    origin: CellPosition
    hit: bool = False
    type: ShipType


class StoredShip(BaseModel):
    """
    A placed ship with its expanded cells.

    ``sunk`` is derived from the cells and must be refreshed through
    ``refresh_sunk`` whenever a cell's hit flag changes.
    """

    model_config = ConfigDict(extra="forbid")

    type: ShipType
    origin: CellPosition
    orientation: Orientation
    sunk: bool = False
    cells: list[ShipCell]

    @model_validator(mode="after")
    def _validate_cells(self) -> StoredShip:
        foreign = [cell.origin for cell in self.cells if cell.type != self.type]
        if foreign:
            raise ValueError(f"{self.type.value} has cells belonging to another ship: {foreign}")
        if self.sunk != self.all_cells_hit():
            raise ValueError(f"{self.type.value} sunk={self.sunk} does not match its cell hit flags")
        return self

    def all_cells_hit(self) -> bool:
        return all(cell.hit for cell in self.cells)

    def find_cell(self, origin: CellPosition) -> ShipCell | None:
        for cell in self.cells:
            if cell.origin == origin:
                return cell
        return None

    def refresh_sunk(self) -> bool:
        """Recompute ``sunk`` from the cells and return the new value."""
        self.sunk = self.all_cells_hit()
        return self.sunk


class BoardState(BaseModel):
    """A player's ship positions plus the flag set once external validation passed."""

    model_config = ConfigDict(extra="forbid")

    valid: bool = False
    positions: dict[ShipType, StoredShip]

    @model_validator(mode="after")
    def _validate_keys(self) -> BoardState:
        mismatched = [key.value for key, ship in self.positions.items() if key != ship.type]
        if mismatched:
            raise ValueError(f"board keys do not match ship types: {mismatched}")
        return self


class OpponentBoard(BaseModel):
    """Board as seen by the opponent: only sunk ships are present."""

    valid: bool
    positions: dict[ShipType, StoredShip] = Field(default_factory=dict)


class AttackInput(BaseModel):
    """
    Incoming attack payload.

    ``prediction`` is opaque metadata attached by the attacking client (e.g. an AI's
    hit probability). It is never read by game logic and is stripped before an attack
    is shown to the opponent.
    """

    model_config = ConfigDict(extra="forbid")

    origin: CellPosition
    prediction: dict[str, Any] | None = None


class AttackMiss(BaseModel):
    """Attack result for a cell not covered by any afloat ship."""

    model_config = ConfigDict(extra="forbid")

    hit: Literal[False] = False
    origin: CellPosition


class AttackHit(BaseModel):
    """Attack result for a cell covered by an afloat ship."""

    model_config = ConfigDict(extra="forbid")

    hit: Literal[True] = True
    origin: CellPosition
    type: ShipType
    destroyed: bool  # true if this attack sank the ship


AttackResult = AttackHit | AttackMiss


class AttackRecord(BaseModel):
    """An attack this player made, stamped with capture time in epoch milliseconds."""

    model_config = ConfigDict(extra="forbid")

    ts: int
    attack: AttackInput
    result: AttackResult


class PlayerRecord(BaseModel):
    """
    Full, unredacted player state.

    This is the shape persisted to the cache and sent to the player who owns it.
    """

    model_config = ConfigDict(extra="forbid")

    uuid: str
    username: str
    score: int = 0
    is_ai: bool = False
    match: str
    board: BoardState
    attacks: list[AttackRecord] = Field(default_factory=list)

    @field_validator("score", mode="before")
    @classmethod
    def _coerce_score(cls, v: object) -> int:
        return coerce_score(v)


class OpponentView(BaseModel):
    """Player state with secret information redacted, sent to the opposing player."""

    username: str
    attacks: list[AttackRecord]
    board: OpponentBoard


def coerce_score(value: object) -> int:
    """
    Coerce a stored score to an int. Non-numeric, NaN and infinite values become 0.
    """
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(number):
        return 0
    return int(number)
