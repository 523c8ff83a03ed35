from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest

from game.logic.enums import Orientation, ShipType
from game.logic.player import MatchPlayer
from game.logic.types import AttackHit, AttackInput, AttackMiss, AttackRecord, CellPosition, ShipPlacement

if TYPE_CHECKING:
    from collections.abc import Mapping


# ============================================================================
# Test State Builder Helpers
# ============================================================================


class FakeClock:
    """Deterministic millisecond clock; each call advances by ``step``."""

    def __init__(self, start: int = 1_000, step: int = 10) -> None:
        self.now = start
        self.step = step

    def __call__(self) -> int:
        current = self.now
        self.now += self.step
        return current


def placement(x: int, y: int, orientation: Orientation = Orientation.HORIZONTAL) -> ShipPlacement:
    return ShipPlacement(origin=CellPosition(x, y), orientation=orientation)


def spread_layout() -> dict[ShipType, ShipPlacement]:
    """A layout on a 5x5 board with ships on separate rows and columns."""
    return {
        ShipType.CARRIER: placement(1, 0),  # (1,0)..(4,0)
        ShipType.BATTLESHIP: placement(0, 1, Orientation.VERTICAL),  # (0,1)..(0,3)
        ShipType.DESTROYER: placement(2, 2),  # (2,2),(3,2)
        ShipType.SUBMARINE: placement(4, 4),  # (4,4)
    }


def create_player(  # noqa: PLR0913
    uuid: str = "player-1",
    username: str = "East Voice",
    *,
    match: str = "match-1",
    is_ai: bool = False,
    score: object = 0,
    layout: Mapping[ShipType, Any] | None = None,
    clock: FakeClock | None = None,
) -> MatchPlayer:
    """Create a MatchPlayer with an unconfirmed board built from ``layout``."""
    return MatchPlayer(
        uuid=uuid,
        username=username,
        match=match,
        is_ai=is_ai,
        score=score,
        placement=layout if layout is not None else spread_layout(),
        clock=clock or FakeClock(),
    )


def create_record(ts: int, x: int, y: int, *, hit: bool, destroyed: bool = False) -> AttackRecord:
    """Create an outgoing attack record with an explicit timestamp."""
    origin = CellPosition(x, y)
    result = AttackHit(origin=origin, type=ShipType.DESTROYER, destroyed=destroyed) if hit else AttackMiss(origin=origin)
    return AttackRecord(ts=ts, attack=AttackInput(origin=origin), result=result)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def player(clock):
    return create_player(clock=clock)


@pytest.fixture
def opponent():
    return create_player(uuid="player-2", username="West Voice", clock=FakeClock(start=5_000))
