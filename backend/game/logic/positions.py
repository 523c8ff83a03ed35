"""
Ship geometry: expand placements into the individual cells a ship covers.

Bounds and overlap checks belong to the placement validator that runs before
a placement reaches the player state; everything here is pure geometry.
"""

from collections.abc import Mapping

from game.logic.enums import Orientation, ShipType
from game.logic.exceptions import InvalidBoardError
from game.logic.settings import GameSettings
from game.logic.types import CellPosition, ShipCell, ShipPlacement, StoredShip


def expand_cells(origin: CellPosition, orientation: Orientation, size: int) -> list[CellPosition]:
    """
    Return the ``size`` cells covered by a ship, starting at ``origin``.

    Horizontal ships extend along the x-axis, vertical ships along the y-axis,
    in increasing coordinate order.
    """
    if size < 1:
        raise InvalidBoardError(f"ship size must be positive, got {size}")
    x, y = origin
    if orientation == Orientation.HORIZONTAL:
        return [CellPosition(x + i, y) for i in range(size)]
    return [CellPosition(x, y + i) for i in range(size)]


def is_same_origin(a: CellPosition, b: CellPosition) -> bool:
    return a[0] == b[0] and a[1] == b[1]


def create_stored_ship(ship_type: ShipType, placement: ShipPlacement, size: int) -> StoredShip:
    """Build an afloat ship record with every cell unhit."""
    cells = expand_cells(placement.origin, placement.orientation, size)
    return StoredShip(
        type=ship_type,
        origin=placement.origin,
        orientation=placement.orientation,
        sunk=False,
        cells=[ShipCell(origin=cell, hit=False, type=ship_type) for cell in cells],
    )


def create_position_data_with_cells(
    placements: Mapping[ShipType, ShipPlacement],
    settings: GameSettings,
) -> dict[ShipType, StoredShip]:
    """
    Expand every ship placement into a stored ship record.

    Ships are keyed in ShipType declaration order regardless of input order.

    Raises:
        InvalidBoardError: If a placement names a ship type with no configured size

    """
    unknown = [ship_type for ship_type in placements if ship_type not in settings.ship_sizes]
    if unknown:
        raise InvalidBoardError(f"no ship size configured for {[t.value for t in unknown]}")

    return {
        ship_type: create_stored_ship(ship_type, placements[ship_type], settings.size_of(ship_type))
        for ship_type in ShipType
        if ship_type in placements
    }


def check_ship_cell_counts(positions: Mapping[ShipType, StoredShip], settings: GameSettings) -> None:
    """
    Verify every stored ship covers exactly as many cells as its type's size.

    Sunk detection relies on this correspondence, so a mismatch is reported
    instead of being silently accepted.

    Raises:
        InvalidBoardError: On the first ship with an unknown type or wrong cell count

    """
    for ship_type, ship in positions.items():
        expected = settings.ship_sizes.get(ship_type)
        if expected is None:
            raise InvalidBoardError(f"no ship size configured for {ship_type.value}")
        if len(ship.cells) != expected:
            raise InvalidBoardError(f"{ship_type.value} must cover {expected} cells, got {len(ship.cells)}")
