"""Ship size table, default layout, and injectable game settings."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field, field_validator

from game.logic.enums import Orientation, ShipType
from game.logic.exceptions import UnsupportedSettingsError
from game.logic.types import CellPosition, ShipPlacement

# number of cells each ship type occupies
SHIP_SIZES: Mapping[ShipType, int] = MappingProxyType(
    {
        ShipType.CARRIER: 4,
        ShipType.BATTLESHIP: 3,
        ShipType.DESTROYER: 2,
        ShipType.SUBMARINE: 1,
    },
)

# Unconfirmed starting layout for a 5x5 board; players re-place before confirming.
DEFAULT_SHIP_LAYOUT: Mapping[ShipType, ShipPlacement] = MappingProxyType(
    {
        ShipType.CARRIER: ShipPlacement(origin=CellPosition(0, 0), orientation=Orientation.HORIZONTAL),
        ShipType.BATTLESHIP: ShipPlacement(origin=CellPosition(0, 1), orientation=Orientation.HORIZONTAL),
        ShipType.DESTROYER: ShipPlacement(origin=CellPosition(0, 2), orientation=Orientation.HORIZONTAL),
        ShipType.SUBMARINE: ShipPlacement(origin=CellPosition(0, 3), orientation=Orientation.HORIZONTAL),
    },
)


class GameSettings(BaseModel):
    """
    Injectable configuration shared by the position expander and player state.

    Defaults reproduce the standard fleet.
    """

    model_config = ConfigDict(frozen=True)

    ship_sizes: Mapping[ShipType, int] = Field(default_factory=lambda: SHIP_SIZES)

    @field_validator("ship_sizes", mode="after")
    @classmethod
    def _freeze_ship_sizes(cls, v: Mapping[ShipType, int]) -> Mapping[ShipType, int]:
        return MappingProxyType(dict(v))

    def size_of(self, ship_type: ShipType) -> int:
        return self.ship_sizes[ship_type]


def validate_settings(settings: GameSettings) -> None:
    """Validate that every ship type has a positive size.

    Raises UnsupportedSettingsError listing every problem found.
    """
    errors: list[str] = []

    missing = [ship_type.value for ship_type in ShipType if ship_type not in settings.ship_sizes]
    if missing:
        errors.append(f"ship_sizes is missing entries for {missing}")

    for ship_type, size in settings.ship_sizes.items():
        if size < 1:
            errors.append(f"ship_sizes[{ship_type.value}]={size} must be positive")

    if errors:
        raise UnsupportedSettingsError("; ".join(errors))
