"""
String enum definitions for naval combat game concepts.
"""

from enum import Enum


class ShipType(str, Enum):
    """
    Kinds of ship a player places on their board.

    Declaration order is significant: attack resolution visits ships in this order.
    """

    CARRIER = "Carrier"
    BATTLESHIP = "Battleship"
    DESTROYER = "Destroyer"
    SUBMARINE = "Submarine"


class Orientation(str, Enum):
    """Direction a ship extends from its origin cell."""

    HORIZONTAL = "horizontal"  # along the x-axis
    VERTICAL = "vertical"  # along the y-axis
