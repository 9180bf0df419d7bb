"""Direction metadata for collision bytes.

Each tile carries one byte; a set bit means the tile can be LEFT in that
direction. The bit layout is fixed by the collision files:

    bit 0 (1)   West        bit 4 (16)  Northwest
    bit 1 (2)   North       bit 5 (32)  Northeast
    bit 2 (4)   East        bit 6 (64)  Southeast
    bit 3 (8)   South       bit 7 (128) Southwest

North is +y and east is +x. Everything a caller needs to know about a
direction (its bit, its opposite, its step vector, whether it is diagonal)
lives in one ``DirectionInfo`` record, so no code depends on enum ordering.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Iterable, Optional, Tuple

ALL_BITS = 0xFF
DIAGONAL_COST = math.sqrt(2)


class Direction(str, Enum):
    WEST = "west"
    NORTH = "north"
    EAST = "east"
    SOUTH = "south"
    NORTHWEST = "northwest"
    NORTHEAST = "northeast"
    SOUTHEAST = "southeast"
    SOUTHWEST = "southwest"

    @property
    def info(self) -> "DirectionInfo":
        return DIRECTION_INFO[self]

    @property
    def bit(self) -> int:
        return DIRECTION_INFO[self].bit

    @property
    def inverse(self) -> "Direction":
        return DIRECTION_INFO[self].inverse


@dataclass(frozen=True)
class DirectionInfo:
    """Static metadata for one compass direction."""

    direction: Direction
    bit: int
    inverse: Direction
    dx: int
    dy: int
    is_diagonal: bool

    @property
    def cost(self) -> float:
        return DIAGONAL_COST if self.is_diagonal else 1.0


def _build_table() -> Dict[Direction, DirectionInfo]:
    rows = [
        (Direction.WEST, 1, Direction.EAST, -1, 0),
        (Direction.NORTH, 2, Direction.SOUTH, 0, 1),
        (Direction.EAST, 4, Direction.WEST, 1, 0),
        (Direction.SOUTH, 8, Direction.NORTH, 0, -1),
        (Direction.NORTHWEST, 16, Direction.SOUTHEAST, -1, 1),
        (Direction.NORTHEAST, 32, Direction.SOUTHWEST, 1, 1),
        (Direction.SOUTHEAST, 64, Direction.NORTHWEST, 1, -1),
        (Direction.SOUTHWEST, 128, Direction.NORTHEAST, -1, -1),
    ]
    return {
        direction: DirectionInfo(
            direction=direction,
            bit=bit,
            inverse=inverse,
            dx=dx,
            dy=dy,
            is_diagonal=dx != 0 and dy != 0,
        )
        for direction, bit, inverse, dx, dy in rows
    }


DIRECTION_INFO: Dict[Direction, DirectionInfo] = _build_table()

# Expansion order used by the search and by accessibility checks
EXPANSION_ORDER: Tuple[DirectionInfo, ...] = tuple(
    DIRECTION_INFO[d]
    for d in (
        Direction.WEST,
        Direction.EAST,
        Direction.SOUTH,
        Direction.NORTH,
        Direction.SOUTHWEST,
        Direction.SOUTHEAST,
        Direction.NORTHWEST,
        Direction.NORTHEAST,
    )
)

_BY_VECTOR: Dict[Tuple[int, int], Direction] = {
    (info.dx, info.dy): info.direction for info in DIRECTION_INFO.values()
}


def is_direction_free(tile_byte: int, direction: Direction) -> bool:
    """True if ``tile_byte`` allows leaving the tile toward ``direction``."""
    return (tile_byte & DIRECTION_INFO[direction].bit) != 0


def decode_directions(tile_byte: int) -> FrozenSet[Direction]:
    """Return the set of directions a tile byte marks as walkable."""
    return frozenset(
        info.direction for info in DIRECTION_INFO.values() if tile_byte & info.bit
    )


def encode_directions(directions: Iterable[Direction]) -> int:
    """Build a tile byte from a collection of walkable directions."""
    value = 0
    for direction in directions:
        value |= DIRECTION_INFO[direction].bit
    return value


def direction_from_delta(dx: int, dy: int) -> Optional[Direction]:
    """Map a unit step (each component in -1..1) to its direction.

    Returns None for ``(0, 0)`` or vectors that are not a single step.
    """
    return _BY_VECTOR.get((dx, dy))


def direction_towards(from_x: int, from_y: int, to_x: int, to_y: int) -> Optional[Direction]:
    """Direction of the first step from one tile toward another (sign of each axis)."""

    def _sign(value: int) -> int:
        return (value > 0) - (value < 0)

    return direction_from_delta(_sign(to_x - from_x), _sign(to_y - from_y))


def format_bits(tile_byte: int) -> str:
    """Render a byte as eight binary digits, e.g. for debug output."""
    return format(tile_byte & ALL_BITS, "08b")


__all__ = [
    "ALL_BITS",
    "DIAGONAL_COST",
    "Direction",
    "DirectionInfo",
    "DIRECTION_INFO",
    "EXPANSION_ORDER",
    "is_direction_free",
    "decode_directions",
    "encode_directions",
    "direction_from_delta",
    "direction_towards",
    "format_bits",
]
