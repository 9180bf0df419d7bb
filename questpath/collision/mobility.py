"""Movement abilities (surge, escape, dive, barge) on top of collision data.

Unlike the pathfinder, a straight-line ability step from A to B requires both
A's bit toward B and B's bit back toward A: the ability cannot slide through
one-way edges. All lookups are synchronous, so preload the area first.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .directions import DIRECTION_INFO, Direction, direction_towards, is_direction_free
from .store import CollisionTileStore

SURGE_DISTANCE = 10
ESCAPE_DISTANCE = 7
DIVE_DISTANCE = 10


@dataclass
class MobilityResult:
    """Landing tile, number of tiles moved, and every tile passed through."""

    x: int
    y: int
    distance: int
    tiles: List[Tuple[int, int]] = field(default_factory=list)


def _walk(
    store: CollisionTileStore,
    x: int,
    y: int,
    floor: int,
    direction: Direction,
    max_distance: int,
) -> List[Tuple[int, int]]:
    info = DIRECTION_INFO[direction]
    tiles: List[Tuple[int, int]] = []
    for _ in range(max_distance):
        if not is_direction_free(store.get_tile_sync(x, y, floor), direction):
            break
        next_x, next_y = x + info.dx, y + info.dy
        if not is_direction_free(store.get_tile_sync(next_x, next_y, floor), info.inverse):
            break
        x, y = next_x, next_y
        tiles.append((x, y))
    return tiles


def _result(tiles: List[Tuple[int, int]]) -> Optional[MobilityResult]:
    if not tiles:
        return None
    x, y = tiles[-1]
    return MobilityResult(x=x, y=y, distance=len(tiles), tiles=tiles)


def surge(
    store: CollisionTileStore, x: int, y: int, floor: int, facing: Direction
) -> Optional[MobilityResult]:
    """Move up to 10 tiles in the facing direction; None if the first step is blocked."""
    return _result(_walk(store, x, y, floor, facing, SURGE_DISTANCE))


def escape(
    store: CollisionTileStore, x: int, y: int, floor: int, facing: Direction
) -> Optional[MobilityResult]:
    """Move up to 7 tiles directly away from the facing direction."""
    return _result(_walk(store, x, y, floor, DIRECTION_INFO[facing].inverse, ESCAPE_DISTANCE))


def _dive_toward(
    store: CollisionTileStore, x: int, y: int, floor: int, target_x: int, target_y: int
) -> List[Tuple[int, int]]:
    direction = direction_towards(x, y, target_x, target_y)
    if direction is None:
        return []
    reach = min(DIVE_DISTANCE, max(abs(target_x - x), abs(target_y - y)))
    return _walk(store, x, y, floor, direction, reach)


def dive(
    store: CollisionTileStore, x: int, y: int, floor: int, target_x: int, target_y: int
) -> Optional[MobilityResult]:
    """Move up to 10 tiles toward a target tile, never past it.

    If a diagonal dive cannot move at all, the x-axis component and then the
    y-axis component are tried on their own.
    """
    if (x, y) == (target_x, target_y):
        return None

    tiles = _dive_toward(store, x, y, floor, target_x, target_y)
    if not tiles and x != target_x and y != target_y:
        tiles = _dive_toward(store, x, y, floor, target_x, y)
        if not tiles:
            tiles = _dive_toward(store, x, y, floor, x, target_y)
    return _result(tiles)


# Barge uses the same targeting and collision rules as dive
barge = dive


__all__ = ["MobilityResult", "surge", "escape", "dive", "barge"]
