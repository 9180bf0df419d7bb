"""Decide whether a tile can be entered and snap arbitrary points to one."""

from __future__ import annotations

from typing import Iterator, Optional, Tuple

from .directions import EXPANSION_ORDER
from .store import CollisionTileStore


def ring_offsets(radius: int) -> Iterator[Tuple[int, int]]:
    """Perimeter offsets of the square ring at Chebyshev ``radius``.

    Scan order is ``dx`` ascending outer, ``dy`` ascending inner, yielding
    only cells on the ring's border. The first accessible hit wins, so this
    order is also the tie-break between equally distant candidates.
    """
    for dx in range(-radius, radius + 1):
        for dy in range(-radius, radius + 1):
            if abs(dx) == radius or abs(dy) == radius:
                yield dx, dy


class AccessibilityResolver:
    """Accessibility queries against a preloaded ``CollisionTileStore``.

    A tile is accessible when some neighbour can walk INTO it, i.e. the
    neighbour's byte has the bit for the direction pointing back at the tile.
    The tile's own outgoing bits are irrelevant here.
    """

    def __init__(self, store: CollisionTileStore, default_radius: int = 15):
        self.store = store
        self.default_radius = default_radius

    def is_accessible(self, x: int, y: int, floor: int) -> bool:
        for info in EXPANSION_ORDER:
            neighbour = self.store.get_tile_sync(x + info.dx, y + info.dy, floor)
            # The neighbour sits in direction `info`; it must be able to step back
            if neighbour & DIRECTION_BACK[info.direction]:
                return True
        return False

    def find_nearest_accessible(
        self,
        x: int,
        y: int,
        floor: int,
        max_radius: Optional[int] = None,
    ) -> Optional[Tuple[int, int]]:
        """Return ``(x, y)`` itself if accessible, otherwise the first hit ring by ring."""
        if self.is_accessible(x, y, floor):
            return x, y

        radius_limit = self.default_radius if max_radius is None else max_radius
        for radius in range(1, radius_limit + 1):
            for dx, dy in ring_offsets(radius):
                if self.is_accessible(x + dx, y + dy, floor):
                    return x + dx, y + dy
        return None


# Bit a neighbour in direction d needs to walk back toward us: the inverse of d
DIRECTION_BACK = {info.direction: info.inverse.bit for info in EXPANSION_ORDER}


__all__ = ["AccessibilityResolver", "ring_offsets"]
