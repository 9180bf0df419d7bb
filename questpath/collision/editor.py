"""
In-memory collision editing.

The editor mutates the bytes cached by a ``CollisionTileStore`` so the next
search sees the change immediately; there is no separate reload step. Edits
only apply to files that are already loaded (call ``ensure_loaded`` first).
Persisting edits anywhere is the caller's business.

Every mutating call notifies subscribers exactly once with the set of file
keys it touched, so visualization layers can redraw and searches can re-run.
"""

from __future__ import annotations

from typing import Callable, Dict, FrozenSet, Iterable, Iterator, List, Optional, Tuple

from ..logging_utils import log_deterministic
from .directions import ALL_BITS, Direction, encode_directions
from .layout import FileKey
from .store import CollisionTileStore

ChangeListener = Callable[[FrozenSet[FileKey]], None]
TileEdit = Tuple[int, int, Callable[[int], int]]

_NORTH_SIDE = encode_directions([Direction.NORTH, Direction.NORTHEAST, Direction.NORTHWEST])
_SOUTH_SIDE = encode_directions([Direction.SOUTH, Direction.SOUTHEAST, Direction.SOUTHWEST])
_EAST_SIDE = encode_directions([Direction.EAST, Direction.NORTHEAST, Direction.SOUTHEAST])
_WEST_SIDE = encode_directions([Direction.WEST, Direction.NORTHWEST, Direction.SOUTHWEST])


def rect_tiles(x1: int, y1: int, x2: int, y2: int) -> Iterator[Tuple[int, int]]:
    """Every tile of the axis-aligned rectangle spanned by two corners (inclusive)."""
    for y in range(min(y1, y2), max(y1, y2) + 1):
        for x in range(min(x1, x2), max(x1, x2) + 1):
            yield x, y


def line_tiles(x1: int, y1: int, x2: int, y2: int) -> List[Tuple[int, int]]:
    """Bresenham line from one tile to another, both endpoints included."""
    dx = abs(x2 - x1)
    dy = -abs(y2 - y1)
    step_x = 1 if x1 < x2 else -1
    step_y = 1 if y1 < y2 else -1
    err = dx + dy

    tiles: List[Tuple[int, int]] = []
    x, y = x1, y1
    while True:
        tiles.append((x, y))
        if x == x2 and y == y2:
            return tiles
        doubled = 2 * err
        if doubled >= dy:
            err += dy
            x += step_x
        if doubled <= dx:
            err += dx
            y += step_y


def _set_to(value: int) -> Callable[[int], int]:
    return lambda _old: value


def _add(bits: int) -> Callable[[int], int]:
    return lambda old: old | (bits & ALL_BITS)


def _remove(bits: int) -> Callable[[int], int]:
    return lambda old: old & ~(bits & ALL_BITS) & ALL_BITS


class CollisionEditor:
    """Mutation primitives over a store's cached collision bytes."""

    def __init__(self, store: CollisionTileStore):
        self.store = store
        self._listeners: List[ChangeListener] = []
        self._last_edit: Optional[Dict[Tuple[int, int, int], int]] = None

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """Register a "collision data changed" listener; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self, keys: FrozenSet[FileKey]) -> None:
        for listener in list(self._listeners):
            listener(keys)

    # ------------------------------------------------------------------
    # Core
    # ------------------------------------------------------------------

    def _apply(self, edits: Iterable[TileEdit], floor: int, label: str) -> int:
        """Apply per-tile transforms, record an undo snapshot, notify once."""
        snapshot: Dict[Tuple[int, int, int], int] = {}
        touched = set()
        count = 0
        for x, y, transform in edits:
            old_value = self.store.get_tile_sync(x, y, floor)
            if self.store.write_tile(x, y, floor, transform(old_value)):
                snapshot.setdefault((x, y, floor), old_value)
                touched.add(FileKey.for_tile(x, y, floor))
                count += 1

        if snapshot:
            self._last_edit = snapshot
        log_deterministic(f"{label}: {count} tile(s) on floor {floor}")
        self._notify(frozenset(touched))
        return count

    def _single(self, x: int, y: int, floor: int, transform: Callable[[int], int], label: str) -> bool:
        return self._apply([(x, y, transform)], floor, label) == 1

    def undo_last_edit(self) -> int:
        """Restore the bytes captured before the most recent mutating call."""
        if not self._last_edit:
            return 0
        snapshot, self._last_edit = self._last_edit, None
        touched = set()
        restored = 0
        for (x, y, floor), value in snapshot.items():
            if self.store.write_tile(x, y, floor, value):
                touched.add(FileKey.for_tile(x, y, floor))
                restored += 1
        log_deterministic(f"Undo: restored {restored} tile(s)")
        self._notify(frozenset(touched))
        return restored

    # ------------------------------------------------------------------
    # Single tiles
    # ------------------------------------------------------------------

    def set_tile_walkable(self, x: int, y: int, floor: int) -> bool:
        return self._single(x, y, floor, _set_to(ALL_BITS), "Made walkable")

    def set_tile_blocked(self, x: int, y: int, floor: int) -> bool:
        return self._single(x, y, floor, _set_to(0), "Made blocked")

    def set_tile_directions(self, x: int, y: int, floor: int, bits: int) -> bool:
        """Replace a tile's byte with an exact walkable-direction mask."""
        return self._single(x, y, floor, _set_to(bits & ALL_BITS), "Set directions")

    def add_tile_directions(self, x: int, y: int, floor: int, bits: int) -> bool:
        return self._single(x, y, floor, _add(bits), f"Added directions {bits & ALL_BITS:08b}")

    def remove_tile_directions(self, x: int, y: int, floor: int, bits: int) -> bool:
        return self._single(x, y, floor, _remove(bits), f"Removed directions {bits & ALL_BITS:08b}")

    # ------------------------------------------------------------------
    # Areas
    # ------------------------------------------------------------------

    def fill_area_walkable(self, x1: int, y1: int, x2: int, y2: int, floor: int) -> int:
        transform = _set_to(ALL_BITS)
        return self._apply(
            ((x, y, transform) for x, y in rect_tiles(x1, y1, x2, y2)), floor, "Made walkable"
        )

    def fill_area_blocked(self, x1: int, y1: int, x2: int, y2: int, floor: int) -> int:
        transform = _set_to(0)
        return self._apply(
            ((x, y, transform) for x, y in rect_tiles(x1, y1, x2, y2)), floor, "Made blocked"
        )

    def add_directions_to_area(
        self, x1: int, y1: int, x2: int, y2: int, floor: int, bits: int
    ) -> int:
        transform = _add(bits)
        return self._apply(
            ((x, y, transform) for x, y in rect_tiles(x1, y1, x2, y2)),
            floor,
            f"Added directions {bits & ALL_BITS:08b}",
        )

    def remove_directions_from_area(
        self, x1: int, y1: int, x2: int, y2: int, floor: int, bits: int
    ) -> int:
        transform = _remove(bits)
        return self._apply(
            ((x, y, transform) for x, y in rect_tiles(x1, y1, x2, y2)),
            floor,
            f"Removed directions {bits & ALL_BITS:08b}",
        )

    # ------------------------------------------------------------------
    # Lines
    # ------------------------------------------------------------------

    def draw_line_walkable(self, x1: int, y1: int, x2: int, y2: int, floor: int) -> int:
        transform = _set_to(ALL_BITS)
        return self._apply(
            ((x, y, transform) for x, y in line_tiles(x1, y1, x2, y2)), floor, "Line walkable"
        )

    def draw_line_blocked(self, x1: int, y1: int, x2: int, y2: int, floor: int) -> int:
        transform = _set_to(0)
        return self._apply(
            ((x, y, transform) for x, y in line_tiles(x1, y1, x2, y2)), floor, "Line blocked"
        )

    def add_directions_to_line(
        self, x1: int, y1: int, x2: int, y2: int, floor: int, bits: int
    ) -> int:
        transform = _add(bits)
        return self._apply(
            ((x, y, transform) for x, y in line_tiles(x1, y1, x2, y2)),
            floor,
            f"Line added directions {bits & ALL_BITS:08b}",
        )

    def remove_directions_from_line(
        self, x1: int, y1: int, x2: int, y2: int, floor: int, bits: int
    ) -> int:
        transform = _remove(bits)
        return self._apply(
            ((x, y, transform) for x, y in line_tiles(x1, y1, x2, y2)),
            floor,
            f"Line removed directions {bits & ALL_BITS:08b}",
        )

    # ------------------------------------------------------------------
    # Walls
    # ------------------------------------------------------------------

    def set_wall(
        self, x1: int, y1: int, x2: int, y2: int, floor: int, remove: bool = False
    ) -> int:
        """Block (or with ``remove=True`` reopen) movement across a tile edge.

        Coordinates are edge coordinates: ``(x, y)`` is the south-west corner
        of tile ``(x, y)``. The wall must be horizontal or vertical. Tiles on
        both sides lose (or regain) every direction that crosses the wall,
        diagonals included.
        """
        if x1 != x2 and y1 != y2:
            raise ValueError("Walls must be horizontal or vertical")

        edits: List[TileEdit] = []

        def _side(bits: int) -> Callable[[int], int]:
            return _add(bits) if remove else _remove(bits)

        if y1 == y2 and x1 != x2:
            for x in range(min(x1, x2), max(x1, x2)):
                edits.append((x, y1, _side(_SOUTH_SIDE)))
                edits.append((x, y1 - 1, _side(_NORTH_SIDE)))
        elif x1 == x2 and y1 != y2:
            for y in range(min(y1, y2), max(y1, y2)):
                edits.append((x1, y, _side(_WEST_SIDE)))
                edits.append((x1 - 1, y, _side(_EAST_SIDE)))

        return self._apply(edits, floor, "Wall removed" if remove else "Wall placed")


__all__ = ["CollisionEditor", "ChangeListener", "rect_tiles", "line_tiles"]
