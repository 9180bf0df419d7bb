"""Shared fixtures: small hand-built collision maps served from memory."""

from __future__ import annotations

import pytest

from questpath.collision import ALL_BITS, CollisionTileStore, FileKey, InMemoryCollisionSource, local_index
from questpath.collision.layout import FILE_BYTES


class CollisionMap:
    """Builds collision files tile by tile and serves them through an in-memory source."""

    def __init__(self) -> None:
        self.source = InMemoryCollisionSource()

    def open_file(self, floor: int, file_x: int, file_y: int, value: int = ALL_BITS) -> None:
        self.source.files[FileKey(floor, file_x, file_y)] = bytearray([value]) * FILE_BYTES

    def blocked_file(self, floor: int, file_x: int, file_y: int) -> None:
        self.source.files[FileKey(floor, file_x, file_y)] = bytearray(FILE_BYTES)

    def set(self, x: int, y: int, floor: int, value: int) -> None:
        key = FileKey.for_tile(x, y, floor)
        if key not in self.source.files:
            self.blocked_file(*key)
        self.source.files[key][local_index(x, y)] = value

    def fill(self, x1: int, y1: int, x2: int, y2: int, floor: int, value: int = ALL_BITS) -> None:
        for y in range(min(y1, y2), max(y1, y2) + 1):
            for x in range(min(x1, x2), max(x1, x2) + 1):
                self.set(x, y, floor, value)

    def store(self) -> CollisionTileStore:
        return CollisionTileStore(self.source)


@pytest.fixture
def collision_map() -> CollisionMap:
    return CollisionMap()
