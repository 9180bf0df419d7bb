"""Collision file geometry: which file covers a tile and where the tile sits in it."""

from __future__ import annotations

from typing import Any, Mapping, NamedTuple, Tuple

CHUNK_SIZE = 64
CHUNKS_PER_FILE = 20
TILES_PER_FILE = CHUNKS_PER_FILE * CHUNK_SIZE  # 1280
FILE_BYTES = TILES_PER_FILE * TILES_PER_FILE


class FileKey(NamedTuple):
    """Cache key of one collision file."""

    floor: int
    file_x: int
    file_y: int

    @classmethod
    def for_tile(cls, x: int, y: int, floor: int) -> "FileKey":
        return cls(floor, x // TILES_PER_FILE, y // TILES_PER_FILE)

    @classmethod
    def coerce(cls, value: Any) -> "FileKey":
        """Accept a FileKey, a ``(floor, file_x, file_y)`` tuple, or a mapping.

        Mappings may use either ``fileX``/``fileY`` (the push channel's shape)
        or ``file_x``/``file_y``.
        """
        if isinstance(value, FileKey):
            return value
        if isinstance(value, Mapping):
            file_x = value.get("fileX", value.get("file_x"))
            file_y = value.get("fileY", value.get("file_y"))
            if file_x is None or file_y is None or "floor" not in value:
                raise ValueError(f"Not a collision file key: {value!r}")
            return cls(int(value["floor"]), int(file_x), int(file_y))
        floor, file_x, file_y = value
        return cls(int(floor), int(file_x), int(file_y))

    def __str__(self) -> str:
        return f"{self.floor}/{self.file_x}-{self.file_y}"


def local_index(x: int, y: int) -> int:
    """Byte offset of a world tile inside its collision file.

    Python's floor-modulo already maps negative coordinates into 0..1279.
    """
    return (y % TILES_PER_FILE) * TILES_PER_FILE + (x % TILES_PER_FILE)


def file_bounds(file_x: int, file_y: int) -> Tuple[Tuple[int, int], Tuple[int, int]]:
    """World bounds of a file as ``((south_y, west_x), (north_y, east_x))``.

    Same ``[[lat, lng], [lat, lng]]`` shape map widgets expect for overlays.
    """
    west_x = file_x * TILES_PER_FILE
    south_y = file_y * TILES_PER_FILE
    return (south_y, west_x), (south_y + TILES_PER_FILE, west_x + TILES_PER_FILE)


__all__ = [
    "CHUNK_SIZE",
    "CHUNKS_PER_FILE",
    "TILES_PER_FILE",
    "FILE_BYTES",
    "FileKey",
    "local_index",
    "file_bounds",
]
