"""Collision data: tile bytes, caching, accessibility and editing."""

from .directions import (
    ALL_BITS,
    Direction,
    DirectionInfo,
    DIRECTION_INFO,
    EXPANSION_ORDER,
    decode_directions,
    encode_directions,
    direction_from_delta,
    direction_towards,
    is_direction_free,
)
from .layout import CHUNK_SIZE, TILES_PER_FILE, FileKey, file_bounds, local_index
from .sources import (
    CollisionSource,
    DirectoryCollisionSource,
    HttpCollisionSource,
    InMemoryCollisionSource,
)
from .store import CollisionTileStore, TileRead, NOT_LOADED
from .accessibility import AccessibilityResolver, ring_offsets
from .editor import CollisionEditor, line_tiles, rect_tiles
from .mobility import MobilityResult, surge, escape, dive, barge

__all__ = [
    "ALL_BITS",
    "Direction",
    "DirectionInfo",
    "DIRECTION_INFO",
    "EXPANSION_ORDER",
    "decode_directions",
    "encode_directions",
    "direction_from_delta",
    "direction_towards",
    "is_direction_free",
    "CHUNK_SIZE",
    "TILES_PER_FILE",
    "FileKey",
    "file_bounds",
    "local_index",
    "CollisionSource",
    "DirectoryCollisionSource",
    "HttpCollisionSource",
    "InMemoryCollisionSource",
    "CollisionTileStore",
    "TileRead",
    "NOT_LOADED",
    "AccessibilityResolver",
    "ring_offsets",
    "CollisionEditor",
    "line_tiles",
    "rect_tiles",
    "MobilityResult",
    "surge",
    "escape",
    "dive",
    "barge",
]
