"""
questpath - collision-aware route finding for a tile-based game world.

Loads per-floor collision files and a transport graph (stairs, ladders,
teleports), finds routes between quest steps with weighted A*, and edits
collision data in place.

Sources are injected: HTTP API, local directory/JSON, or in-memory dicts.
No module-level caches; every session owns its own store.
"""

__version__ = "0.1.0"

from .config import Config
from .errors import (
    QuestPathError,
    ConfigError,
    FetchError,
    TransientFetchError,
    FetchStatusError,
    TileNotLoadedError,
)

# Collision data
from .collision import (
    ALL_BITS,
    Direction,
    DirectionInfo,
    DIRECTION_INFO,
    EXPANSION_ORDER,
    decode_directions,
    encode_directions,
    is_direction_free,
    FileKey,
    CollisionSource,
    DirectoryCollisionSource,
    HttpCollisionSource,
    InMemoryCollisionSource,
    CollisionTileStore,
    TileRead,
    AccessibilityResolver,
    CollisionEditor,
    MobilityResult,
    surge,
    escape,
    dive,
    barge,
)

# Transports and search
from .transport import (
    TransportLink,
    TransportSource,
    HttpTransportSource,
    JsonTransportSource,
    InMemoryTransportSource,
    TransportGraph,
    reverse_name,
)
from .pathfinding import AStarPathfinder, SearchResult, step_endpoint
from .simplify import simplify_path
from .session import PathfindingSession

# Schemas
from .schemas import (
    PathWaypoint,
    Endpoint,
    TransportRecord,
    LatLng,
    QuestStep,
    StepHighlights,
    NpcHighlight,
    ObjectHighlight,
)

__all__ = [
    "__version__",
    "Config",
    "QuestPathError",
    "ConfigError",
    "FetchError",
    "TransientFetchError",
    "FetchStatusError",
    "TileNotLoadedError",
    "ALL_BITS",
    "Direction",
    "DirectionInfo",
    "DIRECTION_INFO",
    "EXPANSION_ORDER",
    "decode_directions",
    "encode_directions",
    "is_direction_free",
    "FileKey",
    "CollisionSource",
    "DirectoryCollisionSource",
    "HttpCollisionSource",
    "InMemoryCollisionSource",
    "CollisionTileStore",
    "TileRead",
    "AccessibilityResolver",
    "CollisionEditor",
    "MobilityResult",
    "surge",
    "escape",
    "dive",
    "barge",
    "TransportLink",
    "TransportSource",
    "HttpTransportSource",
    "JsonTransportSource",
    "InMemoryTransportSource",
    "TransportGraph",
    "reverse_name",
    "AStarPathfinder",
    "SearchResult",
    "step_endpoint",
    "simplify_path",
    "PathfindingSession",
    "PathWaypoint",
    "Endpoint",
    "TransportRecord",
    "LatLng",
    "QuestStep",
    "StepHighlights",
    "NpcHighlight",
    "ObjectHighlight",
]
