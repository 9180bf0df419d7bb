"""
Session wiring.

One ``PathfindingSession`` owns one collision cache and one transport graph.
The editor and the pathfinder share the same store, so an edit is visible to
the next search without a reload.
"""

from __future__ import annotations

from typing import Any, Iterable, Optional

from .collision.accessibility import AccessibilityResolver
from .collision.editor import CollisionEditor
from .collision.sources import (
    CollisionSource,
    DirectoryCollisionSource,
    HttpCollisionSource,
)
from .collision.store import CollisionTileStore
from .config import Config
from .logging_utils import log_info
from .pathfinding import AStarPathfinder
from .transport import (
    HttpTransportSource,
    JsonTransportSource,
    TransportGraph,
    TransportSource,
)


class PathfindingSession:
    """Store, transport graph, resolver, pathfinder and editor for one map."""

    def __init__(
        self,
        collision_source: CollisionSource,
        transport_source: TransportSource,
        *,
        snap_radius: Optional[int] = None,
        preload_padding: Optional[int] = None,
    ):
        self.store = CollisionTileStore(collision_source)
        self.transports = TransportGraph(transport_source)
        self.resolver = AccessibilityResolver(
            self.store,
            default_radius=Config.SNAP_RADIUS if snap_radius is None else snap_radius,
        )
        self.pathfinder = AStarPathfinder(
            self.store,
            self.transports,
            self.resolver,
            snap_radius=snap_radius,
            preload_padding=preload_padding,
        )
        self.editor = CollisionEditor(self.store)

    @classmethod
    def from_config(cls) -> "PathfindingSession":
        """Build a session from ``Config``; local sources win over the HTTP API."""
        Config.validate()

        if Config.COLLISION_DIR:
            collision_source: CollisionSource = DirectoryCollisionSource(Config.COLLISION_DIR)
        else:
            collision_source = HttpCollisionSource(
                Config.API_BASE,
                timeout=Config.FETCH_TIMEOUT_SECONDS,
                max_attempts=Config.FETCH_MAX_ATTEMPTS,
            )

        if Config.TRANSPORTS_FILE:
            transport_source: TransportSource = JsonTransportSource(Config.TRANSPORTS_FILE)
        else:
            transport_source = HttpTransportSource(
                Config.API_BASE, timeout=Config.FETCH_TIMEOUT_SECONDS
            )

        log_info(
            f"Session sources: collision={type(collision_source).__name__}, "
            f"transports={type(transport_source).__name__}"
        )
        return cls(collision_source, transport_source)

    async def find_path(self, *args, **kwargs):
        return await self.pathfinder.find_path(*args, **kwargs)

    async def generate_step_to_step_path(self, from_endpoint, to_endpoint):
        return await self.pathfinder.generate_step_to_step_path(from_endpoint, to_endpoint)

    async def reload_transports(self) -> None:
        """Call after any transport create/update/delete."""
        await self.transports.reload()

    def invalidate_collision(self, keys: Iterable[Any]) -> int:
        """Apply an external "these files changed" notification."""
        return self.store.invalidate(keys)


__all__ = ["PathfindingSession"]
