"""
Weighted A* over collision tiles and transport edges.

Search graph:
- Nodes are tiles keyed by ``(x, y, floor)``; the same ground position on two
  floors is two different nodes.
- Grid moves: from a tile, direction d is legal iff THAT tile's byte has d's
  bit set. The neighbour's bits do not matter, so one-way edges exist
  (cost 1 orthogonal, sqrt(2) diagonal).
- Transport moves: every edge that can be taken from the current tile, plus every
  global teleport, costs its travel time in ticks and may change floor.

``find_path`` runs up to four attempts with increasingly greedy heuristic
weights (1.5, 2, 3, 5), splitting the iteration budget evenly. Greedier
attempts give up optimality to finish in large open areas. Exhausting all
four returns ``None``, which is indistinguishable from "no path exists".

The octile heuristic ignores transports, so it can overestimate the remaining
cost once a teleport is in play and no attempt is guaranteed to pick the
cheapest transport. A slow transport near the start can be preferred over a
faster one further away: its landing node may reach the open list with a
lower ``f`` than the walking frontier that would lead to the faster edge.

The loop is synchronous and reads tiles with ``get_tile_sync``; everything it
may touch is preloaded before the first attempt starts.
"""

from __future__ import annotations

import heapq
import itertools
import math
from dataclasses import dataclass
from itertools import chain
from typing import Any, Dict, List, Mapping, Optional, Sequence, Set, Tuple

from .collision.accessibility import AccessibilityResolver
from .collision.directions import EXPANSION_ORDER
from .collision.store import CollisionTileStore
from .config import Config
from .logging_utils import (
    log_debug,
    log_deterministic,
    log_info,
    log_success,
    log_warning,
)
from .schemas import Endpoint, PathWaypoint, QuestStep
from .simplify import simplify_path
from .transport import TransportGraph

DEFAULT_WEIGHTS: Tuple[float, ...] = (1.5, 2.0, 3.0, 5.0)
_OCTILE_FACTOR = math.sqrt(2) - 1

Tile = Tuple[int, int, int]


@dataclass(slots=True)
class SearchNode:
    """One open/closed search entry; ``transport`` names the edge used to reach it."""

    x: int
    y: int
    floor: int
    g: float
    h: float
    f: float
    parent: Optional["SearchNode"] = None
    transport: Optional[str] = None

    @property
    def key(self) -> Tile:
        return self.x, self.y, self.floor


@dataclass
class SearchResult:
    """Outcome of one weighted A* attempt."""

    nodes: Optional[List[SearchNode]]
    iterations: int
    weight: float

    @property
    def found(self) -> bool:
        return self.nodes is not None

    def waypoints(self) -> List[PathWaypoint]:
        return [PathWaypoint(lat=node.y, lng=node.x) for node in self.nodes or []]

    def transports_used(self) -> List[str]:
        return [node.transport for node in self.nodes or [] if node.transport]


def octile_distance(x1: int, y1: int, x2: int, y2: int) -> float:
    dx = abs(x2 - x1)
    dy = abs(y2 - y1)
    return max(dx, dy) + _OCTILE_FACTOR * min(dx, dy)


def _reconstruct(node: SearchNode) -> List[SearchNode]:
    chain_: List[SearchNode] = []
    current: Optional[SearchNode] = node
    while current is not None:
        chain_.append(current)
        current = current.parent
    chain_.reverse()
    return chain_


class AStarPathfinder:
    """Route finder over one collision store and one transport graph."""

    def __init__(
        self,
        store: CollisionTileStore,
        transports: TransportGraph,
        resolver: Optional[AccessibilityResolver] = None,
        *,
        snap_radius: Optional[int] = None,
        preload_padding: Optional[int] = None,
        weights: Sequence[float] = DEFAULT_WEIGHTS,
    ):
        self.store = store
        self.transports = transports
        self.resolver = resolver or AccessibilityResolver(store)
        self.snap_radius = Config.SNAP_RADIUS if snap_radius is None else snap_radius
        self.preload_padding = Config.PRELOAD_PADDING if preload_padding is None else preload_padding
        self.weights = tuple(weights)
        # Diagnostics of the most recent successful search
        self.last_result: Optional[SearchResult] = None

    async def find_path(
        self,
        start_lat: float,
        start_lng: float,
        end_lat: float,
        end_lng: float,
        floor: int,
        end_floor: Optional[int] = None,
        max_iterations: Optional[int] = None,
    ) -> Optional[List[PathWaypoint]]:
        """Find a simplified walking/transport route, or None.

        ``lat``/``lng`` are world ``y``/``x``; fractional inputs are floored
        to their tile.
        """
        target_floor = floor if end_floor is None else end_floor
        budget = Config.MAX_ITERATIONS if max_iterations is None else max_iterations
        self.last_result = None

        log_info(
            f"Finding path ({start_lng},{start_lat},L{floor}) -> ({end_lng},{end_lat},L{target_floor})"
        )

        await self.transports.load()

        start_x, start_y = math.floor(start_lng), math.floor(start_lat)
        end_x, end_y = math.floor(end_lng), math.floor(end_lat)

        await self.store.preload_area(start_x, start_y, end_x, end_y, floor, self.preload_padding)
        if target_floor != floor:
            await self.store.preload_area(
                start_x, start_y, end_x, end_y, target_floor, self.preload_padding
            )

        start = self.resolver.find_nearest_accessible(start_x, start_y, floor, self.snap_radius)
        end = self.resolver.find_nearest_accessible(end_x, end_y, target_floor, self.snap_radius)
        if start is None or end is None:
            log_warning("No accessible tile near the start or end point")
            return None

        if start == end and floor == target_floor:
            return [PathWaypoint(lat=start[1], lng=start[0])]

        log_deterministic(
            f"Start: ({start[0]}, {start[1]}, L{floor}), End: ({end[0]}, {end[1]}, L{target_floor})"
        )

        per_attempt = budget // len(self.weights)
        for attempt, weight in enumerate(self.weights):
            result = self.run_weighted_astar(
                (start[0], start[1], floor),
                (end[0], end[1], target_floor),
                weight,
                per_attempt,
                verbose=attempt == 0,
            )
            if result.found:
                self.last_result = result
                log_success(
                    f"Path found (weight={weight}): {len(result.nodes)} tiles in "
                    f"{result.iterations} iterations"
                )
                return simplify_path(result.waypoints())
            log_deterministic(f"Weight {weight} failed after {result.iterations} iterations")

        log_warning("No path found")
        return None

    def run_weighted_astar(
        self,
        start: Tile,
        goal: Tile,
        weight: float,
        max_iterations: int,
        verbose: bool = False,
    ) -> SearchResult:
        """One A* attempt with ``f = g + h * weight``; tiles must already be loaded."""
        goal_x, goal_y, _ = goal
        get_tile = self.store.get_tile_sync
        global_links = self.transports.global_teleports()

        counter = itertools.count()
        start_h = octile_distance(start[0], start[1], goal_x, goal_y)
        start_node = SearchNode(start[0], start[1], start[2], 0.0, start_h, start_h * weight)

        heap: List[Tuple[float, int, SearchNode]] = [(start_node.f, next(counter), start_node)]
        open_nodes: Dict[Tile, SearchNode] = {start: start_node}
        closed: Set[Tile] = set()
        iterations = 0

        def relax(current: SearchNode, x: int, y: int, floor: int, cost: float, transport: Optional[str]) -> None:
            key = (x, y, floor)
            if key in closed:
                return
            g = current.g + cost
            existing = open_nodes.get(key)
            if existing is not None and g >= existing.g:
                return
            h = existing.h if existing is not None else octile_distance(x, y, goal_x, goal_y)
            node = SearchNode(x, y, floor, g, h, g + h * weight, current, transport)
            # The superseded entry stays in the heap and is skipped when popped
            open_nodes[key] = node
            heapq.heappush(heap, (node.f, next(counter), node))

        while heap and iterations < max_iterations:
            _, _, current = heapq.heappop(heap)
            key = current.key
            if open_nodes.get(key) is not current:
                continue
            del open_nodes[key]
            iterations += 1

            if key == goal:
                return SearchResult(_reconstruct(current), iterations, weight)

            closed.add(key)
            tile = get_tile(current.x, current.y, current.floor)
            if verbose and iterations <= 10:
                log_debug(
                    f"Iter {iterations}: ({current.x},{current.y},L{current.floor}) "
                    f"byte={tile:08b} f={current.f:.1f} heap={len(heap)}"
                )

            if tile:
                for info in EXPANSION_ORDER:
                    if tile & info.bit:
                        relax(current, current.x + info.dx, current.y + info.dy, current.floor, info.cost, None)

            for link in chain(self.transports.edges_from(current.x, current.y, current.floor), global_links):
                relax(current, link.to_x, link.to_y, link.to_floor, link.time, link.name)

        if verbose:
            log_debug(f"A* ended: iterations={iterations}, heap={len(heap)}, closed={len(closed)}")
        return SearchResult(None, iterations, weight)

    async def generate_step_to_step_path(
        self,
        from_endpoint: Endpoint | Mapping[str, Any] | None,
        to_endpoint: Endpoint | Mapping[str, Any] | None,
    ) -> Optional[List[PathWaypoint]]:
        """Route between two quest-step endpoints (``{lat, lng, floor}``)."""
        if from_endpoint is None or to_endpoint is None:
            log_warning("Cannot generate path: missing start or end point")
            return None

        source = Endpoint.model_validate(from_endpoint)
        target = Endpoint.model_validate(to_endpoint)
        return await self.find_path(
            source.lat,
            source.lng,
            target.lat,
            target.lng,
            source.floor,
            target.floor,
        )


def step_endpoint(step: QuestStep | Mapping[str, Any]) -> Optional[Endpoint]:
    """Where a quest step "happens": its first NPC, else its first object.

    A location at ``(0, 0)`` means "not placed yet" and is skipped. The
    highlight's own floor wins over the step's floor.
    """
    quest_step = QuestStep.model_validate(step)

    if quest_step.highlights.npc:
        npc = quest_step.highlights.npc[0]
        location = npc.npc_location
        if location is not None and (location.lat != 0 or location.lng != 0):
            floor = quest_step.floor if npc.floor is None else npc.floor
            return Endpoint(lat=location.lat, lng=location.lng, floor=floor)

    if quest_step.highlights.object:
        obj = quest_step.highlights.object[0]
        if obj.object_location:
            location = obj.object_location[0]
            if location.lat != 0 or location.lng != 0:
                floor = quest_step.floor if obj.floor is None else obj.floor
                return Endpoint(lat=location.lat, lng=location.lng, floor=floor)

    return None


__all__ = [
    "AStarPathfinder",
    "SearchNode",
    "SearchResult",
    "DEFAULT_WEIGHTS",
    "octile_distance",
    "step_endpoint",
]
