"""Collapse straight runs of a tile path into their end points."""

from __future__ import annotations

from typing import List, Sequence

from .schemas import PathWaypoint


def simplify_path(path: Sequence[PathWaypoint]) -> List[PathWaypoint]:
    """Drop interior waypoints that lie on a straight segment.

    A point is dropped only when the incoming and outgoing steps are collinear
    (zero cross product) AND point the same way (non-negative dot product).
    Corners and direction reversals are kept; the first and last points
    always survive.
    """
    if len(path) <= 2:
        return list(path)

    simplified = [path[0]]
    for prev, curr, nxt in zip(path, path[1:], path[2:]):
        dx1 = curr.lng - prev.lng
        dy1 = curr.lat - prev.lat
        dx2 = nxt.lng - curr.lng
        dy2 = nxt.lat - curr.lat

        cross = dx1 * dy2 - dy1 * dx2
        dot = dx1 * dx2 + dy1 * dy2
        if cross != 0 or dot < 0:
            simplified.append(curr)

    simplified.append(path[-1])
    return simplified


__all__ = ["simplify_path"]
