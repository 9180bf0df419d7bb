"""
Pydantic schemas for the questpath wire formats and public results.

Coordinate convention: ``lat`` is the world ``y`` and ``lng`` is the world
``x`` at every boundary. Internally everything works on integer tiles.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class PathWaypoint(BaseModel):
    """One point of a returned path."""

    model_config = ConfigDict(frozen=True)

    lat: int = Field(..., description="World y coordinate (tile)")
    lng: int = Field(..., description="World x coordinate (tile)")


class Endpoint(BaseModel):
    """A point plus floor, as derived from quest-step highlight data."""

    lat: float
    lng: float
    floor: int = 0


class TransportRecord(BaseModel):
    """A transport row as served by ``GET /api/transports/all``.

    Only ``enabled`` records become graph edges. ``from_x2``/``from_y2`` mark
    the opposite corner of a multi-tile origin (e.g. a wide staircase).
    """

    model_config = ConfigDict(extra="ignore")

    id: Optional[int] = None
    name: str
    transport_type: str = "other"
    from_x: int
    from_y: int
    from_floor: int = 0
    from_x2: Optional[int] = None
    from_y2: Optional[int] = None
    to_x: int
    to_y: int
    to_floor: int = 0
    travel_time: int = Field(1, description="Cost in game ticks; 0 is treated as 1")
    bidirectional: bool = False
    enabled: bool = True
    direction: Optional[str] = None
    source: Optional[str] = Field(None, description="Where the row came from (cache, manual, import)")


class LatLng(BaseModel):
    lat: float = 0
    lng: float = 0


class NpcHighlight(BaseModel):
    """Subset of an NPC highlight needed to locate a step."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    npc_location: Optional[LatLng] = Field(None, alias="npcLocation")
    floor: Optional[int] = None


class ObjectHighlight(BaseModel):
    """Subset of an object highlight needed to locate a step."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    object_location: List[LatLng] = Field(default_factory=list, alias="objectLocation")
    floor: Optional[int] = None


class StepHighlights(BaseModel):
    model_config = ConfigDict(extra="ignore")

    npc: List[NpcHighlight] = Field(default_factory=list)
    object: List[ObjectHighlight] = Field(default_factory=list)


class QuestStep(BaseModel):
    """The slice of a quest step that the path generator reads.

    The full quest-step model lives in the editor; this view only carries the
    highlight locations and the step's default floor.
    """

    model_config = ConfigDict(extra="ignore")

    highlights: StepHighlights = Field(default_factory=StepHighlights)
    floor: int = 0


__all__ = [
    "PathWaypoint",
    "Endpoint",
    "TransportRecord",
    "LatLng",
    "NpcHighlight",
    "ObjectHighlight",
    "StepHighlights",
    "QuestStep",
]
