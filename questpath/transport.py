"""
Transport graph: stairs, ladders, teleports and other non-adjacent moves.

Transports come from an external source as ``TransportRecord`` rows and are
turned into directed ``TransportLink`` edges indexed by their exact origin
tile ``(x, y, floor)``. Rows whose origin is ``(0, 0, 0)`` are global
teleports (lodestones, spells, jewellery): they do not belong to any tile and
are kept in a separate list that the search consults from every node.
Edges with a second origin corner are indexed once under their primary
origin and also kept in a short list of boxes checked by containment, so the
index never grows with the size of a box.

Mutation policy: the graph is never patched in place. After a transport is
created, updated or deleted, callers invoke ``reload()``, which drops every
edge and loads the full set again.
"""

from __future__ import annotations

import asyncio
import json
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

from pydantic import ValidationError

from .config import Config
from .logging_utils import log_error, log_info, log_success, log_warning
from .net import fetch_json
from .schemas import TransportRecord

TileKey = Tuple[int, int, int]


@dataclass(frozen=True)
class TransportLink:
    """One directed transport edge."""

    from_x: int
    from_y: int
    from_floor: int
    to_x: int
    to_y: int
    to_floor: int
    time: int
    name: str
    id: Optional[int] = None
    from_x2: Optional[int] = None
    from_y2: Optional[int] = None
    transport_type: str = "other"

    @property
    def origin(self) -> TileKey:
        return self.from_x, self.from_y, self.from_floor

    @property
    def destination(self) -> TileKey:
        return self.to_x, self.to_y, self.to_floor

    @property
    def is_global(self) -> bool:
        return self.origin == (0, 0, 0)

    @property
    def is_area(self) -> bool:
        """True when a second origin corner widens the origin into a box."""
        return self.from_x2 is not None or self.from_y2 is not None

    def covers(self, x: int, y: int, floor: int) -> bool:
        """Whether the edge can be taken from this tile (any tile of the origin box)."""
        if floor != self.from_floor:
            return False
        x2 = self.from_x if self.from_x2 is None else self.from_x2
        y2 = self.from_y if self.from_y2 is None else self.from_y2
        return (
            min(self.from_x, x2) <= x <= max(self.from_x, x2)
            and min(self.from_y, y2) <= y <= max(self.from_y, y2)
        )


_UP_TO_DOWN = (
    (re.compile(r"\bClimb up\b", re.IGNORECASE), "Climb down"),
    (re.compile(r"\bClimb-up\b", re.IGNORECASE), "Climb-down"),
    (re.compile(r"\bUp\b"), "Down"),
)
_DOWN_TO_UP = (
    (re.compile(r"\bClimb down\b", re.IGNORECASE), "Climb up"),
    (re.compile(r"\bClimb-down\b", re.IGNORECASE), "Climb-up"),
    (re.compile(r"\bDown\b"), "Up"),
)


def _substitute(name: str, rules) -> str:
    for pattern, replacement in rules:
        name = pattern.sub(replacement, name)
    return name


def reverse_name(name: str, from_floor: int = 0, to_floor: int = 0) -> str:
    """Label for the synthesized return edge of a bidirectional transport.

    Direction words are flipped according to where the forward edge goes
    ("Climb up stairs" -> "Climb down stairs", "Ladder Up" -> "Ladder Down").
    A transport on a single floor tries up->down first, then down->up. When no
    word was flipped the label becomes "<name> (return)".
    """
    if to_floor > from_floor:
        reversed_name = _substitute(name, _UP_TO_DOWN)
    elif to_floor < from_floor:
        reversed_name = _substitute(name, _DOWN_TO_UP)
    else:
        reversed_name = _substitute(name, _UP_TO_DOWN)
        if reversed_name == name:
            reversed_name = _substitute(name, _DOWN_TO_UP)

    if reversed_name == name:
        return f"{name} (return)"
    return reversed_name


def links_for_record(record: TransportRecord) -> List[TransportLink]:
    """Forward edge plus, for bidirectional rows, the reverse edge."""
    time = record.travel_time or 1
    links = [
        TransportLink(
            id=record.id,
            from_x=record.from_x,
            from_y=record.from_y,
            from_floor=record.from_floor,
            from_x2=record.from_x2,
            from_y2=record.from_y2,
            to_x=record.to_x,
            to_y=record.to_y,
            to_floor=record.to_floor,
            time=time,
            name=record.name,
            transport_type=record.transport_type,
        )
    ]
    if record.bidirectional:
        # Reverse lands on the single origin tile, not the whole box
        links.append(
            TransportLink(
                id=record.id,
                from_x=record.to_x,
                from_y=record.to_y,
                from_floor=record.to_floor,
                to_x=record.from_x,
                to_y=record.from_y,
                to_floor=record.from_floor,
                time=time,
                name=reverse_name(record.name, record.from_floor, record.to_floor),
                transport_type=record.transport_type,
            )
        )
    return links


# ============================================================================
# Sources
# ============================================================================


def _parse_records(rows: Any, origin: str) -> List[TransportRecord]:
    """Validate raw JSON rows, skipping (and logging) malformed ones."""
    if not isinstance(rows, list):
        raise ValueError(f"{origin} did not return a JSON array of transports")

    records: List[TransportRecord] = []
    for index, row in enumerate(rows):
        try:
            records.append(TransportRecord.model_validate(row))
        except ValidationError as exc:
            log_warning(f"Skipping malformed transport #{index} from {origin}: {exc.error_count()} issue(s)")
    return records


class TransportSource(ABC):
    """Abstract provider of transport rows."""

    @abstractmethod
    async def fetch_records(self) -> List[TransportRecord]:
        """
        Fetch every transport row (enabled or not).

        Raises:
            Exception: If the source is unreachable or unreadable
        """


class HttpTransportSource(TransportSource):
    """``GET {api_base}/api/transports/all``."""

    def __init__(self, api_base: str | None = None, *, timeout: float | None = None):
        self.api_base = (api_base or Config.API_BASE).rstrip("/")
        self.timeout = timeout

    @property
    def url(self) -> str:
        return f"{self.api_base}/api/transports/all"

    async def fetch_records(self) -> List[TransportRecord]:
        rows = await fetch_json(self.url, timeout=self.timeout)
        return _parse_records(rows, self.url)


class JsonTransportSource(TransportSource):
    """A local JSON file holding the same array the API serves."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    async def fetch_records(self) -> List[TransportRecord]:
        text = await asyncio.to_thread(self.path.read_text, encoding="utf-8")
        return _parse_records(json.loads(text), str(self.path))


class InMemoryTransportSource(TransportSource):
    """Fixed list of rows; mutate ``records`` and call ``reload()`` to apply."""

    def __init__(self, records: Optional[Iterable[TransportRecord | Dict[str, Any]]] = None):
        self.records: List[TransportRecord] = [
            r if isinstance(r, TransportRecord) else TransportRecord.model_validate(r)
            for r in (records or [])
        ]
        self.fetch_count = 0
        self.error: Optional[Exception] = None

    async def fetch_records(self) -> List[TransportRecord]:
        self.fetch_count += 1
        if self.error is not None:
            raise self.error
        return list(self.records)


# ============================================================================
# Graph
# ============================================================================


class TransportGraph:
    """Directed transport edges indexed by origin tile, plus global teleports."""

    def __init__(self, source: TransportSource):
        self.source = source
        self._by_origin: Dict[TileKey, List[TransportLink]] = {}
        self._areas: List[TransportLink] = []
        self._globals: List[TransportLink] = []
        self._loaded = False
        self._load_task: Optional[asyncio.Task] = None

    @property
    def loaded(self) -> bool:
        return self._loaded

    async def load(self) -> None:
        """Load every enabled transport once; concurrent callers share the load.

        A ``reload()`` that starts while a load is in flight supersedes it;
        waiters then follow the newer load until the graph is populated.
        """
        while not self._loaded:
            if self._load_task is None:
                self._load_task = asyncio.ensure_future(self._populate())
            await asyncio.shield(self._load_task)

    async def _populate(self) -> None:
        me = asyncio.current_task()
        try:
            records = await self.source.fetch_records()
        except Exception as exc:
            # A broken source must not take path generation down with it
            log_error(f"Failed to load transports: {exc}")
            records = []
        else:
            log_info(f"Loading {len(records)} transports...")

        by_origin: Dict[TileKey, List[TransportLink]] = {}
        areas: List[TransportLink] = []
        globals_: List[TransportLink] = []
        link_count = 0
        for record in records:
            if not record.enabled:
                continue
            for link in links_for_record(record):
                if link.is_global:
                    globals_.append(link)
                else:
                    by_origin.setdefault(link.origin, []).append(link)
                    if link.is_area:
                        areas.append(link)
                link_count += 1

        if self._load_task is not me:
            log_info("Discarding superseded transport load")
            return

        self._by_origin = by_origin
        self._areas = areas
        self._globals = globals_
        self._loaded = True
        log_success(f"{link_count} transport links loaded ({len(globals_)} global teleports)")

    async def reload(self) -> None:
        """Drop every edge (globals included) and load the full set again."""
        self._by_origin = {}
        self._areas = []
        self._globals = []
        self._loaded = False
        self._load_task = None
        await self.load()
        log_info("Transport graph reloaded")

    def edges_from(self, x: int, y: int, floor: int) -> List[TransportLink]:
        """Edges that can be taken from this tile (global teleports excluded).

        Exact-origin edges come first, then multi-tile edges whose box holds
        the tile but whose primary origin lies elsewhere.
        """
        key = (x, y, floor)
        links = list(self._by_origin.get(key, ()))
        links.extend(link for link in self._areas if link.origin != key and link.covers(x, y, floor))
        return links

    def global_teleports(self) -> List[TransportLink]:
        return list(self._globals)

    def summary(self) -> Dict[str, int]:
        """Counts for visualization/debug panels."""
        return {
            "position_links": sum(len(links) for links in self._by_origin.values()),
            "global_links": len(self._globals),
            "unique_positions": len(self._by_origin),
        }


__all__ = [
    "TransportLink",
    "TransportSource",
    "HttpTransportSource",
    "JsonTransportSource",
    "InMemoryTransportSource",
    "TransportGraph",
    "reverse_name",
    "links_for_record",
]
