"""
Collision tile store: fetch, decode and cache collision files for one session.

Every tile is one byte of a 1280x1280 file (see ``layout``). Files are
fetched through an injected ``CollisionSource`` and kept in memory for the
lifetime of the store; a file that could not be fetched is remembered as a
negative result and reads as fully blocked until it is invalidated.

Two ways to read tiles:

* ``get_tile_sync`` answers 0 ("blocked") for a file that is not cached.
  This is what the search loop uses because it must not await. Callers MUST
  run ``preload_area``/``ensure_loaded`` first, otherwise the search sees a
  wall where there is none and may report that no path exists.
* ``get`` returns a ``TileRead`` that distinguishes "not loaded" from
  "loaded and blocked", and ``require`` raises ``TileNotLoadedError``.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from ..errors import TileNotLoadedError
from ..logging_utils import log_debug, log_error, log_info, log_network, log_warning
from .layout import CHUNK_SIZE, FILE_BYTES, FileKey, file_bounds, local_index
from .sources import CollisionSource


@dataclass(frozen=True)
class TileRead:
    """Result of a tile lookup that knows whether the covering file is loaded."""

    loaded: bool
    value: int = 0

    @property
    def blocked(self) -> bool:
        return self.value == 0


NOT_LOADED = TileRead(loaded=False)


class CollisionTileStore:
    """Per-session cache of collision files.

    State is owned by the instance (no module-level caches), so independent
    stores can be used side by side, e.g. one per test. The store is not
    locked: one search or edit at a time is assumed.
    """

    def __init__(self, source: CollisionSource):
        self.source = source
        # None marks a file that failed or does not exist (reads as blocked)
        self._files: Dict[FileKey, Optional[bytearray]] = {}
        self._pending: Dict[FileKey, asyncio.Task] = {}
        # Opaque per-file artefacts derived by visualization layers
        self._images: Dict[FileKey, Any] = {}

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def load_file(self, key: FileKey) -> Optional[bytearray]:
        """Return the bytes of a file, fetching it once if it is not cached.

        Concurrent callers asking for the same key share a single fetch.
        """
        key = FileKey.coerce(key)
        if key in self._files:
            return self._files[key]

        task = self._pending.get(key)
        if task is None:
            task = asyncio.ensure_future(self._fetch(key))
            self._pending[key] = task
        # Shield so one cancelled waiter does not cancel the shared fetch
        return await asyncio.shield(task)

    async def _fetch(self, key: FileKey) -> Optional[bytearray]:
        me = asyncio.current_task()
        data: Optional[bytearray] = None
        try:
            raw = await self.source.fetch_file(key)
        except Exception as exc:
            log_error(f"Failed to load collision file {self.source.describe(key)}: {exc}")
        else:
            if raw is None:
                log_warning(f"Collision file not found: {self.source.describe(key)}")
            else:
                data = bytearray(raw)
                if len(data) != FILE_BYTES:
                    log_warning(
                        f"Collision file {key} has {len(data)} bytes, expected {FILE_BYTES}; "
                        "missing tiles read as blocked"
                    )
                log_network(f"Loaded collision file {key}: {len(data)} bytes")

        # An invalidate() during the fetch replaces or drops our pending entry;
        # in that case the result is stale and must not be cached.
        if self._pending.get(key) is me:
            del self._pending[key]
            self._files[key] = data
        return data

    async def load_tile(self, x: int, y: int, floor: int) -> int:
        """Fetch (if needed) and return the collision byte of one tile; 0 on failure."""
        data = await self.load_file(FileKey.for_tile(x, y, floor))
        return _read(data, x, y)

    def files_for_area(
        self, min_x: int, min_y: int, max_x: int, max_y: int, floor: int
    ) -> List[FileKey]:
        """File keys covering a world rectangle (corners in any order)."""
        lo = FileKey.for_tile(min(min_x, max_x), min(min_y, max_y), floor)
        hi = FileKey.for_tile(max(min_x, max_x), max(min_y, max_y), floor)
        return [
            FileKey(floor, fx, fy)
            for fx in range(lo.file_x, hi.file_x + 1)
            for fy in range(lo.file_y, hi.file_y + 1)
        ]

    async def ensure_loaded(
        self, min_x: int, min_y: int, max_x: int, max_y: int, floor: int
    ) -> int:
        """Load every uncached file covering the rectangle, in parallel.

        Returns the number of files that had to be requested.
        """
        missing = [
            key for key in self.files_for_area(min_x, min_y, max_x, max_y, floor)
            if key not in self._files
        ]
        if missing:
            log_info(f"Preloading {len(missing)} collision file(s) on floor {floor}...")
            await asyncio.gather(*(self.load_file(key) for key in missing))
        return len(missing)

    async def preload_area(
        self,
        start_x: int,
        start_y: int,
        end_x: int,
        end_y: int,
        floor: int,
        padding: int = 1,
    ) -> int:
        """Load the files around the bounding box of two points.

        ``padding`` widens the box on every side by that many 64-tile chunks,
        so a search that detours slightly outside the box still reads real data.
        Padding is counted in chunks, not whole files: ``padding=2`` reaches
        128 tiles past the box, not two 1280-tile files. Any file the widened
        box touches is still loaded whole.
        """
        pad = padding * CHUNK_SIZE
        return await self.ensure_loaded(
            min(start_x, end_x) - pad,
            min(start_y, end_y) - pad,
            max(start_x, end_x) + pad,
            max(start_y, end_y) + pad,
            floor,
        )

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def is_loaded(self, key: FileKey) -> bool:
        """True once a fetch for ``key`` has finished (including negative results)."""
        return FileKey.coerce(key) in self._files

    def get_tile_sync(self, x: int, y: int, floor: int) -> int:
        """Collision byte of a cached tile; 0 if the covering file is not cached."""
        return _read(self._files.get(FileKey.for_tile(x, y, floor)), x, y)

    def get(self, x: int, y: int, floor: int) -> TileRead:
        """Collision byte plus whether the covering file has been loaded."""
        key = FileKey.for_tile(x, y, floor)
        if key not in self._files:
            return NOT_LOADED
        return TileRead(loaded=True, value=_read(self._files[key], x, y))

    def require(self, x: int, y: int, floor: int) -> int:
        """Like ``get_tile_sync`` but raises if the covering file is not loaded."""
        read = self.get(x, y, floor)
        if not read.loaded:
            raise TileNotLoadedError(x, y, floor)
        return read.value

    @staticmethod
    def tile_bounds(file_x: int, file_y: int):
        return file_bounds(file_x, file_y)

    def cached_keys(self) -> List[FileKey]:
        return sorted(self._files)

    def stats(self) -> Dict[str, int]:
        loaded = [data for data in self._files.values() if data is not None]
        return {
            "files": len(loaded),
            "negative": len(self._files) - len(loaded),
            "bytes": sum(len(data) for data in loaded),
        }

    # ------------------------------------------------------------------
    # Mutation (used by CollisionEditor only)
    # ------------------------------------------------------------------

    def write_tile(self, x: int, y: int, floor: int, value: int) -> bool:
        """Overwrite one cached byte. Returns False if the file has no data."""
        key = FileKey.for_tile(x, y, floor)
        data = self._files.get(key)
        if data is None:
            log_warning(f"Cannot edit tile ({x}, {y}, floor {floor}): file {key} not loaded")
            return False

        index = local_index(x, y)
        if index >= len(data):
            log_warning(f"Cannot edit tile ({x}, {y}, floor {floor}): index {index} out of range")
            return False

        old_value = data[index]
        data[index] = value & 0xFF
        log_debug(f"setTile ({x},{y}) file={key} idx={index}: {old_value:08b} -> {data[index]:08b}")
        self._images.pop(key, None)
        return True

    # ------------------------------------------------------------------
    # Invalidation
    # ------------------------------------------------------------------

    def invalidate(self, keys: Iterable[Any]) -> int:
        """Drop the given files so the next access re-fetches them.

        Accepts FileKeys, ``(floor, file_x, file_y)`` tuples or mappings with
        ``floor``/``fileX``/``fileY`` as delivered by the push channel.
        Returns how many cached files were dropped.
        """
        dropped = 0
        for raw_key in keys:
            key = FileKey.coerce(raw_key)
            if self._files.pop(key, False) is not False:
                dropped += 1
            self._pending.pop(key, None)
            self._images.pop(key, None)
        if dropped:
            log_info(f"Invalidated {dropped} collision file(s)")
        return dropped

    def clear_all(self) -> None:
        """Forget every cached file, pending fetch and derived image."""
        self._files.clear()
        self._pending.clear()
        self._images.clear()
        log_info("Collision cache cleared")

    # ------------------------------------------------------------------
    # Visualization cache
    # ------------------------------------------------------------------

    def cache_image(self, key: FileKey, image: Any) -> None:
        self._images[FileKey.coerce(key)] = image

    def cached_image(self, key: FileKey) -> Any:
        return self._images.get(FileKey.coerce(key))


def _read(data: Optional[bytearray], x: int, y: int) -> int:
    if data is None:
        return 0
    index = local_index(x, y)
    if index >= len(data):
        return 0
    return data[index]


__all__ = ["CollisionTileStore", "TileRead", "NOT_LOADED"]
