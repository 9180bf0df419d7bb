"""
CollisionSource interface for pluggable collision-file backends.

The tile store never talks to the network directly; it asks a source for the
raw bytes of one file. Three implementations are included:

1. HttpCollisionSource - the editor API (``/api/collision/{floor}/0/{x}-{y}.png``)
2. DirectoryCollisionSource - the same layout on local disk (offline tools)
3. InMemoryCollisionSource - dict-backed, for tests and scripted scenarios

Contract: ``fetch_file`` returns the bytes, or ``None`` when the file does
not exist. Any other failure is raised; the store logs it and treats the
file as blocked for the rest of the session.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Mapping, Optional

from ..config import Config
from ..errors import FetchStatusError
from ..net import fetch_bytes
from .layout import FileKey


class CollisionSource(ABC):
    """Abstract provider of raw collision files."""

    @abstractmethod
    async def fetch_file(self, key: FileKey) -> Optional[bytes]:
        """
        Fetch the raw byte grid of one collision file.

        Args:
            key: Floor and file coordinates

        Returns:
            The payload (``TILES_PER_FILE ** 2`` bytes), or None if the file
            does not exist

        Raises:
            Exception: For failures other than "not found"
        """

    def describe(self, key: FileKey) -> str:
        """Human-readable location of a file, used in log lines."""
        return str(key)


class HttpCollisionSource(CollisionSource):
    """Collision files served by the editor API.

    The ``.png`` suffix is historical: the body is the already-decompressed
    byte grid, not an image.
    """

    def __init__(
        self,
        api_base: str | None = None,
        *,
        timeout: float | None = None,
        max_attempts: int | None = None,
    ):
        self.api_base = (api_base or Config.API_BASE).rstrip("/")
        self.timeout = timeout
        self.max_attempts = max_attempts

    def url_for(self, key: FileKey) -> str:
        return f"{self.api_base}/api/collision/{key.floor}/0/{key.file_x}-{key.file_y}.png"

    def describe(self, key: FileKey) -> str:
        return self.url_for(key)

    async def fetch_file(self, key: FileKey) -> Optional[bytes]:
        try:
            return await fetch_bytes(
                self.url_for(key),
                timeout=self.timeout,
                max_attempts=self.max_attempts,
            )
        except FetchStatusError:
            # Any non-2xx answer means "no data for this file"
            return None


class DirectoryCollisionSource(CollisionSource):
    """Collision files stored on disk as ``{root}/{floor}/0/{file_x}-{file_y}.png``."""

    def __init__(self, root: str | Path):
        self.root = Path(root)

    def path_for(self, key: FileKey) -> Path:
        return self.root / str(key.floor) / "0" / f"{key.file_x}-{key.file_y}.png"

    def describe(self, key: FileKey) -> str:
        return str(self.path_for(key))

    async def fetch_file(self, key: FileKey) -> Optional[bytes]:
        path = self.path_for(key)
        if not path.is_file():
            return None
        return await asyncio.to_thread(path.read_bytes)


class InMemoryCollisionSource(CollisionSource):
    """Dict-backed source.

    ``fetch_counts`` records how often each key was requested so callers can
    verify caching. ``delay`` (seconds) simulates network latency, which makes
    concurrent-request behaviour observable.
    """

    def __init__(
        self,
        files: Optional[Mapping[FileKey, bytes]] = None,
        *,
        delay: float = 0.0,
    ):
        self.files: Dict[FileKey, bytes] = dict(files or {})
        self.delay = delay
        self.fetch_counts: Dict[FileKey, int] = {}
        self.failing: Dict[FileKey, Exception] = {}

    def put(self, key: FileKey, data: bytes) -> None:
        self.files[FileKey.coerce(key)] = bytes(data)

    def fail(self, key: FileKey, exc: Exception) -> None:
        """Make every fetch of ``key`` raise ``exc``."""
        self.failing[FileKey.coerce(key)] = exc

    async def fetch_file(self, key: FileKey) -> Optional[bytes]:
        self.fetch_counts[key] = self.fetch_counts.get(key, 0) + 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if key in self.failing:
            raise self.failing[key]
        return self.files.get(key)


__all__ = [
    "CollisionSource",
    "HttpCollisionSource",
    "DirectoryCollisionSource",
    "InMemoryCollisionSource",
]
