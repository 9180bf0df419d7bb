"""Exception hierarchy for questpath."""


class QuestPathError(Exception):
    """Base class for all questpath errors."""


class ConfigError(QuestPathError, ValueError):
    """Raised when configuration values are missing or malformed."""


class FetchError(QuestPathError):
    """Raised when a remote resource could not be fetched."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Failed to fetch {url}: {reason}")
        self.url = url
        self.reason = reason


class TransientFetchError(FetchError):
    """Network-level failure (refused connection, timeout) worth retrying."""


class FetchStatusError(FetchError):
    """The server answered with a non-2xx status. Never retried."""

    def __init__(self, url: str, status: int, reason: str = "") -> None:
        super().__init__(url, f"HTTP {status} {reason}".strip())
        self.status = status


class TileNotLoadedError(QuestPathError, LookupError):
    """Raised by strict tile reads when the covering collision file is not cached.

    A non-strict read of the same tile silently answers "blocked"; this error
    exists so callers that forgot to preload find out instead of getting a
    pessimistic search result.
    """

    def __init__(self, x: int, y: int, floor: int) -> None:
        super().__init__(
            f"Collision file covering tile ({x}, {y}, floor {floor}) is not loaded; "
            "call ensure_loaded()/preload_area() first"
        )
        self.x = x
        self.y = y
        self.floor = floor
