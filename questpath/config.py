"""
questpath Configuration

Loads configuration from environment variables with sensible defaults.
"""

import os
from urllib.parse import urlparse

from dotenv import load_dotenv

from .errors import ConfigError

# Load .env file if it exists
load_dotenv()


class Config:
    """Application configuration loaded from environment variables."""

    # API origin serving /api/collision/... and /api/transports/all
    API_BASE: str = os.getenv("QUESTPATH_API_BASE", "http://127.0.0.1:42069")

    # Network
    FETCH_TIMEOUT_SECONDS: float = float(os.getenv("QUESTPATH_FETCH_TIMEOUT", "30"))
    # Attempts for transient network errors only; HTTP status errors never retry
    FETCH_MAX_ATTEMPTS: int = int(os.getenv("QUESTPATH_FETCH_MAX_ATTEMPTS", "2"))

    # Search
    MAX_ITERATIONS: int = int(os.getenv("QUESTPATH_MAX_ITERATIONS", "300000"))
    SNAP_RADIUS: int = int(os.getenv("QUESTPATH_SNAP_RADIUS", "15"))
    # Measured in 64-tile chunks around the start/end bounding box
    PRELOAD_PADDING: int = int(os.getenv("QUESTPATH_PRELOAD_PADDING", "2"))

    # Optional offline sources (take precedence over the HTTP API when set)
    COLLISION_DIR: str | None = os.getenv("QUESTPATH_COLLISION_DIR")
    TRANSPORTS_FILE: str | None = os.getenv("QUESTPATH_TRANSPORTS_FILE")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    @classmethod
    def validate(cls) -> None:
        """Validate configuration and raise ConfigError for unusable values."""
        parsed = urlparse(cls.API_BASE)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ConfigError(
                f"QUESTPATH_API_BASE must be an http(s) URL, got {cls.API_BASE!r}"
            )

        if cls.FETCH_TIMEOUT_SECONDS <= 0:
            raise ConfigError("QUESTPATH_FETCH_TIMEOUT must be positive")

        if cls.FETCH_MAX_ATTEMPTS < 1:
            raise ConfigError("QUESTPATH_FETCH_MAX_ATTEMPTS must be at least 1")

        if cls.MAX_ITERATIONS < 4:
            # Each of the four weight tiers needs at least one iteration
            raise ConfigError("QUESTPATH_MAX_ITERATIONS must be at least 4")

        if cls.SNAP_RADIUS < 0 or cls.PRELOAD_PADDING < 0:
            raise ConfigError(
                "QUESTPATH_SNAP_RADIUS and QUESTPATH_PRELOAD_PADDING cannot be negative"
            )

    @classmethod
    def display(cls) -> str:
        """Return a formatted string showing current configuration."""
        lines = [
            "questpath Configuration:",
            f"  API Base: {cls.API_BASE}",
            f"  Collision Source: {cls.COLLISION_DIR or 'http'}",
            f"  Transport Source: {cls.TRANSPORTS_FILE or 'http'}",
            f"  Fetch Timeout: {cls.FETCH_TIMEOUT_SECONDS}s (attempts: {cls.FETCH_MAX_ATTEMPTS})",
            f"  Max Iterations: {cls.MAX_ITERATIONS}",
            f"  Snap Radius: {cls.SNAP_RADIUS}",
            f"  Preload Padding: {cls.PRELOAD_PADDING} chunks",
        ]
        return "\n".join(lines)
