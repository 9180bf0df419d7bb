"""Logging utilities for questpath.

Provides color-coded console output so deterministic work (search, edits),
network fetches and failures are easy to tell apart when the library runs
inside an interactive editor session.
"""

import os
from enum import Enum


class Color(Enum):
    """ANSI color codes for terminal output."""

    # Colors for operation types
    BLUE = "\033[94m"      # Deterministic operations (search, edits)
    MAGENTA = "\033[95m"   # Network fetches
    YELLOW = "\033[93m"    # Warnings (no path, no accessible tile)
    RED = "\033[91m"       # Errors and retries
    GREEN = "\033[92m"     # Success/completion
    CYAN = "\033[96m"      # Info/metadata
    GRAY = "\033[90m"      # Debug diagnostics

    # Formatting
    BOLD = "\033[1m"
    RESET = "\033[0m"


# Markers for operation types (color-blind accessible)
LOG_TAG_DETERMINISTIC = "[•]"
LOG_TAG_NETWORK = "[net]"
LOG_TAG_ERROR = "[!]"
LOG_TAG_SUCCESS = "[✓]"
LOG_TAG_INFO = "[i]"


def colored(text: str, color: Color, bold: bool = False) -> str:
    """Wrap text in ANSI color codes if colors are enabled.

    Args:
        text: Text to colorize
        color: Color to apply
        bold: Whether to make text bold

    Returns:
        Colorized text if QUESTPATH_NO_COLOR is not set, otherwise plain text
    """
    if os.getenv("QUESTPATH_NO_COLOR"):
        return text

    prefix = color.value
    if bold:
        prefix = Color.BOLD.value + prefix

    return f"{prefix}{text}{Color.RESET.value}"


def debug_enabled() -> bool:
    """Return True when per-iteration diagnostics should be printed."""
    if os.getenv("QUESTPATH_VERBOSE", "").lower() in ("1", "true", "yes"):
        return True
    return os.getenv("LOG_LEVEL", "INFO").upper() == "DEBUG"


def log_deterministic(message: str) -> None:
    """Log a deterministic operation (blue)."""
    print(colored(f"{LOG_TAG_DETERMINISTIC} {message}", Color.BLUE))


def log_network(message: str) -> None:
    """Log a network fetch (magenta)."""
    print(colored(f"{LOG_TAG_NETWORK} {message}", Color.MAGENTA))


def log_warning(message: str) -> None:
    """Log an expected-but-notable outcome (yellow)."""
    print(colored(f"{LOG_TAG_ERROR} {message}", Color.YELLOW))


def log_error(message: str) -> None:
    """Log an error or retry (red)."""
    print(colored(f"{LOG_TAG_ERROR} {message}", Color.RED))


def log_success(message: str) -> None:
    """Log a success (green)."""
    print(colored(f"{LOG_TAG_SUCCESS} {message}", Color.GREEN))


def log_info(message: str) -> None:
    """Log metadata/info (cyan)."""
    print(colored(f"{LOG_TAG_INFO} {message}", Color.CYAN))


def log_debug(message: str) -> None:
    """Log a diagnostic line (gray), only when debugging is enabled."""
    if debug_enabled():
        print(colored(f"    {message}", Color.GRAY))
