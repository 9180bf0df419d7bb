"""Route finding demo.

By default builds a small in-memory map (no server needed): a ground-floor
courtyard, an upstairs room reached by a staircase, and a walled-off garden
only reachable by a teleport.

    uv run python examples/route_demo/run.py

Against a running editor API (QUESTPATH_API_BASE) or local data
(QUESTPATH_COLLISION_DIR / QUESTPATH_TRANSPORTS_FILE):

    uv run python examples/route_demo/run.py --live --from 3200,3200,0 --to 3210,3195,0
"""

from __future__ import annotations

import argparse
import asyncio
from typing import Tuple

from questpath import (
    Config,
    ConfigError,
    Direction,
    FileKey,
    InMemoryCollisionSource,
    InMemoryTransportSource,
    PathfindingSession,
)
from questpath.collision.layout import FILE_BYTES, local_index


# ============================================================================
# Demo map
# ============================================================================

def build_demo_map() -> InMemoryCollisionSource:
    """Courtyard (3190-3215) and upstairs room on floor 1; garden at 3300."""
    ground = bytearray(FILE_BYTES)
    upstairs = bytearray(FILE_BYTES)

    def fill(data: bytearray, x1: int, y1: int, x2: int, y2: int, value: int = 0xFF) -> None:
        for y in range(y1, y2 + 1):
            for x in range(x1, x2 + 1):
                data[local_index(x, y)] = value

    fill(ground, 3190, 3190, 3215, 3215)
    fill(ground, 3295, 3295, 3310, 3310)
    fill(upstairs, 3195, 3195, 3210, 3210)

    # A fence across the courtyard with a one-tile gap
    for x in range(3190, 3216):
        if x != 3212:
            ground[local_index(x, 3203)] &= ~(Direction.NORTH.bit | Direction.NORTHEAST.bit | Direction.NORTHWEST.bit)
            ground[local_index(x, 3204)] &= ~(Direction.SOUTH.bit | Direction.SOUTHEAST.bit | Direction.SOUTHWEST.bit)

    return InMemoryCollisionSource({FileKey(0, 2, 2): bytes(ground), FileKey(1, 2, 2): bytes(upstairs)})


DEMO_TRANSPORTS = [
    {
        "id": 1,
        "name": "Climb up staircase",
        "transport_type": "stairs",
        "from_x": 3195,
        "from_y": 3196,
        "to_x": 3196,
        "to_y": 3196,
        "to_floor": 1,
        "travel_time": 2,
        "bidirectional": True,
    },
    {
        "id": 2,
        "name": "Garden teleport",
        "transport_type": "teleport",
        "from_x": 0,
        "from_y": 0,
        "to_x": 3300,
        "to_y": 3300,
        "travel_time": 20,
    },
]


# ============================================================================
# CLI
# ============================================================================

def parse_point(text: str) -> Tuple[int, int, int]:
    """Parse ``x,y[,floor]``."""
    parts = [int(part) for part in text.split(",")]
    if len(parts) == 2:
        parts.append(0)
    if len(parts) != 3:
        raise argparse.ArgumentTypeError(f"expected x,y[,floor], got {text!r}")
    return parts[0], parts[1], parts[2]


def parse_args() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Find a route between two tiles")
    parser.add_argument("--live", action="store_true", help="Use the configured API/local data instead of the demo map")
    parser.add_argument("--from", dest="start", type=parse_point, help="Start as x,y[,floor]")
    parser.add_argument("--to", dest="end", type=parse_point, help="End as x,y[,floor]")
    parser.add_argument("--max-iterations", type=int, default=None, help="Search budget across all attempts")
    return parser.parse_args()


async def run_demo(args: argparse.Namespace) -> None:
    if args.live:
        session = PathfindingSession.from_config()
        print(Config.display())
    else:
        session = PathfindingSession(build_demo_map(), InMemoryTransportSource(DEMO_TRANSPORTS))

    routes = []
    if args.start and args.end:
        routes.append((args.start, args.end))
    else:
        routes = [
            ((3192, 3192, 0), (3192, 3212, 0)),  # through the fence gap
            ((3192, 3192, 0), (3205, 3205, 1)),  # upstairs
            ((3192, 3192, 0), (3305, 3305, 0)),  # walled garden
        ]

    for (sx, sy, sfloor), (ex, ey, efloor) in routes:
        print(f"\n{'=' * 60}")
        path = await session.find_path(sy, sx, ey, ex, sfloor, efloor, args.max_iterations)
        if path is None:
            print("No route")
            continue
        result = session.pathfinder.last_result
        if result is not None and result.transports_used():
            print(f"Transports: {', '.join(result.transports_used())}")
        print("Waypoints: " + " -> ".join(f"({p.lng},{p.lat})" for p in path))


async def main(args: argparse.Namespace) -> None:
    """Main entry point."""
    try:
        await run_demo(args)
    except ConfigError as exc:
        print(f"[Error] {exc}")


if __name__ == "__main__":
    asyncio.run(main(parse_args()))
