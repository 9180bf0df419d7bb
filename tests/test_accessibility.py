"""Tests for tile accessibility and nearest-accessible snapping."""

import pytest

from questpath.collision import AccessibilityResolver, Direction, ring_offsets


def test_ring_offsets_order_and_size():
    assert list(ring_offsets(1)) == [
        (-1, -1),
        (-1, 0),
        (-1, 1),
        (0, -1),
        (0, 1),
        (1, -1),
        (1, 0),
        (1, 1),
    ]
    for radius in range(1, 6):
        ring = list(ring_offsets(radius))
        assert len(ring) == 8 * radius
        assert all(max(abs(dx), abs(dy)) == radius for dx, dy in ring)


@pytest.mark.asyncio
async def test_accessible_when_neighbour_points_back(collision_map):
    collision_map.blocked_file(0, 2, 2)
    # East neighbour can walk west into (3200, 3200)
    collision_map.set(3201, 3200, 0, Direction.WEST.bit)
    # North neighbour of (3300, 3300) only walks north, away from it
    collision_map.set(3300, 3301, 0, Direction.NORTH.bit)
    store = collision_map.store()
    await store.ensure_loaded(3200, 3200, 3300, 3300, 0)
    resolver = AccessibilityResolver(store)

    assert resolver.is_accessible(3200, 3200, 0)
    assert not resolver.is_accessible(3300, 3300, 0)
    # The tile's own byte is irrelevant
    assert not resolver.is_accessible(3201, 3200, 0)


@pytest.mark.asyncio
async def test_diagonal_neighbour_counts(collision_map):
    collision_map.blocked_file(0, 2, 2)
    collision_map.set(3199, 3199, 0, Direction.NORTHEAST.bit)
    store = collision_map.store()
    await store.ensure_loaded(3200, 3200, 3200, 3200, 0)

    assert AccessibilityResolver(store).is_accessible(3200, 3200, 0)


@pytest.mark.asyncio
async def test_find_nearest_returns_point_itself(collision_map):
    collision_map.open_file(0, 2, 2)
    store = collision_map.store()
    await store.ensure_loaded(3200, 3200, 3200, 3200, 0)

    assert AccessibilityResolver(store).find_nearest_accessible(3200, 3200, 0) == (3200, 3200)


@pytest.mark.asyncio
async def test_find_nearest_breaks_ties_by_scan_order(collision_map):
    collision_map.blocked_file(0, 2, 2)
    # Two candidates on ring 2: (3198, 3201) and (3202, 3200)
    collision_map.set(3197, 3201, 0, Direction.EAST.bit)
    collision_map.set(3203, 3200, 0, Direction.WEST.bit)
    store = collision_map.store()
    await store.ensure_loaded(3200, 3200, 3200, 3200, 0)
    resolver = AccessibilityResolver(store)

    assert resolver.find_nearest_accessible(3200, 3200, 0) == (3198, 3201)


@pytest.mark.asyncio
async def test_find_nearest_prefers_smaller_ring(collision_map):
    collision_map.blocked_file(0, 2, 2)
    collision_map.set(3190, 3200, 0, Direction.EAST.bit)  # makes (3191, 3200) reachable, ring 9
    collision_map.set(3204, 3204, 0, Direction.SOUTH.bit)  # makes (3204, 3203) reachable, ring 4
    store = collision_map.store()
    await store.ensure_loaded(3200, 3200, 3200, 3200, 0)

    assert AccessibilityResolver(store).find_nearest_accessible(3200, 3200, 0) == (3204, 3203)


@pytest.mark.asyncio
async def test_find_nearest_respects_radius(collision_map):
    collision_map.blocked_file(0, 2, 2)
    collision_map.set(3210, 3200, 0, Direction.WEST.bit)  # (3209, 3200), ring 9
    store = collision_map.store()
    await store.ensure_loaded(3200, 3200, 3200, 3200, 0)
    resolver = AccessibilityResolver(store, default_radius=5)

    assert resolver.find_nearest_accessible(3200, 3200, 0) is None
    assert resolver.find_nearest_accessible(3200, 3200, 0, max_radius=9) == (3209, 3200)


@pytest.mark.asyncio
async def test_unloaded_area_reads_as_inaccessible(collision_map):
    collision_map.open_file(0, 2, 2)
    store = collision_map.store()
    resolver = AccessibilityResolver(store)

    # Nothing preloaded yet: every neighbour reads as blocked
    assert not resolver.is_accessible(3200, 3200, 0)
    assert resolver.find_nearest_accessible(3200, 3200, 0, max_radius=2) is None
