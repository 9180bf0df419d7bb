"""Tests for in-memory collision editing, change notifications and undo."""

import pytest

from questpath.collision import ALL_BITS, CollisionEditor, Direction, FileKey, line_tiles, rect_tiles

KEY = FileKey(0, 2, 2)


def test_rect_and_line_tiles():
    assert list(rect_tiles(2, 2, 1, 1)) == [(1, 1), (2, 1), (1, 2), (2, 2)]
    assert line_tiles(0, 0, 3, 1) == [(0, 0), (1, 0), (2, 1), (3, 1)]
    assert line_tiles(3, 0, 0, 0) == [(3, 0), (2, 0), (1, 0), (0, 0)]
    assert line_tiles(5, 5, 5, 5) == [(5, 5)]


@pytest.mark.asyncio
async def test_single_tile_edits(collision_map):
    collision_map.open_file(0, 2, 2)
    store = collision_map.store()
    await store.ensure_loaded(3200, 3200, 3200, 3200, 0)
    editor = CollisionEditor(store)

    assert editor.set_tile_blocked(3200, 3200, 0)
    assert store.get_tile_sync(3200, 3200, 0) == 0

    assert editor.add_tile_directions(3200, 3200, 0, Direction.NORTH.bit | Direction.EAST.bit)
    assert store.get_tile_sync(3200, 3200, 0) == 0b110

    assert editor.remove_tile_directions(3200, 3200, 0, Direction.NORTH.bit)
    assert store.get_tile_sync(3200, 3200, 0) == Direction.EAST.bit

    assert editor.set_tile_directions(3200, 3200, 0, 0x1FF)
    assert store.get_tile_sync(3200, 3200, 0) == ALL_BITS

    assert editor.set_tile_blocked(3201, 3200, 0)
    assert editor.set_tile_walkable(3201, 3200, 0)
    assert store.get_tile_sync(3201, 3200, 0) == ALL_BITS


@pytest.mark.asyncio
async def test_edits_on_unloaded_file_fail(collision_map):
    collision_map.open_file(0, 2, 2)
    editor = CollisionEditor(collision_map.store())

    assert not editor.set_tile_blocked(3200, 3200, 0)
    assert editor.fill_area_blocked(3200, 3200, 3202, 3202, 0) == 0


@pytest.mark.asyncio
async def test_area_and_line_operations(collision_map):
    collision_map.open_file(0, 2, 2)
    store = collision_map.store()
    await store.ensure_loaded(3200, 3200, 3200, 3200, 0)
    editor = CollisionEditor(store)

    assert editor.fill_area_blocked(3202, 3202, 3200, 3200, 0) == 9
    assert all(store.get_tile_sync(x, y, 0) == 0 for x, y in rect_tiles(3200, 3200, 3202, 3202))
    assert store.get_tile_sync(3203, 3200, 0) == ALL_BITS

    assert editor.add_directions_to_area(3200, 3200, 3201, 3201, 0, Direction.SOUTH.bit) == 4
    assert store.get_tile_sync(3201, 3201, 0) == Direction.SOUTH.bit
    assert editor.fill_area_walkable(3200, 3200, 3202, 3202, 0) == 9
    assert editor.remove_directions_from_area(3200, 3200, 3200, 3202, 0, Direction.WEST.bit) == 3
    assert store.get_tile_sync(3200, 3201, 0) == ALL_BITS & ~Direction.WEST.bit

    assert editor.draw_line_blocked(3210, 3210, 3213, 3211, 0) == 4
    assert store.get_tile_sync(3212, 3211, 0) == 0
    assert store.get_tile_sync(3212, 3210, 0) == ALL_BITS
    assert editor.draw_line_walkable(3210, 3210, 3213, 3211, 0) == 4
    assert editor.remove_directions_from_line(3220, 3220, 3220, 3222, 0, Direction.NORTH.bit) == 3
    assert store.get_tile_sync(3220, 3221, 0) == ALL_BITS & ~Direction.NORTH.bit
    assert editor.add_directions_to_line(3220, 3220, 3220, 3222, 0, Direction.NORTH.bit) == 3
    assert store.get_tile_sync(3220, 3221, 0) == ALL_BITS


@pytest.mark.asyncio
async def test_notifies_once_per_call(collision_map):
    collision_map.open_file(0, 1, 2)
    collision_map.open_file(0, 2, 2)
    store = collision_map.store()
    await store.ensure_loaded(2559, 3200, 2560, 3200, 0)
    editor = CollisionEditor(store)
    received = []
    unsubscribe = editor.subscribe(received.append)

    editor.fill_area_blocked(2555, 3200, 2565, 3205, 0)
    editor.set_tile_walkable(2560, 3200, 0)

    assert received == [frozenset({FileKey(0, 1, 2), KEY}), frozenset({KEY})]

    unsubscribe()
    editor.set_tile_blocked(2560, 3200, 0)
    assert len(received) == 2


@pytest.mark.asyncio
async def test_undo_restores_previous_bytes(collision_map):
    collision_map.open_file(0, 2, 2)
    store = collision_map.store()
    await store.ensure_loaded(3200, 3200, 3200, 3200, 0)
    editor = CollisionEditor(store)
    received = []
    editor.subscribe(received.append)

    editor.set_tile_directions(3200, 3200, 0, Direction.EAST.bit)
    editor.fill_area_blocked(3200, 3200, 3201, 3201, 0)

    assert editor.undo_last_edit() == 4
    assert store.get_tile_sync(3200, 3200, 0) == Direction.EAST.bit
    assert store.get_tile_sync(3201, 3201, 0) == ALL_BITS
    assert received[-1] == frozenset({KEY})

    # Only the most recent edit is remembered
    assert editor.undo_last_edit() == 0
    assert store.get_tile_sync(3200, 3200, 0) == Direction.EAST.bit


@pytest.mark.asyncio
async def test_horizontal_wall(collision_map):
    collision_map.open_file(0, 2, 2)
    store = collision_map.store()
    await store.ensure_loaded(3200, 3200, 3200, 3200, 0)
    editor = CollisionEditor(store)

    assert editor.set_wall(3200, 3200, 3203, 3200, 0) == 6

    north_side = ALL_BITS & ~(Direction.SOUTH.bit | Direction.SOUTHEAST.bit | Direction.SOUTHWEST.bit)
    south_side = ALL_BITS & ~(Direction.NORTH.bit | Direction.NORTHEAST.bit | Direction.NORTHWEST.bit)
    for x in range(3200, 3203):
        assert store.get_tile_sync(x, 3200, 0) == north_side
        assert store.get_tile_sync(x, 3199, 0) == south_side
    assert store.get_tile_sync(3203, 3200, 0) == ALL_BITS

    assert editor.set_wall(3200, 3200, 3203, 3200, 0, remove=True) == 6
    assert store.get_tile_sync(3201, 3200, 0) == ALL_BITS
    assert store.get_tile_sync(3201, 3199, 0) == ALL_BITS


@pytest.mark.asyncio
async def test_vertical_wall(collision_map):
    collision_map.open_file(0, 2, 2)
    store = collision_map.store()
    await store.ensure_loaded(3200, 3200, 3200, 3200, 0)
    editor = CollisionEditor(store)

    assert editor.set_wall(3200, 3202, 3200, 3200, 0) == 4

    east_side = ALL_BITS & ~(Direction.WEST.bit | Direction.NORTHWEST.bit | Direction.SOUTHWEST.bit)
    west_side = ALL_BITS & ~(Direction.EAST.bit | Direction.NORTHEAST.bit | Direction.SOUTHEAST.bit)
    for y in (3200, 3201):
        assert store.get_tile_sync(3200, y, 0) == east_side
        assert store.get_tile_sync(3199, y, 0) == west_side


def test_diagonal_wall_rejected(collision_map):
    editor = CollisionEditor(collision_map.store())
    with pytest.raises(ValueError):
        editor.set_wall(0, 0, 2, 2, 0)
