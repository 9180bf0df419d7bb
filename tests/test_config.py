import pytest

from questpath.collision import DirectoryCollisionSource, HttpCollisionSource
from questpath.collision.layout import FILE_BYTES
from questpath.config import Config
from questpath.errors import ConfigError
from questpath.session import PathfindingSession
from questpath.transport import HttpTransportSource, JsonTransportSource


def test_defaults_validate(monkeypatch):
    monkeypatch.setattr(Config, "API_BASE", "http://127.0.0.1:42069")
    monkeypatch.setattr(Config, "FETCH_TIMEOUT_SECONDS", 30.0)
    monkeypatch.setattr(Config, "FETCH_MAX_ATTEMPTS", 2)
    monkeypatch.setattr(Config, "MAX_ITERATIONS", 300000)
    Config.validate()


@pytest.mark.parametrize(
    "name, value",
    [
        ("API_BASE", "ftp://example.test"),
        ("API_BASE", "not a url"),
        ("FETCH_TIMEOUT_SECONDS", 0),
        ("FETCH_MAX_ATTEMPTS", 0),
        ("MAX_ITERATIONS", 3),
        ("SNAP_RADIUS", -1),
        ("PRELOAD_PADDING", -2),
    ],
)
def test_invalid_values_rejected(monkeypatch, name, value):
    monkeypatch.setattr(Config, "API_BASE", "http://127.0.0.1:42069")
    monkeypatch.setattr(Config, name, value)
    with pytest.raises(ConfigError):
        Config.validate()


def test_display_mentions_search_settings():
    text = Config.display()
    assert "Max Iterations" in text
    assert "Preload Padding" in text


def test_session_from_config_uses_http_by_default(monkeypatch):
    monkeypatch.setattr(Config, "API_BASE", "http://editor.test")
    monkeypatch.setattr(Config, "COLLISION_DIR", None)
    monkeypatch.setattr(Config, "TRANSPORTS_FILE", None)

    session = PathfindingSession.from_config()

    assert isinstance(session.store.source, HttpCollisionSource)
    assert session.store.source.api_base == "http://editor.test"
    assert isinstance(session.transports.source, HttpTransportSource)
    assert session.pathfinder.store is session.editor.store


@pytest.mark.asyncio
async def test_session_from_config_with_local_sources(monkeypatch, tmp_path):
    collision_dir = tmp_path / "collision"
    (collision_dir / "0" / "0").mkdir(parents=True)
    (collision_dir / "0" / "0" / "2-2.png").write_bytes(b"\xff" * FILE_BYTES)
    transports = tmp_path / "transports.json"
    transports.write_text('[{"name": "Ladder", "from_x": 3200, "from_y": 3200, "to_x": 3200, "to_y": 3200, "to_floor": 1}]')

    monkeypatch.setattr(Config, "API_BASE", "http://127.0.0.1:42069")
    monkeypatch.setattr(Config, "COLLISION_DIR", str(collision_dir))
    monkeypatch.setattr(Config, "TRANSPORTS_FILE", str(transports))

    session = PathfindingSession.from_config()
    assert isinstance(session.store.source, DirectoryCollisionSource)
    assert isinstance(session.transports.source, JsonTransportSource)

    assert await session.store.load_tile(3200, 3200, 0) == 0xFF
    assert await session.store.load_tile(3200, 3200, 1) == 0
    await session.transports.load()
    assert [link.name for link in session.transports.edges_from(3200, 3200, 0)] == ["Ladder"]

    # Invalidation through the session re-reads from disk
    assert session.invalidate_collision([{"floor": 0, "fileX": 2, "fileY": 2}]) == 1
    assert not session.store.is_loaded((0, 2, 2))
