"""Tests for the TilesetService facade."""

import random
import shutil
from pathlib import Path

import pytest

from wangtiles.animation.clock import GlobalClock
from wangtiles.settings import AppSettings
from wangtiles.terrain.grid import CornerGrid
from wangtiles.tilesets import TilesetService
from wangtiles.tilesets.errors import (
    IncompleteWangSet,
    InvalidWangSet,
    NoMatchingTile,
    TilesetError,
    TilesetFormatError,
)

from conftest import DIRT, GRASS

INCOMPLETE_TSX = """<?xml version="1.0" encoding="UTF-8"?>
<tileset name="patchy" tilewidth="32" tileheight="32" tilecount="4" columns="2">
 <wangsets>
  <wangset name="Ground" type="corner" tile="-1">
   <wangcolor name="Grass" color="#00ff00" tile="-1" probability="1"/>
   <wangtile tileid="1" wangid="0,1,0,1,0,1,0,1"/>
  </wangset>
 </wangsets>
</tileset>
"""


@pytest.fixture
def service(settings: AppSettings, data_dir: Path) -> TilesetService:
    service = TilesetService(settings)
    service.load(data_dir / "meadow.tsx")
    return service


class TestLoading:
    """Test loading and registering tilesets."""

    def test_load_registers(self, service: TilesetService, settings: AppSettings) -> None:
        assert service.get_available_tilesets() == ["meadow"]
        assert service.get_tileset("meadow").tile_count == 16
        assert service.resolver("meadow").wang_set_names == ["Ground"]
        assert service.animation_clock("meadow").get_registered_count() == 2
        assert settings.paths.recent_tilesets[0].endswith("meadow.tsx")

    def test_unknown_tileset(self, service: TilesetService) -> None:
        with pytest.raises(KeyError):
            service.get_tileset("desert")
        with pytest.raises(KeyError):
            service.resolve("desert", "Ground", (GRASS,) * 4)

    def test_incomplete_rejected(self, settings: AppSettings, tmp_path: Path) -> None:
        path = tmp_path / "patchy.tsx"
        path.write_text(INCOMPLETE_TSX)
        service = TilesetService(settings)

        with pytest.raises(IncompleteWangSet):
            service.load(path)
        assert service.get_available_tilesets() == []

    def test_incomplete_accepted_when_lenient(self, settings: AppSettings, tmp_path: Path) -> None:
        path = tmp_path / "patchy.tsx"
        path.write_text(INCOMPLETE_TSX)
        settings.resolver.require_complete_wang_sets = False
        service = TilesetService(settings)

        service.load(path)
        assert service.resolve("patchy", "Ground", (GRASS,) * 4) == 1
        # Without a blank tile the all-wildcard query matches any tile
        assert service.resolve("patchy", "Ground", (0, 0, 0, 0)) == 1

    def test_without_settings(self, data_dir: Path) -> None:
        service = TilesetService()
        service.load(data_dir / "meadow.tsj")
        assert service.resolve("meadow", "Ground", (DIRT,) * 4) == 3


class TestLoadDirectory:
    """Test parallel directory loading."""

    def test_broken_files_skipped(self, settings: AppSettings, data_dir: Path, tmp_path: Path) -> None:
        shutil.copy(data_dir / "meadow.tsx", tmp_path / "meadow.tsx")
        (tmp_path / "patchy.tsx").write_text(INCOMPLETE_TSX)
        (tmp_path / "broken.tsj").write_text("{")
        (tmp_path / "bad.tsx").write_text('<tileset name="bad" tilecount="abc"/>')
        (tmp_path / "notes.txt").write_text("not a tileset")

        service = TilesetService(settings)
        loaded = service.load_directory(tmp_path)

        assert [ts.name for ts in loaded] == ["meadow"]
        assert service.get_available_tilesets() == ["meadow"]

    def test_configured_directory(self, settings: AppSettings, data_dir: Path, tmp_path: Path) -> None:
        shutil.copy(data_dir / "meadow.tsj", tmp_path / "meadow.tsj")
        settings.paths.tilesets_path = tmp_path

        service = TilesetService(settings)
        assert [ts.name for ts in service.load_directory()] == ["meadow"]

    def test_no_directory(self) -> None:
        with pytest.raises(ValueError):
            TilesetService().load_directory()

    def test_invalid_directory(self, tmp_path: Path) -> None:
        with pytest.raises(TilesetError):
            TilesetService().load_directory(tmp_path / "missing")

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(TilesetFormatError):
            TilesetService().load(tmp_path / "missing.tsx")


class TestQueries:
    """Test terrain, animation and collision queries."""

    def test_resolve(self, service: TilesetService) -> None:
        assert service.resolve("meadow", "Ground", (0, 0, 0, 0)) == 0
        assert service.resolve("meadow", "Ground", (DIRT,) * 4) == 3
        assert service.resolve("meadow", "Ground", (GRASS, DIRT, DIRT, DIRT)) == 4
        assert service.resolve("meadow", "Ground", (GRASS,) * 4, random.Random(3)) in {1, 2}
        with pytest.raises(NoMatchingTile):
            service.resolve("meadow", "Ground", (DIRT, GRASS, DIRT, GRASS))

    def test_edge_set_not_resolvable(self, service: TilesetService) -> None:
        with pytest.raises(InvalidWangSet):
            service.resolve("meadow", "Paths", (1, 1, 1, 1))

    def test_chunk_resolver_uses_settings(self, service: TilesetService, settings: AppSettings) -> None:
        settings.resolver.random_seed = 77
        chunks = service.chunk_resolver("meadow", "Ground", missing_tile=0)
        assert chunks.seed == 77
        assert chunks.workers == settings.resolver.parallel_workers

        grid = CornerGrid({(x, y): GRASS for x in range(3) for y in range(3)})
        grid.set(2, 2, DIRT)
        result = chunks.resolve_chunk(grid, (0, 0), (2, 2))
        assert result[(0, 0)] in {1, 2}
        assert result[(1, 1)] == 0

    def test_current_frame(self, service: TilesetService) -> None:
        assert service.current_frame("meadow", 10, 0) == 10
        assert service.current_frame("meadow", 10, 600) == 12
        assert service.current_frame("meadow", 10, 1000) == 10
        assert service.current_frame("meadow", 14, 150) == 14
        assert service.current_frame("meadow", 14, 250) == 15
        # Static tile
        assert service.current_frame("meadow", 3, 250) == 3

    def test_current_frame_from_shared_clock(self, data_dir: Path) -> None:
        now = [0.0]
        service = TilesetService(clock=GlobalClock(time_source=lambda: now[0]))
        service.load(data_dir / "meadow.tsx")

        now[0] = 0.3
        service.clock.sample()
        assert service.current_frame("meadow", 10) == 11

    def test_start_paused_setting(self, settings: AppSettings) -> None:
        settings.animation.start_paused = True
        assert TilesetService(settings).clock.is_paused

    def test_collision_shapes(self, service: TilesetService) -> None:
        shapes = service.collision_shapes("meadow", 3)
        assert len(shapes) == 1
        assert shapes[0].name == "ledge"
        assert service.collision_shapes("meadow", 1) == ()

    def test_tiles_of_class(self, service: TilesetService) -> None:
        assert service.tiles_of_class("meadow", "grass") == {1, 2}
        assert service.tiles_of_class("meadow", "lava") == set()
        assert service.tiles.get_property("meadow", 3, "walkable") == "true"
