"""Tests for load-time tileset validation."""

from pathlib import Path

import pytest

from wangtiles.tilesets.errors import (
    EmptyAnimationSequence,
    IncompleteWangSet,
    InvalidFrameDuration,
    NoMatchingTile,
    OutOfRangeTileId,
    UnknownMaterial,
)
from wangtiles.tilesets.loaders import TilesetFileLoader
from wangtiles.tilesets.models import (
    AnimatedTile,
    AnimationFrame,
    CollisionRect,
    TileData,
    Tileset,
    WangSet,
)
from wangtiles.tilesets.validation import TilesetValidator

from conftest import DIRT, GRASS, make_wang_set


def make_tileset(
    wang_set: WangSet | None = None,
    tiles: dict[int, TileData] | None = None,
    tile_count: int = 16,
) -> Tileset:
    return Tileset(
        name="test",
        tile_count=tile_count,
        wang_sets={wang_set.name: wang_set} if wang_set else {},
        tiles=tiles or {},
    )


def animated(tile_id: int, *frames: tuple[int, int]) -> TileData:
    return TileData(
        tile_id=tile_id,
        animation=AnimatedTile(
            tile_id=tile_id,
            frames=tuple(AnimationFrame(f, d) for f, d in frames),
        ),
    )


class TestCompleteTileset:
    """Test that well-formed data passes."""

    def test_meadow_is_valid(self, data_dir: Path) -> None:
        tileset = TilesetFileLoader().load(data_dir / "meadow.tsx")
        result = TilesetValidator().validate(tileset)

        assert result.is_valid, result.errors
        # Duplicate back-to-back frame and the skipped edge set are warnings only
        assert any("repeats frame 14" in w for w in result.warnings)
        assert any("'Paths'" in w for w in result.warnings)
        result.raise_for_errors()

    def test_fixture_set_is_valid(self, grass_dirt: WangSet) -> None:
        assert TilesetValidator().validate(make_tileset(grass_dirt)).is_valid


class TestWangSetCompleteness:
    """Test the blank and full-cover entry requirements."""

    def test_missing_blank_tile(self) -> None:
        wang_set = make_wang_set({1: (GRASS,) * 4, 2: (DIRT,) * 4})
        result = TilesetValidator().validate(make_tileset(wang_set))

        assert not result.is_valid
        assert isinstance(result.errors[0], IncompleteWangSet)
        # Incomplete sets are a flavour of unmatched blend
        assert isinstance(result.errors[0], NoMatchingTile)
        with pytest.raises(IncompleteWangSet):
            result.raise_for_errors()

    def test_two_blank_tiles(self) -> None:
        wang_set = make_wang_set({0: (0,) * 4, 5: (0,) * 4, 1: (GRASS,) * 4, 2: (DIRT,) * 4})
        result = TilesetValidator().validate(make_tileset(wang_set))

        assert len(result.errors) == 1
        assert "[0, 5]" in str(result.errors[0])

    def test_missing_full_cover(self) -> None:
        wang_set = make_wang_set({0: (0,) * 4, 1: (GRASS,) * 4})
        result = TilesetValidator().validate(make_tileset(wang_set))

        assert len(result.errors) == 1
        assert "'Dirt'" in str(result.errors[0])

    def test_lenient_mode_warns(self) -> None:
        wang_set = make_wang_set({1: (GRASS,) * 4})
        result = TilesetValidator(require_complete_wang_sets=False).validate(make_tileset(wang_set))

        assert result.is_valid
        assert any("missing canonical blank tile" in w for w in result.warnings)
        assert any("'Dirt'" in w for w in result.warnings)


class TestBounds:
    """Test tile id and material bounds."""

    def test_wang_tile_out_of_range(self, grass_dirt: WangSet) -> None:
        result = TilesetValidator().validate(make_tileset(grass_dirt, tile_count=3))

        assert len(result.errors) == 1
        error = result.errors[0]
        assert isinstance(error, OutOfRangeTileId)
        assert error.tile_id == 3

    def test_unknown_material(self) -> None:
        wang_set = make_wang_set({0: (0,) * 4, 1: (GRASS,) * 4, 2: (DIRT,) * 4, 3: (1, 1, 3, 1)})
        result = TilesetValidator().validate(make_tileset(wang_set))

        assert len(result.errors) == 1
        assert isinstance(result.errors[0], UnknownMaterial)
        assert result.errors[0].material == 3

    def test_collision_out_of_range(self) -> None:
        tiles = {20: TileData(tile_id=20, collision=(CollisionRect(0, 0, 8, 8),))}
        result = TilesetValidator().validate(make_tileset(tiles=tiles))

        assert isinstance(result.errors[0], OutOfRangeTileId)


class TestAnimationValidation:
    """Test animation sequence checks."""

    def test_empty_sequence(self) -> None:
        result = TilesetValidator().validate(make_tileset(tiles={4: animated(4)}))

        assert len(result.errors) == 1
        assert isinstance(result.errors[0], EmptyAnimationSequence)
        assert result.errors[0].tile_id == 4

    def test_frame_out_of_range(self) -> None:
        result = TilesetValidator().validate(
            make_tileset(tiles={4: animated(4, (4, 100), (16, 100))})
        )

        assert len(result.errors) == 1
        assert isinstance(result.errors[0], OutOfRangeTileId)
        assert result.errors[0].tile_id == 16

    def test_base_tile_out_of_range(self) -> None:
        result = TilesetValidator().validate(
            make_tileset(tiles={40: animated(40, (4, 100))})
        )
        assert isinstance(result.errors[0], OutOfRangeTileId)

    def test_non_positive_duration(self) -> None:
        result = TilesetValidator().validate(
            make_tileset(tiles={4: animated(4, (4, 100), (5, 0))})
        )

        assert len(result.errors) == 1
        assert isinstance(result.errors[0], InvalidFrameDuration)

    def test_errors_are_collected(self) -> None:
        """Every problem is reported, not only the first."""
        result = TilesetValidator().validate(
            make_tileset(tiles={4: animated(4, (30, 100), (5, -1)), 6: animated(6)})
        )
        assert len(result.errors) == 3
