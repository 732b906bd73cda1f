"""Unit tests for tileset data models."""

import pytest

from wangtiles.tilesets.models import (
    UNSET,
    WILDCARD,
    AnimatedTile,
    AnimationFrame,
    CornerSignature,
    TileData,
    Tileset,
    WangKind,
    WangSet,
)


class TestCornerSignature:
    """Test corner signature parsing and matching."""

    def test_from_wang_id_list(self) -> None:
        """Corner slots 1, 3, 5, 7 map to ne, se, sw, nw."""
        sig = CornerSignature.from_wang_id([0, 1, 0, 2, 0, 3, 0, 4])
        assert sig == CornerSignature(ne=1, se=2, sw=3, nw=4)

    def test_from_wang_id_string(self) -> None:
        """Test the comma separated XML form."""
        assert CornerSignature.from_wang_id("0,2,0,2,0,1,0,1") == (2, 2, 1, 1)

    def test_edge_slots_ignored(self) -> None:
        """Edge slots never affect the corner signature."""
        assert CornerSignature.from_wang_id([9, 1, 9, 1, 9, 1, 9, 1]) == (1, 1, 1, 1)

    def test_wrong_length_rejected(self) -> None:
        with pytest.raises(ValueError):
            CornerSignature.from_wang_id([1, 1, 1, 1])

    def test_wildcard_properties(self) -> None:
        assert WILDCARD.is_wildcard
        assert WILDCARD.has_wildcards
        assert CornerSignature(1, UNSET, 1, 1).has_wildcards
        assert not CornerSignature(1, UNSET, 1, 1).is_wildcard
        assert not CornerSignature.uniform(2).has_wildcards

    def test_matches(self) -> None:
        """Unset query corners match any material."""
        tile = CornerSignature(1, 1, 2, 2)
        assert tile.matches(CornerSignature(1, 1, 2, 2))
        assert tile.matches(CornerSignature(1, UNSET, UNSET, 2))
        assert tile.matches(WILDCARD)
        assert not tile.matches(CornerSignature(2, 1, 2, 2))

    def test_materials(self) -> None:
        assert CornerSignature(1, UNSET, 2, 1).materials() == {1, 2}


class TestWangSet:
    """Test Wang set construction from raw data."""

    def test_from_dict(self) -> None:
        """Test WangSet.from_dict with colours, tiles and probabilities."""
        wang_set = WangSet.from_dict(
            {
                "name": "Ground",
                "type": "corner",
                "colors": [
                    {"name": "Grass", "color": "#00ff00", "probability": 1},
                    {"name": "Dirt", "color": "#ff0000", "probability": 0.5},
                ],
                "wangtiles": [
                    {"tileid": 0, "wangid": [0, 0, 0, 0, 0, 0, 0, 0]},
                    {"tileid": 4, "wangid": [0, 1, 0, 1, 0, 1, 0, 1]},
                    {"tileid": 2, "wangid": [0, 1, 0, 1, 0, 1, 0, 1]},
                ],
            },
            tile_probabilities={4: 0.25},
        )

        assert wang_set.kind is WangKind.CORNER
        assert [m.name for m in wang_set.materials] == ["Grass", "Dirt"]
        assert wang_set.material(2).probability == 0.5
        assert wang_set.material(0) is None
        assert wang_set.material(3) is None
        assert wang_set.material_by_name("Grass").index == 1
        assert wang_set.tiles[4].probability == 0.25
        assert wang_set.tiles[2].probability == 1.0

        # Variants are grouped in tile id order
        variants = wang_set.tiles_with_signature(CornerSignature.uniform(1))
        assert [t.tile_id for t in variants] == [2, 4]
        assert set(wang_set.signatures()) == {WILDCARD, CornerSignature.uniform(1)}

    def test_unknown_kind_is_mixed(self) -> None:
        assert WangKind.from_value("Edge") is WangKind.EDGE
        assert WangKind.from_value("something") is WangKind.MIXED


class TestAnimatedTile:
    """Test frame lookup on animated tiles."""

    def test_period_and_starts(self, water_animation: AnimatedTile) -> None:
        assert water_animation.period_ms == 800
        assert water_animation.starts == (0, 200, 400, 600)

    @pytest.mark.parametrize(
        "elapsed, expected",
        [(0, 0), (199, 0), (200, 1), (250, 1), (799, 3), (800, 0), (1000, 1)],
    )
    def test_frame_at(self, water_animation: AnimatedTile, elapsed: int, expected: int) -> None:
        """Half-open intervals [start, start + duration)."""
        assert water_animation.frame_at(elapsed) == expected

    def test_uneven_durations(self) -> None:
        animated = AnimatedTile(
            tile_id=5,
            frames=(AnimationFrame(5, 100), AnimationFrame(6, 300), AnimationFrame(7, 50)),
        )
        assert animated.period_ms == 450
        assert animated.frame_at(99) == 5
        assert animated.frame_at(100) == 6
        assert animated.frame_at(399) == 6
        assert animated.frame_at(400) == 7
        assert animated.frame_at(450) == 5


class TestTileData:
    """Test tile metadata parsing."""

    def test_from_dict(self) -> None:
        tile = TileData.from_dict({
            "id": 3,
            "type": "dirt",
            "probability": 0.5,
            "properties": [{"name": "walkable", "type": "bool", "value": True}],
            "animation": [{"tileid": 3, "duration": 100}, {"tileid": 4, "duration": 100}],
            "objectgroup": {
                "objects": [
                    {"id": 1, "x": 0, "y": 16, "width": 32, "height": 16},
                    {"id": 2, "x": 0, "y": 0, "polygon": [{"x": 0, "y": 0}]},
                ]
            },
        })

        assert tile.tile_class == "dirt"
        assert tile.probability == 0.5
        assert tile.properties == {"walkable": "true"}
        assert tile.animation is not None
        assert tile.animation.period_ms == 200
        # Polygon skipped
        assert len(tile.collision) == 1
        assert tile.collision[0].height == 16

    def test_class_key(self) -> None:
        assert TileData.from_dict({"id": 1, "class": "water"}).tile_class == "water"

    def test_empty_animation_kept(self) -> None:
        """An empty frame list is kept so validation can reject it."""
        tile = TileData.from_dict({"id": 1, "animation": []})
        assert tile.animation is not None
        assert tile.animation.frames == ()


class TestTileset:
    """Test tileset construction."""

    def test_from_dict(self) -> None:
        tileset = Tileset.from_dict(
            {
                "name": "meadow",
                "tilewidth": 16,
                "tileheight": 16,
                "tilecount": 8,
                "columns": 4,
                "image": "meadow.png",
                "imagewidth": 64,
                "imageheight": 32,
                "tiles": [
                    {"id": 1, "type": "water", "probability": 0.5},
                    {"id": 2, "animation": [{"tileid": 2, "duration": 100}]},
                ],
                "wangsets": [
                    {
                        "name": "Ground",
                        "type": "corner",
                        "colors": [{"name": "Grass"}],
                        "wangtiles": [{"tileid": 1, "wangid": [0, 1, 0, 1, 0, 1, 0, 1]}],
                    }
                ],
            },
            source_path="meadow.tsj",
        )

        assert tileset.tile_width == 16
        assert tileset.image.width == 64
        assert tileset.contains_tile_id(7)
        assert not tileset.contains_tile_id(8)
        assert not tileset.contains_tile_id(-1)
        assert set(tileset.animations) == {2}
        assert tileset.collision_shapes == {}
        assert tileset.tiles_of_class("water") == {1}
        # Tile probability flows into the Wang tile weight
        assert tileset.wang_sets["Ground"].tiles[1].probability == 0.5
