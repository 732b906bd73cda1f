"""Shared fixtures for wangtiles tests."""

from pathlib import Path

import pytest

from wangtiles.settings import AppSettings
from wangtiles.tilesets.models import (
    AnimatedTile,
    AnimationFrame,
    CornerSignature,
    TerrainMaterial,
    WangKind,
    WangSet,
    WangTile,
)

DATA_DIR = Path(__file__).parent / "data"

GRASS = 1
DIRT = 2


def make_wang_set(
    tiles: dict[int, tuple[int, int, int, int]],
    probabilities: dict[int, float] | None = None,
    name: str = "Ground",
    materials: tuple[str, ...] = ("Grass", "Dirt"),
) -> WangSet:
    """Build a corner Wang set from tile id -> (ne, se, sw, nw)."""
    probabilities = probabilities or {}
    return WangSet(
        name=name,
        kind=WangKind.CORNER,
        materials=tuple(
            TerrainMaterial(index=index, name=material)
            for index, material in enumerate(materials, start=1)
        ),
        tiles={
            tile_id: WangTile(
                tile_id=tile_id,
                signature=CornerSignature(*corners),
                probability=probabilities.get(tile_id, 1.0),
            )
            for tile_id, corners in tiles.items()
        },
    )


@pytest.fixture
def data_dir() -> Path:
    return DATA_DIR


@pytest.fixture
def grass_dirt() -> WangSet:
    """Blank tile 0, A=plain grass, B=plain dirt, C=grass east / dirt west."""
    return make_wang_set({
        0: (0, 0, 0, 0),
        1: (GRASS, GRASS, GRASS, GRASS),   # A
        2: (DIRT, DIRT, DIRT, DIRT),       # B
        3: (GRASS, GRASS, DIRT, DIRT),     # C
    })


@pytest.fixture
def grass_variants() -> WangSet:
    """Two interchangeable plain grass tiles with weights 3:1."""
    return make_wang_set(
        {
            0: (0, 0, 0, 0),
            1: (GRASS, GRASS, GRASS, GRASS),
            2: (GRASS, GRASS, GRASS, GRASS),
            3: (DIRT, DIRT, DIRT, DIRT),
        },
        probabilities={1: 3.0, 2: 1.0},
    )


@pytest.fixture
def water_animation() -> AnimatedTile:
    """Four frames of 200 ms each (cycle of 800 ms)."""
    return AnimatedTile(
        tile_id=0,
        frames=tuple(AnimationFrame(tile_id=i, duration_ms=200) for i in range(4)),
    )


@pytest.fixture
def settings(tmp_path: Path) -> AppSettings:
    """Settings stored in a throwaway INI file."""
    return AppSettings(profile="test", settings_file=tmp_path / "settings.ini")
