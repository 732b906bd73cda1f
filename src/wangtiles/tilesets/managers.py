"""
Managers for tilesets and per-tile metadata.

Provides indexing, lookup and bookkeeping for the different tables of the
tileset system. No I/O; registration happens once per tileset at load time
and every table is read-only afterwards.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Dict, Tuple

from .models import CollisionRect, TileData, Tileset


class TilesetManager:
    """Registry of loaded tilesets keyed by tileset name.

    Registering a name twice replaces the earlier tileset (last-wins).
    """

    def __init__(self):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.tilesets: Dict[str, Tileset] = {}
        self._lock = threading.Lock()

    def add_tileset(self, tileset: Tileset) -> Tileset:
        """Register a validated tileset and return it."""
        with self._lock:
            previous = self.tilesets.get(tileset.name)
            self.tilesets[tileset.name] = tileset
        if previous is not None and previous.source_path != tileset.source_path:
            self.logger.warning(
                f"Tileset '{tileset.name}' from {tileset.source_path} "
                f"replaces the one from {previous.source_path}"
            )
        return tileset

    def get_tileset(self, name: str) -> Tileset | None:
        """Return tileset by name if present."""
        return self.tilesets.get(name)

    def names(self) -> list[str]:
        return list(self.tilesets.keys())


@dataclass
class TilesManager:
    """Per-tile metadata indexed by tileset.

    tilesets[tileset][tile_id] -> TileData
    """

    tilesets: Dict[str, Dict[int, TileData]] = field(default_factory=lambda: {})

    def add_tiles(self, tileset: Tileset) -> None:
        """Index every tile of a tileset, replacing earlier entries."""
        self.tilesets[tileset.name] = dict(tileset.tiles)

    def get_tile(self, tileset: str, tile_id: int) -> TileData | None:
        """Get tile metadata by id within a tileset, if present."""
        return self.tilesets.get(tileset, {}).get(tile_id)

    def get_collision_shapes(self, tileset: str, tile_id: int) -> Tuple[CollisionRect, ...]:
        """Collision rectangles of a tile (empty when it has none)."""
        tile = self.get_tile(tileset, tile_id)
        return tile.collision if tile else ()

    def tiles_of_class(self, tileset: str, tile_class: str) -> set[int]:
        """Ids of tiles with the given class/type."""
        return {
            tile_id
            for tile_id, tile in self.tilesets.get(tileset, {}).items()
            if tile.tile_class == tile_class
        }

    def get_property(
        self, tileset: str, tile_id: int, name: str, default: str = ""
    ) -> str:
        """String property of a tile, or `default`."""
        tile = self.get_tile(tileset, tile_id)
        if tile is None:
            return default
        return tile.properties.get(name, default)
