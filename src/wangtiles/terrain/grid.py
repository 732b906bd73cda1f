"""Corner-material grid and chunk resolution.

The grid stores which material occupies each integer corner. In a y-down
grid tile (tx, ty) has corners nw=(tx, ty), ne=(tx+1, ty), se=(tx+1, ty+1)
and sw=(tx, ty+1), so every corner is shared by up to four tiles.
"""

import logging
import math
import random
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from wangtiles.tilesets.errors import NoMatchingTile
from wangtiles.tilesets.models import UNSET, CornerSignature

from .resolver import TerrainResolver
from .selector import coordinate_rng

Coord = Tuple[int, int]


class CornerGrid:
    """Sparse corner -> material assignment owned by the world layer.

    Missing corners are UNSET. Edits and signature reads share one lock so a
    tile is never resolved against a half-applied edit.
    """

    def __init__(self, corners: Optional[Mapping[Coord, int]] = None):
        self._corners: Dict[Coord, int] = {}
        self._lock = threading.RLock()
        if corners:
            self.update(corners)

    def __len__(self) -> int:
        return len(self._corners)

    def get(self, cx: int, cy: int) -> int:
        """Material at a corner (UNSET if never painted)."""
        with self._lock:
            return self._corners.get((cx, cy), UNSET)

    def set(self, cx: int, cy: int, material: int) -> List[Coord]:
        """Paint a corner.

        Returns:
            Tiles whose signature changed and must be re-resolved
        """
        with self._lock:
            previous = self._corners.get((cx, cy), UNSET)
            if material == UNSET:
                self._corners.pop((cx, cy), None)
            else:
                self._corners[(cx, cy)] = material
        if previous == material:
            return []
        return self.affected_tiles(cx, cy)

    def clear(self, cx: int, cy: int) -> List[Coord]:
        """Reset a corner to UNSET. See `set`."""
        return self.set(cx, cy, UNSET)

    def update(self, corners: Mapping[Coord, int]) -> None:
        """Paint many corners atomically."""
        with self._lock:
            for (cx, cy), material in corners.items():
                if material == UNSET:
                    self._corners.pop((cx, cy), None)
                else:
                    self._corners[(cx, cy)] = material

    @staticmethod
    def affected_tiles(cx: int, cy: int) -> List[Coord]:
        """The four tiles sharing a corner, in row-major order."""
        return [(cx - 1, cy - 1), (cx, cy - 1), (cx - 1, cy), (cx, cy)]

    def signature_for_tile(self, tx: int, ty: int) -> CornerSignature:
        """Corner signature (ne, se, sw, nw) of one tile."""
        with self._lock:
            return self._signature_unlocked(tx, ty)

    def signatures_for_tiles(self, tiles: Iterable[Coord]) -> Dict[Coord, CornerSignature]:
        """Consistent snapshot of several tiles' signatures."""
        with self._lock:
            return {(tx, ty): self._signature_unlocked(tx, ty) for tx, ty in tiles}

    def _signature_unlocked(self, tx: int, ty: int) -> CornerSignature:
        get = self._corners.get
        return CornerSignature(
            ne=get((tx + 1, ty), UNSET),
            se=get((tx + 1, ty + 1), UNSET),
            sw=get((tx, ty + 1), UNSET),
            nw=get((tx, ty), UNSET),
        )


def chunk_tiles(origin: Coord, size: Coord) -> List[Coord]:
    """Tile coordinates of a rectangular chunk, row-major."""
    ox, oy = origin
    width, height = size
    return [(ox + x, oy + y) for y in range(height) for x in range(width)]


class ChunkResolver:
    """Resolves whole chunks of a CornerGrid against one Wang set.

    Each tile draws from a generator derived from (seed, wang set, x, y), so
    the result does not depend on worker count or resolution order.
    """

    def __init__(
        self,
        resolver: TerrainResolver,
        wang_set_name: str,
        seed: int = 0,
        workers: int = 1,
        missing_tile: Optional[int] = None,
    ):
        """Initialize the chunk resolver.

        Args:
            resolver: Resolver bound to the tileset's tables
            wang_set_name: Wang set used for every tile
            seed: Base seed for per-coordinate variant selection
            workers: Thread count for chunk resolution (1 = sequential)
            missing_tile: Tile id the caller chose for unmatched blends; when
                None, NoMatchingTile propagates
        """
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.resolver = resolver
        self.wang_set_name = wang_set_name
        self.seed = seed
        self.workers = max(1, workers)
        self.missing_tile = missing_tile
        # Fails early on an unknown Wang set
        self.resolver.get_wang_set(wang_set_name)

    def resolve_signature(
        self, tx: int, ty: int, signature: CornerSignature, reroll: bool = False
    ) -> int:
        """Resolve one tile's signature.

        Args:
            tx: Tile X coordinate
            ty: Tile Y coordinate
            signature: Tile's corner signature
            reroll: Draw from an unseeded generator instead of the
                coordinate-derived one

        Returns:
            Resolved tile id
        """
        rng = random.Random() if reroll else coordinate_rng(
            self.seed, self.wang_set_name, tx, ty
        )
        try:
            return self.resolver.resolve(self.wang_set_name, signature, rng)
        except NoMatchingTile:
            if self.missing_tile is None:
                raise
            self.logger.warning(
                f"Tile ({tx}, {ty}): no match for {tuple(signature)}, "
                f"using missing tile {self.missing_tile}"
            )
            return self.missing_tile

    def resolve_tiles(
        self, grid: CornerGrid, tiles: Iterable[Coord], reroll: bool = False
    ) -> Dict[Coord, int]:
        """Resolve a set of tiles from a consistent grid snapshot."""
        snapshot = grid.signatures_for_tiles(tiles)
        if self.workers == 1 or len(snapshot) < 2:
            return {
                coord: self.resolve_signature(coord[0], coord[1], signature, reroll)
                for coord, signature in snapshot.items()
            }

        coords = list(snapshot.keys())
        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            resolved = executor.map(
                lambda coord: self.resolve_signature(coord[0], coord[1], snapshot[coord], reroll),
                coords,
            )
            return dict(zip(coords, resolved))

    def resolve_chunk(self, grid: CornerGrid, origin: Coord, size: Coord) -> Dict[Coord, int]:
        """Resolve every tile of a rectangular chunk.

        Args:
            grid: Corner assignments
            origin: Top-left tile coordinate of the chunk
            size: (width, height) in tiles

        Returns:
            Tile coordinate -> resolved tile id
        """
        result = self.resolve_tiles(grid, chunk_tiles(origin, size))
        self.logger.debug(
            f"Resolved chunk at {origin} of size {size} with {self.workers} workers"
        )
        return result

    def reresolve(
        self, grid: CornerGrid, cx: int, cy: int, reroll: bool = False
    ) -> Dict[Coord, int]:
        """Resolve the four tiles around an edited corner."""
        return self.resolve_tiles(grid, CornerGrid.affected_tiles(cx, cy), reroll)


def world_to_tile(
    x: float,
    y: float,
    tile_size: float,
    map_size: Coord,
    offset: Tuple[float, float] = (0.0, 0.0),
) -> Optional[Coord]:
    """Convert a world position to the tile containing it.

    Args:
        x: World X coordinate
        y: World Y coordinate
        tile_size: Tile edge length in world units
        map_size: (width, height) of the map in tiles
        offset: Added to the position before division (map origin correction)

    Returns:
        (tx, ty), or None when the position lies outside the map
    """
    tx = math.floor((x + offset[0]) / tile_size)
    ty = math.floor((y + offset[1]) / tile_size)
    width, height = map_size
    if 0 <= tx < width and 0 <= ty < height:
        return tx, ty
    return None
