"""
Terrain resolution for corner-based Wang sets.

Maps corner materials to tile ids and keeps a corner grid resolvable in
chunks.
"""

from .resolver import TerrainResolver
from .selector import select_weighted_tile, tile_weight, coordinate_rng
from .grid import CornerGrid, ChunkResolver, chunk_tiles, world_to_tile

__all__ = [
    'TerrainResolver',
    'select_weighted_tile',
    'tile_weight',
    'coordinate_rng',
    'CornerGrid',
    'ChunkResolver',
    'chunk_tiles',
    'world_to_tile',
]
