"""
wangtiles: Corner-based Wang tile resolution and tile animation

Resolves terrain corner materials to tileset tile ids and answers which
animation frame an animated tile shows at a given time.
"""

__version__ = "0.1.0"
__author__ = "wangtiles Contributors"

# Core service imports
from .tilesets import TilesetService
from .utils.logging_config import setup_logging

# Main data models
from .tilesets.models import (
    CornerSignature, WangSet, WangTile, AnimatedTile, CollisionRect, Tileset
)
from .terrain import TerrainResolver, CornerGrid, ChunkResolver
from .animation import AnimationClock, AnimationStateManager

__all__ = [
    # Services
    'TilesetService',
    'TerrainResolver',
    'ChunkResolver',
    'AnimationClock',
    'AnimationStateManager',
    'CornerGrid',

    # Logging
    'setup_logging',

    # Data models
    'CornerSignature',
    'WangSet',
    'WangTile',
    'AnimatedTile',
    'CollisionRect',
    'Tileset',
]
