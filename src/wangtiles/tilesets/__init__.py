"""
Tilesets package for Wang terrain tilesets.

Provides services for loading, validating and querying Tiled tilesets,
including their Wang sets, tile animations and collision shapes.
"""

from .service import TilesetService
from .models import (
    UNSET, WILDCARD, WangKind, TerrainMaterial, CornerSignature, WangTile, WangSet,
    AnimationFrame, AnimatedTile, CollisionRect, TileData, TilesetImage, Tileset
)
from .errors import (
    TilesetError, TilesetFormatError, InvalidWangSet, NoMatchingTile, IncompleteWangSet,
    UnknownMaterial, EmptyAnimationSequence, InvalidFrameDuration, OutOfRangeTileId
)
from .managers import TilesetManager, TilesManager
from .loaders import TilesetFileLoader
from .validation import TilesetValidator, TilesetValidationResult

# Public classes intended for external use
__all__ = [
    # Main service
    'TilesetService',

    # Data models
    'UNSET',
    'WILDCARD',
    'WangKind',
    'TerrainMaterial',
    'CornerSignature',
    'WangTile',
    'WangSet',
    'AnimationFrame',
    'AnimatedTile',
    'CollisionRect',
    'TileData',
    'TilesetImage',
    'Tileset',

    # Errors
    'TilesetError',
    'TilesetFormatError',
    'InvalidWangSet',
    'NoMatchingTile',
    'IncompleteWangSet',
    'UnknownMaterial',
    'EmptyAnimationSequence',
    'InvalidFrameDuration',
    'OutOfRangeTileId',

    # Components (exposed in case they are needed directly)
    'TilesetFileLoader',
    'TilesetValidator',
    'TilesetValidationResult',
    'TilesetManager',
    'TilesManager'
]

# Module version
__version__ = '1.0.0'
