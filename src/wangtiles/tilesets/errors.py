"""
Exceptions raised by the tileset system.

All errors indicate content-authoring defects in the tileset tables, not
transient conditions: callers should surface them, never retry.
"""

from typing import Sequence

from .models import CornerSignature


class TilesetError(Exception):
    """Base class for tileset loading, validation and lookup errors."""
    pass


class TilesetFormatError(TilesetError):
    """Raised when a tileset file cannot be read or parsed."""
    pass


class InvalidWangSet(TilesetError):
    """Raised when a Wang set name is not present in the loaded tables."""

    def __init__(self, name: str, available: Sequence[str] = ()):
        self.name = name
        self.available = list(available)
        super().__init__(
            f"Wang set '{name}' not found. Available: {self.available}"
        )


class NoMatchingTile(TilesetError):
    """Raised when no tile in a Wang set depicts the requested blend."""

    def __init__(self, wang_set: str, signature: CornerSignature, detail: str = ""):
        self.wang_set = wang_set
        self.signature = signature
        message = f"No tile in Wang set '{wang_set}' matches {tuple(signature)} (ne, se, sw, nw)"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class IncompleteWangSet(NoMatchingTile):
    """Raised at load time when a required Wang set entry is missing or ambiguous."""
    pass


class UnknownMaterial(TilesetError):
    """Raised when a corner refers to a material the Wang set does not declare."""

    def __init__(self, wang_set: str, material: int, declared: int):
        self.wang_set = wang_set
        self.material = material
        self.declared = declared
        super().__init__(
            f"Wang set '{wang_set}' declares {declared} materials, got index {material}"
        )


class EmptyAnimationSequence(TilesetError):
    """Raised when an animated tile declares zero frames."""

    def __init__(self, tile_id: int):
        self.tile_id = tile_id
        super().__init__(f"Animated tile {tile_id} has no frames")


class InvalidFrameDuration(TilesetError):
    """Raised when an animation frame duration is not strictly positive."""

    def __init__(self, tile_id: int, frame_tile_id: int, duration_ms: int):
        self.tile_id = tile_id
        self.frame_tile_id = frame_tile_id
        self.duration_ms = duration_ms
        super().__init__(
            f"Animated tile {tile_id}: frame {frame_tile_id} has duration {duration_ms} ms"
        )


class OutOfRangeTileId(TilesetError):
    """Raised when a tile id exceeds the tileset's declared tile count."""

    def __init__(self, tile_id: int, tile_count: int, context: str = ""):
        self.tile_id = tile_id
        self.tile_count = tile_count
        self.context = context
        where = f" ({context})" if context else ""
        super().__init__(
            f"Tile id {tile_id} out of range [0, {tile_count}){where}"
        )
