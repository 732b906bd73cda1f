"""
Load-time validation of tileset tables.

Every check runs before a tileset is registered, so that resolution and
animation lookups never meet an authoring defect at query time.
"""

import logging
from dataclasses import dataclass, field
from typing import List

from .errors import (
    EmptyAnimationSequence,
    IncompleteWangSet,
    InvalidFrameDuration,
    OutOfRangeTileId,
    TilesetError,
    UnknownMaterial,
)
from .models import WILDCARD, AnimatedTile, CornerSignature, Tileset, WangKind, WangSet

logger = logging.getLogger(__name__)


@dataclass
class TilesetValidationResult:
    """Result of tileset validation."""
    tileset: str
    errors: List[TilesetError] = field(default_factory=lambda: [])
    warnings: List[str] = field(default_factory=lambda: [])

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def raise_for_errors(self) -> None:
        """Log every problem and raise the first error, if any."""
        for warning in self.warnings:
            logger.warning(f"{self.tileset}: {warning}")
        if not self.errors:
            return
        for error in self.errors:
            logger.error(f"{self.tileset}: {error}")
        raise self.errors[0]


class TilesetValidator:
    """Validates bounds and completeness of a tileset's tables."""

    def __init__(self, require_complete_wang_sets: bool = True):
        self.require_complete_wang_sets = require_complete_wang_sets

    def validate(self, tileset: Tileset) -> TilesetValidationResult:
        """Validate a tileset.

        Args:
            tileset: Parsed tileset

        Returns:
            TilesetValidationResult collecting every error and warning
        """
        result = TilesetValidationResult(tileset=tileset.name)

        if tileset.tile_count <= 0:
            result.warnings.append("tileset declares no tiles")

        for tile_id, animated in tileset.animations.items():
            self._validate_animation(tileset, tile_id, animated, result)

        for tile_id in tileset.collision_shapes:
            if not tileset.contains_tile_id(tile_id):
                result.errors.append(
                    OutOfRangeTileId(tile_id, tileset.tile_count, "collision shape")
                )

        for wang_set in tileset.wang_sets.values():
            if wang_set.kind is not WangKind.CORNER:
                result.warnings.append(
                    f"wang set '{wang_set.name}' is of type '{wang_set.kind.value}', "
                    f"only corner sets are supported; it will be skipped"
                )
                continue
            self._validate_wang_set(tileset, wang_set, result)

        logger.debug(
            f"Validated tileset '{tileset.name}': "
            f"{len(result.errors)} errors, {len(result.warnings)} warnings"
        )
        return result

    @staticmethod
    def _validate_animation(
        tileset: Tileset,
        tile_id: int,
        animated: AnimatedTile,
        result: TilesetValidationResult,
    ) -> None:
        if not tileset.contains_tile_id(tile_id):
            result.errors.append(
                OutOfRangeTileId(tile_id, tileset.tile_count, "animated base tile")
            )
        if not animated.frames:
            result.errors.append(EmptyAnimationSequence(tile_id))
            return

        previous: int | None = None
        for frame in animated.frames:
            if not tileset.contains_tile_id(frame.tile_id):
                result.errors.append(
                    OutOfRangeTileId(
                        frame.tile_id, tileset.tile_count, f"frame of animated tile {tile_id}"
                    )
                )
            if frame.duration_ms <= 0:
                result.errors.append(
                    InvalidFrameDuration(tile_id, frame.tile_id, frame.duration_ms)
                )
            if frame.tile_id == previous:
                # Kept as a visual pause; reported so authors can confirm intent
                result.warnings.append(
                    f"animated tile {tile_id} repeats frame {frame.tile_id} back-to-back"
                )
            previous = frame.tile_id

    def _validate_wang_set(
        self,
        tileset: Tileset,
        wang_set: WangSet,
        result: TilesetValidationResult,
    ) -> None:
        declared = len(wang_set.materials)

        for tile in wang_set.tiles.values():
            if not tileset.contains_tile_id(tile.tile_id):
                result.errors.append(
                    OutOfRangeTileId(
                        tile.tile_id, tileset.tile_count, f"wang set '{wang_set.name}'"
                    )
                )
            for corner in tile.signature:
                if corner < 0 or corner > declared:
                    result.errors.append(UnknownMaterial(wang_set.name, corner, declared))

        required: List[tuple[CornerSignature, str]] = [(WILDCARD, "canonical blank tile")]
        required.extend(
            (CornerSignature.uniform(material.index), f"full cover tile for '{material.name}'")
            for material in wang_set.materials
        )

        for signature, purpose in required:
            matches = wang_set.tiles_with_signature(signature)
            problem = ""
            if not matches:
                problem = f"missing {purpose}"
            elif signature == WILDCARD and len(matches) > 1:
                ids = sorted(tile.tile_id for tile in matches)
                problem = f"expected exactly one {purpose}, found tiles {ids}"
            if not problem:
                continue

            if self.require_complete_wang_sets:
                result.errors.append(IncompleteWangSet(wang_set.name, signature, problem))
            else:
                result.warnings.append(f"wang set '{wang_set.name}': {problem}")
