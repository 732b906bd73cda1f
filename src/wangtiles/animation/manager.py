"""Animation management with per-instance cursors.

For engines without a convenient global clock: each tile instance owns a
cursor that is advanced by wall-clock deltas and wraps modulo the cycle
length, giving the same frames as the elapsed-time model.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Hashable

from wangtiles.tilesets.models import AnimatedTile

from .clock import check_sequence


@dataclass
class AnimationCursor:
    """Play state of one animated tile instance.

    elapsed_ms is kept inside [0, period) so long sessions do not lose
    float precision.
    """

    animated: AnimatedTile
    elapsed_ms: float = 0.0
    delay_ms: float = 0.0
    playing: bool = True

    def __post_init__(self):
        check_sequence(self.animated)
        self.elapsed_ms %= self.animated.period_ms

    def advance(self, delta_ms: float) -> None:
        """Advance by a wall-clock delta, consuming any start delay first."""
        if not self.playing or delta_ms <= 0:
            return
        if self.delay_ms > 0:
            consumed = min(self.delay_ms, delta_ms)
            self.delay_ms -= consumed
            delta_ms -= consumed
        self.elapsed_ms = (self.elapsed_ms + delta_ms) % self.animated.period_ms

    @property
    def frame_index(self) -> int:
        return self.animated.frame_index_at(self.elapsed_ms)

    @property
    def current_frame(self) -> int:
        return self.animated.frames[self.frame_index].tile_id


class AnimationStateManager:
    """Manages animation cursors for animated tile instances.

    Instances are identified by any hashable key, typically the tile's grid
    coordinate. Each cursor is owned by exactly one instance.
    """

    def __init__(self):
        """Initialize the animation state manager."""
        # instance key -> AnimationCursor
        self._cursors: Dict[Hashable, AnimationCursor] = {}
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def register(
        self,
        key: Hashable,
        animated: AnimatedTile,
        delay_ms: float = 0.0,
        start_elapsed_ms: float = 0.0,
        playing: bool = True,
    ) -> AnimationCursor:
        """Register an animated tile instance.

        Safe to call multiple times for the same key: an existing cursor is
        kept unless it animates a different tile.

        Args:
            key: Instance identifier (e.g. grid coordinate)
            animated: Animated tile definition
            delay_ms: Time to hold the first frame before playing
            start_elapsed_ms: Initial position in the cycle
            playing: Whether the cursor advances on tick

        Returns:
            The instance's cursor

        Raises:
            EmptyAnimationSequence: If the tile has no frames
            InvalidFrameDuration: If a frame duration is not positive
        """
        check_sequence(animated)
        cursor = self._cursors.get(key)
        if cursor is not None and cursor.animated.tile_id == animated.tile_id:
            return cursor

        cursor = AnimationCursor(
            animated=animated,
            elapsed_ms=start_elapsed_ms,
            delay_ms=delay_ms,
            playing=playing,
        )
        self._cursors[key] = cursor
        self.logger.debug(
            f"Registered animated instance {key!r}: tile {animated.tile_id}, "
            f"{len(animated.frames)} frames"
        )
        return cursor

    def unregister(self, key: Hashable) -> None:
        """Forget an instance (e.g. its chunk was streamed out)."""
        self._cursors.pop(key, None)

    def tick(self, delta_ms: float) -> None:
        """Advance every playing cursor by a wall-clock delta."""
        for cursor in self._cursors.values():
            cursor.advance(delta_ms)

    def current_frame(self, key: Hashable) -> int:
        """Tile id currently shown by an instance.

        Raises:
            KeyError: If the instance was never registered
        """
        return self._get(key).current_frame

    def pause(self, key: Hashable) -> None:
        self._get(key).playing = False

    def resume(self, key: Hashable) -> None:
        self._get(key).playing = True

    def is_playing(self, key: Hashable) -> bool:
        return self._get(key).playing

    def clear(self) -> None:
        """Clear all cursors.

        Useful when loading a new map or tileset.
        """
        self._cursors.clear()
        self.logger.debug("Cleared all animation cursors")

    def get_registered_count(self) -> int:
        """Number of registered instances."""
        return len(self._cursors)

    def _get(self, key: Hashable) -> AnimationCursor:
        cursor = self._cursors.get(key)
        if cursor is None:
            raise KeyError(f"Animated instance {key!r} is not registered")
        return cursor
