"""Elapsed-time animation clock for animated tiles.

Frames are looked up from a single shared elapsed time, so every instance of
an animated tile shows the same frame and late-joining instances fall into
step without any per-instance state.
"""

import logging
import time
from typing import Callable, Dict, Mapping, Optional

from wangtiles.tilesets.errors import EmptyAnimationSequence, InvalidFrameDuration
from wangtiles.tilesets.models import AnimatedTile


def check_sequence(animated: AnimatedTile) -> None:
    """Reject frame lists that cannot be played.

    Raises:
        EmptyAnimationSequence: If there are no frames
        InvalidFrameDuration: If a frame duration is not strictly positive
    """
    if not animated.frames:
        raise EmptyAnimationSequence(animated.tile_id)
    for frame in animated.frames:
        if frame.duration_ms <= 0:
            raise InvalidFrameDuration(animated.tile_id, frame.tile_id, frame.duration_ms)


def current_frame(animated: AnimatedTile, elapsed_ms: float) -> int:
    """Tile id visible `elapsed_ms` after play start.

    The frame list is a circle of length T = sum of durations; the frame
    whose half-open interval [start, start + duration) contains
    `elapsed_ms mod T` is returned.
    """
    return animated.frame_at(elapsed_ms)


class GlobalClock:
    """Monotonic millisecond clock sampled once per render frame.

    Readers use `elapsed_ms`, which only changes on `sample()`, so everything
    drawn in one frame agrees on the time.
    """

    def __init__(
        self,
        time_source: Callable[[], float] = time.perf_counter,
        start_paused: bool = False,
    ):
        """Initialize the clock.

        Args:
            time_source: Returns seconds from a monotonic origin
            start_paused: Start without advancing until `resume()`
        """
        self._time_source = time_source
        self._last = self._time_source()
        self._elapsed_ms = 0.0
        self._paused = start_paused

    @property
    def elapsed_ms(self) -> float:
        """Elapsed play time as of the last sample."""
        return self._elapsed_ms

    @property
    def is_paused(self) -> bool:
        return self._paused

    def sample(self) -> float:
        """Advance by the wall-clock time since the previous sample.

        Returns:
            Updated elapsed play time in milliseconds
        """
        now = self._time_source()
        if not self._paused:
            self._elapsed_ms += (now - self._last) * 1000
        self._last = now
        return self._elapsed_ms

    def pause(self) -> None:
        self.sample()
        self._paused = True

    def resume(self) -> None:
        # Drop the paused interval
        self._last = self._time_source()
        self._paused = False

    def reset(self) -> None:
        self._last = self._time_source()
        self._elapsed_ms = 0.0


class AnimationClock:
    """Registry of animated tiles answering frame queries.

    Stateless apart from the registry: the displayed frame is a pure function
    of the tile's frame list and the elapsed time.
    """

    def __init__(
        self,
        animations: Optional[Mapping[int, AnimatedTile]] = None,
        clock: Optional[GlobalClock] = None,
    ):
        """Initialize the animation clock.

        Args:
            animations: Animated tiles keyed by base tile id
            clock: Shared clock used when no elapsed time is passed
        """
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self._animations: Dict[int, AnimatedTile] = {}
        self.clock = clock
        for animated in (animations or {}).values():
            self.register(animated)

    def register(self, animated: AnimatedTile) -> None:
        """Register an animated tile. Safe to call again for the same id.

        Raises:
            EmptyAnimationSequence: If the tile has no frames
            InvalidFrameDuration: If a frame duration is not positive
        """
        check_sequence(animated)
        if animated.tile_id not in self._animations:
            self._animations[animated.tile_id] = animated
            self.logger.debug(
                f"Registered animated tile {animated.tile_id} with {len(animated.frames)} frames"
            )

    def is_animated(self, tile_id: int) -> bool:
        return tile_id in self._animations

    def get_animation(self, tile_id: int) -> Optional[AnimatedTile]:
        return self._animations.get(tile_id)

    def period_ms(self, tile_id: int) -> int:
        """Cycle length of an animated tile (0 for static tiles)."""
        animated = self._animations.get(tile_id)
        return animated.period_ms if animated else 0

    def current_frame(self, tile_id: int, elapsed_ms: Optional[float] = None) -> int:
        """Tile id to display for `tile_id` at the given elapsed time.

        Args:
            tile_id: Resolved (base) tile id
            elapsed_ms: Time since play start; the shared clock's last
                sample is used when None

        Returns:
            Frame tile id, or `tile_id` itself for static tiles
        """
        animated = self._animations.get(tile_id)
        if animated is None:
            return tile_id
        if elapsed_ms is None:
            elapsed_ms = self.clock.elapsed_ms if self.clock else 0.0
        return current_frame(animated, elapsed_ms)

    def get_registered_count(self) -> int:
        return len(self._animations)
