"""
Terrain resolution settings for wangtiles.
"""

import logging

from .types import SettingsSection

logger = logging.getLogger(__name__)

MAX_WORKERS = 32


class ResolverSettings(SettingsSection):
    """Manages terrain resolver settings."""

    @property
    def random_seed(self) -> int:
        """Base seed for per-coordinate variant selection."""
        return self._get_int("resolver/random_seed", 0)

    @random_seed.setter
    def random_seed(self, value: int) -> None:
        self._set("resolver/random_seed", int(value))

    @property
    def require_complete_wang_sets(self) -> bool:
        """Reject Wang sets lacking the blank or full-cover entries."""
        return self._get_bool("resolver/require_complete_wang_sets", True)

    @require_complete_wang_sets.setter
    def require_complete_wang_sets(self, value: bool) -> None:
        self._set("resolver/require_complete_wang_sets", bool(value))

    @property
    def parallel_workers(self) -> int:
        """Thread count for chunk resolution and directory loading (1-32)."""
        value = self._get_int("resolver/parallel_workers", 4)
        return max(1, min(MAX_WORKERS, value))

    @parallel_workers.setter
    def parallel_workers(self, value: int) -> None:
        if 1 <= value <= MAX_WORKERS:
            self._set("resolver/parallel_workers", value)
        else:
            logger.warning(
                f"Invalid worker count: {value}, keeping current: {self.parallel_workers}"
            )
