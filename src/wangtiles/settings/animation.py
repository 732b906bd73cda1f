"""
Animation-related settings for wangtiles.
"""

from .types import SettingsSection


class AnimationSettings(SettingsSection):
    """Manages animation settings."""

    @property
    def start_paused(self) -> bool:
        """Whether the shared animation clock starts paused."""
        return self._get_bool("animation/start_paused", False)

    @start_paused.setter
    def start_paused(self, value: bool) -> None:
        self._set("animation/start_paused", bool(value))
