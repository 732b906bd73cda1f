"""
Path-related settings for wangtiles.
"""

from pathlib import Path
from typing import List, Optional, Union, cast

from .types import SettingsSection

MAX_RECENT = 10


class PathSettings(SettingsSection):
    """Manages path-related settings."""

    def _get_list(self, key: str) -> List[str]:
        """Type-safe list retrieval from settings."""
        value = self.settings.value(key, [])
        if isinstance(value, list):
            return [str(item) for item in cast(list[object], value) if item is not None]
        if isinstance(value, str) and value:
            # INI storage collapses a one-element list into a plain string
            return [value]
        return []

    @property
    def tilesets_path(self) -> Optional[Path]:
        """Directory scanned for tileset files."""
        path_str = self._get_str("paths/tilesets", "")
        return Path(path_str) if path_str else None

    @tilesets_path.setter
    def tilesets_path(self, value: Optional[Path]) -> None:
        self._set("paths/tilesets", str(value) if value else "")

    @property
    def recent_tilesets(self) -> List[str]:
        """Recently loaded tileset files, newest first."""
        return self._get_list("paths/recent_tilesets")

    def add_recent_tileset(self, file_path: Union[str, Path]) -> None:
        """Add a tileset file to the recent list (max 10 items)."""
        recent = self.recent_tilesets
        file_str = str(file_path)

        if file_str in recent:
            recent.remove(file_str)
        recent.insert(0, file_str)

        self._set("paths/recent_tilesets", recent[:MAX_RECENT])

    def clear_recent_tilesets(self) -> None:
        self._set("paths/recent_tilesets", [])
