"""
Settings validation system for wangtiles.
"""

import logging
from pathlib import Path
from typing import List, TYPE_CHECKING

from .types import ValidationResult

if TYPE_CHECKING:
    from .core import AppSettings

logger = logging.getLogger(__name__)


class SettingsValidator:
    """Validates configuration settings."""

    def __init__(self, settings: "AppSettings"):
        self.settings = settings

    def validate(self) -> ValidationResult:
        """Validate current configuration."""
        errors: List[str] = []
        warnings: List[str] = []

        tilesets_path = self.settings.paths.tilesets_path
        if tilesets_path:
            if not tilesets_path.exists():
                errors.append(f"Tilesets path does not exist: {tilesets_path}")
            elif not tilesets_path.is_dir():
                errors.append(f"Tilesets path is not a directory: {tilesets_path}")

        if not self.settings.resolver.require_complete_wang_sets:
            warnings.append(
                "Incomplete Wang sets are accepted; unmatched blends will raise at query time"
            )

        # Drop recent tilesets that no longer exist
        recent = self.settings.paths.recent_tilesets
        valid_recent = [path for path in recent if Path(path).exists()]
        for path in recent:
            if path not in valid_recent:
                warnings.append(f"Recent tileset no longer exists: {path}")
        if len(valid_recent) != len(recent):
            self.settings.settings.setValue("paths/recent_tilesets", valid_recent)
            self.settings.settings.sync()

        return ValidationResult(
            is_valid=len(errors) == 0, errors=errors, warnings=warnings
        )
