"""
Configuration type definitions and shared helpers for wangtiles settings.
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, List, cast

if TYPE_CHECKING:
    from PySide6.QtCore import QSettings


class ConfigVersion(Enum):
    """Configuration version for migration support."""
    V1_0 = "1.0"
    CURRENT = V1_0


class ConfigError(Exception):
    """Raised when configuration is invalid or cannot be accessed."""
    pass


@dataclass
class ValidationResult:
    """Result of configuration validation."""
    is_valid: bool
    errors: List[str]
    warnings: List[str]


class SettingsSection:
    """Base for a group of settings stored in a shared QSettings."""

    def __init__(self, settings: "QSettings"):
        self.settings = settings

    def _get_str(self, key: str, default: str = "") -> str:
        """Type-safe string retrieval from settings."""
        value = self.settings.value(key, default)
        return str(value) if value is not None else default

    def _get_bool(self, key: str, default: bool = False) -> bool:
        """Type-safe boolean retrieval from settings."""
        value = self.settings.value(key, default)
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.lower() in ("true", "1", "yes")
        return bool(value) if value is not None else default

    def _get_int(self, key: str, default: int = 0) -> int:
        """Type-safe integer retrieval from settings."""
        value = self.settings.value(key, default)
        try:
            if value is None:
                return default
            return int(cast(str | int, value))
        except (ValueError, TypeError):
            return default

    def _set(self, key: str, value: object) -> None:
        self.settings.setValue(key, value)
        self.settings.sync()
