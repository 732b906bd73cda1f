"""
Core settings management for wangtiles.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from PySide6.QtCore import QSettings

from .types import ConfigError, ConfigVersion, ValidationResult
from .validation import SettingsValidator
from .paths import PathSettings
from .resolver import ResolverSettings
from .animation import AnimationSettings
from .logging import LoggingSettings

logger = logging.getLogger(__name__)


class AppSettings:
    """
    Configuration management using QSettings.

    Provides type-safe access to settings with cross-platform storage
    (or an explicit INI file) and validation.
    """

    def __init__(
        self,
        profile: str = "default",
        settings_file: Optional[Union[str, Path]] = None,
    ):
        """Initialize settings for a profile.

        Args:
            profile: Settings profile name (default: "default")
            settings_file: INI file to use instead of the platform store

        Raises:
            ConfigError: If the settings store cannot be read or written
        """
        if settings_file is not None:
            self.settings = QSettings(str(settings_file), QSettings.Format.IniFormat)
        else:
            self.settings = QSettings("wangtiles", "wangtiles")
        self.profile = profile

        # Use profile as a group: wangtiles/wangtiles/default/...
        self.settings.beginGroup(profile)

        self._validator = SettingsValidator(self)
        self._paths = PathSettings(self.settings)
        self._resolver = ResolverSettings(self.settings)
        self._animation = AnimationSettings(self.settings)
        self._logging = LoggingSettings(self.settings)

        self._ensure_version()
        self._check_status()

        logger.debug(
            f"Settings initialized for profile '{profile}', stored at: {self.settings.fileName()}"
        )

    # === SUBSYSTEM ACCESS ===

    @property
    def paths(self) -> PathSettings:
        """Access path settings subsystem."""
        return self._paths

    @property
    def resolver(self) -> ResolverSettings:
        """Access terrain resolver settings subsystem."""
        return self._resolver

    @property
    def animation(self) -> AnimationSettings:
        """Access animation settings subsystem."""
        return self._animation

    @property
    def logging(self) -> LoggingSettings:
        """Access logging settings subsystem."""
        return self._logging

    # === VERSION ===

    def _ensure_version(self) -> None:
        stored = str(self.settings.value("app/version", ""))
        if not stored:
            self.settings.setValue("app/version", ConfigVersion.CURRENT.value)
            self.settings.sync()
            logger.info("First run detected, initializing configuration")
        elif stored != ConfigVersion.CURRENT.value:
            logger.warning(
                f"Configuration version {stored} is newer or unknown, "
                f"expected {ConfigVersion.CURRENT.value}"
            )

    def _check_status(self) -> None:
        status = self.settings.status()
        if status != QSettings.Status.NoError:
            raise ConfigError(
                f"Settings store {self.settings.fileName()} is not accessible: {status.name}"
            )

    @property
    def version(self) -> str:
        """Get configuration version."""
        value = self.settings.value("app/version", ConfigVersion.CURRENT.value)
        return str(value)

    # === LOGGING SETTINGS (DELEGATED) ===

    @property
    def console_logging(self) -> bool:
        return self._logging.console_logging

    @property
    def console_log_level(self) -> str:
        return self._logging.console_log_level

    @property
    def console_use_colors(self) -> bool:
        return self._logging.console_use_colors

    @property
    def file_logging(self) -> bool:
        return self._logging.file_logging

    @property
    def log_file_path(self) -> str:
        return self._logging.log_file_path

    # === VALIDATION ===

    def validate(self) -> ValidationResult:
        """Validate current configuration."""
        return self._validator.validate()

    # === UTILITY METHODS ===

    def get_settings_file_path(self) -> str:
        """Get the file path where settings are stored."""
        return self.settings.fileName()

    def sync(self) -> None:
        """Force synchronization of settings to storage."""
        self.settings.sync()
