"""
Settings package for wangtiles.

This package provides a modular, type-safe configuration management system
using Qt's QSettings for cross-platform storage.

Usage:
    from wangtiles.settings import AppSettings, ValidationResult

    settings = AppSettings()
    result = settings.validate()
"""

from .core import AppSettings
from .types import ConfigVersion, ConfigError, ValidationResult
from .resolver import ResolverSettings
from .animation import AnimationSettings
from .paths import PathSettings
from .logging import LoggingSettings

__all__ = [
    "AppSettings",
    "ConfigVersion",
    "ConfigError",
    "ValidationResult",
    "ResolverSettings",
    "AnimationSettings",
    "PathSettings",
    "LoggingSettings",
]
