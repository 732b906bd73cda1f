"""Utility helpers for wangtiles."""

from .logging_config import setup_logging

__all__ = ["setup_logging"]
