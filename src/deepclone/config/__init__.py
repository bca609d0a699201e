"""Configuration module using Pydantic Settings.

Provides typed configuration for copiers with environment variable support.

Usage:
    from deepclone.config import CopySettings

    settings = CopySettings(cycle_detection_depth=10)
"""

from deepclone.config.settings import CopySettings, get_settings

__all__ = [
    "CopySettings",
    "get_settings",
]
