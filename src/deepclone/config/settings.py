"""Configuration settings using Pydantic Settings.

Provides typed configuration with environment variable support for copiers.

Usage:
    from deepclone.config import CopySettings

    # Load from environment variables (DEEPCLONE_*)
    settings = CopySettings()

    # Or override with explicit values
    settings = CopySettings(cycle_detection_depth=0, include_private=True)
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field

try:
    from pydantic_settings import BaseSettings, SettingsConfigDict
except ImportError as e:
    raise ImportError(
        "pydantic-settings is required for the config module. "
        "Install with: pip install deepclone"
    ) from e


class CopySettings(BaseSettings):  # type: ignore[misc]
    """Configuration for copy traversal.

    Attributes:
        cycle_detection_depth: Nesting depth of reference-bearing nodes after
            which identities are tracked to break cycles. 0 tracks from the root.
        include_private: Copy underscore-prefixed fields too. Off by default,
            so private fields keep their zero value in copies.
        state_pool_size: Maximum number of idle traversal states kept for reuse.

    Environment Variables:
        DEEPCLONE_CYCLE_DETECTION_DEPTH
        DEEPCLONE_INCLUDE_PRIVATE
        DEEPCLONE_STATE_POOL_SIZE
    """

    model_config = SettingsConfigDict(
        env_prefix="DEEPCLONE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # The interpreter's default recursion limit is 1000 frames and each
    # nested node costs about two, so cycles must be caught well below that.
    cycle_detection_depth: int = Field(default=100, ge=0)
    include_private: bool = False
    state_pool_size: int = Field(default=32, ge=0)


@lru_cache(maxsize=1)
def get_settings() -> CopySettings:
    """Load settings from the environment once per process.

    Returns:
        Shared CopySettings instance used by the default copier.
    """
    return CopySettings()
