"""Capability functionality: clone protocol, record cache, and invocation."""

from deepclone.core.capability.core import (
    CapabilityCache,
    find_clone_method,
    get_capability_cache,
    invoke,
)
from deepclone.core.capability.models import CapabilityRecord, Cloneable, ReturnShape

__all__ = [
    # Models
    "Cloneable",
    "CapabilityRecord",
    "ReturnShape",
    # Core
    "CapabilityCache",
    "get_capability_cache",
    "find_clone_method",
    "invoke",
]
