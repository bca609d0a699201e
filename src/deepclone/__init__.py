"""deepclone: type-directed deep copying of arbitrary Python values.

Usage:
    from dataclasses import dataclass, field
    from deepclone import deep_clone, deep_copy, Ref

    @dataclass
    class Inventory:
        items: dict[str, list[int]] = field(default_factory=dict)

    original = Inventory({"bolts": [1, 2]})
    twin = deep_clone(original)
    twin.items["bolts"].append(3)     # original is untouched

    # Overwrite an existing destination in place
    buffer = [0] * 5
    deep_copy(buffer, [1, 2, 3])      # buffer == [1, 2, 3]

    # Types can take over their own copying
    @dataclass
    class Session:
        token: str

        def __clone__(self) -> "Session":
            return Session(token="")
"""

__version__ = "0.1.0"

# Configuration
from deepclone.config import CopySettings, get_settings

# Entry points
from deepclone.copier import Copier, deep_clone, deep_copy, get_default_copier

# Core primitives
from deepclone.core import (
    CapabilityCache,
    CapabilityRecord,
    Cloneable,
    Copy,
    Ref,
    ValueKind,
    get_capability_cache,
    is_atomic,
    kind_of,
    register_atomic,
)

# Errors
from deepclone.errors import (
    CopyError,
    InvalidArgumentError,
    StateCorruptionError,
    TypeMismatchError,
)

# Traversal
from deepclone.traversal import StatePool, TraversalState, Traverser

__all__ = [
    # Version
    "__version__",
    # Entry points
    "Copier",
    "deep_copy",
    "deep_clone",
    "get_default_copier",
    # Core
    "Copy",
    "Ref",
    "Cloneable",
    "ValueKind",
    "kind_of",
    "register_atomic",
    "is_atomic",
    "CapabilityCache",
    "CapabilityRecord",
    "get_capability_cache",
    # Traversal
    "Traverser",
    "TraversalState",
    "StatePool",
    # Config
    "CopySettings",
    "get_settings",
    # Errors
    "CopyError",
    "InvalidArgumentError",
    "TypeMismatchError",
    "StateCorruptionError",
]
