"""Core functionalities: stateless protocols and primitives.

Architecture Note:
    core/ contains pure functionalities: value kinds, the clone capability
    protocol and its type-keyed cache, and the Ref cell. The only shared
    state is the process-wide caches, which are monotonic.
    For per-call traversal state and the copy engine, see traversal/.
"""

from deepclone.core.capability import (
    CapabilityCache,
    CapabilityRecord,
    Cloneable,
    ReturnShape,
    find_clone_method,
    get_capability_cache,
    invoke,
)
from deepclone.core.kind import ValueKind, is_atomic, is_pydantic_model, kind_of, register_atomic
from deepclone.core.reference import Ref
from deepclone.core.types import Copy

__all__ = [
    # Types
    "Copy",
    "Ref",
    # Kind
    "ValueKind",
    "kind_of",
    "register_atomic",
    "is_atomic",
    "is_pydantic_model",
    # Capability
    "Cloneable",
    "CapabilityRecord",
    "ReturnShape",
    "CapabilityCache",
    "get_capability_cache",
    "find_clone_method",
    "invoke",
]
