"""Value kind resolution and the atomic type registry.

Usage:
    kind_of(list)          # ValueKind.SEQUENCE
    kind_of(datetime)      # ValueKind.SCALAR (opaque atomic type)

    @dataclass
    class Money:
        cents: int

    register_atomic(Money)  # copy Money by assignment from now on
"""

from __future__ import annotations

import array
import datetime as dt
import fractions
import re
import threading
import types
import uuid
from collections import deque
from dataclasses import is_dataclass
from decimal import Decimal
from enum import Enum
from pathlib import PurePath

from deepclone.core.kind.models import ValueKind
from deepclone.core.reference import Ref

# Immutable builtins. Subclasses are scalars too, e.g. ``class Name(str)``.
_SCALAR_BASES: tuple[type, ...] = (
    type(None),
    bool,
    int,
    float,
    complex,
    str,
    bytes,
    frozenset,
    range,
    slice,
    type(Ellipsis),
    type(NotImplemented),
)

# Shared, never decomposed: classes, callables, modules, descriptors.
_OPAQUE_BASES: tuple[type, ...] = (
    type,
    types.FunctionType,
    types.BuiltinFunctionType,
    types.MethodType,
    types.ModuleType,
    types.CodeType,
    property,
    staticmethod,
    classmethod,
)

_atomic_types: set[type] = {
    dt.datetime,
    dt.date,
    dt.time,
    dt.timedelta,
    dt.timezone,
    Decimal,
    fractions.Fraction,
    uuid.UUID,
    re.Pattern,
}

_kind_cache: dict[type, ValueKind] = {}
_lock = threading.Lock()


def register_atomic(cls: type) -> type:
    """Register an opaque atomic value type, copied by assignment.

    Matching is by exact type, so subclasses must be registered on their own.
    Usable as a class decorator.

    Args:
        cls: Type to treat as an immutable snapshot.

    Returns:
        The same class.

    Raises:
        TypeError: If cls is not a class.
    """
    if not isinstance(cls, type):
        raise TypeError(f"register_atomic expects a class, got {cls!r}")
    with _lock:
        _atomic_types.add(cls)
        _kind_cache.clear()
    return cls


def is_atomic(cls: type) -> bool:
    """Check whether cls is a registered opaque atomic type (exact match).

    Args:
        cls: Type to check.

    Returns:
        True if values of cls are copied by assignment as atomic snapshots.
    """
    return cls in _atomic_types or (isinstance(cls, type) and issubclass(cls, PurePath))


def is_pydantic_model(cls: type) -> bool:
    """Check if class is a Pydantic model without importing pydantic.

    Args:
        cls: Class to check.

    Returns:
        True if class inherits from pydantic.BaseModel, False otherwise.
    """
    for base in cls.__mro__:
        if base.__module__.startswith("pydantic") and base.__name__ == "BaseModel":
            return True
    return False


def _has_instance_state(cls: type) -> bool:
    """Check whether instances of a Python-level class carry fields."""
    for klass in cls.__mro__[:-1]:
        namespace = vars(klass)
        if "__slots__" in namespace or "__dict__" in namespace:
            return True
    return False


def _classify(cls: type) -> ValueKind:
    if is_atomic(cls) or issubclass(cls, Enum):
        return ValueKind.SCALAR
    if issubclass(cls, _SCALAR_BASES) or issubclass(cls, _OPAQUE_BASES):
        return ValueKind.SCALAR
    if issubclass(cls, Ref):
        return ValueKind.REFERENCE
    if issubclass(cls, dict):
        return ValueKind.MAPPING
    if issubclass(cls, (list, bytearray, deque, array.array)):
        return ValueKind.SEQUENCE
    if issubclass(cls, tuple):
        return ValueKind.ARRAY
    if issubclass(cls, set):
        return ValueKind.SET
    if is_dataclass(cls) or is_pydantic_model(cls) or _has_instance_state(cls):
        return ValueKind.STRUCT
    return ValueKind.SCALAR


def kind_of(cls: type) -> ValueKind:
    """Resolve the value kind of a type, memoized per type.

    Args:
        cls: Concrete runtime type of a value.

    Returns:
        The kind the traversal engine dispatches on.
    """
    kind = _kind_cache.get(cls)
    if kind is not None:
        return kind
    kind = _classify(cls)
    with _lock:
        return _kind_cache.setdefault(cls, kind)
