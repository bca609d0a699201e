"""Capability models: the clone protocol and cached capability records.

A type opts out of structural copying by implementing ``__clone__``. The
engine then defers to it and never recurses into the type's fields.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Protocol, Self, runtime_checkable


@runtime_checkable
class Cloneable(Protocol):
    """One instance → an independent copy, built by the type itself."""

    def __clone__(self) -> Self: ...


class ReturnShape(Enum):
    """How an override hands back its copy."""

    VALUE = auto()  # Returns the instance itself
    REFERENCE = auto()  # Returns a Ref wrapping the instance
    INFERRED = auto()  # Unannotated, shape read from the returned object


@dataclass(slots=True, frozen=True)
class CapabilityRecord:
    """Cached fact about whether and how a type overrides copying."""

    owner: type
    method: Callable[[Any], Any] | None = None
    returns: ReturnShape = ReturnShape.VALUE

    def is_valid(self) -> bool:
        """Check whether the owner type declares a usable override.

        Returns:
            True if method can be invoked, False for an empty record.
        """
        return self.method is not None
