"""Value kind models.

The traversal engine dispatches every node on one of these tags.
"""

from __future__ import annotations

from enum import Enum, auto


class ValueKind(Enum):
    """Shape of a runtime value as seen by the traversal engine."""

    SCALAR = auto()  # Leaf value, copied by assignment
    STRUCT = auto()  # Object with named fields
    SEQUENCE = auto()  # Growable sequence (list, bytearray)
    ARRAY = auto()  # Fixed-size sequence (tuple)
    MAPPING = auto()  # Key/value container
    SET = auto()  # Unordered members, assigned directly
    REFERENCE = auto()  # Ref cell

    @property
    def is_reference_bearing(self) -> bool:
        """Whether nodes of this kind pass through the cycle guard.

        Returns:
            True for kinds whose identity can repeat along a recursion path.
        """
        return self in _REFERENCE_BEARING


_REFERENCE_BEARING = frozenset(
    {ValueKind.STRUCT, ValueKind.SEQUENCE, ValueKind.MAPPING, ValueKind.REFERENCE}
)
