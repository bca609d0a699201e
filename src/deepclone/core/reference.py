"""Reference cells.

Python reaches every object through a reference, but it has no first-class
pointer to a storage slot. ``Ref`` fills that role: it is the pointer kind of
the traversal and the writable destination of ``deep_copy``.

Usage:
    target = Ref[int]()
    deep_copy(target, 42)
    assert target.value == 42
"""

from __future__ import annotations

from typing import Any


class Ref[T]:
    """Mutable cell holding a single value."""

    __slots__ = ("value",)

    def __init__(self, value: T | None = None) -> None:
        self.value = value

    def get(self) -> T | None:
        """Return the referenced value."""
        return self.value

    def set(self, value: T | None) -> None:
        """Replace the referenced value."""
        self.value = value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Ref):
            return NotImplemented
        return self.value is other.value or bool(self.value == other.value)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.value!r})"


def deref(value: Any) -> Any:
    """Follow a Ref to its value, leaving any other value unchanged."""
    if isinstance(value, Ref):
        return value.value
    return value
