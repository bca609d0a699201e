"""Error types raised by copy operations.

Every error signals a caller contract violation or a broken internal
invariant. None of them is retryable and none is swallowed by the library.
"""

from __future__ import annotations


class CopyError(Exception):
    """Base class for all deepclone errors."""

    pass


class InvalidArgumentError(CopyError, ValueError):
    """Raised for a non-writable destination, a None source, or an override
    result that cannot be reshaped to what the call site expects."""

    pass


class TypeMismatchError(CopyError, TypeError):
    """Raised when destination and source have different types."""

    pass


class StateCorruptionError(CopyError, RuntimeError):
    """Raised when a pooled traversal state is checked out dirty.

    A dirty state means the cycle bookkeeping of an earlier copy was not
    unwound, so reusing it could hide real cycles.
    """

    pass
