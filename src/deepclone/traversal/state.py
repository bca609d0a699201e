"""Per-call traversal state and its pool.

TraversalState carries the cycle guard bookkeeping of one top-level copy.
StatePool recycles states across calls so repeated copies do not rebuild
their bookkeeping from scratch.
"""

from __future__ import annotations

import threading
from collections.abc import Hashable, Iterator
from contextlib import contextmanager

from deepclone.errors import StateCorruptionError


class TraversalState:
    """Recursion depth and in-progress identities of one copy call.

    Owned by a single top-level copy for its whole duration. Must never be
    shared between concurrent calls.
    """

    __slots__ = ("depth", "seen")

    def __init__(self) -> None:
        """Initialize a clear traversal state."""
        self.depth = 0
        self.seen: set[Hashable] = set()

    def enter(self, key: Hashable) -> bool:
        """Record an identity as in progress on the current path.

        Args:
            key: Identity key of a reference-bearing node.

        Returns:
            False if key is already in progress (a cycle), True otherwise.
        """
        if key in self.seen:
            return False
        self.seen.add(key)
        return True

    def leave(self, key: Hashable) -> None:
        """Remove an identity recorded by enter()."""
        self.seen.discard(key)

    def is_clear(self) -> bool:
        """Check that no bookkeeping is left from an earlier traversal.

        Returns:
            True if depth is zero and no identity is in progress.
        """
        return self.depth == 0 and not self.seen

    def reset(self) -> None:
        """Drop all bookkeeping."""
        self.depth = 0
        self.seen.clear()


class StatePool:
    """Thread-safe free list of traversal states.

    Args:
        max_size: Maximum number of idle states kept (0 disables pooling).
    """

    def __init__(self, max_size: int = 32):
        """Initialize an empty pool.

        Args:
            max_size: Maximum number of idle states kept (0 disables pooling).
        """
        self._max_size = max_size
        self._free_list: list[TraversalState] = []
        self._lock = threading.Lock()

    def checkout(self) -> TraversalState:
        """Take a state from the free list, creating one when it is empty.

        Returns:
            A clear TraversalState owned by the caller.

        Raises:
            StateCorruptionError: If the pooled state still holds bookkeeping.
        """
        with self._lock:
            state = self._free_list.pop() if self._free_list else None
        if state is None:
            return TraversalState()
        if not state.is_clear():
            raise StateCorruptionError(
                f"Pooled traversal state is not clear: depth={state.depth}, "
                f"{len(state.seen)} identities in progress"
            )
        return state

    def release(self, state: TraversalState) -> None:
        """Return a state to the free list.

        Args:
            state: State previously obtained from checkout().

        Raises:
            StateCorruptionError: If the state still holds bookkeeping. The
                state is not pooled.
        """
        if not state.is_clear():
            raise StateCorruptionError(
                f"Released traversal state is not clear: depth={state.depth}, "
                f"{len(state.seen)} identities in progress"
            )
        with self._lock:
            if len(self._free_list) < self._max_size:
                self._free_list.append(state)

    @contextmanager
    def acquire(self) -> Iterator[TraversalState]:
        """Check a state out for the duration of a with block.

        Yields:
            A clear TraversalState, released on every exit path.

        Raises:
            StateCorruptionError: If the state comes back dirty, chained to
                the exception that left the block, if any.
        """
        state = self.checkout()
        try:
            yield state
        except BaseException as error:
            try:
                self.release(state)
            except StateCorruptionError as corruption:
                raise corruption from error
            raise
        self.release(state)

    def __len__(self) -> int:
        return len(self._free_list)
