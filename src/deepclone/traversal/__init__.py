"""Traversal engine and per-call state.

Architecture Note:
    traversal/ holds the stateful side of copying. A TraversalState belongs to
    exactly one top-level copy call; StatePool recycles states between calls.
    For the stateless building blocks the engine consults, see core/.
"""

from deepclone.traversal.engine import Traverser
from deepclone.traversal.state import StatePool, TraversalState

__all__ = [
    "Traverser",
    "TraversalState",
    "StatePool",
]
