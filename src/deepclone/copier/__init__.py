"""Copy entry points.

Architecture Note:
    copier/ is the public surface. Copier validates destinations and sources,
    checks a traversal state out of its pool, runs the engine from
    traversal/, and writes the result into the destination.
"""

from deepclone.copier.copier import Copier, deep_clone, deep_copy, get_default_copier

__all__ = [
    "Copier",
    "deep_copy",
    "deep_clone",
    "get_default_copier",
]
