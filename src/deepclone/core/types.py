"""Core type definitions for deepclone."""

type Copy[T] = T
"""Type alias indicating a value is an independent deep copy.

When you see `Copy[T]` in a return type, the returned value shares no mutable
storage with its source, except where a `__clone__` override chose to alias.
Mutating the copy never affects the original, and vice versa.
"""
