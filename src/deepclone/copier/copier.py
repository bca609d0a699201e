"""Copier: entry points that validate arguments and drive the engine.

Usage:
    copier = Copier()

    # Clone any value
    snapshot = copier.clone(config)

    # Overwrite an existing destination in place
    buffer = [0] * 5
    copier.copy(buffer, [1, 2, 3])   # buffer == [1, 2, 3]

    # Copy into a reference cell
    target = Ref()
    copier.copy(target, {"a": [1, 2]})

    # Module-level shortcuts use a shared default copier
    deep_copy(buffer, [4, 5])
    twin = deep_clone(tree)
"""

from __future__ import annotations

import array
import threading
from collections import defaultdict, deque
from dataclasses import is_dataclass
from typing import Any

from deepclone.config import CopySettings, get_settings
from deepclone.core.capability import CapabilityCache, get_capability_cache
from deepclone.core.kind import ValueKind, is_pydantic_model, kind_of
from deepclone.core.reference import Ref, deref
from deepclone.core.types import Copy
from deepclone.errors import InvalidArgumentError, TypeMismatchError
from deepclone.traversal import StatePool, Traverser
from deepclone.traversal.engine import instance_fields, is_writable_field

_IN_PLACE_KINDS = frozenset(
    {ValueKind.STRUCT, ValueKind.SEQUENCE, ValueKind.MAPPING, ValueKind.SET}
)


def _is_frozen(cls: type) -> bool:
    if is_dataclass(cls):
        return bool(cls.__dataclass_params__.frozen)  # type: ignore[attr-defined]
    if is_pydantic_model(cls):
        return bool(cls.model_config.get("frozen", False))  # type: ignore[attr-defined]
    return False


class Copier:
    """Deep copy service bundling settings, capability cache and state pool.

    Copier instances are safe to share between threads: each call checks out
    its own traversal state, and the capability cache is lock-guarded.

    Args:
        settings: Traversal settings (defaults to get_settings()).
        cache: Capability cache (defaults to the process-wide one).
        pool: Traversal state pool (defaults to a private pool sized by settings).
    """

    def __init__(
        self,
        settings: CopySettings | None = None,
        *,
        cache: CapabilityCache | None = None,
        pool: StatePool | None = None,
    ):
        self._settings = settings if settings is not None else get_settings()
        self._cache = cache if cache is not None else get_capability_cache()
        self._pool = pool if pool is not None else StatePool(self._settings.state_pool_size)

    @property
    def settings(self) -> CopySettings:
        """Settings this copier traverses with."""
        return self._settings

    @property
    def pool(self) -> StatePool:
        """Traversal state pool used by this copier."""
        return self._pool

    def copy(self, destination: Any, source: Any) -> None:
        """Deep copy source into destination.

        Args:
            destination: A Ref, or a mutable struct, list, bytearray, dict or
                set that is overwritten in place.
            source: A value of the destination's type, or a Ref to one.

        Raises:
            InvalidArgumentError: If destination is not writable or source is None.
            TypeMismatchError: If source and destination types differ.
        """
        kind = self._destination_kind(destination)
        if source is None:
            raise InvalidArgumentError("source is None")
        if source is destination:
            return

        value = deref(source)
        if kind is ValueKind.REFERENCE:
            current = destination.get()
            if current is not None and type(current) is not type(value):
                raise TypeMismatchError(
                    f"type mismatch {type(current).__qualname__} != "
                    f"{type(value).__qualname__}"
                )
        elif type(destination) is not type(value):
            raise TypeMismatchError(
                f"type mismatch {type(destination).__qualname__} != {type(value).__qualname__}"
            )
        elif isinstance(destination, array.array) and destination.typecode != value.typecode:
            raise TypeMismatchError(
                f"type mismatch array({destination.typecode!r}) != array({value.typecode!r})"
            )

        with self._pool.acquire() as state:
            result = Traverser(
                state,
                cycle_threshold=self._settings.cycle_detection_depth,
                include_private=self._settings.include_private,
                cache=self._cache,
            ).copy_value(value)
        self._write(destination, kind, result)

    def clone[T](self, source: T | Ref[T]) -> Copy[T]:
        """Return a deep copy of source.

        A Ref source is followed, so clone(Ref(x)) copies x.

        Args:
            source: Any value except None.

        Returns:
            A newly allocated, fully independent copy.

        Raises:
            InvalidArgumentError: If source is None.
        """
        if source is None:
            raise InvalidArgumentError("source is None")
        destination: Ref[T] = Ref()
        self.copy(destination, source)
        return destination.get()  # type: ignore[return-value]

    def _destination_kind(self, destination: Any) -> ValueKind:
        if isinstance(destination, Ref):
            return ValueKind.REFERENCE
        kind = kind_of(type(destination))
        if kind not in _IN_PLACE_KINDS or _is_frozen(type(destination)):
            raise InvalidArgumentError(
                "destination must be a Ref or a mutable object, "
                f"got {type(destination).__qualname__}"
            )
        return kind

    def _write(self, destination: Any, kind: ValueKind, result: Any) -> None:
        if kind is ValueKind.REFERENCE:
            destination.set(result)
            return
        if result is None:
            raise InvalidArgumentError(
                f"cannot write None into {type(destination).__qualname__} in place"
            )
        if isinstance(destination, deque):
            destination.clear()
            destination.extend(result)
        elif kind is ValueKind.SEQUENCE:
            destination[:] = result
        elif kind in (ValueKind.MAPPING, ValueKind.SET):
            destination.clear()
            destination.update(result)
            if isinstance(destination, defaultdict):
                destination.default_factory = result.default_factory
        else:
            self._overwrite_fields(destination, result)

    def _overwrite_fields(self, destination: Any, result: Any) -> None:
        # Non-writable fields of the destination are left untouched
        private = self._settings.include_private
        incoming = {
            name: value
            for name, value in instance_fields(result)
            if is_writable_field(name, private)
        }
        for name, _ in list(instance_fields(destination)):
            if is_writable_field(name, private) and name not in incoming:
                object.__delattr__(destination, name)
        for name, value in incoming.items():
            object.__setattr__(destination, name, value)
        if isinstance(destination, BaseException):
            destination.args = result.args


_default_copier: Copier | None = None
_default_lock = threading.Lock()


def get_default_copier() -> Copier:
    """Access the shared copier used by deep_copy() and deep_clone().

    Returns:
        A Copier built from get_settings() on first use.
    """
    global _default_copier
    if _default_copier is None:
        with _default_lock:
            if _default_copier is None:
                _default_copier = Copier()
    return _default_copier


def deep_copy(destination: Any, source: Any) -> None:
    """Deep copy source into destination using the default copier.

    See Copier.copy() for the argument contract.
    """
    get_default_copier().copy(destination, source)


def deep_clone[T](source: T | Ref[T]) -> Copy[T]:
    """Return a deep copy of source using the default copier.

    See Copier.clone() for the argument contract.
    """
    return get_default_copier().clone(source)
