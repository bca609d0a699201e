"""Recursive copy engine.

The engine is functional: ``copy_value`` returns a new value instead of
writing into a destination slot. Per node it first gives the type's
``__clone__`` override a chance, then dispatches on the value kind.
Reference-bearing kinds pass through the cycle guard, which stays inert until
the configured nesting depth is exceeded.

Usage:
    with StatePool().acquire() as state:
        copy = Traverser(state).copy_value(source)
"""

from __future__ import annotations

import array
import copyreg
import logging
from collections import defaultdict, deque
from collections.abc import Callable, Hashable, Iterator
from dataclasses import MISSING, fields, is_dataclass
from functools import cache
from typing import Any

from deepclone.core.capability import CapabilityCache, get_capability_cache, invoke
from deepclone.core.kind import ValueKind, is_pydantic_model, kind_of
from deepclone.core.reference import Ref
from deepclone.traversal.state import TraversalState

logger = logging.getLogger(__name__)

_UNSET = object()


@cache
def _slot_names(cls: type) -> tuple[str, ...]:
    """Attribute names backed by __slots__ anywhere in the MRO, mangled."""
    names: list[str] = []
    for klass in cls.__mro__:
        slots = vars(klass).get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for name in slots:
            if name in ("__dict__", "__weakref__"):
                continue
            if name.startswith("__") and not name.endswith("__"):
                name = f"_{klass.__name__.lstrip('_')}{name}"
            if name not in names:
                names.append(name)
    return tuple(names)


def instance_fields(obj: Any) -> Iterator[tuple[str, Any]]:
    """Yield (name, value) for every field set on obj."""
    state = getattr(obj, "__dict__", None)
    if state is not None:
        yield from list(state.items())
    for name in _slot_names(type(obj)):
        value = getattr(obj, name, _UNSET)
        if value is not _UNSET:
            yield name, value


def is_writable_field(name: str, include_private: bool = False) -> bool:
    """Check whether a field is copied: public names, or any name in private mode."""
    return include_private or not name.startswith("_")


def _zero_value(field: Any) -> Any:
    if field.default is not MISSING:
        return field.default
    if field.default_factory is not MISSING:
        return field.default_factory()
    return None


def _empty_mapping(source: dict[Any, Any]) -> dict[Any, Any]:
    cls = type(source)
    if cls is dict:
        return {}
    if isinstance(source, defaultdict):
        return cls(source.default_factory)
    return cls()


def _copy_scalar(source: Any) -> Any:
    return source


def _copy_set(source: set[Any]) -> set[Any]:
    return type(source)(source)


def _new_instance(cls: type) -> Any:
    """Allocate cls without running __init__."""
    try:
        return cls.__new__(cls)
    except TypeError:
        # __new__ requires arguments the instance cannot supply
        return object.__new__(cls)


def _identity_key(kind: ValueKind, value: Any) -> Hashable:
    if kind is ValueKind.SEQUENCE:
        # Storage identity plus length, as a slice view is keyed
        return (id(value), len(value))
    return id(value)


class Traverser:
    """Copy engine bound to the traversal state of one top-level call.

    Args:
        state: Checked-out traversal state, owned by this call.
        cycle_threshold: Depth of reference-bearing nodes after which
            identities are tracked.
        include_private: Copy underscore-prefixed fields too.
        cache: Capability cache (defaults to the process-wide one).
    """

    __slots__ = ("_state", "_threshold", "_include_private", "_cache", "_handlers")

    def __init__(
        self,
        state: TraversalState,
        *,
        cycle_threshold: int = 100,
        include_private: bool = False,
        cache: CapabilityCache | None = None,
    ):
        self._state = state
        self._threshold = cycle_threshold
        self._include_private = include_private
        self._cache = cache if cache is not None else get_capability_cache()
        self._handlers: dict[ValueKind, Callable[[Any], Any]] = {
            ValueKind.SCALAR: _copy_scalar,
            ValueKind.ARRAY: self._copy_array,
            ValueKind.SET: _copy_set,
            ValueKind.STRUCT: self._copy_struct,
            ValueKind.SEQUENCE: self._copy_sequence,
            ValueKind.MAPPING: self._copy_mapping,
            ValueKind.REFERENCE: self._copy_reference,
        }

    def copy_value(self, source: Any) -> Any:
        """Return a deep copy of source.

        Args:
            source: Any value.

        Returns:
            A structurally independent copy, or the override's result when
            the source type implements ``__clone__``. A reference-bearing
            node that closes a cycle past the threshold yields None.
        """
        found, result = self._try_override(source)
        if found:
            return result

        kind = kind_of(type(source))
        handler = self._handlers[kind]
        if not kind.is_reference_bearing:
            return handler(source)

        state = self._state
        state.depth += 1
        try:
            if state.depth <= self._threshold:
                return handler(source)
            key = _identity_key(kind, source)
            if not state.enter(key):
                logger.debug(
                    "Breaking reference cycle at %s (depth %d)",
                    type(source).__qualname__,
                    state.depth,
                )
                return None
            try:
                return handler(source)
            finally:
                state.leave(key)
        finally:
            state.depth -= 1

    def is_writable(self, name: str) -> bool:
        """Check whether this traversal copies the named field."""
        return is_writable_field(name, self._include_private)

    def _try_override(self, source: Any) -> tuple[bool, Any]:
        # Through a reference first, then on the value itself
        if isinstance(source, Ref) and source.value is not None:
            target = source.value
            found, result = invoke(self._cache.resolve(type(target)), target, by_reference=True)
            if found:
                return True, result
        return invoke(self._cache.resolve(type(source)), source, by_reference=False)

    def _copy_struct(self, source: Any) -> Any:
        cls = type(source)
        if is_pydantic_model(cls):
            return self._copy_model(source)

        copy = self._allocate(source)
        if copy is source:
            return source
        for name, value in instance_fields(source):
            if self.is_writable(name):
                object.__setattr__(copy, name, self.copy_value(value))
        if is_dataclass(cls) and not self._include_private:
            for field in fields(cls):
                if not self.is_writable(field.name):
                    object.__setattr__(copy, field.name, _zero_value(field))
        return copy

    def _allocate(self, source: Any) -> Any:
        """Create the shell of a struct copy the way pickle would.

        Types that reduce to constructor arguments (exceptions, classes with
        ``__getnewargs__`` or a custom ``__reduce__``) are rebuilt from copies
        of those arguments. Field state is filled in by the caller.

        Returns:
            A new instance, or source itself when it reduces to a global name.
        """
        cls = type(source)
        try:
            reduced = source.__reduce_ex__(4)
        except TypeError:
            return _new_instance(cls)
        if isinstance(reduced, str):
            return source
        constructor, args = reduced[0], reduced[1]
        if constructor is copyreg.__newobj__ and len(args) == 1:
            return _new_instance(cls)
        return constructor(*self.copy_value(args))

    def _copy_model(self, source: Any) -> Any:
        # model_construct fills private attributes with their defaults
        values = {
            name: self.copy_value(value)
            for name, value in source.__dict__.items()
            if self.is_writable(name)
        }
        extra = getattr(source, "__pydantic_extra__", None)
        if extra:
            values.update({name: self.copy_value(value) for name, value in extra.items()})
        copy = type(source).model_construct(_fields_set=set(source.model_fields_set), **values)
        private = getattr(source, "__pydantic_private__", None)
        if self._include_private and private:
            object.__setattr__(
                copy,
                "__pydantic_private__",
                {name: self.copy_value(value) for name, value in private.items()},
            )
        return copy

    def _copy_mapping(self, source: dict[Any, Any]) -> dict[Any, Any]:
        copy = _empty_mapping(source)
        for key, value in source.items():
            copy[key] = self.copy_value(value)
        return copy

    def _copy_sequence(self, source: Any) -> Any:
        if isinstance(source, bytearray):
            return type(source)(source)
        if isinstance(source, array.array):
            return type(source)(source.typecode, source)
        items = [self.copy_value(item) for item in source]
        if type(source) is list:
            return items
        if isinstance(source, deque):
            return type(source)(items, source.maxlen)
        copy = type(source)()
        copy.extend(items)
        return copy

    def _copy_array(self, source: tuple[Any, ...]) -> tuple[Any, ...]:
        items = [self.copy_value(item) for item in source]
        cls = type(source)
        if cls is tuple:
            return tuple(items)
        if hasattr(cls, "_make"):
            return cls._make(items)  # type: ignore[attr-defined, no-any-return]
        return cls(items)

    def _copy_reference(self, source: Ref[Any]) -> Ref[Any]:
        return type(source)(self.copy_value(source.get()))
