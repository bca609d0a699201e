"""Capability cache, resolution, and override invocation.

Usage:
    @dataclass
    class Token:
        secret: str

        def __clone__(self) -> "Token":
            return Token(secret="<redacted>")

    record = get_capability_cache().resolve(Token)
    found, copy = invoke(record, Token("abc"), by_reference=False)
"""

from __future__ import annotations

import inspect
import logging
import threading
import typing
from typing import Any, Self

from deepclone.core.capability.models import CapabilityRecord, Cloneable, ReturnShape
from deepclone.core.reference import Ref
from deepclone.errors import InvalidArgumentError

logger = logging.getLogger(__name__)

CLONE_METHOD = "__clone__"

_REQUIRED_PARAMETER_KINDS = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
    inspect.Parameter.KEYWORD_ONLY,
)
_RECEIVER_KINDS = _REQUIRED_PARAMETER_KINDS[:2]


def _takes_no_arguments(method: Any) -> bool:
    """Check that method can be called with the receiver alone."""
    try:
        signature = inspect.signature(method)
    except (TypeError, ValueError):
        return False
    parameters = list(signature.parameters.values())
    if not parameters:
        return False
    receiver, rest = parameters[0], parameters[1:]
    if receiver.kind is inspect.Parameter.VAR_POSITIONAL:
        rest = parameters
    elif receiver.kind not in _RECEIVER_KINDS:
        return False
    return not any(
        p.kind in _REQUIRED_PARAMETER_KINDS and p.default is inspect.Parameter.empty for p in rest
    )


def _names_owner(cls: type, annotation: Any) -> bool:
    """Check whether an annotation denotes the owner type itself."""
    if annotation is Self or annotation is cls:
        return True
    if isinstance(annotation, typing.ForwardRef):
        annotation = annotation.__forward_arg__
    if isinstance(annotation, str):
        text = annotation.strip().strip("'\"")
        return text in {"Self", "typing.Self", cls.__name__, cls.__qualname__}
    return False


def _return_shape(cls: type, method: Any) -> ReturnShape | None:
    """Classify the declared return of an override.

    Accepts the owner type, Self, or a Ref of either. Returns None when the
    annotation names anything else, which disqualifies the override.
    """
    annotation = inspect.signature(method).return_annotation
    if annotation is inspect.Signature.empty:
        return ReturnShape.INFERRED
    if isinstance(annotation, str):
        try:
            annotation = typing.get_type_hints(method)["return"]
        except (NameError, AttributeError, TypeError, SyntaxError):
            # Forward refs to local classes cannot be resolved; match the text
            text = annotation.strip().strip("'\"")
            if _names_owner(cls, text):
                return ReturnShape.VALUE
            if text in {"Ref", "Ref[Any]"}:
                return ReturnShape.REFERENCE
            if text.startswith("Ref[") and text.endswith("]") and _names_owner(cls, text[4:-1]):
                return ReturnShape.REFERENCE
            return None
    if _names_owner(cls, annotation):
        return ReturnShape.VALUE
    if annotation is Ref:
        return ReturnShape.REFERENCE
    if typing.get_origin(annotation) is Ref:
        args = typing.get_args(annotation)
        if not args or args[0] is Any or _names_owner(cls, args[0]):
            return ReturnShape.REFERENCE
    return None


def find_clone_method(cls: type) -> CapabilityRecord:
    """Inspect a type for a usable ``__clone__`` override, without caching.

    Args:
        cls: Type to inspect.

    Returns:
        A valid record when cls declares a zero-argument instance method
        returning itself or a Ref to itself, an empty record otherwise.
    """
    empty = CapabilityRecord(owner=cls)
    if not issubclass(cls, Cloneable):
        return empty
    raw = inspect.getattr_static(cls, CLONE_METHOD, None)
    if isinstance(raw, (staticmethod, classmethod)) or not callable(raw):
        return empty
    method = getattr(cls, CLONE_METHOD)
    if not _takes_no_arguments(method):
        return empty
    shape = _return_shape(cls, method)
    if shape is None:
        return empty
    return CapabilityRecord(owner=cls, method=method, returns=shape)


class CapabilityCache:
    """Process-wide cache mapping types to their capability records.

    Population is lock-guarded with first-writer-wins semantics: concurrent
    misses may both inspect a type, but only one record is kept and every
    reader observes it afterwards. Entries are never evicted.
    """

    def __init__(self) -> None:
        """Initialize empty capability cache."""
        self._records: dict[type, CapabilityRecord] = {}
        self._lock = threading.Lock()

    def resolve(self, cls: type) -> CapabilityRecord:
        """Return the capability record for a type, inspecting it on first use.

        Args:
            cls: Concrete type of a value being copied.

        Returns:
            Cached record, valid if cls overrides copying.
        """
        record = self._records.get(cls)
        if record is not None:
            return record
        record = find_clone_method(cls)
        logger.debug(
            "Resolved clone capability for %s.%s: %s",
            cls.__module__,
            cls.__qualname__,
            record.returns.name if record.is_valid() else "none",
        )
        with self._lock:
            return self._records.setdefault(cls, record)

    def __contains__(self, cls: object) -> bool:
        return cls in self._records

    def __len__(self) -> int:
        return len(self._records)


# Module-level cache instance
_cache = CapabilityCache()


def get_capability_cache() -> CapabilityCache:
    """Access the global capability cache.

    Returns:
        The process-local CapabilityCache instance.
    """
    return _cache


def invoke(record: CapabilityRecord, receiver: Any, *, by_reference: bool) -> tuple[bool, Any]:
    """Call an override and reshape its result for the call site.

    Args:
        record: Capability record of the receiver's type.
        receiver: Value to clone.
        by_reference: True when the call site holds a Ref to the receiver and
            expects a Ref back, False when it expects the value itself.

    Returns:
        (False, None) for an empty record, otherwise (True, reshaped result).

    Raises:
        InvalidArgumentError: If the result is neither the owner type nor a Ref to it.
    """
    if record.method is None:
        return False, None

    result = record.method(receiver)
    if result is None:
        return True, None

    returned_ref = isinstance(result, Ref)
    if record.returns is ReturnShape.REFERENCE and not returned_ref:
        raise InvalidArgumentError(
            f"{record.owner.__qualname__}.{CLONE_METHOD} declared a Ref result "
            f"but returned {type(result).__qualname__}"
        )
    target = result.value if returned_ref else result
    if target is not None and not isinstance(target, record.owner):
        raise InvalidArgumentError(
            f"Cannot reshape {type(target).__qualname__} returned by "
            f"{record.owner.__qualname__}.{CLONE_METHOD} into {record.owner.__qualname__}"
        )

    if by_reference:
        return True, result if returned_ref else Ref(result)
    return True, target
