"""Value kind functionality: kind tags, resolution, and atomic types."""

from deepclone.core.kind.core import is_atomic, is_pydantic_model, kind_of, register_atomic
from deepclone.core.kind.models import ValueKind

__all__ = [
    # Models
    "ValueKind",
    # Core
    "kind_of",
    "register_atomic",
    "is_atomic",
    "is_pydantic_model",
]
