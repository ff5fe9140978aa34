"""Core types for cachetags."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, NewType

# Branded tag type - compile-time enforcement only
if TYPE_CHECKING:
    CacheTag = NewType("CacheTag", str)
else:
    CacheTag = str

QueryId = str


@dataclass(frozen=True, slots=True)
class ErrorContext:
    """Where a tag index failure happened."""

    backend: str
    operation: str
    args: tuple[Any, ...]


# Observer called with the original exception before it is re-raised or suppressed
OnError = Callable[[Exception, ErrorContext], None]
