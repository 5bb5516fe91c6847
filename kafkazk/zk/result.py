"""
Lookup results.

A lookup either yields a value or a typed failure. Callers decide whether a
failure is logged, mapped to a sentinel, or propagated.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class FailureReason(str, Enum):
    """Why a lookup produced no value."""
    
    ABSENT = "absent"            # Node does not exist (or is empty)
    MALFORMED = "malformed"      # Payload failed to decode
    UNAVAILABLE = "unavailable"  # Coordination service call failed


@dataclass(frozen=True)
class Failure:
    """
    A failed lookup.
    
    Attributes:
        reason: Failure category
        message: Human-readable detail
        path: Node path involved, if any
    """
    reason: FailureReason
    message: str
    path: Optional[str] = None


@dataclass(frozen=True)
class Result(Generic[T]):
    """Either a value or a failure."""
    
    value: Optional[T] = None
    failure: Optional[Failure] = None
    
    @classmethod
    def of(cls, value: T) -> "Result[T]":
        return cls(value=value)
    
    @classmethod
    def fail(
        cls,
        reason: FailureReason,
        message: str,
        path: Optional[str] = None,
    ) -> "Result[T]":
        return cls(failure=Failure(reason=reason, message=message, path=path))
    
    @property
    def ok(self) -> bool:
        return self.failure is None
    
    def value_or(self, default: T) -> T:
        """Return the value, or default on failure."""
        return self.value if self.failure is None else default
