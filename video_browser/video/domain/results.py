"""
Result values for the media delivery engine.

Every component of the delivery path returns a Result instead of raising, so the
presentation layer can translate failures into HTTP responses in a single place.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Generic, Optional, TypeVar

T = TypeVar("T")


class ErrorKind(Enum):
    """Failure categories of the delivery engine"""
    INVALID_REQUEST = "invalid_request"
    NOT_FOUND = "not_found"
    UNSATISFIABLE_RANGE = "unsatisfiable_range"
    UPSTREAM_PROCESS_FAILURE = "upstream_process_failure"
    IO_FAILURE = "io_failure"


@dataclass
class Result(Generic[T]):
    """
    Outcome of an engine operation.

    Usage:
        def lookup(identity) -> Result[VideoRecord]:
            if record is None:
                return Result.Err(ErrorKind.NOT_FOUND, f"Video {identity} not found")
            return Result.Ok(record)
    """
    ok: bool
    data: Optional[T] = None
    error: Optional[str] = None
    kind: Optional[ErrorKind] = None
    meta: Dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def Ok(data: T, **meta: Any) -> "Result[T]":
        """Create a successful result"""
        return Result(ok=True, data=data, meta=meta)

    @staticmethod
    def Err(kind: ErrorKind, error: str, **meta: Any) -> "Result[T]":
        """Create a failed result"""
        return Result(ok=False, error=error, kind=kind, meta=meta)

    def unwrap(self) -> T:
        """Get data or raise ValueError if this is an error"""
        if self.ok:
            return self.data
        raise ValueError(f"[{self.kind.value}] {self.error}")
