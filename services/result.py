"""
Result type returned by the host-facing services.

Host-facing calls report failures as values so a UI handler can branch on
``result.success`` and ``result.error_code`` instead of catching domain
exceptions.

Usage:
    result = comparisons.record_result(winner_id, loser_id, "OH")
    if result:
        show_change(result.value)
    else:
        show_error(result.error_code, result.error)
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """
    Outcome of a service call.

    Attributes:
        success: Whether the call succeeded
        value: Payload on success (may be None, e.g. an exhausted pairing)
        error: Human-readable message on failure
        error_code: Code from services.error_codes on failure
    """

    success: bool
    value: T | None = None
    error: str | None = None
    error_code: str | None = None

    @classmethod
    def ok(cls, value: T | None = None) -> "Result[T]":
        return cls(success=True, value=value)

    @classmethod
    def fail(cls, error: str, code: str | None = None) -> "Result[T]":
        return cls(success=False, error=error, error_code=code)

    def __bool__(self) -> bool:
        return self.success

    def unwrap(self) -> T:
        """Return the payload, raising ValueError for a failed result."""
        if not self.success:
            raise ValueError(f"Cannot unwrap failed result: {self.error}")
        return self.value  # type: ignore

    def unwrap_or(self, default: T) -> T:
        return self.value if self.success else default  # type: ignore

    def map(self, fn: Callable[[T], "Result"]) -> "Result":
        """Chain a follow-up call onto a successful result; failures pass through."""
        if not self.success:
            return self
        return fn(self.value)  # type: ignore

    def to_dict(self) -> dict:
        if self.success:
            return {"success": True, "value": self.value}
        return {"success": False, "error": self.error, "error_code": self.error_code}
