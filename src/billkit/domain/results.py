"""Structured outcome returned by engine operations."""

from dataclasses import dataclass
from typing import Any, Optional

from billkit.domain.errors import DomainError


@dataclass(frozen=True)
class OperationResult:
    """Success with data, or failure with a message and error kind.

    ``error_kind`` is one of ``validation``, ``not_found``,
    ``invalid_transition``, ``conflict``, ``dependency`` or ``transient_io``.
    """

    success: bool
    data: Any = None
    error: Optional[str] = None
    error_kind: Optional[str] = None

    @classmethod
    def ok(cls, data: Any = None) -> "OperationResult":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: DomainError) -> "OperationResult":
        return cls(success=False, error=str(error), error_kind=error.kind)

    def to_dict(self) -> dict[str, Any]:
        """Render as {"success": True, "data": ...} or {"success": False, "error": ...}."""
        if self.success:
            return {"success": True, "data": self.data}
        return {"success": False, "error": self.error, "error_kind": self.error_kind}
