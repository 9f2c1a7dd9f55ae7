"""
Strategy results.

Every remote cancellation strategy reports exactly one of four outcomes:

- SUCCESS: the backend accepted the request (payload attached)
- NOT_SUPPORTED: the operation does not exist, or this caller's role can never use it
- REJECTED: the backend understood the request and denied it on business grounds
- TRANSIENT: timeout, connectivity failure or server error
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class ResultKind(Enum):
    SUCCESS = "success"
    NOT_SUPPORTED = "not_supported"
    REJECTED = "rejected"
    TRANSIENT = "transient"


@dataclass(frozen=True)
class StrategyResult:
    """
    Classified result of one strategy call.

    Attributes:
        kind: ResultKind
        payload: Parsed response body (SUCCESS only)
        reason: Backend explanation (REJECTED) or diagnostic detail
        status_code: HTTP status, None for transport failures
    """
    kind: ResultKind
    payload: Dict[str, Any] = field(default_factory=dict)
    reason: Optional[str] = None
    status_code: Optional[int] = None

    @classmethod
    def success(cls, payload: Optional[Dict[str, Any]] = None, status_code: Optional[int] = None) -> "StrategyResult":
        return cls(ResultKind.SUCCESS, payload=payload or {}, status_code=status_code)

    @classmethod
    def not_supported(cls, reason: Optional[str] = None, status_code: Optional[int] = None) -> "StrategyResult":
        return cls(ResultKind.NOT_SUPPORTED, reason=reason, status_code=status_code)

    @classmethod
    def rejected(cls, reason: str, status_code: Optional[int] = None) -> "StrategyResult":
        return cls(ResultKind.REJECTED, reason=reason, status_code=status_code)

    @classmethod
    def transient(cls, reason: Optional[str] = None, status_code: Optional[int] = None) -> "StrategyResult":
        return cls(ResultKind.TRANSIENT, reason=reason, status_code=status_code)

    @property
    def is_terminal(self) -> bool:
        """True when the cascade must stop on this result."""
        return self.kind in (ResultKind.SUCCESS, ResultKind.REJECTED)
