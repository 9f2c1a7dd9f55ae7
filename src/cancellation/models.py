"""
Data structures for cancellation intents.

CancellationIntent is the durable record of a user's cancellation request.
It is persisted as one camelCase JSON document per intent:

{
    "id": str,
    "bookingId": str,
    "reason": str,
    "requestedAt": ISO-8601,
    "status": "pending" | "approved" | "rejected",
    "submittedToBackend": bool,
    "submittedAt": ISO-8601 (optional),
    "updatedAt": ISO-8601 (optional)
}
"""
import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from cancellation.errors import InvalidStatusTransition


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return value.isoformat()


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp, accepting a trailing 'Z'.

    Values without an offset are taken as UTC.
    """
    if not value:
        return None
    if not isinstance(value, str):
        raise TypeError(f"Timestamp must be a string, got {type(value).__name__}")
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class IntentStatus(Enum):
    """Cancellation intent status. PENDING is initial, the others are terminal."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    @property
    def is_terminal(self) -> bool:
        return self is not IntentStatus.PENDING

    def can_transition_to(self, new_status: "IntentStatus") -> bool:
        if new_status is self:
            return True
        return not self.is_terminal


@dataclass(frozen=True)
class CancellationIntent:
    """
    A user's unresolved (or resolved) cancellation request.

    Attributes:
        id: Opaque unique identifier, assigned at creation
        booking_id: Identifier of the external booking (weak reference)
        reason: Free-text reason supplied by the requester
        requested_at: Creation timestamp (UTC)
        status: Current IntentStatus
        submitted_to_backend: True once forwarded to the backend out of band
        submitted_at: When it was forwarded
        updated_at: When the status last changed
    """
    id: str
    booking_id: str
    reason: str
    requested_at: datetime
    status: IntentStatus = IntentStatus.PENDING
    submitted_to_backend: bool = False
    submitted_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def new(cls, booking_id: str, reason: str) -> "CancellationIntent":
        """Create a fresh pending intent that has not reached the backend."""
        return cls(
            id=uuid.uuid4().hex,
            booking_id=str(booking_id),
            reason=reason,
            requested_at=utcnow(),
        )

    @property
    def is_pending(self) -> bool:
        return self.status is IntentStatus.PENDING

    def with_status(self, new_status: IntentStatus) -> "CancellationIntent":
        """
        Return a copy moved to new_status.

        Setting the current status again returns the intent unchanged.

        Raises:
            InvalidStatusTransition: If the intent is already terminal
        """
        if new_status is self.status:
            return self
        if not self.status.can_transition_to(new_status):
            raise InvalidStatusTransition(
                f"Cannot move intent {self.id} from {self.status.value} to {new_status.value}"
            )
        return replace(self, status=new_status, updated_at=utcnow())

    def as_submitted(self) -> "CancellationIntent":
        if self.submitted_to_backend:
            return self
        return replace(self, submitted_to_backend=True, submitted_at=utcnow())

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the persisted JSON document."""
        data: Dict[str, Any] = {
            "id": self.id,
            "bookingId": self.booking_id,
            "reason": self.reason,
            "requestedAt": format_timestamp(self.requested_at),
            "status": self.status.value,
            "submittedToBackend": self.submitted_to_backend,
        }
        if self.submitted_at is not None:
            data["submittedAt"] = format_timestamp(self.submitted_at)
        if self.updated_at is not None:
            data["updatedAt"] = format_timestamp(self.updated_at)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CancellationIntent":
        """
        Build an intent from a persisted JSON document.

        Raises:
            KeyError, ValueError, TypeError: If required fields are missing or malformed
        """
        requested_at = parse_timestamp(data["requestedAt"])
        if requested_at is None:
            raise ValueError("requestedAt is empty")
        return cls(
            id=str(data["id"]),
            booking_id=str(data["bookingId"]),
            reason=data.get("reason", ""),
            requested_at=requested_at,
            status=IntentStatus(data.get("status", IntentStatus.PENDING.value)),
            submitted_to_backend=bool(data.get("submittedToBackend", False)),
            submitted_at=parse_timestamp(data.get("submittedAt")),
            updated_at=parse_timestamp(data.get("updatedAt")),
        )


class CancellationPolicy(BaseModel):
    """Informational cancellation policy returned by the bookings API."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    can_cancel_directly: bool = Field(False, alias="canCancelDirectly")
    requires_approval: bool = Field(True, alias="requiresApproval")
    cancellation_fee: float = Field(0, alias="cancellationFee")
    notice: str = "24 hours"
    message: Optional[str] = None

    @classmethod
    def default(cls) -> "CancellationPolicy":
        """Policy assumed when the backend does not expose one."""
        return cls(
            can_cancel_directly=False,
            requires_approval=True,
            cancellation_fee=0,
            notice="24 hours",
            message="Cancellation requires landlord approval",
        )
