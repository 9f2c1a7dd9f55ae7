"""
Cancellation outcomes.

Every call to CancellationOrchestrator.attempt ends in exactly one of:

- REMOTE_ACCEPTED: a backend strategy accepted the cancellation
- REJECTED: the backend explicitly refused on business grounds
- LOCALLY_QUEUED: no strategy was usable, the intent is stored on the device
- FAILED: the intent could not be stored
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from cancellation.models import CancellationIntent


class OutcomeKind(Enum):
    REMOTE_ACCEPTED = "remote_accepted"
    REJECTED = "rejected"
    LOCALLY_QUEUED = "locally_queued"
    FAILED = "failed"


@dataclass(frozen=True)
class CancellationOutcome:
    """
    Terminal result of a cancellation attempt.

    Attributes:
        kind: OutcomeKind
        message: Human-readable message for the user
        payload: Backend response body (REMOTE_ACCEPTED)
        intent: Stored intent (LOCALLY_QUEUED)
        strategy: Name of the strategy that ended the cascade
        remediation: Suggested manual next step (REJECTED, LOCALLY_QUEUED, FAILED)
    """
    kind: OutcomeKind
    message: str
    payload: Dict[str, Any] = field(default_factory=dict)
    intent: Optional[CancellationIntent] = None
    strategy: Optional[str] = None
    remediation: Optional[str] = None

    @property
    def success(self) -> bool:
        """True when the request was accepted remotely or recorded locally."""
        return self.kind in (OutcomeKind.REMOTE_ACCEPTED, OutcomeKind.LOCALLY_QUEUED)

    @property
    def requires_contact(self) -> bool:
        """True when the user has to reach the landlord or support themselves."""
        return self.kind is not OutcomeKind.REMOTE_ACCEPTED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.kind.value,
            "success": self.success,
            "message": self.message,
            "strategy": self.strategy,
            "remediation": self.remediation,
            "requiresContact": self.requires_contact,
            "data": self.payload,
            "cancellationRequest": self.intent.to_dict() if self.intent else None,
        }
