"""
Status reconciliation.

Maps a CancellationIntent's state to the message shown to the user.
Pure: no I/O, no side effects.
"""
from typing import Optional

from cancellation.models import CancellationIntent, IntentStatus

LOCAL_ONLY_MESSAGE = (
    "Your cancellation request is saved locally. "
    "Please contact the landlord directly or our support team{contact}."
)
UNDER_REVIEW_MESSAGE = (
    "Your cancellation request has been submitted and is being reviewed by the landlord."
)
APPROVED_MESSAGE = "Your cancellation request has been approved."
REJECTED_MESSAGE = (
    "Your cancellation request has been rejected. "
    "Please contact support{contact} for more information."
)


class StatusReconciler:
    """User-facing status messages for cancellation intents."""

    def __init__(self, support_email: Optional[str] = None):
        self.support_email = support_email

    def _contact(self) -> str:
        return f" at {self.support_email}" if self.support_email else ""

    def message(self, intent: CancellationIntent) -> str:
        if intent.status is IntentStatus.PENDING:
            if intent.submitted_to_backend:
                return UNDER_REVIEW_MESSAGE
            return LOCAL_ONLY_MESSAGE.format(contact=self._contact())
        if intent.status is IntentStatus.APPROVED:
            return APPROVED_MESSAGE
        return REJECTED_MESSAGE.format(contact=self._contact())


def status_message(intent: CancellationIntent, support_email: Optional[str] = None) -> str:
    return StatusReconciler(support_email).message(intent)
