"""
Cascade strategies.

The fixed order in which remote cancellation strategies are tried.
"""
from dataclasses import dataclass
from typing import Awaitable, Callable, List

from cancellation.gateway.base import RemoteCancellationGateway
from cancellation.gateway.results import StrategyResult

StrategyCall = Callable[[str, str], Awaitable[StrategyResult]]


@dataclass(frozen=True)
class Strategy:
    """One remote cancellation operation in the cascade."""
    name: str
    call: StrategyCall
    accepted_message: str


def build_cascade(gateway: RemoteCancellationGateway) -> List[Strategy]:
    """
    Ordered strategy list for a gateway.

    1. request_cancellation - approval-pending request, most likely to be allowed
    2. direct_status_update - set the booking to cancelled
    3. alternative_cancel   - looser cancel endpoint
    """
    return [
        Strategy(
            name="request_cancellation",
            call=gateway.request_cancellation,
            accepted_message=(
                "Cancellation request submitted successfully. "
                "The landlord will review your request."
            ),
        ),
        Strategy(
            name="direct_status_update",
            call=gateway.direct_status_update,
            accepted_message="Booking cancelled successfully.",
        ),
        Strategy(
            name="alternative_cancel",
            call=gateway.alternative_cancel,
            accepted_message="Booking cancelled successfully.",
        ),
    ]
