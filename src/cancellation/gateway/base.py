"""
Remote Cancellation Gateway interface.

One async method per backend strategy. Implementations own the mapping from
transport outcomes to StrategyResult and never raise for remote failures.
"""

import abc

from cancellation.models import CancellationPolicy

from .results import StrategyResult


class RemoteCancellationGateway(abc.ABC):
    """Backend cancellation strategies, in no particular order.

    Contract:
    - request_cancellation(): create an approval-pending cancellation record
    - direct_status_update(): set the booking itself to cancelled
    - alternative_cancel(): looser cancel endpoint
    - get_cancellation_policy(): informational read, never part of the cascade
    """

    @abc.abstractmethod
    async def request_cancellation(self, booking_id: str, reason: str) -> StrategyResult:
        raise NotImplementedError

    @abc.abstractmethod
    async def direct_status_update(self, booking_id: str, reason: str) -> StrategyResult:
        raise NotImplementedError

    @abc.abstractmethod
    async def alternative_cancel(self, booking_id: str, reason: str) -> StrategyResult:
        raise NotImplementedError

    async def get_cancellation_policy(self, booking_id: str) -> CancellationPolicy:
        return CancellationPolicy.default()

    async def aclose(self) -> None:
        return None
