"""
Scripted Cancellation Gateway

Deterministic RemoteCancellationGateway for E2E runs and tests.
Returns scripted StrategyResults without calling external APIs and
records every call it receives.
"""

import logging
from typing import Dict, List, Optional, Sequence, Tuple, Union

from cancellation.gateway.base import RemoteCancellationGateway
from cancellation.gateway.results import StrategyResult
from cancellation.models import CancellationPolicy

logger = logging.getLogger(__name__)

STRATEGY_NAMES = ("request_cancellation", "direct_status_update", "alternative_cancel")

Script = Union[StrategyResult, Sequence[StrategyResult], BaseException]


class ScriptedCancellationGateway(RemoteCancellationGateway):
    """
    Gateway whose strategy results are configured up front.

    Each strategy may be scripted with a single StrategyResult (returned on
    every call), a sequence (consumed one per call, last one repeats), or an
    exception instance (raised, for contract-violation tests). Unscripted
    strategies return NOT_SUPPORTED.

    Example:
        >>> gateway = ScriptedCancellationGateway(
        ...     request_cancellation=StrategyResult.not_supported(),
        ...     direct_status_update=StrategyResult.rejected("Only the landlord may cancel"),
        ... )
    """

    def __init__(
        self,
        request_cancellation: Optional[Script] = None,
        direct_status_update: Optional[Script] = None,
        alternative_cancel: Optional[Script] = None,
        policy: Optional[CancellationPolicy] = None,
    ):
        self._scripts: Dict[str, Optional[Script]] = {
            "request_cancellation": request_cancellation,
            "direct_status_update": direct_status_update,
            "alternative_cancel": alternative_cancel,
        }
        self._cursor: Dict[str, int] = {name: 0 for name in STRATEGY_NAMES}
        self._policy = policy
        self.calls: List[Tuple[str, str, str]] = []

    def script(self, strategy: str, result: Script) -> None:
        """Replace the script for one strategy."""
        if strategy not in self._scripts:
            raise ValueError(f"Unknown strategy: {strategy}")
        self._scripts[strategy] = result
        self._cursor[strategy] = 0

    def calls_for(self, strategy: str) -> List[Tuple[str, str]]:
        """(booking_id, reason) pairs received by one strategy."""
        return [(booking_id, reason) for name, booking_id, reason in self.calls if name == strategy]

    def _next(self, strategy: str, booking_id: str, reason: str) -> StrategyResult:
        self.calls.append((strategy, str(booking_id), reason))
        script = self._scripts[strategy]
        if script is None:
            result = StrategyResult.not_supported("scripted default", status_code=404)
        elif isinstance(script, BaseException):
            raise script
        elif isinstance(script, StrategyResult):
            result = script
        else:
            index = min(self._cursor[strategy], len(script) - 1)
            self._cursor[strategy] += 1
            result = script[index]
        logger.debug(
            f"[TEST MODE] {strategy} -> {result.kind.value}",
            extra={"strategy": strategy, "booking_id": str(booking_id), "result": result.kind.value},
        )
        return result

    async def request_cancellation(self, booking_id: str, reason: str) -> StrategyResult:
        return self._next("request_cancellation", booking_id, reason)

    async def direct_status_update(self, booking_id: str, reason: str) -> StrategyResult:
        return self._next("direct_status_update", booking_id, reason)

    async def alternative_cancel(self, booking_id: str, reason: str) -> StrategyResult:
        return self._next("alternative_cancel", booking_id, reason)

    async def get_cancellation_policy(self, booking_id: str) -> CancellationPolicy:
        return self._policy or CancellationPolicy.default()
