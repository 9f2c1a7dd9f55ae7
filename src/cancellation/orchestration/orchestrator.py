"""
Cancellation Orchestrator

Resolves a user's cancellation request against a backend whose cancellation
support differs per deployment.

Flow:
1. If the store already holds a pending intent for the booking, return it
   (no remote call, no duplicate record)
2. Try each strategy of the cascade in order, one at a time
   - SUCCESS       -> REMOTE_ACCEPTED
   - REJECTED      -> REJECTED (never masked by later strategies or local queuing)
   - NOT_SUPPORTED -> next strategy
   - TRANSIENT     -> next strategy
3. Cascade exhausted -> persist a new pending intent
   - stored        -> LOCALLY_QUEUED
   - StorageError  -> FAILED
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, List, Optional

from cancellation.errors import StorageError
from cancellation.gateway.base import RemoteCancellationGateway
from cancellation.gateway.results import ResultKind, StrategyResult
from cancellation.logging_config import generate_request_id, log_with_context
from cancellation.models import CancellationIntent, CancellationPolicy
from cancellation.reconciler import StatusReconciler
from cancellation.store.base import IntentStore

from .outcomes import CancellationOutcome, OutcomeKind
from .strategies import Strategy, build_cascade

logger = logging.getLogger(__name__)

DEFAULT_REASON = "User requested cancellation"


class CancellationOrchestrator:
    """Drives the strategy cascade and backs it with the local intent store."""

    def __init__(
        self,
        gateway: RemoteCancellationGateway,
        store: IntentStore,
        reconciler: Optional[StatusReconciler] = None,
        support_email: Optional[str] = None,
        default_reason: str = DEFAULT_REASON,
    ):
        """
        Initialize orchestrator.

        Args:
            gateway: Remote cancellation strategies
            store: Durable intent store
            reconciler: Status message source (built from support_email if None)
            support_email: Support address used in remediation messages
            default_reason: Reason used when attempt() gets none
        """
        self.gateway = gateway
        self.store = store
        self.support_email = support_email
        self.reconciler = reconciler or StatusReconciler(support_email)
        self.default_reason = default_reason
        self.strategies: List[Strategy] = build_cascade(gateway)
        self._locks: Dict[str, asyncio.Lock] = {}
        self._lock_users: Dict[str, int] = {}

    @classmethod
    def from_config(cls, cfg=None, token_provider=None) -> "CancellationOrchestrator":
        """Wire gateway and store from CancellationConfig."""
        from cancellation.execution import build_gateway
        from cancellation.store import create_intent_store

        if cfg is None:
            from cancellation.config import config as cfg
        return cls(
            gateway=build_gateway(cfg, token_provider=token_provider),
            store=create_intent_store(cfg),
            support_email=cfg.SUPPORT_EMAIL,
            default_reason=cfg.DEFAULT_REASON,
        )

    async def aclose(self) -> None:
        """Release the gateway's HTTP client and the store's connections."""
        try:
            await self.gateway.aclose()
        finally:
            await self.store.aclose()

    async def __aenter__(self) -> "CancellationOrchestrator":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    def _contact_line(self) -> str:
        if self.support_email:
            return f"Please contact the landlord directly or our support team at {self.support_email}."
        return "Please contact the landlord directly or our support team."

    # ------------------------------------------------------------------
    # Per-booking serialization
    # ------------------------------------------------------------------

    @asynccontextmanager
    async def _booking_lock(self, booking_id: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(booking_id, asyncio.Lock())
        self._lock_users[booking_id] = self._lock_users.get(booking_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[booking_id] -= 1
            if self._lock_users[booking_id] == 0:
                del self._lock_users[booking_id]
                del self._locks[booking_id]

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def attempt(self, booking_id: str, reason: Optional[str] = None) -> CancellationOutcome:
        """
        Resolve a cancellation request for one booking.

        Always runs to a terminal outcome; never raises for remote or
        storage failures.

        Args:
            booking_id: Booking identifier
            reason: Free-text reason (defaults to the configured reason)

        Returns:
            CancellationOutcome
        """
        booking_id = str(booking_id)
        reason = (reason or "").strip() or self.default_reason
        request_id = generate_request_id()

        async with self._booking_lock(booking_id):
            outcome = await self._resolve(booking_id, reason, request_id)

        log_with_context(
            logger, logging.INFO, f"Cancellation for booking {booking_id} ended {outcome.kind.value}",
            request_id=request_id, booking_id=booking_id,
            outcome=outcome.kind.value, strategy=outcome.strategy,
        )
        return outcome

    async def get_cancellation_policy(self, booking_id: str) -> CancellationPolicy:
        """Informational policy read; not part of the cascade."""
        return await self.gateway.get_cancellation_policy(str(booking_id))

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    async def _resolve(self, booking_id: str, reason: str, request_id: str) -> CancellationOutcome:
        # Step 1: existing pending intent
        try:
            existing = await self.store.get_for_booking(booking_id)
        except StorageError as e:
            logger.error(
                f"Could not read intent store for booking {booking_id}: {e}",
                extra={"request_id": request_id, "booking_id": booking_id},
                exc_info=True,
            )
            return self._failed()

        if existing is not None:
            log_with_context(
                logger, logging.INFO, f"Booking {booking_id} already has a pending intent",
                request_id=request_id, booking_id=booking_id, intent_id=existing.id,
            )
            return self._queued(existing)

        # Step 2: cascade
        for strategy in self.strategies:
            result = await self._run_strategy(strategy, booking_id, reason, request_id)
            if not result.is_terminal:
                continue

            if result.kind is ResultKind.SUCCESS:
                return CancellationOutcome(
                    kind=OutcomeKind.REMOTE_ACCEPTED,
                    message=strategy.accepted_message,
                    payload=result.payload,
                    strategy=strategy.name,
                )

            # REJECTED
            explanation = result.reason or "The cancellation was declined."
            return CancellationOutcome(
                kind=OutcomeKind.REJECTED,
                message=f"Your cancellation request was declined: {explanation}",
                strategy=strategy.name,
                remediation=self._contact_line(),
            )

        # Step 3: cascade exhausted
        logger.info(
            f"All backend cancellation strategies unusable for booking {booking_id}, storing locally",
            extra={"request_id": request_id, "booking_id": booking_id},
        )
        intent = CancellationIntent.new(booking_id, reason)
        try:
            await self.store.put(intent)
        except StorageError as e:
            logger.error(
                f"CRITICAL: Failed to persist cancellation intent for booking {booking_id}: {e}",
                extra={
                    "request_id": request_id,
                    "booking_id": booking_id,
                    "intent_id": intent.id,
                    "error_type": type(e).__name__,
                },
                exc_info=True,
            )
            return self._failed()

        return self._queued(intent)

    async def _run_strategy(self, strategy: Strategy, booking_id: str, reason: str,
                            request_id: str) -> StrategyResult:
        try:
            result = await strategy.call(booking_id, reason)
        except Exception as e:
            # Gateway contract violation; keep the cascade going
            logger.warning(
                f"{strategy.name} raised instead of returning a result: {e}",
                extra={"request_id": request_id, "booking_id": booking_id,
                       "strategy": strategy.name, "error_type": type(e).__name__},
                exc_info=True,
            )
            return StrategyResult.transient(str(e))

        log_with_context(
            logger, logging.INFO, f"{strategy.name} -> {result.kind.value}",
            request_id=request_id, booking_id=booking_id,
            strategy=strategy.name, result=result.kind.value,
            status_code=result.status_code,
        )
        return result

    def _queued(self, intent: CancellationIntent) -> CancellationOutcome:
        return CancellationOutcome(
            kind=OutcomeKind.LOCALLY_QUEUED,
            message=self.reconciler.message(intent),
            intent=intent,
            strategy="local",
            remediation=self._contact_line(),
        )

    def _failed(self) -> CancellationOutcome:
        return CancellationOutcome(
            kind=OutcomeKind.FAILED,
            message="We could not save your cancellation request on this device.",
            remediation=self._contact_line(),
        )
