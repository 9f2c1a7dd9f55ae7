"""
Booking cancellation resolution.

Tries the backend's cancellation strategies in order and, when none is
usable, records the user's intent on the device.

Example:
    >>> orchestrator = CancellationOrchestrator.from_config()
    >>> outcome = await orchestrator.attempt("booking-42", "Change of plans")
    >>> outcome.kind
    <OutcomeKind.LOCALLY_QUEUED: 'locally_queued'>
"""

from cancellation.errors import (
    CancellationError,
    ConfigurationError,
    InvalidStatusTransition,
    StorageError,
    UpstreamError,
)
from cancellation.gateway import (
    HttpCancellationGateway,
    RemoteCancellationGateway,
    ResultKind,
    StrategyResult,
)
from cancellation.models import CancellationIntent, CancellationPolicy, IntentStatus
from cancellation.orchestration import (
    CancellationOrchestrator,
    CancellationOutcome,
    OutcomeKind,
)
from cancellation.reconciler import StatusReconciler, status_message
from cancellation.store import (
    InMemoryIntentStore,
    IntentStore,
    JsonFileIntentStore,
    RedisIntentStore,
    create_intent_store,
)

__all__ = [
    "CancellationError",
    "CancellationIntent",
    "CancellationOrchestrator",
    "CancellationOutcome",
    "CancellationPolicy",
    "ConfigurationError",
    "HttpCancellationGateway",
    "InMemoryIntentStore",
    "IntentStatus",
    "IntentStore",
    "InvalidStatusTransition",
    "JsonFileIntentStore",
    "OutcomeKind",
    "RedisIntentStore",
    "RemoteCancellationGateway",
    "ResultKind",
    "StatusReconciler",
    "StorageError",
    "StrategyResult",
    "UpstreamError",
    "create_intent_store",
    "status_message",
]
