"""
Orchestration Layer

Cancellation cascade, outcomes and strategy ordering.
"""

from .orchestrator import CancellationOrchestrator
from .outcomes import CancellationOutcome, OutcomeKind
from .strategies import Strategy, build_cascade

__all__ = [
    "CancellationOrchestrator",
    "CancellationOutcome",
    "OutcomeKind",
    "Strategy",
    "build_cascade",
]
