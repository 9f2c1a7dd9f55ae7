"""
Execution Mode Configuration

Determines whether cancellation attempts call the real bookings API
(production) or a deterministic scripted gateway (test).
"""

import os
from typing import Literal

EXECUTION_MODE_PRODUCTION = "production"
EXECUTION_MODE_TEST = "test"

ExecutionMode = Literal["production", "test"]


def get_execution_mode(cfg=None) -> ExecutionMode:
    """
    Get the current execution mode.

    Returns:
        "production" for real API execution, "test" for deterministic test execution.
        Defaults to "production" if CANCELLATION_EXECUTION_MODE is not set.
    """
    if cfg is not None:
        mode = cfg.EXECUTION_MODE
    else:
        mode = os.getenv("CANCELLATION_EXECUTION_MODE", EXECUTION_MODE_PRODUCTION).lower()
    if mode not in (EXECUTION_MODE_PRODUCTION, EXECUTION_MODE_TEST):
        # Default to production for invalid values
        return EXECUTION_MODE_PRODUCTION
    return mode  # type: ignore
