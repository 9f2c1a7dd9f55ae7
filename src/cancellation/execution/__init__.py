"""
Execution Layer

Selects the cancellation gateway for the current execution mode.
"""

from typing import Optional

from cancellation.gateway.base import RemoteCancellationGateway
from cancellation.gateway.base_client import TokenProvider
from cancellation.gateway.http_gateway import HttpCancellationGateway

from .config import (
    EXECUTION_MODE_PRODUCTION,
    EXECUTION_MODE_TEST,
    get_execution_mode,
)
from .scripted_gateway import ScriptedCancellationGateway


def build_gateway(cfg=None, token_provider: Optional[TokenProvider] = None) -> RemoteCancellationGateway:
    """
    Build the gateway for the configured execution mode.

    production -> HttpCancellationGateway against CANCELLATION_API_BASE_URL
    test       -> ScriptedCancellationGateway (every strategy NOT_SUPPORTED)
    """
    if cfg is None:
        from cancellation.config import config as cfg
    if get_execution_mode(cfg) == EXECUTION_MODE_TEST:
        return ScriptedCancellationGateway()
    return HttpCancellationGateway.from_config(cfg, token_provider=token_provider)


__all__ = [
    "EXECUTION_MODE_PRODUCTION",
    "EXECUTION_MODE_TEST",
    "ScriptedCancellationGateway",
    "build_gateway",
    "get_execution_mode",
]
