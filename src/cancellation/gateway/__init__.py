"""
Remote cancellation gateway.

Interface, result taxonomy and the HTTP implementation.
"""

from .base import RemoteCancellationGateway
from .base_client import BaseClient
from .classification import classify_response
from .http_gateway import HttpCancellationGateway
from .results import ResultKind, StrategyResult

__all__ = [
    "RemoteCancellationGateway",
    "BaseClient",
    "HttpCancellationGateway",
    "ResultKind",
    "StrategyResult",
    "classify_response",
]
