"""
Bookings API cancellation gateway.

HTTP implementation of RemoteCancellationGateway against the legacy
bookings backend. Different deployments expose different subsets of these
endpoints, so every call is classified rather than raised.
"""

import logging
from typing import Any, Dict, Iterable, Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from cancellation.errors import UpstreamError
from cancellation.models import CancellationPolicy, format_timestamp, utcnow

from .base import RemoteCancellationGateway
from .base_client import BaseClient, TokenProvider
from .classification import classify_response
from .results import StrategyResult

logger = logging.getLogger(__name__)


class HttpCancellationGateway(BaseClient, RemoteCancellationGateway):
    """HTTP client for the bookings cancellation endpoints."""

    def __init__(
        self,
        base_url: str,
        *,
        requested_by: str = "student",
        denial_codes: Iterable[str] = (),
        timeout: float = 30.0,
        token_provider: Optional[TokenProvider] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize cancellation gateway.

        Args:
            base_url: Bookings API base URL
            requested_by: Role reported in requestedBy / cancelledBy
            denial_codes: Body error codes that mark an explicit business denial
            timeout: Per-request timeout in seconds
            token_provider: Callable returning the current bearer token
            transport: Optional httpx transport
        """
        super().__init__(
            base_url=base_url,
            timeout=timeout,
            token_provider=token_provider,
            transport=transport,
        )
        self.requested_by = requested_by
        self.denial_codes = list(denial_codes)

    @classmethod
    def from_config(cls, cfg=None, token_provider: Optional[TokenProvider] = None) -> "HttpCancellationGateway":
        if cfg is None:
            from cancellation.config import config as cfg
        return cls(
            cfg.API_BASE_URL,
            requested_by=cfg.REQUESTED_BY,
            denial_codes=cfg.DENIAL_CODES,
            timeout=cfg.API_TIMEOUT,
            token_provider=token_provider,
        )

    @staticmethod
    def _booking_path(booking_id: str, suffix: str = "") -> str:
        """Path under /bookings/ with the id escaped as a single segment."""
        segment = quote(str(booking_id), safe="")
        if segment in (".", ".."):
            # Dot segments are collapsed by URL normalization
            segment = segment.replace(".", "%2E")
        return f"/bookings/{segment}{suffix}"

    async def _call(self, strategy: str, method: str, path: str, payload: Dict[str, Any]) -> StrategyResult:
        try:
            status_code, body = await self._send(method, path, json=payload)
        except UpstreamError as e:
            logger.info(
                f"{strategy} unreachable: {e}",
                extra={"strategy": strategy, "path": path, "result": "transient"},
            )
            return StrategyResult.transient(str(e))

        result = classify_response(status_code, body, self.denial_codes)
        logger.info(
            f"{strategy} returned {status_code}",
            extra={
                "strategy": strategy,
                "path": path,
                "status_code": status_code,
                "result": result.kind.value,
            },
        )
        return result

    async def request_cancellation(self, booking_id: str, reason: str) -> StrategyResult:
        """POST /bookings/{id}/request-cancellation - creates an approval-pending request."""
        payload = {
            "reason": reason,
            "requestedBy": self.requested_by,
            "requestedAt": format_timestamp(utcnow()),
        }
        return await self._call(
            "request_cancellation", "POST", self._booking_path(booking_id, "/request-cancellation"), payload)

    async def direct_status_update(self, booking_id: str, reason: str) -> StrategyResult:
        """PUT /bookings/{id} - sets the booking status to cancelled."""
        payload = {
            "status": "cancelled",
            "cancelledBy": self.requested_by,
            "cancelledAt": format_timestamp(utcnow()),
            "cancelReason": reason,
        }
        return await self._call(
            "direct_status_update", "PUT", self._booking_path(booking_id), payload)

    async def alternative_cancel(self, booking_id: str, reason: str) -> StrategyResult:
        """POST /bookings/{id}/cancel - looser cancel endpoint."""
        payload = {
            "cancelledBy": self.requested_by,
            "reason": reason,
        }
        return await self._call(
            "alternative_cancel", "POST", self._booking_path(booking_id, "/cancel"), payload)

    async def get_cancellation_policy(self, booking_id: str) -> CancellationPolicy:
        """
        GET /bookings/{id}/cancellation-policy.

        Falls back to CancellationPolicy.default() when the endpoint is
        missing, unreachable or returns an unexpected body.
        """
        try:
            body = await self._request("GET", self._booking_path(booking_id, "/cancellation-policy"))
            return CancellationPolicy.model_validate(body)
        except (UpstreamError, ValidationError) as e:
            logger.info(
                f"Cancellation policy unavailable for booking {booking_id}, using default: {e}",
                extra={"booking_id": str(booking_id)},
            )
            return CancellationPolicy.default()
