"""
Redis Intent Store Implementation

Concrete implementation of IntentStore using a Redis hash.

Key format: {key} (default "cancellation_requests")
Field: intent id
Value: JSON-serialized intent document
No TTL: retention is an external policy.
"""

import json
import logging
from typing import List, Optional

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from cancellation.errors import ConfigurationError, StorageError
from cancellation.models import CancellationIntent

from .base import IntentStore

logger = logging.getLogger(__name__)


class RedisIntentStore(IntentStore):
    """
    Redis-backed intent store.

    HSET/HGET on a single field are atomic, which gives per-record atomicity
    without multi-key transactions. Unlike best-effort caches, failures are
    raised as StorageError: a lost write must never look like a saved intent.
    """

    def __init__(self, redis_client=None, redis_url: Optional[str] = None,
                 key: str = "cancellation_requests"):
        """
        Initialize Redis intent store.

        Args:
            redis_client: Optional redis.asyncio client instance.
                          If None, one is created from redis_url.
            redis_url: Redis URL, required when redis_client is None
            key: Name of the hash holding the intents
        """
        if redis_client is None:
            if not redis_url:
                raise ConfigurationError(
                    "Redis intent store requires a client or REDIS_URL")
            redis_client = aioredis.from_url(
                redis_url,
                decode_responses=True,
                socket_connect_timeout=2,
                socket_timeout=2,
            )
        self._client = redis_client
        self.key = key

    @staticmethod
    def _decode(raw) -> CancellationIntent:
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        try:
            return CancellationIntent.from_dict(json.loads(raw))
        except (KeyError, ValueError, TypeError) as e:
            raise StorageError(f"Malformed intent record in Redis: {e}") from e

    async def put(self, intent: CancellationIntent) -> None:
        value = json.dumps(intent.to_dict(), ensure_ascii=False)
        try:
            await self._client.hset(self.key, intent.id, value)
        except RedisError as e:
            logger.error(
                f"Failed to persist intent {intent.id} to Redis: {e}",
                extra={
                    "intent_id": intent.id,
                    "booking_id": intent.booking_id,
                    "error_type": type(e).__name__,
                },
                exc_info=True,
            )
            raise StorageError(f"Failed to persist intent {intent.id}: {e}") from e

    async def get(self, intent_id: str) -> Optional[CancellationIntent]:
        try:
            raw = await self._client.hget(self.key, intent_id)
        except RedisError as e:
            raise StorageError(f"Failed to read intent {intent_id}: {e}") from e
        if raw is None:
            return None
        return self._decode(raw)

    async def get_all(self) -> List[CancellationIntent]:
        try:
            values = await self._client.hvals(self.key)
        except RedisError as e:
            raise StorageError(f"Failed to read intents: {e}") from e
        return [self._decode(raw) for raw in values]

    async def clear(self) -> None:
        try:
            await self._client.delete(self.key)
        except RedisError as e:
            raise StorageError(f"Failed to clear intents: {e}") from e

    async def aclose(self) -> None:
        await self._client.aclose()
