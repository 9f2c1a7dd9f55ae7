"""
Intent Store

Durable, keyed persistence of cancellation intents.
"""

from cancellation.errors import ConfigurationError

from .base import IntentStore
from .file_store import JsonFileIntentStore
from .memory_store import InMemoryIntentStore
from .redis_store import RedisIntentStore


def create_intent_store(cfg=None) -> IntentStore:
    """
    Build the intent store selected by CANCELLATION_STORE_BACKEND.

    Raises:
        ConfigurationError: On an unknown backend name
    """
    if cfg is None:
        from cancellation.config import config as cfg

    backend = cfg.STORE_BACKEND
    if backend == "file":
        return JsonFileIntentStore(cfg.STORE_PATH)
    if backend == "redis":
        return RedisIntentStore(redis_url=cfg.REDIS_URL, key=cfg.REDIS_KEY)
    if backend == "memory":
        return InMemoryIntentStore()
    raise ConfigurationError(f"Unknown intent store backend: {backend}")


__all__ = [
    "IntentStore",
    "InMemoryIntentStore",
    "JsonFileIntentStore",
    "RedisIntentStore",
    "create_intent_store",
]
