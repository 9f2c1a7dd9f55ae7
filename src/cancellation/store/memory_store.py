"""
In-Memory Intent Store

Dict-backed IntentStore. Not durable; used as a test double and in
test execution mode.
"""

from typing import Dict, List, Optional

from cancellation.models import CancellationIntent

from .base import IntentStore


class InMemoryIntentStore(IntentStore):
    """Intent store keeping records in a process-local dict keyed by id."""

    def __init__(self):
        self._records: Dict[str, CancellationIntent] = {}

    async def put(self, intent: CancellationIntent) -> None:
        self._records[intent.id] = intent

    async def get(self, intent_id: str) -> Optional[CancellationIntent]:
        return self._records.get(intent_id)

    async def get_all(self) -> List[CancellationIntent]:
        return list(self._records.values())

    async def clear(self) -> None:
        self._records.clear()
