"""
Intent Store Abstraction

Provides a clean interface for persisting and retrieving cancellation intents.
All intent persistence goes through this abstraction.

The store is a generic keyed record collection: it knows nothing about the
one-pending-intent-per-booking rule, which the orchestrator enforces.
"""

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from cancellation.models import CancellationIntent, IntentStatus


def latest_pending(intents: Iterable[CancellationIntent], booking_id: str) -> Optional[CancellationIntent]:
    """Most recent pending intent for booking_id, if any."""
    candidates = [
        intent for intent in intents
        if intent.booking_id == str(booking_id) and intent.is_pending
    ]
    if not candidates:
        return None
    return max(candidates, key=lambda intent: intent.requested_at)


class IntentStore(ABC):
    """
    Abstract base class for intent storage.

    Implementations must provide:
    - put(intent) -> None
    - get(intent_id) -> CancellationIntent | None
    - get_all() -> list[CancellationIntent]
    - clear() -> None

    Status changes are built on top of get + put and are atomic per record
    for a single writer.

    All operations raise StorageError when the backing storage fails.
    """

    @abstractmethod
    async def put(self, intent: CancellationIntent) -> None:
        """
        Insert or replace an intent, keyed by intent.id.

        Raises:
            StorageError: If the record could not be written
        """
        pass

    @abstractmethod
    async def get(self, intent_id: str) -> Optional[CancellationIntent]:
        """Return the intent with intent_id or None."""
        pass

    @abstractmethod
    async def get_all(self) -> List[CancellationIntent]:
        """Return every stored intent. Order is not significant."""
        pass

    @abstractmethod
    async def clear(self) -> None:
        """Remove all records. Intended for test isolation."""
        pass

    async def aclose(self) -> None:
        """Release backend connections. Stores without any keep this no-op."""
        return None

    async def get_for_booking(self, booking_id: str) -> Optional[CancellationIntent]:
        """
        Return the pending intent for a booking.

        If several legacy pending records exist for the same booking, the most
        recently requested one is returned.
        """
        return latest_pending(await self.get_all(), booking_id)

    async def update_status(self, intent_id: str, new_status: IntentStatus) -> Optional[CancellationIntent]:
        """
        Move an intent to new_status and stamp updated_at.

        Idempotent: repeating the current status leaves the stored record
        untouched.

        Returns:
            The stored intent, or None if intent_id is unknown

        Raises:
            InvalidStatusTransition: If the intent is already in another terminal status
            StorageError: If the record could not be read or written
        """
        intent = await self.get(intent_id)
        if intent is None:
            return None
        updated = intent.with_status(IntentStatus(new_status))
        if updated is not intent:
            await self.put(updated)
        return updated

    async def mark_submitted(self, intent_id: str) -> Optional[CancellationIntent]:
        """
        Flag an intent as forwarded to the backend and stamp submitted_at.

        Returns:
            The stored intent, or None if intent_id is unknown
        """
        intent = await self.get(intent_id)
        if intent is None:
            return None
        updated = intent.as_submitted()
        if updated is not intent:
            await self.put(updated)
        return updated
