"""
JSON File Intent Store

Device-local durable IntentStore. All intents live in one JSON file as an
object keyed by intent id, each value being the persisted intent document:

{
    "<id>": {"id": ..., "bookingId": ..., "status": "pending", ...},
    ...
}

Writes go to a temporary file in the same directory and are swapped in
with os.replace, so a crash never leaves a half-written file behind.
"""

import asyncio
import json
import logging
import os
import tempfile
from typing import Any, Dict, List, Optional

from cancellation.errors import StorageError
from cancellation.models import CancellationIntent, IntentStatus

from .base import IntentStore

logger = logging.getLogger(__name__)


class JsonFileIntentStore(IntentStore):
    """
    File-backed intent store.

    Every operation re-reads the file so that records written by an earlier
    process on the same device are visible. Mutations are serialized with an
    asyncio.Lock (single writer per process).
    """

    def __init__(self, path: str):
        """
        Initialize file store.

        Args:
            path: JSON file to read and write. Parent directories are created
                  on first write.
        """
        self.path = os.path.expanduser(path)
        self._lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Raw file access (runs in a worker thread)
    # ------------------------------------------------------------------

    def _read_documents(self) -> Dict[str, Dict[str, Any]]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = f.read()
        except OSError as e:
            raise StorageError(f"Failed to read intent store {self.path}: {e}") from e

        if not raw.strip():
            return {}
        try:
            documents = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageError(f"Intent store {self.path} is corrupt: {e}") from e

        # Legacy layout: a plain list of intent documents
        if isinstance(documents, list):
            documents = {str(doc["id"]): doc for doc in documents if isinstance(doc, dict) and "id" in doc}
        if not isinstance(documents, dict):
            raise StorageError(f"Intent store {self.path} has unexpected layout")
        return documents

    def _write_documents(self, documents: Dict[str, Dict[str, Any]]) -> None:
        directory = os.path.dirname(self.path) or "."
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix=".intents-", suffix=".json", dir=directory)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(documents, f, ensure_ascii=False, indent=2)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_path, self.path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except OSError as e:
            raise StorageError(f"Failed to write intent store {self.path}: {e}") from e

    async def _load(self) -> Dict[str, Dict[str, Any]]:
        return await asyncio.to_thread(self._read_documents)

    async def _save(self, documents: Dict[str, Dict[str, Any]]) -> None:
        await asyncio.to_thread(self._write_documents, documents)

    @staticmethod
    def _decode(document: Dict[str, Any]) -> CancellationIntent:
        try:
            return CancellationIntent.from_dict(document)
        except (KeyError, ValueError, TypeError) as e:
            raise StorageError(f"Malformed intent record {document!r}: {e}") from e

    # ------------------------------------------------------------------
    # IntentStore
    # ------------------------------------------------------------------

    async def put(self, intent: CancellationIntent) -> None:
        async with self._lock:
            documents = await self._load()
            documents[intent.id] = intent.to_dict()
            await self._save(documents)
        logger.debug(
            f"Persisted intent {intent.id}",
            extra={"intent_id": intent.id, "booking_id": intent.booking_id},
        )

    async def get(self, intent_id: str) -> Optional[CancellationIntent]:
        documents = await self._load()
        document = documents.get(intent_id)
        if document is None:
            return None
        return self._decode(document)

    async def get_all(self) -> List[CancellationIntent]:
        documents = await self._load()
        return [self._decode(document) for document in documents.values()]

    async def update_status(self, intent_id: str, new_status: IntentStatus) -> Optional[CancellationIntent]:
        # Hold the lock across read-modify-write
        async with self._lock:
            documents = await self._load()
            document = documents.get(intent_id)
            if document is None:
                return None
            intent = self._decode(document)
            updated = intent.with_status(IntentStatus(new_status))
            if updated is not intent:
                documents[intent_id] = updated.to_dict()
                await self._save(documents)
            return updated

    async def mark_submitted(self, intent_id: str) -> Optional[CancellationIntent]:
        async with self._lock:
            documents = await self._load()
            document = documents.get(intent_id)
            if document is None:
                return None
            intent = self._decode(document)
            updated = intent.as_submitted()
            if updated is not intent:
                documents[intent_id] = updated.to_dict()
                await self._save(documents)
            return updated

    async def clear(self) -> None:
        async with self._lock:
            try:
                await asyncio.to_thread(self._remove_file)
            except OSError as e:
                raise StorageError(f"Failed to clear intent store {self.path}: {e}") from e

    def _remove_file(self) -> None:
        if os.path.exists(self.path):
            os.remove(self.path)
