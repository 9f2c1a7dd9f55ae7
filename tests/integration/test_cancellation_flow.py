"""
Integration tests: orchestrator + HTTP gateway + JSON file store.

The bookings backend is simulated with httpx.MockTransport; the store
writes to a temporary directory.
"""

import httpx
import pytest

from cancellation.gateway import HttpCancellationGateway
from cancellation.models import IntentStatus
from cancellation.orchestration import CancellationOrchestrator, OutcomeKind
from cancellation.store import JsonFileIntentStore

BASE_URL = "https://bookings.example.test"


class FakeBackend:
    """Bookings backend exposing a configurable subset of endpoints."""

    def __init__(self, routes):
        # (method, path suffix) -> (status_code, body)
        self.routes = routes
        self.seen = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.seen.append((request.method, request.url.path))
        for (method, suffix), (status_code, body) in self.routes.items():
            if request.method == method and request.url.path.endswith(suffix):
                return httpx.Response(status_code, json=body)
        return httpx.Response(404, json={"message": "Cannot find route"})


@pytest.fixture
def store_path(tmp_path):
    return str(tmp_path / "cancellation_requests.json")


async def run_attempt(backend, store_path, booking_id="b-1"):
    gateway = HttpCancellationGateway(
        BASE_URL,
        denial_codes=["CANCELLATION_DENIED"],
        transport=httpx.MockTransport(backend),
    )
    orchestrator = CancellationOrchestrator(
        gateway, JsonFileIntentStore(store_path), support_email="help@example.test")
    try:
        return await orchestrator.attempt(booking_id, "Change of plans")
    finally:
        await gateway.aclose()


async def test_backend_without_cancellation_support_queues_durably(store_path):
    backend = FakeBackend({("PUT", "/bookings/b-1"): (403, {"message": "Forbidden"})})

    outcome = await run_attempt(backend, store_path)

    assert outcome.kind is OutcomeKind.LOCALLY_QUEUED
    assert backend.seen == [
        ("POST", "/bookings/b-1/request-cancellation"),
        ("PUT", "/bookings/b-1"),
        ("POST", "/bookings/b-1/cancel"),
    ]
    # A fresh store instance (simulated restart) sees the intent
    reloaded = await JsonFileIntentStore(store_path).get_all()
    assert [intent.id for intent in reloaded] == [outcome.intent.id]
    assert reloaded[0].status is IntentStatus.PENDING


async def test_queued_intent_survives_restart_and_is_not_duplicated(store_path):
    backend = FakeBackend({})

    first = await run_attempt(backend, store_path)
    second = await run_attempt(backend, store_path)

    assert second.intent.id == first.intent.id
    assert len(await JsonFileIntentStore(store_path).get_all()) == 1
    assert len(backend.seen) == 3


async def test_request_endpoint_accepts(store_path):
    backend = FakeBackend({
        ("POST", "/request-cancellation"): (201, {"id": "req-1", "status": "pending"}),
    })

    outcome = await run_attempt(backend, store_path)

    assert outcome.kind is OutcomeKind.REMOTE_ACCEPTED
    assert outcome.payload["id"] == "req-1"
    assert len(backend.seen) == 1
    assert await JsonFileIntentStore(store_path).get_all() == []


async def test_business_denial_on_direct_update_is_surfaced(store_path):
    backend = FakeBackend({
        ("PUT", "/bookings/b-1"): (
            422, {"code": "CANCELLATION_DENIED", "message": "Only the landlord can cancel this booking"}),
    })

    outcome = await run_attempt(backend, store_path)

    assert outcome.kind is OutcomeKind.REJECTED
    assert "landlord" in outcome.message
    assert ("POST", "/bookings/b-1/cancel") not in backend.seen
    assert await JsonFileIntentStore(store_path).get_all() == []


async def test_server_errors_fall_through_to_alternative_cancel(store_path):
    backend = FakeBackend({
        ("POST", "/request-cancellation"): (503, {"message": "Service Unavailable"}),
        ("PUT", "/bookings/b-1"): (500, {"message": "boom"}),
        ("POST", "/cancel"): (200, {"status": "cancelled"}),
    })

    outcome = await run_attempt(backend, store_path)

    assert outcome.kind is OutcomeKind.REMOTE_ACCEPTED
    assert outcome.strategy == "alternative_cancel"


async def test_unwritable_store_reports_failure(tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("")
    backend = FakeBackend({})

    outcome = await run_attempt(backend, str(blocker / "cancellation_requests.json"))

    assert outcome.kind is OutcomeKind.FAILED
    assert outcome.intent is None
