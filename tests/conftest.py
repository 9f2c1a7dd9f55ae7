"""
Pytest configuration for cancellation tests.

Async tests run under pytest-asyncio (asyncio_mode = "auto" in pyproject.toml).
"""

import pytest

from cancellation.execution import ScriptedCancellationGateway
from cancellation.gateway import StrategyResult
from cancellation.orchestration import CancellationOrchestrator
from cancellation.store import InMemoryIntentStore, JsonFileIntentStore

SUPPORT_EMAIL = "support@staykaru.test"


@pytest.fixture
def memory_store() -> InMemoryIntentStore:
    return InMemoryIntentStore()


@pytest.fixture
def file_store(tmp_path) -> JsonFileIntentStore:
    return JsonFileIntentStore(str(tmp_path / "device" / "cancellation_requests.json"))


@pytest.fixture(params=["memory", "file"])
def intent_store(request, tmp_path):
    """Every local store implementation that needs no external service."""
    if request.param == "memory":
        return InMemoryIntentStore()
    return JsonFileIntentStore(str(tmp_path / "cancellation_requests.json"))


@pytest.fixture
def make_gateway():
    def create_gateway(**scripts) -> ScriptedCancellationGateway:
        return ScriptedCancellationGateway(**scripts)

    return create_gateway


@pytest.fixture
def make_orchestrator(memory_store):
    def create_orchestrator(gateway, store=None) -> CancellationOrchestrator:
        return CancellationOrchestrator(
            gateway=gateway,
            store=store if store is not None else memory_store,
            support_email=SUPPORT_EMAIL,
        )

    return create_orchestrator


@pytest.fixture
def all_not_supported():
    return {
        "request_cancellation": StrategyResult.not_supported(status_code=404),
        "direct_status_update": StrategyResult.not_supported(status_code=403),
        "alternative_cancel": StrategyResult.not_supported(status_code=405),
    }
