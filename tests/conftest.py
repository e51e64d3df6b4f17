import pytest
from fastapi.testclient import TestClient

from fakes import FakeInference, make_relay
from src.main import app
from src.modules.persistence.memory import InMemoryToolStore
from src.modules.persistence.service import get_tool_store
from src.modules.relay.service import get_relay_service


@pytest.fixture
def fake_inference():
    return FakeInference()


@pytest.fixture
def tool_store():
    return InMemoryToolStore()


@pytest.fixture
def client(fake_inference, tool_store):
    """App client backed by the scripted gateway and a fresh tool store."""
    relay = make_relay(fake_inference)
    app.dependency_overrides[get_relay_service] = lambda: relay
    app.dependency_overrides[get_tool_store] = lambda: tool_store
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
