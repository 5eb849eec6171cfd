import pytest
from fastapi.testclient import TestClient

from app.main import create_app
from app.routers.utils.dependencies import get_chat_client

pytest_plugins = [
    "tests.fixtures.chat_event_fixtures",
    "tests.fixtures.chat_client_fixtures",
]


@pytest.fixture
def client(fake_chat_client):
    """Client with the chat client replaced by an in-memory fake."""
    app = create_app(testing=True)
    app.dependency_overrides[get_chat_client] = lambda: fake_chat_client
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
