import json
from datetime import datetime, timezone

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from circles.config import Settings
from circles.database import Base, get_db
from circles.main import app
from circles.services.ai_gateway import AIGateway, get_ai_gateway
from circles.services.attention import get_now

# A Wednesday; the Sunday-based week runs Oct 11 - Oct 17
NOW = datetime(2026, 10, 14, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


class FakeChatCompletions:
    """Records chat-completion requests and answers with canned replies."""

    def __init__(self):
        self.requests = []
        self.replies = []
        self.status_code = 200

    def reply(self, content: str) -> None:
        self.replies.append(content)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(json.loads(request.content))
        if self.status_code != 200:
            return httpx.Response(self.status_code, json={"error": "upstream"})
        content = self.replies.pop(0) if self.replies else ""
        return httpx.Response(200, json={"choices": [{"message": {"content": content}}]})


@pytest.fixture
def fake_ai():
    return FakeChatCompletions()


@pytest.fixture
def ai_gateway(fake_ai):
    settings = Settings(ai_api_key="test-key", ai_gateway_url="https://ai.test/v1/chat/completions")
    return AIGateway(settings=settings, transport=httpx.MockTransport(fake_ai.handler))


@pytest.fixture
def client(engine, ai_gateway):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        db = TestingSession()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_now] = lambda: NOW
    app.dependency_overrides[get_ai_gateway] = lambda: ai_gateway
    app.state.view_states.reset()

    yield TestClient(app)

    app.dependency_overrides.clear()
    app.state.view_states.reset()


def register_and_login(client: TestClient, username: str) -> dict:
    response = client.post(
        "/api/auth/register",
        json={"username": username, "password": "secret-pass"},
    )
    assert response.status_code == 201
    response = client.post(
        "/api/auth/login",
        json={"username": username, "password": "secret-pass"},
    )
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def auth_headers(client):
    return register_and_login(client, "alice")


@pytest.fixture
def other_headers(client):
    return register_and_login(client, "bob")


@pytest.fixture
def create_contact(client, auth_headers):
    def _create(**fields):
        payload = {"name": "Jane Doe"}
        payload.update(fields)
        response = client.post("/api/contacts", json=payload, headers=auth_headers)
        assert response.status_code == 201, response.text
        return response.json()
    return _create
