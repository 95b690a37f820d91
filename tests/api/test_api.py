"""Tests for the HTTP API.

The application is created without its lifespan and wired with mocked
components through ``app.state``.
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from support_agent.agents.models import AgentResponse, ResponseSource
from support_agent.core.exceptions import IngestionAbortError
from support_agent.main import create_app, lifespan
from support_agent.rag.models import InitializationResult, KnowledgeBaseStatus


def make_status(initialized=True, is_initializing=False, error=None):
    return KnowledgeBaseStatus(
        initialized=initialized,
        document_count=12 if initialized else 0,
        last_updated=datetime(2024, 1, 1, tzinfo=timezone.utc) if initialized else None,
        error=error,
        is_initializing=is_initializing
    )


@pytest.fixture
def coordinator():
    """Create a mock coordinator for a ready knowledge base."""
    coordinator = MagicMock()
    coordinator.is_ready.return_value = True
    coordinator.status.return_value = make_status()
    coordinator.refresh = AsyncMock(return_value=InitializationResult(
        message="Knowledge base initialized successfully",
        duration_ms=1500
    ))
    return coordinator


@pytest.fixture
def response_router():
    """Create a mock response router."""
    response_router = MagicMock()
    response_router.resolve = AsyncMock(return_value=AgentResponse(
        answer="EVA automates eligibility verification.",
        source=ResponseSource.PREDEFINED,
        confidence=1.0,
        matched_question="What does the eligibility verification agent (EVA) do?"
    ))
    return response_router


@pytest.fixture
def app(coordinator, response_router):
    """Create the application with mocked components."""
    app = create_app(use_lifespan=False)
    app.state.coordinator = coordinator
    app.state.response_router = response_router
    app.state.server_ready = True
    return app


@pytest.fixture
def client(app):
    """Create a test client."""
    return TestClient(app)


def test_health(client):
    """Test the health endpoint once the first initialization has finished."""
    response = client.get("/api/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["knowledge_base"]["initialized"] is True
    assert data["knowledge_base"]["document_count"] == 12
    assert "timestamp" in data
    assert "X-Process-Time" in response.headers


def test_health_while_initializing(app, client, coordinator):
    """Test the health endpoint before the first initialization has finished."""
    app.state.server_ready = False
    coordinator.status.return_value = make_status(initialized=False, is_initializing=True)

    data = client.get("/api/health").json()

    assert data["status"] == "initializing"
    assert data["knowledge_base"]["is_initializing"] is True


def test_knowledge_status(client):
    """Test the knowledge base status endpoint."""
    response = client.get("/api/knowledge/status")

    assert response.status_code == 200
    assert response.json()["document_count"] == 12


def test_refresh(client, coordinator):
    """Test a successful refresh."""
    response = client.post("/api/knowledge/refresh")

    assert response.status_code == 200
    assert response.json()["message"] == "Knowledge base initialized successfully"
    coordinator.refresh.assert_awaited_once()


def test_refresh_failure(client, coordinator):
    """Test that a failed refresh reports the error."""
    coordinator.refresh.side_effect = IngestionAbortError("No content was retrieved.")

    response = client.post("/api/knowledge/refresh")

    assert response.status_code == 500
    assert response.json() == {"error": "Refresh failed", "message": "No content was retrieved."}


def test_chat(client, response_router):
    """Test a successful chat request."""
    response = client.post("/api/chat", json={
        "message": "  What does EVA do?  ",
        "conversation_history": [{"role": "user", "content": "Hi"}],
    })

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["data"]["source"] == "predefined"
    assert data["data"]["confidence"] == 1.0

    query, history = response_router.resolve.await_args.args
    assert query == "What does EVA do?"
    assert history[0].content == "Hi"


def test_chat_not_ready(client, coordinator, response_router):
    """Test that chat is unavailable before the first successful ingestion."""
    coordinator.is_ready.return_value = False
    coordinator.status.return_value = make_status(initialized=False, is_initializing=True)

    response = client.post("/api/chat", json={"message": "What does EVA do?"})

    assert response.status_code == 503
    data = response.json()
    assert data["message"].startswith("Knowledge base is still initializing")
    assert data["details"]["status"]["is_initializing"] is True
    response_router.resolve.assert_not_called()


@pytest.mark.parametrize("body", [{}, {"message": ""}, {"message": "   "}, {"message": 42}, {"message": None}])
def test_chat_invalid_message(client, response_router, body):
    """Test that malformed messages are rejected."""
    response = client.post("/api/chat", json=body)

    assert response.status_code == 400
    assert response.json()["message"] == "Please provide a valid message"
    response_router.resolve.assert_not_called()


def test_chat_failure(client, response_router):
    """Test that resolution failures return a generic error."""
    response_router.resolve.side_effect = RuntimeError("completion service unreachable")

    response = client.post("/api/chat", json={"message": "What does EVA do?"})

    assert response.status_code == 500
    assert response.json()["message"] == "Failed to process your request. Please try again."


def test_unknown_route(client):
    """Test the JSON 404 for unknown routes."""
    response = client.get("/api/unknown")

    assert response.status_code == 404
    assert response.json()["error"] == "Not found"


@pytest.mark.asyncio
async def test_lifespan_stops_initialization_on_shutdown(coordinator, response_router):
    """Test that leaving the lifespan shuts the coordinator down."""
    coordinator.initialize = AsyncMock(return_value=InitializationResult(
        message="Knowledge base initialized successfully"
    ))
    coordinator.shutdown = AsyncMock()
    app = create_app(use_lifespan=False)

    with patch("support_agent.main.build_components", return_value=(coordinator, response_router)):
        async with lifespan(app):
            assert app.state.coordinator is coordinator
            assert app.state.server_ready is False

    coordinator.shutdown.assert_awaited_once()
