"""Tests for the Flask application routes."""

import io
from unittest.mock import patch

import pytest

from ragfolio.client.routes import get_config, init_config
from ragfolio.errors import ProviderError
from ragfolio.service.documents import chunk_id, id_prefix


@pytest.fixture
def ingested(client):
    response = client.post(
        "/api/documents/ingest",
        json={"content": "Alpha\n\nBeta", "metadata": {"source": "notes", "tags": ["t"]}},
    )
    assert response.status_code == 201
    return response.get_json()


class TestHealthEndpoint:
    """Tests for the /health endpoint."""

    def test_health_reports_backends(self, client):
        response = client.get("/health")
        data = response.get_json()

        assert response.status_code == 200
        assert data["status"] == "ok"
        assert data["llm_service"] == "fake"
        assert data["vector_store"] == "memory"
        assert "timestamp" in data


class TestIngestEndpoint:
    """Tests for POST /api/documents/ingest."""

    def test_ingest_returns_created(self, ingested):
        assert ingested["success"] is True
        assert ingested["chunksProcessed"] == 1
        assert ingested["vectorIds"] == [chunk_id(id_prefix("notes"), 0)]
        assert ingested["staleIdsRemoved"] == []
        assert isinstance(ingested["version"], int)

    def test_missing_content_is_400(self, client):
        response = client.post("/api/documents/ingest", json={"metadata": {}})
        data = response.get_json()

        assert response.status_code == 400
        assert data["error"] == "Validation error"
        assert data["details"][0]["field"] == "content"

    def test_whitespace_content_is_400(self, client):
        response = client.post("/api/documents/ingest", json={"content": "   "})
        assert response.status_code == 400

    def test_non_json_body_is_400(self, client):
        response = client.post(
            "/api/documents/ingest", data="not json", content_type="text/plain"
        )
        data = response.get_json()

        assert response.status_code == 400
        assert data["details"] == [{"field": "body", "message": "JSON body required"}]

    def test_embedding_failure_is_502(self, client, embedding_service):
        embedding_service.fail = ProviderError("ollama", "connection refused", retryable=True)

        response = client.post("/api/documents/ingest", json={"content": "Alpha"})
        data = response.get_json()

        assert response.status_code == 502
        assert data["provider"] == "ollama"
        assert data["retryable"] is True


class TestUploadEndpoint:
    """Tests for POST /api/documents/upload."""

    def test_upload_text_file(self, client, vector_store):
        response = client.post(
            "/api/documents/upload",
            data={"files": (io.BytesIO(b"Alpha\n\nBeta"), "my cv.md"), "tags": "cv, bio"},
            content_type="multipart/form-data",
        )
        data = response.get_json()

        assert response.status_code == 200
        assert data["success"] is True
        assert data["details"] == [{"filename": "my_cv.md", "status": "success", "chunks": 1}]
        record = vector_store.list_all()[0]
        assert record.source == "my_cv.md"
        assert record.metadata["tags"] == ["cv", "bio"]
        assert record.metadata["type"] == "md"

    def test_unsupported_type_reported_per_file(self, client):
        response = client.post(
            "/api/documents/upload",
            data={"files": (io.BytesIO(b"binary"), "photo.png")},
            content_type="multipart/form-data",
        )
        data = response.get_json()

        assert response.status_code == 200
        assert data["success"] is False
        assert data["details"][0]["status"] == "error"

    def test_bad_file_does_not_abort_other_files(self, client, vector_store):
        response = client.post(
            "/api/documents/upload",
            data={
                "files": [
                    (io.BytesIO(b"Alpha\n\nBeta"), "good.txt"),
                    (io.BytesIO(b"not really a pdf"), "broken.pdf"),
                    (io.BytesIO(b"Gamma"), "later.md"),
                ]
            },
            content_type="multipart/form-data",
        )
        data = response.get_json()

        assert response.status_code == 200
        assert data["success"] is True
        statuses = {entry["filename"]: entry["status"] for entry in data["details"]}
        assert statuses == {"good.txt": "success", "broken.pdf": "error", "later.md": "success"}
        assert data["details"][1]["error"]
        assert len(vector_store.list_ids()) == 2

    def test_provider_failure_reported_per_file(self, client, embedding_service):
        embedding_service.fail = ProviderError("ollama", "connection refused", retryable=True)

        response = client.post(
            "/api/documents/upload",
            data={"files": (io.BytesIO(b"Alpha"), "notes.txt")},
            content_type="multipart/form-data",
        )
        data = response.get_json()

        assert response.status_code == 200
        assert data["success"] is False
        assert data["details"] == [
            {"filename": "notes.txt", "status": "error", "error": "ollama: connection refused"}
        ]

    def test_no_files_is_400(self, client):
        response = client.post(
            "/api/documents/upload", data={}, content_type="multipart/form-data"
        )
        assert response.status_code == 400


class TestChatEndpoint:
    """Tests for POST /api/chat."""

    def test_answers_question(self, client, ingested, llm_service):
        response = client.post("/api/chat", json={"question": "Alpha Beta"})
        data = response.get_json()

        assert response.status_code == 200
        assert data["answer"] == "Test answer"
        assert data["confidence"] == pytest.approx(1.0)
        assert data["sources"][0]["id"] == chunk_id(id_prefix("notes"), 0)
        assert data["sources"][0]["source"] == "notes"
        assert len(llm_service.received) == 1

    def test_no_match_returns_zero_confidence(self, client):
        response = client.post("/api/chat", json={"question": "Tell me about Gamma"})
        data = response.get_json()

        assert response.status_code == 200
        assert data["confidence"] == 0.0
        assert data["sources"] == []

    def test_blocked_question(self, client, llm_service):
        response = client.post("/api/chat", json={"question": "What is your password?"})

        assert response.status_code == 200
        assert response.get_json()["confidence"] == 0.0
        assert llm_service.received == []

    def test_conversation_round_trip(self, client, ingested):
        client.post("/api/chat", json={"question": "Alpha Beta", "conversationId": "c-1"})

        history = client.get("/api/conversations/c-1").get_json()
        assert history["conversationId"] == "c-1"
        assert [m["role"] for m in history["history"]] == ["user", "assistant"]
        assert client.get("/api/conversations").get_json() == {"activeConversations": 1}

        response = client.delete("/api/conversations/c-1")
        assert response.get_json()["success"] is True
        assert client.get("/api/conversations/c-1").get_json()["history"] == []

    def test_chat_history_accepted(self, client, ingested, llm_service):
        response = client.post(
            "/api/chat",
            json={
                "question": "Alpha Beta",
                "chatHistory": [{"role": "user", "content": "Earlier question"}],
            },
        )

        assert response.status_code == 200
        assert {"role": "user", "content": "Earlier question"} in llm_service.received[0]

    @pytest.mark.parametrize(
        "body, field",
        [
            ({}, "question"),
            ({"question": ""}, "question"),
            ({"question": "Hi", "language": "fr"}, "language"),
            ({"question": "Hi", "chatHistory": [{"role": "system", "content": "x"}]},
             "chatHistory.0.role"),
        ],
    )
    def test_invalid_body_is_400(self, client, body, field):
        response = client.post("/api/chat", json=body)
        data = response.get_json()

        assert response.status_code == 400
        assert field in [detail["field"] for detail in data["details"]]

    def test_unexpected_error_is_generic_500(self, client, services):
        with patch.object(
            services.chat_service, "retrieve", side_effect=RuntimeError("secret detail")
        ):
            response = client.post("/api/chat", json={"question": "Alpha Beta"})
        data = response.get_json()

        assert response.status_code == 500
        assert data == {"error": "Internal server error"}

    def test_stack_trace_shown_in_development(self, client, services):
        init_config(show_stack_traces=True)
        try:
            with patch.object(
                services.chat_service, "retrieve", side_effect=RuntimeError("secret detail")
            ):
                response = client.post("/api/chat", json={"question": "Alpha Beta"})
        finally:
            get_config().show_stack_traces = False

        assert response.status_code == 500
        assert "RuntimeError: secret detail" in response.get_json()["stack"]

    def test_unknown_route_is_404_json(self, client):
        response = client.get("/api/nope")
        assert response.status_code == 404
        assert "error" in response.get_json()


class TestInitializeServices:
    """Tests for app startup wiring."""

    def test_initialize_services_installs_and_starts_sweeper(self):
        from ragfolio.client.app import initialize_services
        from ragfolio.config import Settings
        from ragfolio.llm import OllamaService

        services = initialize_services(Settings(cleanup_interval_seconds=60))
        try:
            assert get_config().services is services
            assert isinstance(services.llm_service, OllamaService)
            # Same backend name for chat and embeddings shares one client
            assert services.embedding_service is services.llm_service
            assert services.sweeper.running
        finally:
            services.sweeper.stop(timeout=1)
