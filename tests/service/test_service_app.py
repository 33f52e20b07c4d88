"""Tests for the FastAPI service mode."""

from __future__ import annotations

import base64
from pathlib import Path
from typing import Optional

import pytest
from fastapi.testclient import TestClient

from codescribe.config import CodescribeConfig, DocumentSettings
from codescribe.orchestrator import Orchestrator
from codescribe.service import create_app
from codescribe.usage import AllowAllUsageGate, QuotaUsageGate, UsageAction
from tests._fixtures.project_builder import ProjectBuilder, REACT_APP

FILES = ProjectBuilder.blobs(REACT_APP)


@pytest.fixture
def gate() -> AllowAllUsageGate:
    return AllowAllUsageGate()


@pytest.fixture
def client(gate: AllowAllUsageGate) -> TestClient:
    return TestClient(create_app(lambda: Orchestrator(usage_gate=gate)))


def test_health_endpoint(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_analyze_endpoint(client: TestClient, gate: AllowAllUsageGate) -> None:
    response = client.post("/analyze", json={"files": FILES})

    assert response.status_code == 200
    data = response.json()
    assert data["content"].startswith("# shop-ui Documentation")
    assert data["ai_optimized"].startswith("# PROJECT CONTEXT: shop-ui")
    assert data["metadata"]["file_count"] == 3
    assert data["analysis"]["type"] == "react"
    assert "components" in data["sections"]
    assert len(gate.events) == 1


def test_analyze_accepts_zip_archives(client: TestClient) -> None:
    encoded = base64.b64encode(ProjectBuilder.archive(REACT_APP)).decode("ascii")

    response = client.post("/analyze", json={"archive_base64": encoded, "archive_name": "shop.zip"})

    assert response.status_code == 200
    assert response.json()["analysis"]["name"] == "shop-ui"


@pytest.mark.parametrize(
    ("payload", "detail"),
    [
        ({}, "Request must include files or archive_base64"),
        ({"archive_base64": "not base64!"}, "archive_base64 is not valid base64"),
    ],
)
def test_bad_payloads_are_rejected(client: TestClient, payload: dict, detail: str) -> None:
    response = client.post("/analyze", json=payload)

    assert response.status_code == 400
    assert response.json() == {"detail": detail}


def test_usage_denial_maps_to_forbidden() -> None:
    client = TestClient(create_app(lambda: Orchestrator(usage_gate=QuotaUsageGate(0))))

    response = client.post("/analyze", json={"files": FILES})

    assert response.status_code == 403
    assert response.json()["action"] == "analysis"


def test_professional_endpoint(client: TestClient) -> None:
    response = client.post(
        "/documents/professional",
        json={"files": FILES, "document_type": "api-documentation", "compliance": ["gdpr"]},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["title"] == "API Documentation"
    assert data["info"]["compliance"] == ["gdpr"]
    assert "api-overview" in data["sections"]


def test_unknown_document_type_is_a_client_error(client: TestClient, gate: AllowAllUsageGate) -> None:
    response = client.post("/documents/professional", json={"files": FILES, "document_type": "novel"})

    assert response.status_code == 400
    assert gate.events == []


def test_offline_workflows_endpoint(client: TestClient) -> None:
    response = client.post("/workflows", json={"files": FILES, "offline": True})

    assert response.status_code == 200
    data = response.json()
    assert data["source"] == "fallback"
    assert data["reason"] == "No model API key configured"
    assert data["result"]["stories"][0]["title"] == "Read products"
    assert data["analysis"]["data_operations"][0]["entity"] == "products"


def test_export_endpoint_sets_attachment_headers(client: TestClient) -> None:
    response = client.post("/export", json={"files": FILES, "format": "html"})

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert response.headers["content-disposition"] == 'attachment; filename="project-documentation.html"'
    assert "<pre class=\"document\">" in response.text


def test_export_workflows_as_csv(client: TestClient, gate: AllowAllUsageGate) -> None:
    response = client.post("/export", json={"files": FILES, "format": "csv", "workflows": True})

    assert response.status_code == 200
    assert response.headers["content-disposition"] == 'attachment; filename="user-stories.csv"'
    assert response.text.startswith('"ID","Title"')
    assert gate.events == [(UsageAction.ANALYSIS, "shop-ui", 3), (UsageAction.EXPORT, "shop-ui", 0)]


def test_export_unknown_format(client: TestClient) -> None:
    response = client.post("/export", json={"files": FILES, "format": "docx"})

    assert response.status_code == 400


def test_chat_endpoint_answers_locally(client: TestClient, gate: AllowAllUsageGate) -> None:
    response = client.post("/chat", json={"files": FILES, "question": "Which dependencies are declared?"})

    assert response.status_code == 200
    body = response.json()
    assert body["source"] == "local"
    assert body["intent"] == "dependencies"
    assert body["content"].startswith("## Dependencies in shop-ui")
    assert gate.events == [(UsageAction.CHAT, "shop-ui", 3)]


def test_chat_endpoint_offline_fallback(client: TestClient) -> None:
    response = client.post("/chat", json={"files": FILES, "question": "Tell me a joke", "offline": True})

    assert response.status_code == 200
    assert response.json()["reason"] == "No model API key configured"


def test_chat_requires_a_question(client: TestClient) -> None:
    assert client.post("/chat", json={"files": FILES, "question": ""}).status_code == 422


class ExportDenyingGate(AllowAllUsageGate):
    def is_allowed(self, action: UsageAction, *, project_name: Optional[str], file_count: int) -> bool:
        return action != UsageAction.EXPORT


def test_workflow_export_is_gated() -> None:
    gate = ExportDenyingGate()
    client = TestClient(create_app(lambda: Orchestrator(usage_gate=gate)))

    response = client.post("/export", json={"files": FILES, "format": "csv", "workflows": True})

    assert response.status_code == 403
    assert response.json()["action"] == "export"
    assert gate.events == [(UsageAction.ANALYSIS, "shop-ui", 3)]


def test_professional_defaults_come_from_config(tmp_path: Path) -> None:
    settings = DocumentSettings(document_type="api-documentation", company_name="Acme")
    client = TestClient(create_app(lambda: Orchestrator(CodescribeConfig(root=tmp_path, document=settings))))

    response = client.post("/documents/professional", json={"files": FILES})

    assert response.status_code == 200
    data = response.json()
    assert data["document_type"] == "api-documentation"
    assert data["content"].startswith("# Acme")
    assert data["info"]["output_format"] == "markdown"
