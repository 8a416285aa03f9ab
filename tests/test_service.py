"""Tests for the FastAPI service mode."""

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from tests._fixtures.project_builder import ProjectBuilder
from uicontext.service import create_app


@pytest.fixture
def client() -> TestClient:
    return TestClient(create_app())


def test_health_endpoint(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_index_then_search(client: TestClient, sample_project: ProjectBuilder) -> None:
    path = str(sample_project.path())

    indexed = client.post("/index", json={"path": path})
    assert indexed.status_code == 200
    assert indexed.json()["componentsCount"] == 5
    assert indexed.json()["framework"] == "react"

    response = client.post("/search", json={"path": path, "text": "button", "tags": ["interactive"]})
    assert response.status_code == 200
    results = response.json()["results"]
    assert results[0]["component"]["name"] == "Button"
    assert results[0]["relevanceScore"] == 21


def test_search_accepts_camel_case_filters(client: TestClient, sample_project: ProjectBuilder) -> None:
    sample_project.index()

    response = client.post(
        "/search",
        json={"path": str(sample_project.path()), "hasSideEffects": True, "componentType": "functional"},
    )

    assert response.status_code == 200
    assert response.json()["results"][0]["component"]["name"] == "UserList"


def test_search_without_index_returns_404(client: TestClient, tmp_path: Path) -> None:
    response = client.post("/search", json={"path": str(tmp_path), "text": "x"})

    assert response.status_code == 404
    assert "uicontext index" in response.json()["detail"]


def test_similar_endpoint(client: TestClient, sample_project: ProjectBuilder) -> None:
    sample_project.index()
    path = str(sample_project.path())

    response = client.post("/similar", json={"path": path, "component": "Button", "mode": "usage"})
    assert response.status_code == 200
    assert [r["component"]["name"] for r in response.json()["results"]] == ["Card"]

    missing = client.post("/similar", json={"path": path, "component": "Modal"})
    assert missing.status_code == 404
    assert "Button" in missing.json()["available"]


def test_stats_endpoint(client: TestClient, sample_project: ProjectBuilder) -> None:
    sample_project.index()

    response = client.post("/stats", json={"path": str(sample_project.path())})

    assert response.status_code == 200
    assert response.json()["health"]["total"] == 5


def test_correlate_endpoint_without_index(client: TestClient) -> None:
    response = client.post(
        "/correlate",
        json={"elements": [{"selector": "a", "tagName": "a", "text": "Home"}], "focus": "all"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["correlations"][0]["matchReason"] == "No project index available"
    assert body["summary"]["unmatchedElements"] == 1


def test_index_missing_directory_returns_404(client: TestClient, tmp_path: Path) -> None:
    response = client.post("/index", json={"path": str(tmp_path / "missing")})

    assert response.status_code == 404
