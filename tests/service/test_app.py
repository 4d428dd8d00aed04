"""Tests for the FastAPI service mode."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from cemview.manifest import Package
from cemview.service import create_app


@pytest.fixture
def client(package: Package) -> TestClient:
    return TestClient(create_app(lambda: package))


def test_health_endpoint(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_list_tags(client: TestClient) -> None:
    response = client.get("/tags")

    assert response.status_code == 200
    tags = response.json()["tags"]
    assert [tag["tag"] for tag in tags] == ["my-button", "old-card"]
    assert tags[0]["class_name"] == "MyButton"
    assert tags[0]["module"] == "elements/my-button/my-button.js"
    assert tags[0]["deprecated"] is False
    assert tags[1]["deprecated"] is True


def test_describe_tag_returns_plain_tables(client: TestClient) -> None:
    response = client.get("/tags/my-button")

    assert response.status_code == 200
    data = response.json()
    assert data["description"] == "Renders a native button in its shadow root."
    attributes = data["sections"]["Attributes"]
    assert attributes["headings"][:3] == ["Name", "DOM Property", "Reflects"]
    assert [row[0] for row in attributes["rows"]] == [
        "variant",
        "disabled (DEPRECATED: use inert)",
        "size",
    ]
    assert "Slots" in data["sections"]


def test_describe_unknown_tag_is_404(client: TestClient) -> None:
    response = client.get("/tags/nope")

    assert response.status_code == 404
    assert response.json() == {"detail": "Tag not found: nope"}


def test_query_endpoint(client: TestClient) -> None:
    response = client.post(
        "/query",
        json={"path": "modules.#(path==$.file).declarations.#", "args": {"file": "lib/utils.js"}},
    )

    assert response.status_code == 200
    assert response.json() == {
        "source": "manifest",
        "path": "modules.#(path==$.file).declarations.#",
        "result": 4,
    }


def test_query_exists_filter_on_missing_path(client: TestClient) -> None:
    response = client.post("/query", json={"path": "nothing", "filter": "exists"})

    assert response.json()["result"] is False


def test_query_missing_path_is_404(client: TestClient) -> None:
    response = client.post("/query", json={"path": "nothing"})

    assert response.status_code == 404
    assert "not found in source 'manifest'" in response.json()["detail"]


def test_manifest_endpoint(client: TestClient, manifest_dict) -> None:
    response = client.get("/manifest")

    assert response.status_code == 200
    assert response.json() == manifest_dict
