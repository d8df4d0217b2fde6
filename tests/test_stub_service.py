"""Tests for the local stub service."""

from fastapi.testclient import TestClient

from conftest import valid_params
from kolam_client.dev.stub_service import PLACEHOLDER_IMAGE, create_stub_app


client = TestClient(create_stub_app())


def test_health_check():
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_generate_success():
    response = client.post("/api/generate", json=valid_params(ND=9))
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["image"] == PLACEHOLDER_IMAGE
    assert data["path_count"] == 3
    assert data["is_one_stroke"] is False
    assert data["generation_time"] >= 0


def test_generate_one_stroke_has_single_path():
    response = client.post("/api/generate", json=valid_params(one_stroke=True))
    data = response.json()
    assert data["path_count"] == 1
    assert data["is_one_stroke"] is True


def test_unknown_boundary_is_rejected_in_body():
    response = client.post(
        "/api/generate", json=valid_params(boundary_type="hexagon")
    )
    assert response.status_code == 200
    assert response.json() == {
        "success": False,
        "error": "Unsupported boundary type: hexagon",
    }


def test_density_out_of_range_is_rejected_in_body():
    response = client.post("/api/generate", json=valid_params(ND=51))
    assert response.json()["success"] is False


def test_malformed_body_is_unprocessable():
    response = client.post("/api/generate", json=valid_params(kolam_color="pink"))
    assert response.status_code == 422
