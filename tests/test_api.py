"""API endpoint tests using FastAPI TestClient."""

import httpx
import pytest
from unittest.mock import AsyncMock
from fastapi.testclient import TestClient

from api.server import create_app
from atelier.exceptions import GenerationError
from atelier.models import GeneratedMedia, GenerationResult, MediaExtraction, OutputKind
from atelier.pipeline import Atelier
from atelier.services import GeminiClient
from conftest import make_oversized_png, make_png


@pytest.fixture
def app(offline_config):
    return create_app(offline_config)


@pytest.fixture
def client(app):
    return TestClient(app)


def png_upload(name, width=40, height=60, color=(200, 30, 30, 255)):
    return ("files", (name, make_png(width, height, color), "image/png"))


def upload_pair(client, muses=1, garments=1):
    client.post("/api/uploads/muse", files=[png_upload(f"m{i}.png") for i in range(muses)])
    client.post("/api/uploads/garment", files=[png_upload(f"g{i}.png") for i in range(garments)])


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    def test_root_endpoint(self, client):
        """Root endpoint returns OK status."""
        response = client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert "service" in data
        assert "version" in data

    def test_health_reports_simulation(self, client):
        data = client.get("/health").json()

        assert data["gemini"] == "simulation"

    def test_health_reports_configured(self, online_config):
        data = TestClient(create_app(online_config)).get("/health").json()

        assert data["gemini"] == "configured"


class TestUploadEndpoints:

    def test_upload_images(self, client):
        response = client.post("/api/uploads/muse", files=[png_upload("a.png"), png_upload("b.png")])

        assert response.status_code == 200
        data = response.json()
        assert data["added"] == 2
        assert data["skipped"] == []
        assert data["counts"] == {"muse": 2, "garment": 0}

    def test_non_image_rejected_upstream(self, client):
        response = client.post("/api/uploads/garment", files=[
            png_upload("a.png"),
            ("files", ("notes.txt", b"hello", "text/plain")),
        ])

        data = response.json()
        assert data["added"] == 1
        assert data["skipped"][0]["filename"] == "notes.txt"

    def test_undecodable_image_skipped(self, client):
        response = client.post("/api/uploads/muse", files=[
            ("files", ("fake.png", b"definitely not a png", "image/png")),
            png_upload("real.png"),
        ])

        data = response.json()
        assert data["added"] == 1
        assert [s["filename"] for s in data["skipped"]] == ["fake.png"]

    def test_oversized_image_skipped(self, client):
        response = client.post("/api/uploads/garment", files=[
            ("files", ("huge.png", make_oversized_png(), "image/png")),
            png_upload("real.png"),
        ])

        assert response.status_code == 200
        data = response.json()
        assert data["added"] == 1
        assert [s["filename"] for s in data["skipped"]] == ["huge.png"]

    def test_unknown_bucket(self, client):
        response = client.post("/api/uploads/shoes", files=[png_upload("a.png")])

        assert response.status_code == 422

    def test_remove(self, client):
        upload_pair(client, muses=2)

        response = client.delete("/api/uploads/muse/0")

        assert response.json() == {"removed": True, "counts": {"muse": 1, "garment": 1}}

    def test_remove_out_of_range(self, client):
        upload_pair(client)

        response = client.delete("/api/uploads/garment/7")

        assert response.status_code == 200
        assert response.json() == {"removed": False, "counts": {"muse": 1, "garment": 1}}

    def test_remove_while_generating_conflicts(self, client, app):
        upload_pair(client)
        app.state.studio._busy = True

        response = client.delete("/api/uploads/muse/0")

        assert response.status_code == 409
        assert app.state.studio.counts == {"muse": 1, "garment": 1}


class TestStateAndPreview:

    def test_state(self, client):
        upload_pair(client, muses=2, garments=1)

        data = client.get("/api/state").json()

        assert data["counts"] == {"muse": 2, "garment": 1}
        assert data["pair_count"] == 1
        assert len(data["muse_thumbnails"]) == 2
        assert data["muse_thumbnails"][0].startswith("data:image/png;base64,")
        assert data["generate_label"] == "GENERATE PHOTOS"
        assert data["busy"] is False

    def test_preview_png(self, client):
        upload_pair(client)

        response = client.get("/api/preview")

        assert response.status_code == 200
        assert response.headers["content-type"] == "image/png"
        assert response.content.startswith(b"\x89PNG")

    def test_resize_canvas(self, client, app):
        response = client.put("/api/canvas", json={"width": 320, "height": 240})

        assert response.status_code == 200
        assert app.state.studio.canvas.image.size == (320, 240)

    def test_output_kind(self, client):
        data = client.put("/api/output-kind", json={"kind": "video"}).json()

        assert data["output_kind"] == "video"
        assert data["generate_label"] == "GENERATE VIDEOS"


class TestGenerateEndpoint:

    def test_zero_pairs_is_bad_request(self, client):
        client.post("/api/uploads/muse", files=[png_upload("a.png")])

        response = client.post("/api/generate", json={})

        assert response.status_code == 400
        assert "at least one muse and one garment" in response.json()["detail"]

    def test_simulated_generation(self, client):
        upload_pair(client, muses=2, garments=3)

        response = client.post("/api/generate", json={"custom_instruction": "Runway lights"})

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "no_media"
        assert data["simulated"] is True
        assert data["pair_count"] == 2
        assert data["excluded_garments"] == 1
        assert data["card"]["label"] == "Group Photo - No Media"
        assert "media" not in data["card"]

    def test_photo_failure_reported_in_body(self, client, app):
        upload_pair(client)
        app.state.studio.client.invoke_generation = AsyncMock(side_effect=GenerationError("API Error: 500"))

        response = client.post("/api/generate", json={"kind": "photo"})

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "error"
        assert "500" in data["error"]
        assert client.get("/api/state").json()["notice"]

    def test_download_media(self, client, app):
        upload_pair(client)
        png = make_png(20, 20)
        app.state.studio.client.invoke_generation = AsyncMock(return_value=GenerationResult(
            kind=OutputKind.PHOTO,
            extraction=MediaExtraction.found(GeneratedMedia(data=png, mime_type="image/png")),
        ))
        client.post("/api/generate", json={})

        response = client.get("/api/results/0/download")

        assert response.status_code == 200
        assert response.content == png
        assert 'filename="group_photo.png"' in response.headers["content-disposition"]

    def test_download_missing(self, client):
        upload_pair(client)
        client.post("/api/generate", json={})

        assert client.get("/api/results/0/download").status_code == 404
        assert client.get("/api/results/5/download").status_code == 404


class TestModelsEndpoint:

    def test_models_without_key(self, client):
        response = client.get("/api/models")

        assert response.status_code == 200
        assert response.json() == []

    def test_models_listing_failure_returns_empty(self, online_config):
        transport = httpx.MockTransport(
            lambda request: httpx.Response(403, json={"error": {"message": "API key not valid"}})
        )
        gemini = GeminiClient(
            config=online_config.gemini,
            api_key=online_config.gemini_api_key,
            simulation=online_config.simulation,
            transport=transport,
        )
        app = create_app(online_config, studio=Atelier(online_config, client=gemini))

        response = TestClient(app).get("/api/models")

        assert response.status_code == 200
        assert response.json() == []


class TestLifespan:

    def test_shutdown_closes_http_client(self, app):
        gemini = app.state.studio.client

        with TestClient(app) as client:
            client.get("/health")
            http_client = gemini.client

        assert http_client.is_closed
        assert gemini._client is None
