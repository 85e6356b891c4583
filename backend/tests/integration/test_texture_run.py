"""Integration tests for a full texture run.

The real TextureImageClient and TexturePipeline are driven through the HTTP
API; only the Gemini SDK client is replaced.

Tests cover:
- Complete run with every map downloadable and exportable
- Derived map failure isolated end to end
- Base image failure surfaced as the run error
"""

import io
import zipfile
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from app.api.textures import get_pipeline, get_view
from app.engine.pipeline import TexturePipeline
from app.llm.image_client import TextureImageClient
from app.main import app
from app.models.texture import ViewState

pytestmark = pytest.mark.integration

# Keywords that identify each derived instruction in the request
INSTRUCTION_KEYWORDS = {
    "Normal map": b"normal-png",
    "Height (displacement)": b"height-png",
    "Metallic map": b"metallic-png",
    "Ambient Occlusion": b"ao-png",
}


class FakeGemini:
    """Answers generate_content like the image model would."""

    def __init__(self, fail_on: str | None = None, empty_on: str | None = None):
        self.fail_on = fail_on
        self.empty_on = empty_on
        self.requests: list[list] = []

    def generate_content(self, model, contents, config):
        self.requests.append(contents)
        instruction = contents[-1].text

        if self.fail_on and self.fail_on in instruction:
            raise RuntimeError("429 RESOURCE_EXHAUSTED")
        if self.empty_on and self.empty_on in instruction:
            return self._response(None)

        if len(contents) == 1:
            return self._response(b"albedo-png")
        for keyword, data in INSTRUCTION_KEYWORDS.items():
            if keyword in instruction:
                return self._response(data)
        raise AssertionError(f"Unexpected instruction: {instruction}")

    @staticmethod
    def _response(data: bytes | None):
        part = MagicMock()
        part.inline_data = None
        if data is not None:
            part.inline_data = MagicMock(data=data, mime_type="image/png")
        candidate = MagicMock()
        candidate.content.parts = [part]
        response = MagicMock()
        response.candidates = [candidate]
        return response


def make_client(fake: FakeGemini, tmp_path) -> TestClient:
    sdk = MagicMock()
    sdk.models.generate_content.side_effect = fake.generate_content
    pipeline = TexturePipeline(
        TextureImageClient(api_key="test-key", client=sdk),
        logs_dir=tmp_path,
    )
    view = ViewState()
    app.dependency_overrides[get_pipeline] = lambda: pipeline
    app.dependency_overrides[get_view] = lambda: view
    return TestClient(app)


@pytest.fixture(autouse=True)
def clear_overrides():
    yield
    app.dependency_overrides.clear()


class TestTextureRun:
    """Full runs through the API."""

    def test_complete_run(self, tmp_path) -> None:
        fake = FakeGemini()
        client = make_client(fake, tmp_path)

        response = client.post("/api/textures/generate", json={"prompt": "cracked desert mud"})
        assert response.status_code == 202

        state = client.get("/api/textures/state").json()
        assert state["status"] == "done"
        assert all(m["status"] == "ready" for m in state["maps"])

        # Base request first, then every derived request carries the albedo bytes
        assert "cracked desert mud" in fake.requests[0][0].text
        for request in fake.requests[1:]:
            assert request[0].inline_data.data == b"albedo-png"

        assert client.get("/api/textures/maps/height").content == b"height-png"

        export = client.get("/api/textures/export")
        with zipfile.ZipFile(io.BytesIO(export.content)) as archive:
            assert len(archive.namelist()) == 5
            assert archive.read("texture_metallic.png") == b"metallic-png"

        assert len(list(tmp_path.glob("*_run1.log"))) == 1

    def test_derived_failure_isolated(self, tmp_path) -> None:
        client = make_client(FakeGemini(fail_on="Height (displacement)"), tmp_path)

        client.post("/api/textures/generate", json={"prompt": "weathered basalt rock"})

        state = client.get("/api/textures/state").json()
        statuses = {m["id"]: m for m in state["maps"]}
        assert state["error"] is None
        assert statuses["height"]["status"] == "failed"
        assert "RESOURCE_EXHAUSTED" in statuses["height"]["error"]
        assert statuses["ao"]["status"] == "ready"
        assert client.get("/api/textures/maps/height").status_code == 404

    def test_empty_derived_response(self, tmp_path) -> None:
        client = make_client(FakeGemini(empty_on="Metallic map"), tmp_path)

        client.post("/api/textures/generate", json={"prompt": "brushed steel"})

        maps = {m["id"]: m for m in client.get("/api/textures/state").json()["maps"]}
        assert maps["metallic"]["status"] == "failed"
        assert maps["metallic"]["error"] == "No metallic map generated"

    def test_base_failure(self, tmp_path) -> None:
        fake = FakeGemini(fail_on="seamless tileable texture")
        client = make_client(fake, tmp_path)

        client.post("/api/textures/generate", json={"prompt": "weathered basalt rock"})

        state = client.get("/api/textures/state").json()
        assert state["status"] == "idle"
        assert "RESOURCE_EXHAUSTED" in state["error"]
        assert len(fake.requests) == 1
        assert client.get("/api/textures/export").status_code == 404
