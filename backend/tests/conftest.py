"""
Shared pytest fixtures for TextureGen backend tests.

This module provides:
- mock_generator / pipeline: Pipeline wired to a deterministic mock client
- png_bytes / png_data_uri: A small real PNG for image handling tests
- api_client: FastAPI TestClient with the pipeline dependency overridden
- Custom markers for test categorization
"""

from __future__ import annotations

import sys
from io import BytesIO
from pathlib import Path
from typing import TYPE_CHECKING, Iterator

import pytest

# Add backend to path for imports
backend_path = Path(__file__).parent.parent
if str(backend_path) not in sys.path:
    sys.path.insert(0, str(backend_path))

from app.engine.images import encode_data_uri  # noqa: E402
from app.engine.pipeline import TexturePipeline  # noqa: E402

if TYPE_CHECKING:
    from fastapi.testclient import TestClient
    from tests.mocks.generation import MockGenerationClient


# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
    config.addinivalue_line(
        "markers", "e2e: marks tests as end-to-end tests requiring the real image API"
    )


# =============================================================================
# Image Fixtures
# =============================================================================


@pytest.fixture
def png_bytes() -> bytes:
    """A 4x2 RGB PNG with a distinct left and right half."""
    from PIL import Image

    image = Image.new("RGB", (4, 2), (255, 0, 0))
    for y in range(2):
        for x in range(2, 4):
            image.putpixel((x, y), (0, 0, 255))
    buffer = BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def png_data_uri(png_bytes: bytes) -> str:
    return encode_data_uri(png_bytes, "image/png")


# =============================================================================
# Pipeline Fixtures
# =============================================================================


@pytest.fixture
def mock_generator() -> "MockGenerationClient":
    """Mock generation client where every call succeeds."""
    from tests.mocks.generation import MockGenerationClient

    return MockGenerationClient()


@pytest.fixture
def pipeline(mock_generator: "MockGenerationClient") -> TexturePipeline:
    return TexturePipeline(mock_generator)


@pytest.fixture
def api_client(pipeline: TexturePipeline) -> Iterator["TestClient"]:
    """TestClient whose routes use the mock-backed pipeline and a fresh view."""
    from fastapi.testclient import TestClient

    from app.api.textures import get_pipeline, get_view
    from app.main import app
    from app.models.texture import ViewState

    view = ViewState()
    app.dependency_overrides[get_pipeline] = lambda: pipeline
    app.dependency_overrides[get_view] = lambda: view
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
