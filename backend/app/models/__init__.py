"""Pydantic models for TextureGen"""

from app.models.texture import (
    MapKind,
    BASE_MAP,
    DERIVED_MAPS,
    MAP_INFO,
    MAP_LABELS,
    RunStatus,
    MapStatus,
    MapState,
    PipelineSnapshot,
    GenerateRequest,
    ViewState,
)

__all__ = [
    # Map kinds
    "MapKind",
    "BASE_MAP",
    "DERIVED_MAPS",
    "MAP_INFO",
    "MAP_LABELS",
    # Pipeline state
    "RunStatus",
    "MapStatus",
    "MapState",
    "PipelineSnapshot",
    # API models
    "GenerateRequest",
    "ViewState",
]
