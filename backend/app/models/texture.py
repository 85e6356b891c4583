"""
Texture models - Map kinds, run status and the snapshots served to the frontend
"""

from enum import Enum

from pydantic import BaseModel, Field


class MapKind(str, Enum):
    """The five outputs of a texture run.

    Attributes:
        ALBEDO: Base color texture generated from the prompt
        NORMAL: Derived tangent-space normal map
        HEIGHT: Derived grayscale displacement map
        METALLIC: Derived grayscale metalness mask
        AO: Derived ambient occlusion map
    """

    ALBEDO = "albedo"
    NORMAL = "normal"
    HEIGHT = "height"
    METALLIC = "metallic"
    AO = "ao"


BASE_MAP = MapKind.ALBEDO

# Order in which derived maps are requested from the image model
DERIVED_MAPS: tuple[MapKind, ...] = (
    MapKind.NORMAL,
    MapKind.HEIGHT,
    MapKind.METALLIC,
    MapKind.AO,
)

# Map metadata for the /maps endpoint, in display order
MAP_INFO = [
    {"id": MapKind.ALBEDO.value, "label": "Albedo / Base Color"},
    {"id": MapKind.NORMAL.value, "label": "Normal Map"},
    {"id": MapKind.HEIGHT.value, "label": "Height / Displacement"},
    {"id": MapKind.METALLIC.value, "label": "Metallic Map"},
    {"id": MapKind.AO.value, "label": "Ambient Occlusion"},
]

MAP_LABELS: dict[MapKind, str] = {MapKind(info["id"]): info["label"] for info in MAP_INFO}


class RunStatus(str, Enum):
    """Pipeline state machine: idle -> base_in_flight -> derived_in_flight -> done"""

    IDLE = "idle"
    BASE_IN_FLIGHT = "base_in_flight"
    DERIVED_IN_FLIGHT = "derived_in_flight"
    DONE = "done"


class MapStatus(str, Enum):
    """Per-output status shown next to each map"""

    EMPTY = "empty"
    PENDING = "pending"
    READY = "ready"
    FAILED = "failed"


class MapState(BaseModel):
    """Status of a single output within the current run"""
    id: MapKind
    label: str
    status: MapStatus = MapStatus.EMPTY
    error: str | None = None  # Diagnostic for a failed derived map


class PipelineSnapshot(BaseModel):
    """Point-in-time view of the pipeline for polling clients"""
    run_id: int = 0
    prompt: str | None = None
    status: RunStatus = RunStatus.IDLE
    is_running: bool = False
    error: str | None = None  # Run-level error (base image failed)
    maps: list[MapState] = Field(default_factory=list)


class GenerateRequest(BaseModel):
    """Request to start a texture run"""
    prompt: str


class ViewState(BaseModel):
    """Which map is displayed and whether it is previewed tiled.

    Display-only: changing it never touches the pipeline.
    """
    selected: MapKind = MapKind.ALBEDO
    tiling: bool = False
