"""
Texture API endpoints - Start runs, poll progress and download generated maps
"""

import io
import logging
import zipfile
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Response

from app.config import get_settings
from app.engine.images import decode_data_uri, render_tiled_preview
from app.engine.pipeline import TexturePipeline, is_blank_prompt
from app.llm.image_client import TextureImageClient
from app.models.texture import (
    MAP_INFO,
    GenerateRequest,
    MapKind,
    PipelineSnapshot,
    ViewState,
)

logger = logging.getLogger(__name__)

router = APIRouter()

EXPORT_FILENAME = "texture_maps.zip"

# Single-user prototype: one pipeline and one view per process
_pipeline: Optional[TexturePipeline] = None
_view = ViewState()


def get_pipeline() -> TexturePipeline:
    """Get the process-wide texture pipeline, built from settings on first use."""
    global _pipeline
    if _pipeline is None:
        settings = get_settings()
        _pipeline = TexturePipeline(
            TextureImageClient.from_settings(settings),
            logs_dir=settings.log_dir,
        )
    return _pipeline


def get_view() -> ViewState:
    return _view


def map_filename(kind: MapKind) -> str:
    return f"texture_{kind.value}.png"


def _require_image(pipeline: TexturePipeline, kind: MapKind) -> tuple[str, bytes]:
    image = pipeline.get_image(kind)
    if image is None:
        raise HTTPException(status_code=404, detail=f"No {kind.value} map generated yet")
    try:
        return decode_data_uri(image)
    except ValueError as e:
        raise HTTPException(status_code=500, detail=f"Stored {kind.value} map is unreadable: {e}")


@router.post("/generate", response_model=PipelineSnapshot, status_code=202)
async def generate_texture(
    request: GenerateRequest,
    background_tasks: BackgroundTasks,
    pipeline: TexturePipeline = Depends(get_pipeline),
):
    """Start a texture run for a prompt.

    The run proceeds in the background; poll /state for progress.
    """
    # Past this check, start() returning False means a run is active
    if is_blank_prompt(request.prompt):
        raise HTTPException(status_code=400, detail="Prompt cannot be empty")
    if not pipeline.start(request.prompt):
        raise HTTPException(status_code=409, detail="A texture is already being generated")

    background_tasks.add_task(pipeline.process)
    return pipeline.snapshot()


@router.get("/state", response_model=PipelineSnapshot)
async def get_state(pipeline: TexturePipeline = Depends(get_pipeline)):
    """Current run status and per-map progress"""
    return pipeline.snapshot()


@router.get("/maps")
async def list_maps() -> dict:
    """List the map kinds a run produces"""
    return {"maps": MAP_INFO}


@router.get("/maps/{kind}")
async def download_map(kind: MapKind, pipeline: TexturePipeline = Depends(get_pipeline)):
    """Download a generated map as a file named after its kind"""
    mime_type, data = _require_image(pipeline, kind)
    return Response(
        content=data,
        media_type=mime_type,
        headers={"Content-Disposition": f'attachment; filename="{map_filename(kind)}"'},
    )


@router.get("/maps/{kind}/preview")
async def preview_map(
    kind: MapKind,
    tiled: Optional[bool] = None,
    pipeline: TexturePipeline = Depends(get_pipeline),
    view: ViewState = Depends(get_view),
):
    """Render a map inline, repeated 3x3 when tiling is on.

    When ``tiled`` is not given, the tiling toggle of the current view applies.
    """
    mime_type, data = _require_image(pipeline, kind)
    if tiled is None:
        tiled = view.tiling
    if not tiled:
        return Response(content=data, media_type=mime_type)

    try:
        preview = render_tiled_preview(data)
    except (OSError, ValueError) as e:
        logger.error(f"Could not render tiled preview for {kind.value}: {e}")
        raise HTTPException(status_code=500, detail=f"Could not render preview: {e}")
    return Response(content=preview, media_type="image/png")


@router.get("/export")
async def export_all(pipeline: TexturePipeline = Depends(get_pipeline)):
    """Download every generated map in a single zip archive"""
    kinds = pipeline.available_maps()
    if not kinds:
        raise HTTPException(status_code=404, detail="No maps generated yet")

    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        for kind in kinds:
            _, data = _require_image(pipeline, kind)
            archive.writestr(map_filename(kind), data)

    logger.info(f"Exported {len(kinds)} map(s)")
    return Response(
        content=buffer.getvalue(),
        media_type="application/zip",
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
    )


@router.get("/view", response_model=ViewState)
async def get_view_state(view: ViewState = Depends(get_view)):
    """Selected map and tiling toggle"""
    return view


@router.put("/view", response_model=ViewState)
async def update_view_state(update: ViewState, view: ViewState = Depends(get_view)):
    """Change the selected map or tiling toggle. Never affects the pipeline."""
    view.selected = update.selected
    view.tiling = update.tiling
    return view
