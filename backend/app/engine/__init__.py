"""Texture pipeline components.

- `pipeline.py`: TexturePipeline run state machine
- `protocols.py`: ImageGenerator interface the pipeline depends on
- `images.py`: Data URI and tiled preview helpers

Import directly from submodules:
    from app.engine.pipeline import TexturePipeline
"""
