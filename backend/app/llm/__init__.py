"""Image model integration.

- `image_client.py`: Gemini client for base and derived texture maps
- `prompt_loader.py`: Prompt template loading utility
- `run_logger.py`: Per-run generation logging
"""

from app.llm.image_client import (
    TextureImageClient,
    TextureGenerationError,
    GenerationFailed,
    NoImageProduced,
)
from app.llm.prompt_loader import get_loader

__all__ = [
    "TextureImageClient",
    "TextureGenerationError",
    "GenerationFailed",
    "NoImageProduced",
    "get_loader",
]
