"""
Protocol definitions for the texture pipeline.

The pipeline depends only on this interface, so tests and alternative
backends can stand in for the Gemini client.

Component Flow:
    Prompt -> ImageGenerator.generate_base -> albedo
                       |
                       v  (normal, height, metallic, ao - one at a time)
    albedo -> ImageGenerator.generate_derived -> derived map
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from app.models.texture import MapKind


@runtime_checkable
class ImageGenerator(Protocol):
    """Protocol for the remote image generation service.

    Example implementations:
        - TextureImageClient: Google Gemini image model
        - MockGenerationClient: Deterministic test double
    """

    async def generate_base(self, prompt: str) -> str:
        """Generate the base texture for a prompt.

        Returns:
            Data URI of the generated image
        """
        ...

    async def generate_derived(self, base_image: str, kind: "MapKind") -> str:
        """Derive a map of the given kind from the base texture.

        Returns:
            Data URI of the generated map
        """
        ...
