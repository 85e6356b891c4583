"""
Texture image client - Google Gemini image generation for PBR texture maps.

Two calls are exposed:
- generate_base(): text prompt -> seamless albedo texture
- generate_derived(): albedo texture + fixed instruction -> normal/height/metallic/ao map

Both return the produced image as a data URI. No retries and no timeouts:
a failed call is final for that map.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, Optional

from app.config import DEFAULT_ASPECT_RATIO, DEFAULT_IMAGE_MODEL, Settings
from app.engine.images import decode_data_uri, encode_data_uri
from app.llm.prompt_loader import PromptLoader, get_loader
from app.models.texture import BASE_MAP, DERIVED_MAPS, MapKind

if TYPE_CHECKING:
    from google import genai

logger = logging.getLogger(__name__)

PROMPT_CATEGORY = "texture"
BASE_PROMPT_FILE = "base_texture.txt"


class TextureGenerationError(Exception):
    """Base class for texture generation failures."""

    def __init__(self, message: str, kind: MapKind):
        super().__init__(message)
        self.message = message
        self.kind = kind


class GenerationFailed(TextureGenerationError):
    """The remote call itself errored (network or service fault)."""


class NoImageProduced(TextureGenerationError):
    """The call succeeded but the response carried no image data."""

    def __init__(self, kind: MapKind):
        if kind == BASE_MAP:
            message = "No image generated"
        else:
            message = f"No {kind.value} map generated"
        super().__init__(message, kind)


def map_prompt_file(kind: MapKind) -> str:
    """Prompt filename holding the instruction for a derived map."""
    return f"map_{kind.value}.txt"


def extract_image(response: Any) -> Optional[tuple[bytes | str, str | None]]:
    """Find the first inline image in the first candidate of a response.

    Returns:
        Tuple of (data, mime_type), or None if no part carries inline data
    """
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return None

    content = getattr(candidates[0], "content", None)
    parts = getattr(content, "parts", None) or []
    for part in parts:
        inline_data = getattr(part, "inline_data", None)
        if inline_data is not None and inline_data.data:
            return inline_data.data, getattr(inline_data, "mime_type", None)
    return None


class TextureImageClient:
    """Generate texture images with a Gemini image model.

    Configuration is passed in explicitly; nothing is read from the
    environment here. ``client`` lets tests inject a stand-in for
    ``genai.Client``.
    """

    def __init__(
        self,
        api_key: str = "",
        model: str = DEFAULT_IMAGE_MODEL,
        aspect_ratio: str = DEFAULT_ASPECT_RATIO,
        client: Optional["genai.Client"] = None,
        prompt_loader: Optional[PromptLoader] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.aspect_ratio = aspect_ratio
        self._client = client
        self.prompts = prompt_loader or get_loader()

    @classmethod
    def from_settings(cls, settings: Settings) -> "TextureImageClient":
        return cls(
            api_key=settings.gemini_api_key,
            model=settings.image_model,
            aspect_ratio=settings.aspect_ratio,
        )

    def _get_client(self) -> "genai.Client":
        # Created lazily so a missing key fails the call, not the app startup
        if self._client is None:
            from google import genai

            self._client = genai.Client(api_key=self.api_key)
        return self._client

    def build_base_prompt(self, prompt: str) -> str:
        return self.prompts.render(PROMPT_CATEGORY, BASE_PROMPT_FILE, prompt=prompt)

    def build_map_instruction(self, kind: MapKind) -> str:
        return self.prompts.get_prompt(PROMPT_CATEGORY, map_prompt_file(kind))

    async def generate_base(self, prompt: str) -> str:
        """Generate the seamless albedo texture for a prompt.

        Raises:
            GenerationFailed: The request to the image model failed
            NoImageProduced: The response contained no image
        """
        from google.genai import types

        contents = [types.Part.from_text(text=self.build_base_prompt(prompt))]
        return await self._generate(BASE_MAP, contents)

    async def generate_derived(self, base_image: str, kind: MapKind) -> str:
        """Derive one PBR map from the base texture.

        Args:
            base_image: Data URI of the albedo texture
            kind: One of the derived map kinds

        Raises:
            ValueError: If kind is not a derived map or base_image is not a data URI
            GenerationFailed: The request to the image model failed
            NoImageProduced: The response contained no image
        """
        from google.genai import types

        if kind not in DERIVED_MAPS:
            raise ValueError(f"'{kind}' is not a derived map kind")

        mime_type, image_bytes = decode_data_uri(base_image)
        contents = [
            types.Part.from_bytes(data=image_bytes, mime_type=mime_type),
            types.Part.from_text(text=self.build_map_instruction(kind)),
        ]
        return await self._generate(kind, contents)

    async def _generate(self, kind: MapKind, contents: list) -> str:
        from google.genai import types

        config = types.GenerateContentConfig(
            image_config=types.ImageConfig(aspect_ratio=self.aspect_ratio),
        )

        logger.info(f"Image request: kind={kind.value}, model={self.model}")
        try:
            client = self._get_client()
            response = await asyncio.to_thread(
                client.models.generate_content,
                model=self.model,
                contents=contents,
                config=config,
            )
        except Exception as e:
            logger.error(f"Image API error ({kind.value}): {type(e).__name__}: {e}")
            raise GenerationFailed(f"API error: {e}", kind) from e

        image = extract_image(response)
        if image is None:
            logger.warning(f"No image data in response for {kind.value}")
            raise NoImageProduced(kind)

        data, mime_type = image
        logger.info(f"Image response: kind={kind.value}, mime_type={mime_type}")
        return encode_data_uri(data, mime_type)
