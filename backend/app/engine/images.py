"""
Image utilities for generated textures.

Generated maps are kept as data URIs (the same value the browser renders).
These helpers convert between data URIs and raw bytes, and render the
tiled preview used to check that a texture repeats seamlessly.
"""

import base64
import binascii
from io import BytesIO

from PIL import Image

DEFAULT_MIME_TYPE = "image/png"

# The frontend previews tiling at 33.33% background size, i.e. 3x3 repeats
PREVIEW_REPEAT = 3


def encode_data_uri(data: bytes | str, mime_type: str | None = None) -> str:
    """Wrap image bytes as a base64 data URI.

    Args:
        data: Raw image bytes, or an already base64-encoded string
        mime_type: MIME type of the image (defaults to image/png)

    Returns:
        A ``data:<mime>;base64,<payload>`` string
    """
    if isinstance(data, bytes):
        payload = base64.b64encode(data).decode("ascii")
    else:
        payload = data
    return f"data:{mime_type or DEFAULT_MIME_TYPE};base64,{payload}"


def decode_data_uri(uri: str) -> tuple[str, bytes]:
    """Split a base64 data URI into its MIME type and decoded bytes.

    Raises:
        ValueError: If the value is not a base64 data URI
    """
    header, sep, payload = uri.partition(",")
    if not sep or not header.startswith("data:") or not header.endswith(";base64"):
        raise ValueError("Expected a base64 data URI")

    mime_type = header[len("data:"):-len(";base64")] or DEFAULT_MIME_TYPE
    try:
        data = base64.b64decode(payload, validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 payload: {e}") from e
    return mime_type, data


def render_tiled_preview(image_bytes: bytes, repeat: int = PREVIEW_REPEAT) -> bytes:
    """Render an image repeated ``repeat`` x ``repeat`` times as PNG bytes."""
    if repeat < 1:
        raise ValueError("repeat must be at least 1")

    with Image.open(BytesIO(image_bytes)) as source:
        source.load()
        # Sheet is always RGB or RGBA
        tile = source if source.mode in ("RGB", "RGBA") else source.convert("RGBA")
        width, height = tile.size
        sheet = Image.new(tile.mode, (width * repeat, height * repeat))
        for row in range(repeat):
            for col in range(repeat):
                sheet.paste(tile, (col * width, row * height))

    buffer = BytesIO()
    sheet.save(buffer, format="PNG")
    return buffer.getvalue()
