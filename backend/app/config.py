"""
Application settings - Read once from the environment (and .env) at startup
"""

import os
import logging
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_MODEL = "gemini-2.5-flash-image"
DEFAULT_ASPECT_RATIO = "1:1"
DEFAULT_CORS_ORIGINS = ["http://localhost:5173", "http://127.0.0.1:5173"]


class Settings(BaseModel):
    """Explicit configuration handed to the generation client and the API"""

    gemini_api_key: str = ""
    image_model: str = DEFAULT_IMAGE_MODEL
    aspect_ratio: str = DEFAULT_ASPECT_RATIO
    cors_origins: list[str] = Field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))
    log_dir: Path | None = None  # Per-run interaction logs; None disables them

    @field_validator("image_model", "aspect_ratio")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("value cannot be empty")
        return v.strip()


def _split_origins(raw: str | None) -> list[str]:
    if not raw:
        return list(DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def load_settings() -> Settings:
    """Build Settings from the current process environment"""
    api_key = os.getenv("GEMINI_API_KEY", "")
    if not api_key:
        # The service rejects the request; nothing else to do here
        logger.warning("GEMINI_API_KEY not found in environment")

    log_dir = os.getenv("TEXTUREGEN_LOG_DIR")

    return Settings(
        gemini_api_key=api_key,
        image_model=os.getenv("IMAGE_MODEL", DEFAULT_IMAGE_MODEL),
        aspect_ratio=os.getenv("IMAGE_ASPECT_RATIO", DEFAULT_ASPECT_RATIO),
        cors_origins=_split_origins(os.getenv("CORS_ORIGINS")),
        log_dir=Path(log_dir) if log_dir else None,
    )


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the process-wide settings instance."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings
