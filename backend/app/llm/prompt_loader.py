"""
Prompt Loader - Loads the texture prompt templates from text files.

Prompts live in subdirectories of ``prompts/``:
- texture/base_texture.txt - Base (albedo) texture prompt, ``{prompt}`` placeholder
- texture/map_<kind>.txt - Instruction for each derived map

Files are cached after the first read and re-read when they change on disk,
so prompt wording can be tuned without restarting the server.
"""

import logging
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger(__name__)

PROMPTS_DIR = Path(__file__).parent / "prompts"


class PromptLoader:
    """Loads and caches prompts from text files with hot reloading support."""

    def __init__(self, prompts_dir: Optional[Path] = None):
        self.prompts_dir = Path(prompts_dir) if prompts_dir else PROMPTS_DIR
        self._cache: Dict[str, str] = {}
        self._file_timestamps: Dict[str, float] = {}

    def _get_prompt_path(self, category: str, filename: str) -> Path:
        return self.prompts_dir / category / filename

    def get_prompt(self, category: str, filename: str, reload: bool = False) -> str:
        """
        Get a prompt from cache or file.

        Args:
            category: Subdirectory name (e.g., 'texture')
            filename: Prompt filename (e.g., 'base_texture.txt')
            reload: If True, force reload from file even if cached

        Returns:
            Prompt content with surrounding whitespace stripped

        Raises:
            FileNotFoundError: If the file does not exist and nothing is cached
        """
        cache_key = f"{category}/{filename}"
        path = self._get_prompt_path(category, filename)

        if not path.exists():
            if cache_key in self._cache:
                logger.warning(f"Prompt file deleted but using cached version: {cache_key}")
                return self._cache[cache_key]
            raise FileNotFoundError(
                f"Prompt file not found: {path}\n"
                f"Expected location: {self.prompts_dir}/{category}/{filename}"
            )

        mtime = path.stat().st_mtime
        if reload or cache_key not in self._cache or mtime > self._file_timestamps.get(cache_key, 0):
            if cache_key in self._cache:
                logger.info(f"Hot reloading modified prompt: {cache_key}")
            else:
                logger.debug(f"Loading prompt: {cache_key}")
            self._cache[cache_key] = path.read_text(encoding="utf-8").strip()
            self._file_timestamps[cache_key] = mtime

        return self._cache[cache_key]

    def render(self, category: str, filename: str, **values: str) -> str:
        """Load a prompt and substitute ``{name}`` placeholders."""
        return self.get_prompt(category, filename).format(**values)

    def clear(self) -> None:
        """Drop all cached prompts."""
        self._cache.clear()
        self._file_timestamps.clear()


_loader: Optional[PromptLoader] = None


def get_loader() -> PromptLoader:
    """Get the global prompt loader instance."""
    global _loader
    if _loader is None:
        _loader = PromptLoader()
    return _loader
