"""
Run-based generation logger.

Writes one human-readable log file per texture run listing every image
call in the order it was made, with its outcome and duration.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from app.models.texture import MapKind


class RunLogger:
    """Logs the image calls of a single texture run to a dedicated file."""

    def __init__(self, logs_dir: Path, run_id: int, prompt: str):
        self.logs_dir = logs_dir
        self.run_id = run_id
        self.prompt = prompt
        self.call_count = 0
        self.log_file: Path | None = None

    def _ensure_log_file(self) -> Path:
        """Create the log file on first write."""
        if self.log_file is None:
            self.logs_dir.mkdir(parents=True, exist_ok=True)
            timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
            self.log_file = self.logs_dir / f"{timestamp}_run{self.run_id}.log"

            with open(self.log_file, "w", encoding="utf-8") as f:
                f.write("TextureGen Run Log\n")
                f.write("==================\n")
                f.write(f"Run: {self.run_id}\n")
                f.write(f"Prompt: {self.prompt}\n")
                f.write(f"Started: {datetime.now().isoformat()}\n")
                f.write("\n")

        return self.log_file

    def log_call(
        self,
        kind: MapKind,
        success: bool,
        duration: float,
        error: str | None = None,
    ) -> None:
        """Log the outcome of one image call."""
        log_file = self._ensure_log_file()
        self.call_count += 1

        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        outcome = "OK" if success else "FAILED"

        with open(log_file, "a", encoding="utf-8") as f:
            f.write("─" * 70 + "\n")
            f.write(
                f"CALL #{self.call_count} | {timestamp} | {kind.value} | "
                f"{outcome} | {duration:.2f}s\n"
            )
            if error:
                f.write(f"Error: {error}\n")
            f.write("\n")

    def log_run_end(self, status: str, error: str | None = None) -> None:
        """Write the closing summary line."""
        log_file = self._ensure_log_file()
        with open(log_file, "a", encoding="utf-8") as f:
            f.write("═" * 70 + "\n")
            f.write(f"RUN FINISHED | status={status} | calls={self.call_count}\n")
            if error:
                f.write(f"Error: {error}\n")
