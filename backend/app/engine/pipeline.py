"""
Texture pipeline - Runs one generation pass and tracks per-map progress.

A run requests the albedo texture first, then the four derived maps one
after another. The albedo failing ends the run with an error; a derived map
failing only leaves that map empty.

State machine:
    idle -> base_in_flight -> derived_in_flight -> done
      ^           |
      +-----------+  (base failed)
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Optional

from app.engine.protocols import ImageGenerator
from app.llm.run_logger import RunLogger
from app.models.texture import (
    BASE_MAP,
    DERIVED_MAPS,
    MAP_LABELS,
    MapKind,
    MapState,
    MapStatus,
    PipelineSnapshot,
    RunStatus,
)

logger = logging.getLogger(__name__)

DEFAULT_RUN_ERROR = "Failed to generate texture"

ACTIVE_STATUSES = (RunStatus.BASE_IN_FLIGHT, RunStatus.DERIVED_IN_FLIGHT)


def is_blank_prompt(prompt: str | None) -> bool:
    return not prompt or not prompt.strip()


class TexturePipeline:
    """Drive a texture run and expose its live state.

    Attributes:
        generator: Client used for every image call
        logs_dir: Directory for per-run log files (None disables them)
        run_id: Number of runs accepted so far
        prompt: Prompt of the current (or last) run
        status: Current RunStatus
        maps: Result set, map kind -> data URI
        pending: Map kinds with a call in flight
        failures: Derived map kinds that failed this run -> diagnostic
        error: Run-level error when the albedo could not be generated
    """

    def __init__(self, generator: ImageGenerator, logs_dir: Optional[Path] = None):
        self.generator = generator
        self.logs_dir = logs_dir
        self.run_id = 0
        self.prompt: str | None = None
        self.status = RunStatus.IDLE
        self.maps: dict[MapKind, str] = {}
        self.pending: set[MapKind] = set()
        self.failures: dict[MapKind, str] = {}
        self.error: str | None = None
        self._run_logger: RunLogger | None = None

    @property
    def is_running(self) -> bool:
        return self.status in ACTIVE_STATUSES

    def start(self, prompt: str) -> bool:
        """Begin a new run without issuing any calls.

        Rejected (returns False, nothing changes) when the prompt is blank
        or another run is still active.
        """
        if is_blank_prompt(prompt):
            logger.debug("Ignoring blank prompt")
            return False
        if self.is_running:
            logger.info(f"Run {self.run_id} still active, rejecting new prompt")
            return False

        self.run_id += 1
        self.prompt = prompt
        self.maps = {}
        self.failures = {}
        self.error = None
        self.pending = {BASE_MAP}
        self.status = RunStatus.BASE_IN_FLIGHT
        self._run_logger = (
            RunLogger(self.logs_dir, self.run_id, prompt) if self.logs_dir else None
        )

        logger.info(f"Run {self.run_id} started: prompt={prompt!r}")
        return True

    async def process(self) -> None:
        """Execute the run begun by start(): albedo, then each derived map."""
        if self.status != RunStatus.BASE_IN_FLIGHT:
            raise RuntimeError("process() called without a started run")

        started = time.monotonic()
        try:
            albedo = await self.generator.generate_base(self.prompt)
        except Exception as e:
            self.error = str(e) or DEFAULT_RUN_ERROR
            self.pending = set()
            self.status = RunStatus.IDLE
            logger.error(f"Run {self.run_id}: albedo generation failed: {e}")
            self._log_call(BASE_MAP, started, error=self.error)
            self._log_end()
            return

        self.maps[BASE_MAP] = albedo
        self.pending.discard(BASE_MAP)
        self._log_call(BASE_MAP, started)

        self.pending.update(DERIVED_MAPS)
        self.status = RunStatus.DERIVED_IN_FLIGHT

        # One call in flight at a time, in DERIVED_MAPS order
        for kind in DERIVED_MAPS:
            started = time.monotonic()
            message = None
            try:
                self.maps[kind] = await self.generator.generate_derived(albedo, kind)
            except Exception as e:
                message = str(e) or f"Failed to generate {kind.value} map"
                self.failures[kind] = message
                logger.error(f"Run {self.run_id}: failed to generate {kind.value} map: {e}")
            finally:
                self.pending.discard(kind)
            self._log_call(kind, started, error=message)

        self.status = RunStatus.DONE
        logger.info(
            f"Run {self.run_id} done: {len(self.maps)}/{len(MapKind)} maps generated"
        )
        self._log_end()

    async def submit(self, prompt: str) -> bool:
        """Start and fully execute a run. Returns False if it was rejected."""
        if not self.start(prompt):
            return False
        await self.process()
        return True

    def map_status(self, kind: MapKind) -> MapStatus:
        if kind in self.pending:
            return MapStatus.PENDING
        if kind in self.maps:
            return MapStatus.READY
        if kind in self.failures:
            return MapStatus.FAILED
        return MapStatus.EMPTY

    def get_image(self, kind: MapKind) -> str | None:
        return self.maps.get(kind)

    def available_maps(self) -> list[MapKind]:
        """Populated map kinds in display order."""
        return [kind for kind in MapKind if kind in self.maps]

    def snapshot(self) -> PipelineSnapshot:
        return PipelineSnapshot(
            run_id=self.run_id,
            prompt=self.prompt,
            status=self.status,
            is_running=self.is_running,
            error=self.error,
            maps=[
                MapState(
                    id=kind,
                    label=MAP_LABELS[kind],
                    status=self.map_status(kind),
                    error=self.failures.get(kind),
                )
                for kind in MapKind
            ],
        )

    def _log_call(self, kind: MapKind, started: float, error: str | None = None) -> None:
        if self._run_logger is None:
            return
        try:
            self._run_logger.log_call(
                kind, success=error is None, duration=time.monotonic() - started, error=error
            )
        except OSError as e:
            logger.warning(f"Run {self.run_id}: could not write run log: {e}")

    def _log_end(self) -> None:
        if self._run_logger is None:
            return
        try:
            self._run_logger.log_run_end(self.status.value, self.error)
        except OSError as e:
            logger.warning(f"Run {self.run_id}: could not write run log: {e}")
