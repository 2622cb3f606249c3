"""
The main orchestrator that converts every track of a disc concurrently.
"""

import asyncio
import contextlib
import logging
import time
from pathlib import Path
from typing import Optional

from braker_cli.exceptions import BrakerError, EngineInvocationError, OutputMissingError
from braker_cli.models.config import DEFAULT_OUTPUT_DIR, ExtractionConfig
from braker_cli.models.track import BatchResult, ConversionJob, TrackDescriptor
from braker_cli.utils.path import create_dir
from braker_cli.utils.structured_logger import (
    ExtractionLogger,
    SessionLogger,
    create_structured_logger,
)

from .job_runner import JobRunner

log = logging.getLogger(__name__)


class ExtractionManager:
    """
    Orchestrates one batch: a conversion job per track, all launched at once.

    Tracks whose output file already exists are skipped. Every task runs to
    completion regardless of its siblings, and failures are only inspected
    once the whole batch has finished.
    """

    def __init__(
        self,
        source_path: Path | str,
        engine_path: str,
        profile: str,
        output_dir: Path | str = DEFAULT_OUTPUT_DIR,
        container: str = "mp4",
        max_parallel: int = 0,
        dry_run: bool = False,
        runner: Optional[JobRunner] = None,
        events: Optional[ExtractionLogger] = None,
        session_events: Optional[SessionLogger] = None,
    ):
        self.source_path = Path(source_path)
        self.engine_path = engine_path
        self.profile = profile
        self.output_dir = Path(output_dir).expanduser()
        self.container = container
        self.max_parallel = max_parallel
        self.dry_run = dry_run
        self.runner = runner or JobRunner(engine_path)
        if events is None or session_events is None:
            _, default_events, default_session = create_structured_logger()
            events = events or default_events
            session_events = session_events or default_session
        self.events = events
        self.session_events = session_events

    @classmethod
    def from_config(
        cls,
        config: ExtractionConfig,
        source_path: Path | str,
        events: Optional[ExtractionLogger] = None,
        session_events: Optional[SessionLogger] = None,
    ) -> "ExtractionManager":
        return cls(
            source_path,
            engine_path=config.engine_path,
            profile=config.profile,
            output_dir=config.output_dir,
            container=config.container,
            max_parallel=config.max_parallel,
            dry_run=config.dry_run,
            events=events,
            session_events=session_events,
        )

    def build_jobs(self, tracks: list[TrackDescriptor]) -> list[ConversionJob]:
        return [
            ConversionJob.create(
                track, self.source_path, self.profile, self.output_dir, self.container
            )
            for track in tracks
        ]

    async def execute(self, tracks: list[TrackDescriptor]) -> BatchResult:
        """
        Converts every track and waits for all of them.

        Returns:
            A BatchResult whose `failures` holds one error per failed track,
            in completion order.
        """
        jobs = self.build_jobs(tracks)
        result = BatchResult(dry_run=self.dry_run)
        # Sized to the number of producers so put_nowait never blocks.
        failures: asyncio.Queue[BrakerError] = asyncio.Queue(maxsize=len(jobs))
        limiter = (
            asyncio.Semaphore(self.max_parallel)
            if self.max_parallel > 0
            else contextlib.nullcontext()
        )

        if jobs and not self.dry_run:
            create_dir(self.output_dir)

        self.session_events.batch_started(
            self.source_path,
            self.profile,
            len(jobs),
            self.max_parallel,
            dry_run=self.dry_run,
        )
        start_time = time.monotonic()

        log.debug("Waiting for all track tasks to finish...")
        await asyncio.gather(
            *(self._process_job(job, result, failures, limiter) for job in jobs)
        )

        while True:
            try:
                result.failures.append(failures.get_nowait())
            except asyncio.QueueEmpty:
                break

        self.session_events.batch_completed(
            time.monotonic() - start_time,
            tracks_converted=len(result.converted),
            tracks_skipped=len(result.skipped),
            tracks_failed=len(result.failures),
        )
        return result

    async def _process_job(
        self,
        job: ConversionJob,
        result: BatchResult,
        failures: "asyncio.Queue[BrakerError]",
        limiter,
    ) -> None:
        track_id = job.track.id

        if job.output_path.exists():
            result.skipped.append(job)
            self.events.track_skipped(track_id, job.output_path, "already exists")
            return

        if self.dry_run:
            result.planned.append(job)
            log.info(
                f"  [cyan]→ (Dry Run)[/] Would convert track {track_id} to "
                f"[dim]{job.output_path}[/dim]"
            )
            return

        async with limiter:
            self.events.track_started(
                track_id, job.track.runtime_minutes, job.output_path
            )
            start_time = time.monotonic()
            try:
                await self.runner.run(job)
                if not job.output_path.exists():
                    raise OutputMissingError(track_id, job.output_path)
            except BrakerError as e:
                self.events.track_failed(track_id, str(e))
                failures.put_nowait(e)
                return
            except Exception as e:
                log.debug(f"Unexpected error for track {track_id}", exc_info=True)
                error = EngineInvocationError(
                    f"track {track_id}: unexpected error: {e}", track_id=track_id
                )
                self.events.track_failed(track_id, str(error))
                failures.put_nowait(error)
                return

        result.converted.append(job)
        self.events.track_completed(
            track_id, job.output_path, time.monotonic() - start_time
        )


async def extract_tracks(
    source_path: Path | str,
    engine_path: str,
    profile: str,
    tracks: list[TrackDescriptor],
    **options,
) -> BatchResult:
    """
    Converts `tracks` and raises if any of them failed.

    Keyword options are passed through to ExtractionManager.

    Raises:
        BatchError: If one or more tracks failed, naming every failure.
    """
    manager = ExtractionManager(source_path, engine_path, profile, **options)
    result = await manager.execute(tracks)
    result.raise_for_failures()
    return result
