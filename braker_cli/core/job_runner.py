"""
Runs the transcoding engine for a single conversion job.
"""

import asyncio
import logging
import shlex

from braker_cli.exceptions import EngineInvocationError
from braker_cli.models.track import ConversionJob

log = logging.getLogger(__name__)


class JobRunner:
    """
    Executes one engine invocation and reports its exit status.

    The engine's stdout and stderr are inherited, so its progress output
    streams straight to the terminal. Whether the output file was actually
    written is left to the caller.
    """

    def __init__(self, engine_path: str):
        self.engine_path = engine_path

    def build_command(self, job: ConversionJob) -> list[str]:
        return [
            self.engine_path,
            "-t",
            job.track.id,
            "-i",
            str(job.input_path),
            "--preset",
            job.profile,
            "-o",
            str(job.output_path),
        ]

    async def run(self, job: ConversionJob) -> None:
        """
        Runs the engine for `job` and waits for it to exit.

        Raises:
            EngineInvocationError: If the engine cannot be started or exits
            with a non-zero status.
        """
        args = self.build_command(job)
        log.debug(f"Command line: {shlex.join(args)}")

        try:
            process = await asyncio.create_subprocess_exec(*args)
        except OSError as e:
            raise EngineInvocationError(
                f"track {job.track.id}: could not start '{self.engine_path}': {e}",
                track_id=job.track.id,
            ) from e

        returncode = await process.wait()
        if returncode != 0:
            raise EngineInvocationError(
                f"track {job.track.id}: '{self.engine_path}' exited with status "
                f"{returncode}",
                track_id=job.track.id,
                returncode=returncode,
            )
