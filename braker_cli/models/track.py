"""
Data classes describing disc tracks, the conversion jobs derived from them,
and the outcome of a batch.
"""

from dataclasses import dataclass, field
from pathlib import Path

from braker_cli.exceptions import BatchError, BrakerError
from braker_cli.utils.path import VIDEO_TS_DIR, build_output_path


@dataclass(frozen=True)
class TrackDescriptor:
    """A selectable track on the source disc, as reported by the engine."""

    id: str
    runtime_minutes: int = 0


@dataclass(frozen=True)
class ConversionJob:
    """The unit of work for converting a single track."""

    track: TrackDescriptor
    source_path: Path
    output_path: Path
    profile: str

    @classmethod
    def create(
        cls,
        track: TrackDescriptor,
        source_path: Path,
        profile: str,
        output_dir: Path,
        container: str = "mp4",
    ) -> "ConversionJob":
        """Builds a job whose output path is derived from the naming scheme."""
        return cls(
            track=track,
            source_path=Path(source_path),
            output_path=build_output_path(
                output_dir, profile, source_path, track.id, container
            ),
            profile=profile,
        )

    @property
    def input_path(self) -> Path:
        """The directory handed to the engine for conversion."""
        return self.source_path / VIDEO_TS_DIR


@dataclass
class BatchResult:
    """Aggregate outcome of one extraction run."""

    converted: list[ConversionJob] = field(default_factory=list)
    skipped: list[ConversionJob] = field(default_factory=list)
    planned: list[ConversionJob] = field(default_factory=list)
    failures: list[BrakerError] = field(default_factory=list)
    dry_run: bool = False

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def total(self) -> int:
        return (
            len(self.converted)
            + len(self.skipped)
            + len(self.planned)
            + len(self.failures)
        )

    def raise_for_failures(self) -> None:
        """Raises a BatchError carrying every failure, if there were any."""
        if self.failures:
            raise BatchError(self.failures)
