"""
Utilities for validating disc folders and naming output files.
"""

import os
from pathlib import Path

from pathvalidate import sanitize_filename

from braker_cli.exceptions import InvalidSourceError

VIDEO_TS_DIR = "VIDEO_TS"


def create_dir(directory_path: Path) -> None:
    """Creates a directory if it does not already exist."""
    directory_path.mkdir(parents=True, exist_ok=True)


def source_name(source_path: Path | str) -> str:
    """Returns the base name of the disc folder, even for '.' or trailing slashes."""
    return Path(os.path.abspath(os.path.expanduser(str(source_path)))).name


def build_output_path(
    output_dir: Path | str,
    profile: str,
    source_path: Path | str,
    track_id: str,
    container: str = "mp4",
) -> Path:
    """
    Computes where a converted track is written.

    The name combines the profile, the disc folder's base name and the track
    id, so the same inputs always map to the same file.
    """
    filename = sanitize_filename(
        f"{profile}_{source_name(source_path)}_{track_id}.{container}",
        platform="auto",
    )
    return Path(output_dir).expanduser() / filename


def validate_source(source_path: Path) -> Path:
    """
    Ensures the source folder contains a VIDEO_TS directory.

    Returns:
        The VIDEO_TS directory.

    Raises:
        InvalidSourceError: If the folder or its VIDEO_TS directory is missing.
    """
    video_ts = Path(source_path) / VIDEO_TS_DIR
    if not video_ts.is_dir():
        raise InvalidSourceError(f"Invalid DVD path: {video_ts} should exist")
    return video_ts
