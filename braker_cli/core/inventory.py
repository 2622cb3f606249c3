"""
Reads the engine's scan report and turns it into an ordered list of tracks.
"""

import asyncio
import dataclasses
import logging
import re
from pathlib import Path
from typing import Iterable, Optional

from braker_cli.exceptions import InventoryError, ParseError
from braker_cli.models.track import TrackDescriptor

log = logging.getLogger(__name__)

TITLE_PATTERN = re.compile(r"^.+?title\s+(\d+):")
# Hours and minutes accept any token; anything but ASCII digits raises ParseError.
DURATION_PATTERN = re.compile(r"^.+?duration: ([^:\s]+):([^:\s]+):\d+$")


def parse_track_info(output: str) -> list[TrackDescriptor]:
    """
    Parses the engine's scan report into track descriptors.

    A "title N:" line starts a new track. A "duration: HH:MM:SS" line sets the
    runtime of the most recently started track. Every other line is ignored.

    Args:
        output: The combined stdout/stderr of the inventory scan.

    Returns:
        Tracks in the order their title lines appear.

    Raises:
        ParseError: If a duration line has a non-numeric hour or minute field.
    """
    tracks: list[TrackDescriptor] = []

    for line in output.splitlines():
        if match := TITLE_PATTERN.match(line):
            tracks.append(TrackDescriptor(id=match.group(1)))
            continue

        if match := DURATION_PATTERN.match(line):
            hours = _parse_field(line, "hours", match.group(1))
            minutes = _parse_field(line, "minutes", match.group(2))

            if not tracks:
                log.warning(f"Ignoring duration line before any title: {line!r}")
                continue

            tracks[-1] = dataclasses.replace(
                tracks[-1], runtime_minutes=minutes + hours * 60
            )

    return tracks


def _parse_field(line: str, field: str, value: str) -> int:
    # int() would also take signs, underscores and non-ASCII digits
    if not re.fullmatch(r"\d+", value, re.ASCII):
        raise ParseError(line.strip(), field, value)
    return int(value)


def select_tracks(
    tracks: Iterable[TrackDescriptor],
    track_ids: Optional[Iterable[str]] = None,
    min_minutes: int = 0,
) -> list[TrackDescriptor]:
    """
    Filters tracks by id and minimum runtime, preserving order.

    Args:
        tracks: Parsed tracks.
        track_ids: Only keep these ids. None or empty keeps every id.
        min_minutes: Drop tracks shorter than this many minutes.
    """
    wanted = set(track_ids or ())
    selected = []
    for track in tracks:
        if wanted and track.id not in wanted:
            continue
        if track.runtime_minutes < min_minutes:
            log.info(
                f"Skipping track {track.id} ({track.runtime_minutes} min, "
                f"shorter than {min_minutes} min)"
            )
            continue
        selected.append(track)

    if missing := wanted - {t.id for t in selected}:
        log.warning(
            f"[yellow]Requested tracks not selected: {', '.join(sorted(missing))}"
            "[/yellow]"
        )
    return selected


async def fetch_inventory(engine_path: str, source_path: Path | str) -> str:
    """
    Runs the engine in scan mode and returns its combined output.

    Raises:
        InventoryError: If the engine cannot be started or exits non-zero.
    """
    args = [engine_path, "-i", str(source_path), "-t", "0"]
    log.debug(f"Inventory command line: {' '.join(args)}")

    try:
        process = await asyncio.create_subprocess_exec(
            *args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
        )
    except OSError as e:
        raise InventoryError(f"Could not start '{engine_path}': {e}") from e

    raw_output, _ = await process.communicate()
    output = raw_output.decode("utf-8", errors="replace")

    if process.returncode != 0:
        tail = "\n".join(output.strip().splitlines()[-5:])
        raise InventoryError(
            f"'{engine_path}' exited with status {process.returncode} while "
            f"scanning {source_path}" + (f":\n{tail}" if tail else "")
        )

    return output


async def get_track_info(
    engine_path: str, source_path: Path | str
) -> list[TrackDescriptor]:
    """Scans the source with the engine and parses the resulting report."""
    output = await fetch_inventory(engine_path, source_path)
    tracks = parse_track_info(output)
    log.debug(f"Found {len(tracks)} tracks in {source_path}")
    return tracks
