"""
Structured logging system for better log analysis and debugging.
Provides JSON-formatted logs with context and metadata.
"""

import json
import logging
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Any

from rich.markup import escape


class StructuredLogger:
    """
    Logger that outputs both human-readable and machine-parseable logs.

    Usage:
        logger = StructuredLogger("braker_cli")
        logger.info("track_completed",
                    track_id="4",
                    output_path="/home/me/Desktop/High Profile_DISC_4.mp4",
                    duration_s=812.4)
    """

    def __init__(
        self,
        name: str,
        log_dir: Path | None = None,
        enable_json: bool = True,
        enable_console: bool = True,
    ):
        """
        Initialize structured logger.

        Args:
            name: Logger name
            log_dir: Directory for JSON log files (None = disabled)
            enable_json: Enable JSON file logging
            enable_console: Enable console output
        """
        self.name = name
        self.log_dir = log_dir
        self.enable_json = enable_json and log_dir is not None
        self.enable_console = enable_console

        self._logger = logging.getLogger(name)

        self._json_file = None
        self.json_log_path: Path | None = None
        if self.enable_json:
            log_dir.mkdir(parents=True, exist_ok=True)
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            self.json_log_path = log_dir / f"braker_{timestamp}.jsonl"
            self._json_file = open(self.json_log_path, "a", encoding="utf-8")  # noqa: SIM115

        # Session context (added to all log entries)
        self._session_context: dict[str, Any] = {
            "session_id": f"{int(time.time())}_{id(self)}",
            "start_time": datetime.now().isoformat(),
        }

    def set_session_context(self, **kwargs) -> None:
        """Set session-level context that appears in all logs."""
        self._session_context.update(kwargs)

    def _format_message(self, event: str, **context) -> str:
        parts = [escape(f"[{event}]")]
        for key, value in context.items():
            if key not in ("level", "timestamp"):
                parts.append(escape(f"{key}={value}"))
        return " ".join(parts)

    def _write_json(self, level: str, event: str, **context) -> None:
        if not self._json_file or self._json_file.closed:
            return

        entry = {
            "timestamp": datetime.now().isoformat(),
            "level": level,
            "event": event,
            **self._session_context,
            **context,
        }

        try:
            self._json_file.write(json.dumps(entry, default=str) + "\n")
            self._json_file.flush()
        except OSError as e:
            print(f"JSON logging failed: {e}", file=sys.stderr)

    def debug(self, event: str, **context) -> None:
        """Log debug event."""
        if self.enable_console:
            self._logger.debug(self._format_message(event, **context))
        if self.enable_json:
            self._write_json("DEBUG", event, **context)

    def info(self, event: str, **context) -> None:
        """Log info event."""
        if self.enable_console:
            self._logger.info(self._format_message(event, **context))
        if self.enable_json:
            self._write_json("INFO", event, **context)

    def warning(self, event: str, **context) -> None:
        """Log warning event."""
        if self.enable_console:
            self._logger.warning(self._format_message(event, **context))
        if self.enable_json:
            self._write_json("WARNING", event, **context)

    def error(self, event: str, **context) -> None:
        """Log error event."""
        if self.enable_console:
            self._logger.error(self._format_message(event, **context))
        if self.enable_json:
            self._write_json("ERROR", event, **context)

    def close(self) -> None:
        """Close JSON log file."""
        if self._json_file and not self._json_file.closed:
            self._json_file.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


class ExtractionLogger:
    """Specialized logger for per-track conversion events."""

    def __init__(self, logger: StructuredLogger):
        self.logger = logger

    def track_started(self, track_id: str, runtime_minutes: int, output_path: Path):
        self.logger.info(
            "track_started",
            track_id=track_id,
            runtime_minutes=runtime_minutes,
            output_path=str(output_path),
        )

    def track_completed(self, track_id: str, output_path: Path, duration_s: float):
        self.logger.info(
            "track_completed",
            track_id=track_id,
            output_path=str(output_path),
            duration_s=round(duration_s, 2),
        )

    def track_failed(self, track_id: str, error: str):
        self.logger.error("track_failed", track_id=track_id, error=error)

    def track_skipped(self, track_id: str, output_path: Path, reason: str):
        self.logger.info(
            "track_skipped",
            track_id=track_id,
            output_path=str(output_path),
            reason=reason,
        )


class SessionLogger:
    """Specialized logger for batch-level events."""

    def __init__(self, logger: StructuredLogger):
        self.logger = logger

    def batch_started(
        self,
        source_path: Path,
        profile: str,
        track_count: int,
        max_parallel: int,
        dry_run: bool = False,
    ):
        self.logger.info(
            "batch_started",
            source_path=str(source_path),
            profile=profile,
            track_count=track_count,
            max_parallel=max_parallel,
            dry_run=dry_run,
        )

    def batch_completed(
        self,
        duration_s: float,
        tracks_converted: int,
        tracks_skipped: int,
        tracks_failed: int,
    ):
        self.logger.info(
            "batch_completed",
            duration_s=round(duration_s, 2),
            tracks_converted=tracks_converted,
            tracks_skipped=tracks_skipped,
            tracks_failed=tracks_failed,
        )


def create_structured_logger(
    log_dir: Path | None = None, enable_json: bool = False
) -> tuple[StructuredLogger, ExtractionLogger, SessionLogger]:
    """
    Create all structured loggers.

    Returns:
        Tuple of (base_logger, extraction_logger, session_logger)
    """
    base = StructuredLogger(
        "braker_cli.events", log_dir=log_dir, enable_json=enable_json
    )
    extraction = ExtractionLogger(base)
    session = SessionLogger(base)

    return base, extraction, session
