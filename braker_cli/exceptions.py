"""
Defines custom exceptions for the application to allow for more specific error handling.
"""

from pathlib import Path


class BrakerError(Exception):
    """Base exception for all application-specific errors."""


class ConfigurationError(BrakerError):
    """Raised for issues related to configuration loading or validation."""


class InvalidSourceError(BrakerError):
    """Raised when the source folder does not look like a disc folder."""


class ParseError(BrakerError):
    """Raised when a duration line in the inventory report cannot be parsed."""

    def __init__(self, line: str, field: str, value: str):
        self.line = line
        self.field = field
        self.value = value
        super().__init__(
            f"Failed to parse {field} from line '{line}', {field} '{value}'"
        )


class InventoryError(BrakerError):
    """Raised when the engine's inventory scan fails to start or exits non-zero."""


class EngineInvocationError(BrakerError):
    """
    Raised when a conversion subprocess fails to start or exits with a non-zero
    status.
    """

    def __init__(self, message: str, track_id: str, returncode: int | None = None):
        self.track_id = track_id
        self.returncode = returncode
        super().__init__(message)


class OutputMissingError(BrakerError):
    """Raised when the engine reported success but the output file is absent."""

    def __init__(self, track_id: str, output_path: Path):
        self.track_id = track_id
        self.output_path = output_path
        super().__init__(f"failed to create track {output_path}")


class BatchError(BrakerError):
    """
    Raised when one or more conversions in a batch failed.

    The message is the text of every constituent error, one per line.
    """

    def __init__(self, errors: list[BrakerError]):
        self.errors = list(errors)
        super().__init__("\n".join(str(e) for e in self.errors))
