"""
Pydantic model for application configuration.
Provides robust validation for all settings.
"""

from pydantic import BaseModel, Field, field_validator

DEFAULT_ENGINE_PATH = "HandBrakeCLI"
DEFAULT_PROFILE = "High Profile"
DEFAULT_OUTPUT_DIR = "~/Desktop"

SUPPORTED_CONTAINERS = ("mp4", "m4v", "mkv")


class ExtractionConfig(BaseModel):
    """A validated configuration model for the application."""

    # Engine
    engine_path: str = DEFAULT_ENGINE_PATH
    profile: str = DEFAULT_PROFILE

    # Output
    output_dir: str = DEFAULT_OUTPUT_DIR
    container: str = "mp4"

    # Batch behaviour
    max_parallel: int = 0
    min_minutes: int = 0
    dry_run: bool = False

    # Logging
    log_dir: str = ""

    # Internal fields not loaded from INI file
    config_path: str = Field("", repr=False)
    track_ids: list[str] = Field(default_factory=list, repr=False)

    class Config:
        """Pydantic model configuration."""

        validate_assignment = True
        str_strip_whitespace = True

    @field_validator("engine_path", "profile", "output_dir")
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("Value cannot be empty.")
        return v

    @field_validator("container")
    @classmethod
    def validate_container(cls, v: str) -> str:
        """Normalizes the container extension and checks it is supported."""
        v = v.lower().lstrip(".")
        if v not in SUPPORTED_CONTAINERS:
            raise ValueError(
                f"Container must be one of {', '.join(SUPPORTED_CONTAINERS)}."
            )
        return v

    @field_validator("max_parallel")
    @classmethod
    def validate_parallel(cls, v: int) -> int:
        """0 means one engine process per track, all at once."""
        if v < 0 or v > 64:
            raise ValueError("Max parallel must be between 0 (unbounded) and 64.")
        return v

    @field_validator("min_minutes")
    @classmethod
    def validate_min_minutes(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Minimum runtime cannot be negative.")
        return v

    @classmethod
    def get_ini_keys(cls) -> set[str]:
        """Returns a set of all keys that are expected in the INI file."""
        internal_fields = {"config_path", "track_ids", "dry_run"}
        return {key for key in cls.model_fields if key not in internal_fields}
