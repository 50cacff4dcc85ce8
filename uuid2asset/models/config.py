"""
Pydantic model for application configuration.
Provides robust validation for all settings.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_FILE_EXTENSIONS = [
    ".json",
    ".ttf",
    ".bin",
    ".png",
    ".jpg",
    ".bmp",
    ".jpeg",
    ".gif",
    ".ico",
    ".tiff",
    ".webp",
    ".image",
    ".pvr",
    ".pkm",
    ".mp3",
    ".ogg",
    ".wav",
    ".m4a",
]

DEFAULT_MAX_WORKERS = 400
DEFAULT_PROGRESS_INTERVAL = 50
DEFAULT_TIMEOUT = 30.0
DEFAULT_RETRY_DELAY = 5.0


class FetchConfig(BaseModel):
    """A validated configuration model for a fetch session."""

    model_config = ConfigDict(validate_assignment=True, str_strip_whitespace=True)

    server_url: str

    # Retrieval Settings
    max_workers: int = DEFAULT_MAX_WORKERS
    progress_interval: int = DEFAULT_PROGRESS_INTERVAL
    timeout: float = DEFAULT_TIMEOUT
    retry_delay: float = DEFAULT_RETRY_DELAY
    max_attempts: Optional[int] = None  # None retries forever
    extensions: list[str] = Field(
        default_factory=lambda: list(DEFAULT_FILE_EXTENSIONS)
    )

    # Output
    output_dir: str = "."

    # Internal fields not loaded from INI file
    config_path: str = Field(default="", repr=False)
    manifest_paths: list[str] = Field(default_factory=list, repr=False)

    @field_validator("server_url")
    @classmethod
    def validate_server_url(cls, v: str) -> str:
        """Requires an http(s) URL and drops any trailing slash."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("Server URL must start with http:// or https://.")
        v = v.rstrip("/")
        if v in ("http:", "https:"):
            raise ValueError("Server URL must include a host.")
        return v

    @field_validator("max_workers")
    @classmethod
    def validate_workers(cls, v: int) -> int:
        """Ensures a reasonable number of workers."""
        if v < 1 or v > 2000:
            raise ValueError("Max workers must be between 1 and 2000.")
        return v

    @field_validator("progress_interval")
    @classmethod
    def validate_progress_interval(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Progress interval must be at least 1.")
        return v

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Timeout must be greater than zero.")
        return v

    @field_validator("retry_delay")
    @classmethod
    def validate_retry_delay(cls, v: float) -> float:
        if v < 0:
            raise ValueError("Retry delay cannot be negative.")
        return v

    @field_validator("max_attempts")
    @classmethod
    def validate_max_attempts(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 1:
            raise ValueError("Max attempts must be at least 1 (omit it to retry forever).")
        return v

    @field_validator("extensions")
    @classmethod
    def validate_extensions(cls, v: list[str]) -> list[str]:
        """Normalizes extensions to '.ext' form and rejects an empty set."""
        normalized = []
        for ext in v:
            ext = ext.strip()
            if not ext:
                continue
            if not ext.startswith("."):
                ext = f".{ext}"
            if ext not in normalized:
                normalized.append(ext)
        if not normalized:
            raise ValueError("At least one file extension is required.")
        return normalized

    @classmethod
    def get_ini_keys(cls) -> set[str]:
        """Returns a set of all keys that may appear in the INI file."""
        internal_fields = {"config_path", "manifest_paths", "server_url"}
        return {key for key in cls.model_fields if key not in internal_fields}
