"""Application configuration settings.

This module defines the application-wide settings using Pydantic's BaseSettings.
It allows for loading configurations from environment variables and .env files,
providing type validation and default values.
"""

from pathlib import Path

from pydantic import Field
from pydantic import field_validator
from pydantic_settings import BaseSettings

# Default list of CORS allowed origins
DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://localhost:8000",
    "http://0.0.0.0:8000",
]

# Simulated processing time (seconds) for each step
DEFAULT_LATENCY_SECONDS: dict[str, float] = {
    "analysis": 3.0,
    "suggestions": 2.0,
    "summary": 2.5,
    "quiz": 2.0,
    "slides": 2.5,
    "course_sheet": 2.0,
    "tp_sheet": 2.5,
    "export_pdf": 2.0,
    "export_pptx": 2.5,
    "email": 1.5,
}


class Settings(BaseSettings):
    """Manages application settings, loading them from environment variables or an .env file.

    Attributes:
        storage_path: JSON file backing the key-value store. ``None`` keeps state in memory only.
        simulate_latency: When False every simulated delay resolves immediately.
        latency_seconds: Simulated delay per step name (see DEFAULT_LATENCY_SECONDS).
        content_preview_chars: Number of characters kept as the upload content preview.
        max_file_size: Maximum accepted upload size in bytes.
        random_seed: Optional seed for the placeholder word-count/read-time figures.
        email_template_name: Jinja2 template used to compose the results email body.
        log_level: Level of the application (``app.*``) loggers.
        cors_allowed_origins: List of allowed origins for CORS.
    """

    storage_path: Path | None = Field(default=Path("data/opticours.json"))
    simulate_latency: bool = Field(default=True)
    latency_seconds: dict[str, float] = Field(default_factory=lambda: dict(DEFAULT_LATENCY_SECONDS))
    content_preview_chars: int = Field(default=1000, ge=0)
    max_file_size: int = Field(default=25 * 1024 * 1024, description="Maximum upload size in bytes.")
    random_seed: int | None = Field(default=None)
    email_template_name: str = Field(default="results_email.jinja2")
    log_level: str = Field(default="INFO")

    cors_allowed_origins: list[str] = Field(
        default_factory=lambda: list(DEFAULT_CORS_ORIGINS),  # Use a copy of the default list
    )

    model_config = {
        "env_file": ".env",
        "env_prefix": "OPTICOURS_",
        "extra": "ignore",  # Ignore extra fields
    }

    @field_validator("storage_path", mode="before")  # type: ignore
    @classmethod
    def empty_storage_path_means_memory(cls, v: str | Path | None) -> str | Path | None:
        """An empty string (e.g. ``OPTICOURS_STORAGE_PATH=``) disables file persistence."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("latency_seconds", mode="after")  # type: ignore
    @classmethod
    def fill_latency_defaults(cls, v: dict[str, float]) -> dict[str, float]:
        """Merges partial overrides with the default per-step delays."""
        return {**DEFAULT_LATENCY_SECONDS, **v}

    @field_validator("cors_allowed_origins", mode="before")  # type: ignore
    @classmethod
    def assemble_cors_origins(cls, v: str | list[str] | None) -> list[str]:
        """Assembles the list of CORS allowed origins.

        If 'v' is a string, it splits it by commas. If 'v' is already a list,
        it's used directly. Otherwise, returns the default list of origins.

        Args:
            v: The value from the environment or direct assignment.

        Returns:
            A list of strings representing allowed CORS origins.
        """
        if isinstance(v, str) and v:
            return [origin.strip() for origin in v.split(",")]
        elif isinstance(v, list):
            return v
        # Return the default if env var is empty or not a string/list
        return list(DEFAULT_CORS_ORIGINS)  # Use a copy of the default list


settings = Settings()
