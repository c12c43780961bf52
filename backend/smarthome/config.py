"""
SmartHome API: Application Configuration
========================================

What:  Centralized configuration management using Pydantic Settings.
Why:   Type-safe environment variable loading with validation on startup.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by main.py (lifespan, CORS, logging) and database.py.
When:  Loaded once at module import time.
"""

from pathlib import Path
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

# JSON schemas shipped with the package
PACKAGED_SCHEMA_DIR = Path(__file__).resolve().parent / "validation"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have defaults suitable for a local MongoDB.
    """

    # ── MongoDB ───────────────────────────────────────────────────────────
    mongodb_url: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection string",
    )
    mongodb_database: str = Field(default="SmartHome")

    # What: How long the driver waits to find a usable server before an
    # operation fails. The pipeline never retries, so this bounds how long a
    # request can hang on an unreachable database.
    mongodb_server_selection_timeout_ms: int = Field(default=5000, ge=100, le=60000)

    # ── Validation ────────────────────────────────────────────────────────
    # Empty means "use the schemas bundled in smarthome/validation"
    validation_schema_dir: str = Field(default="")

    @property
    def schema_dir(self) -> Path:
        if self.validation_schema_dir:
            return Path(self.validation_schema_dir)
        return PACKAGED_SCHEMA_DIR

    # ── CORS ──────────────────────────────────────────────────────────────
    cors_origins: str = Field(default="http://localhost:3000")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=8000, ge=1024, le=65535)

    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


settings = Settings()
