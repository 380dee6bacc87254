"""Mini README: Centralised configuration models and helpers for Dronebase.

Structure:
    * DronebaseSettings - Pydantic model describing runtime configuration.
    * get_settings - cached accessor for environment-aware settings.

Usage:
    Import ``get_settings`` to read environment variables (prefixed with
    ``DRONEBASE_``), choose where mission plans are written, and point the
    fleet registry at its database. The configuration is cached so the cost of
    validation is incurred only once per process.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, validator
from pydantic_settings import BaseSettings


class DronebaseSettings(BaseSettings):
    """Runtime configuration for the Dronebase service."""

    environment: str = Field(
        "development",
        description="Environment label controlling debug toggles and logging levels.",
    )
    mission_directory: Path = Field(
        Path("missions"),
        description=(
            "Directory that receives generated .plan files. Point this at the"
            " QGroundControl Missions folder to make plans appear in the GCS."
        ),
    )
    database_url: str = Field(
        "sqlite:///./dronebase.db",
        description="SQLAlchemy URL of the database holding the drone fleet.",
    )
    coordinate_log_capacity: int = Field(
        10_000,
        description="Maximum number of received coordinates kept in memory.",
        ge=1,
    )
    api_prefix: str = Field(
        "/api",
        description="Path prefix under which the coordinate and drone routes are mounted.",
    )
    interface_host: str = Field(
        "0.0.0.0",
        description="Network interface for the HTTP service to bind to.",
    )
    interface_port: int = Field(
        8000,
        description="Default port the HTTP service exposes.",
        ge=1,
        le=65535,
    )
    log_level: str = Field("INFO", description="Root logging level.")

    class Config:
        env_prefix = "DRONEBASE_"
        env_file = ".env"
        case_sensitive = False

    @validator("mission_directory", pre=True)
    def _expand_path(cls, value: Optional[str | Path]) -> Path:
        """Ensure configured paths expand user directories and exist."""

        path = Path(value).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    @validator("api_prefix")
    def _normalise_prefix(cls, value: str) -> str:
        """Strip trailing slashes and guarantee a leading one."""

        value = value.strip().rstrip("/")
        if value and not value.startswith("/"):
            value = f"/{value}"
        return value

    @validator("log_level")
    def _upper_level(cls, value: str) -> str:
        return value.strip().upper()


@lru_cache()
def get_settings() -> DronebaseSettings:
    """Return cached settings, ensuring consistent configuration across modules."""

    return DronebaseSettings()
