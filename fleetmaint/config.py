"""Settings from environment variables, and logging setup."""

import logging
import sys
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DATA_DIR = Path("data")
DEFAULT_POLL_INTERVAL = 30.0
DEFAULT_FETCH_TIMEOUT = 10.0
DEFAULT_LOG_LEVEL = "INFO"

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class Settings(BaseSettings):
    """Runtime configuration, read from FLEETMAINT_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="FLEETMAINT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    data_dir: Path = Field(default=DEFAULT_DATA_DIR, description="YAML backend directory")
    poll_interval: float = Field(
        default=DEFAULT_POLL_INTERVAL, gt=0, description="Seconds between telemetry polls"
    )
    fetch_timeout: float = Field(
        default=DEFAULT_FETCH_TIMEOUT, gt=0, description="Per-request telemetry timeout"
    )
    log_level: str = Field(default=DEFAULT_LOG_LEVEL, description="Root log level")
    seed: bool = Field(default=True, description="Load seed data on first run")

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()


def configure_logging(level: str = DEFAULT_LOG_LEVEL) -> None:
    """Send log records to stderr with timestamps."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        stream=sys.stderr,
    )
