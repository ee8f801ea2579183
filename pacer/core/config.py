"""Process configuration using Pydantic Settings.

Configuration is environment-aware:
- PACER_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file

Executors never read these settings directly; only the factory does, so
explicitly constructed executors are unaffected by the environment.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Determine which environment to load (default: development)
PACER_ENV = os.getenv("PACER_ENV", "development")

# Project root (so .env resolution doesn't depend on current working directory)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

ENV_FILE_MAP = {
    "development": ".env.development",
    "testing": ".env.testing",
    "staging": ".env.staging",
    "production": ".env.production",
}

_env_filename = ENV_FILE_MAP.get(PACER_ENV, ".env.development")
_env_path = PROJECT_ROOT / _env_filename

_env_file = str(_env_path) if _env_path.is_file() else None


# Nested BaseSettings don't inherit env_file, so populate os.environ up front.
if _env_file:
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=True)


def _build_scheduler_settings() -> "SchedulerSettings":
    return SchedulerSettings()


def _build_log_settings() -> "LogSettings":
    return LogSettings()


class SchedulerSettings(BaseSettings):
    """Defaults used by ``create_executor`` when no options are passed."""

    policy: Literal["concurrent", "serial"] = Field(
        "concurrent",
        description="Dispatch policy: run a window's batch in parallel or one at a time",
    )
    max_operations_per_interval: int = Field(
        10,
        description="Maximum number of jobs reserved per window",
        ge=0,
    )
    rate_limit_interval_ms: int = Field(
        10000,
        description="Window length in milliseconds",
        gt=0,
    )
    buffer_ms: int = Field(
        200,
        description="Grace buffer added to the window length to absorb timer jitter",
        ge=0,
    )

    model_config = SettingsConfigDict(
        env_prefix="PACER_SCHEDULER_",
        case_sensitive=False,
    )


class LogSettings(BaseSettings):
    """Logging output configuration."""

    level: str = Field("INFO", description="Root log level name")
    format: Literal["json", "plain"] = Field(
        "json",
        description="Record format: JSON lines or plain text",
    )
    output: Literal["stdout", "file"] = Field(
        "stdout",
        description="Where records are written",
    )
    file_path: str | None = Field(
        None,
        description="Log file path when output is 'file' (default logs/pacer.log)",
    )
    max_bytes: int = Field(
        0,
        description="Rotate the log file at this size; 0 disables rotation",
        ge=0,
    )
    backup_count: int = Field(
        3,
        description="Number of rotated files to keep",
        ge=0,
    )

    model_config = SettingsConfigDict(
        env_prefix="PACER_LOG_",
        case_sensitive=False,
    )


class Settings(BaseSettings):
    """Main settings container.

    Nested settings are created via default_factory so env loading works.
    """

    pacer_env: str = PACER_ENV
    scheduler: SchedulerSettings = Field(default_factory=_build_scheduler_settings)
    log: LogSettings = Field(default_factory=_build_log_settings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


settings = Settings()
