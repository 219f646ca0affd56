"""Settings loaded from environment variables."""

import os
from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic import BaseModel, Field, field_validator

ENV_PREFIX = "TASK_MANAGER"

DEFAULT_CATEGORIES = ["Work", "Personal", "Other"]

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip()


def _env_list(name: str, default: List[str]) -> List[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default)
    parts = [part.strip() for part in raw.split(",") if part.strip()]
    return parts or list(default)


class Settings(BaseModel):
    """Runtime settings shared by the CLI and the MCP server."""

    tasks_file: Path = Field(default=Path("tasks.json"), description="Implicit persistence file")
    categories: List[str] = Field(default_factory=lambda: list(DEFAULT_CATEGORIES))
    log_level: str = Field(default="INFO")

    @field_validator("log_level", mode="before")
    @classmethod
    def _known_log_level(cls, value: object) -> str:
        level = str(value).strip().upper()
        return level if level in LOG_LEVELS else "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            tasks_file=Path(_env(_k("FILE"), "tasks.json")).expanduser(),
            categories=_env_list(_k("CATEGORIES"), DEFAULT_CATEGORIES),
            log_level=_env(_k("LOG_LEVEL"), "INFO").upper(),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings, read once from the environment."""
    return Settings.from_env()
