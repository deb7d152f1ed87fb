"""
Friend Finder: Centralized configuration.

Loads all settings from .env and the environment.
This module is the foundation for every other module in the project.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, field_validator

# Load .env from project root (two levels up from src/config.py)
_ENV_PATH = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_ENV_PATH)

_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class Settings(BaseModel):
    """Application settings loaded from environment variables."""

    # Persistence medium: "sqlite" | "memory"
    STORAGE_PROVIDER: str = "sqlite"

    # SQLite
    DATABASE_PATH: str = "data/friend_finder.db"

    # Activity planner
    TIMEZONE: str = "Europe/Copenhagen"
    PLAN_DAYS_AHEAD: int = 5
    PLAN_TIMES_OF_DAY: list[str] = ["18:00", "19:00", "20:00"]

    LOG_LEVEL: str = "INFO"

    @field_validator("PLAN_TIMES_OF_DAY", mode="before")
    @classmethod
    def parse_times(cls, v: str | list[str]) -> list[str]:
        if isinstance(v, list):
            return v
        if isinstance(v, str) and v.strip():
            return [t.strip() for t in v.split(",") if t.strip()]
        return ["18:00", "19:00", "20:00"]

    @field_validator("PLAN_DAYS_AHEAD", mode="before")
    @classmethod
    def parse_days(cls, v: str | int) -> int:
        days = int(v)
        if days < 1:
            raise ValueError("PLAN_DAYS_AHEAD must be at least 1")
        return days


def _load_settings() -> Settings:
    """Load settings from environment."""
    return Settings(
        STORAGE_PROVIDER=os.getenv("STORAGE_PROVIDER", "sqlite"),
        DATABASE_PATH=os.getenv("DATABASE_PATH", "data/friend_finder.db"),
        TIMEZONE=os.getenv("TIMEZONE", "Europe/Copenhagen"),
        PLAN_DAYS_AHEAD=os.getenv("PLAN_DAYS_AHEAD", "5"),
        PLAN_TIMES_OF_DAY=os.getenv("PLAN_TIMES_OF_DAY", "18:00,19:00,20:00"),
        LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO"),
    )


def configure_logging(level: str | None = None) -> None:
    """Apply the project-wide log format at the configured level."""
    logging.basicConfig(
        level=(level or settings.LOG_LEVEL).upper(),
        format=_LOG_FORMAT,
    )


# Singleton: imported by all other modules as:
#   from src.config import settings
settings = _load_settings()
