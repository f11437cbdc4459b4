"""
MindMate — Centralized configuration.

Loads all settings from .env and validates required keys.
Every adapter reads its connection details from here.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, field_validator

# Load .env from project root (one level up from mindmate/config.py)
_ENV_PATH = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_ENV_PATH)


class Settings(BaseModel):
    """Application settings loaded from environment variables."""

    # Remote MindMate API
    MINDMATE_API_URL: str
    MINDMATE_API_TOKEN: str = ""      # empty → no Authorization header
    HTTP_TIMEOUT_SECONDS: float = 50.0

    # Which side of the app this process acts for: "mentor" | "learner"
    VIEWER_ROLE: str = "mentor"

    LOG_LEVEL: str = "INFO"

    @field_validator("MINDMATE_API_URL")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("VIEWER_ROLE", mode="before")
    @classmethod
    def parse_role(cls, v: str) -> str:
        role = (v or "mentor").strip().lower()
        if role not in ("mentor", "learner"):
            raise ValueError(f"VIEWER_ROLE must be 'mentor' or 'learner', got {v!r}")
        return role

    @field_validator("HTTP_TIMEOUT_SECONDS", mode="before")
    @classmethod
    def parse_timeout(cls, v: str | float) -> float:
        return float(v)


def _load_settings() -> Settings:
    """Load settings from environment, validating required keys."""
    api_url = os.getenv("MINDMATE_API_URL", "")

    if not api_url or api_url.startswith("your-"):
        print("ERROR: MINDMATE_API_URL is missing or not set in .env", file=sys.stderr)
        sys.exit(1)

    return Settings(
        MINDMATE_API_URL=api_url,
        MINDMATE_API_TOKEN=os.getenv("MINDMATE_API_TOKEN", ""),
        HTTP_TIMEOUT_SECONDS=os.getenv("HTTP_TIMEOUT_SECONDS", "50"),
        VIEWER_ROLE=os.getenv("VIEWER_ROLE", "mentor"),
        LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO"),
    )


# Singleton — imported by all other modules as:
#   from mindmate.config import settings
settings = _load_settings()
