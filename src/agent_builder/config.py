"""Process-wide settings, read once from the environment."""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Optional, Tuple

from pydantic import BaseModel

DEFAULT_MODEL = "gemini-2.5-flash"

AVAILABLE_MODELS: Tuple[str, ...] = (
    "gemini-2.5-flash",
    "gemini-2.5-pro",
    "gemini-2.5-flash-lite",
)


class Settings(BaseModel):
    """Read-only configuration shared by the CLI and the loaders."""

    default_model: str = DEFAULT_MODEL
    available_models: Tuple[str, ...] = AVAILABLE_MODELS
    log_level: Optional[str] = None
    gcloud_binary: str = "gcloud"

    model_config = {"frozen": True}


def load_settings(environ: Optional[dict] = None) -> Settings:
    """Build settings from ``environ`` (defaults to ``os.environ``)."""
    env = os.environ if environ is None else environ
    return Settings(
        default_model=env.get("AGENT_BUILDER_DEFAULT_MODEL") or DEFAULT_MODEL,
        log_level=env.get("AGENT_BUILDER_LOG_LEVEL") or None,
        gcloud_binary=env.get("AGENT_BUILDER_GCLOUD") or "gcloud",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()
