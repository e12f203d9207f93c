"""Shared FastAPI dependencies injected into route handlers."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends

from src.config import Settings, get_settings
from src.saheli.config_loader import InsightConfig, get_insight_config


def get_engine_config() -> InsightConfig:
    """Return the loaded insight configuration.

    The app lifespan loads it from ``insight_config_path`` at startup.
    Override this dependency to serve a different config.
    """
    return get_insight_config()


# Annotated shortcuts for route signatures
AppSettings = Annotated[Settings, Depends(get_settings)]
EngineConfig = Annotated[InsightConfig, Depends(get_engine_config)]
