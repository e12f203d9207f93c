"""Health check endpoint. Public, no auth required."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter

from src.dependencies import AppSettings, EngineConfig

router = APIRouter(tags=["system"])
logger = logging.getLogger("saheli.health")


@router.get("/health")
async def health_check(settings: AppSettings, config: EngineConfig) -> dict:
    """Liveness probe. Returns 200 if the API process is up."""
    return {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.environment,
        "insight_config": config.version,
        "presets": config.preset_names,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
