"""Insight endpoints: recompute insights from caller-supplied logs."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException

from src.dependencies import AppSettings, EngineConfig
from src.models.base import ErrorDetail
from src.models.insights import Insight, InsightRequest
from src.saheli.insights import InsightEngine

router = APIRouter(prefix="/insights", tags=["insights"])
logger = logging.getLogger("saheli.routers.insights")


def build_engine(config: EngineConfig, settings: AppSettings, preset: str | None) -> InsightEngine:
    """Build an engine for ``preset``, falling back to the configured default.

    Raises:
        HTTPException: 404 if the preset does not exist.
    """
    try:
        return InsightEngine(config, preset or settings.insight_preset)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc.args[0])) from exc


@router.post(
    "",
    response_model=list[Insight],
    responses={404: {"model": ErrorDetail}},
)
async def generate(
    body: InsightRequest, config: EngineConfig, settings: AppSettings
) -> list[Insight]:
    engine = build_engine(config, settings, body.preset)
    return engine.generate(body.logs, now=body.now)
