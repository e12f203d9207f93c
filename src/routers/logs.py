"""Log book endpoints: save a day and re-analyse, month calendar markers."""

from __future__ import annotations

import logging

from fastapi import APIRouter

from src.dependencies import AppSettings, EngineConfig
from src.models.base import ErrorDetail
from src.models.insights import SaveLogResponse
from src.models.tracking import CalendarDay, CalendarRequest, SaveLogRequest
from src.routers.insights import build_engine
from src.saheli.logbook import coerce_logs, save_day_log
from src.saheli.month_calendar import month_markers

router = APIRouter(prefix="/logs", tags=["logs"])
logger = logging.getLogger("saheli.routers.logs")


@router.post(
    "/save",
    response_model=SaveLogResponse,
    responses={404: {"model": ErrorDetail}},
)
async def save_log(
    body: SaveLogRequest, config: EngineConfig, settings: AppSettings
) -> SaveLogResponse:
    logs = save_day_log(coerce_logs(body.logs), body.log)
    engine = build_engine(config, settings, None)
    insights = engine.generate(logs, now=body.now)
    logger.info("Saved log for %s; %d logged day(s)", body.log.date, len(logs))
    return SaveLogResponse(logs=list(logs.values()), insights=insights)


@router.post("/calendar", response_model=list[CalendarDay])
async def calendar(body: CalendarRequest) -> list[CalendarDay]:
    return month_markers(body.logs, body.year, body.month)
