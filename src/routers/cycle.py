"""Cycle status endpoints.

Stateless: the caller sends its stored ``CycleConfig`` (and, for the
inferred strategy, its logs) and gets the derived values back.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter

from src.dependencies import EngineConfig
from src.models.cycle import (
    CycleConfig,
    CycleStatusRead,
    CycleStatusRequest,
    PeriodStartRequest,
)
from src.saheli.cycle import make_strategy, record_period_start

router = APIRouter(prefix="/cycle", tags=["cycle"])
logger = logging.getLogger("saheli.routers.cycle")


@router.post("/status", response_model=CycleStatusRead)
async def cycle_status(body: CycleStatusRequest, config: EngineConfig) -> CycleStatusRead:
    strategy = make_strategy(body.strategy or config.cycle_strategy, body.config, body.logs)
    status = strategy.status(body.today)
    return CycleStatusRead(
        tracked=status.tracked,
        cycle_day=status.cycle_day,
        phase=status.phase,
        phase_label=status.phase_label,
        status_label=status.status_label,
        next_predicted_start=status.next_predicted_start,
        strategy=strategy.name,
    )


@router.post("/period-start", response_model=CycleConfig)
async def period_start(body: PeriodStartRequest) -> CycleConfig:
    return record_period_start(body.config, body.start_date)
