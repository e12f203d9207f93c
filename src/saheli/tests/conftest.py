"""Shared fixtures and log builders for cycle and insight engine tests."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Any

import pytest

from src.models.cycle import CycleConfig
from src.models.tracking import DailyLog
from src.saheli.config_loader import InsightConfig, load_insight_config, reload_insight_config

# Canonical reference day
TEST_DATE = date(2024, 1, 15)


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def make_log(day: date, **fields: Any) -> DailyLog:
    return DailyLog(date=day, **fields)


def build_logs(entries: list[dict[str, Any]], end: date = TEST_DATE) -> dict[str, DailyLog]:
    """Build consecutive daily logs ending on ``end`` (last entry = ``end``)."""
    start = end - timedelta(days=len(entries) - 1)
    logs = {}
    for offset, fields in enumerate(entries):
        day = start + timedelta(days=offset)
        logs[day.isoformat()] = make_log(day, **fields)
    return logs


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def insight_config() -> InsightConfig:
    """Load the real insight config for tests."""
    return load_insight_config()


@pytest.fixture
def restore_insight_config():
    """Put the bundled config back into the global singleton after the test."""
    yield
    reload_insight_config()


@pytest.fixture
def cycle_config() -> CycleConfig:
    """The default 28/5 cycle starting on 2024-01-01."""
    return CycleConfig(
        cycle_length_days=28,
        period_length_days=5,
        last_period_start_date=date(2024, 1, 1),
    )


@pytest.fixture
def healthy_logs() -> dict[str, DailyLog]:
    """Ten days that trip none of the standard rules."""
    return build_logs(
        [{"water_cups": 8, "exercise": True, "mood": "happy"} for _ in range(10)]
    )
