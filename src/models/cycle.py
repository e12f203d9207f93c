"""Pydantic models for cycle configuration and derived cycle status."""

from __future__ import annotations

from datetime import date
from enum import Enum

from pydantic import Field

from src.models.base import FrozenSaheliBase, SaheliBase
from src.models.tracking import DailyLog


class Phase(str, Enum):
    menstruation = "menstruation"
    follicular = "follicular"
    ovulation = "ovulation"
    luteal = "luteal"

    @property
    def label(self) -> str:
        return _PHASE_LABELS[self]


_PHASE_LABELS = {
    Phase.menstruation: "Menstruation",
    Phase.follicular: "Follicular Phase",
    Phase.ovulation: "Ovulation",
    Phase.luteal: "Luteal Phase",
}


class CycleStrategyName(str, Enum):
    configured = "configured"
    inferred = "inferred"


class CycleConfig(SaheliBase):
    """Per-person cycle settings.

    Created with defaults on first use and overwritten whenever settings
    change or a new period start is logged.  No ``last_period_start_date``
    means tracking has not started yet.
    """

    cycle_length_days: int = Field(default=28, ge=20, le=40)
    period_length_days: int = Field(default=5, ge=2, le=10)
    last_period_start_date: date | None = None

    @property
    def is_tracking(self) -> bool:
        return self.last_period_start_date is not None


class CycleStatus(FrozenSaheliBase):
    """Derived cycle position.  All fields are None when untracked."""

    cycle_day: int | None = None
    phase: Phase | None = None
    next_predicted_start: date | None = None

    @property
    def tracked(self) -> bool:
        return self.cycle_day is not None

    @property
    def status_label(self) -> str:
        return f"Day {self.cycle_day}" if self.cycle_day is not None else "Not tracked"

    @property
    def phase_label(self) -> str:
        return self.phase.label if self.phase is not None else "Not tracked"


# ---------- Request / response bodies ----------

class CycleStatusRequest(SaheliBase):
    config: CycleConfig = Field(default_factory=CycleConfig)
    today: date
    strategy: CycleStrategyName | None = None
    logs: list[DailyLog] = Field(default_factory=list)


class CycleStatusRead(SaheliBase):
    tracked: bool
    cycle_day: int | None = None
    phase: Phase | None = None
    phase_label: str
    status_label: str
    next_predicted_start: date | None = None
    strategy: CycleStrategyName


class PeriodStartRequest(SaheliBase):
    config: CycleConfig = Field(default_factory=CycleConfig)
    start_date: date
