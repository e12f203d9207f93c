"""Selectable ways of working out where someone is in their cycle.

Two strategies sit behind the ``CycleStrategy`` interface:

- ``ConfiguredCycleStrategy`` counts from the configured last period start
  and wraps modulo the cycle length.
- ``InferredFromHistoryStrategy`` ignores the configured start and reports
  the raw number of days since the most recent logged flow, without
  wrapping.

Usage::

    strategy = make_strategy("configured", config)
    status = strategy.status(today)
    print(status.status_label, status.phase_label)
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import date, datetime, timedelta

from src.models.cycle import CycleConfig, CycleStatus, CycleStrategyName
from src.saheli.cycle.cycle_model import (
    UNTRACKED,
    Untracked,
    current_cycle_day,
    cycle_phase,
    predict_next_start,
    whole_days_between,
)
from src.saheli.logbook import LogCollection, as_day, logged_days

logger = logging.getLogger("saheli.cycle.strategies")


class CycleStrategy(ABC):
    """Abstract base for cycle-day strategies."""

    name: CycleStrategyName

    def __init__(self, config: CycleConfig) -> None:
        self._config = config

    @property
    def config(self) -> CycleConfig:
        return self._config

    @abstractmethod
    def cycle_day(self, today: date | datetime) -> int | Untracked:
        """Return the current cycle day, or ``UNTRACKED``."""

    @abstractmethod
    def predict_next_start(self, today: date | datetime) -> date | Untracked:
        """Return the predicted next cycle start, or ``UNTRACKED``."""

    def status(self, today: date | datetime) -> CycleStatus:
        day = self.cycle_day(today)
        if day is UNTRACKED:
            return CycleStatus()
        next_start = self.predict_next_start(today)
        return CycleStatus(
            cycle_day=day,
            phase=cycle_phase(day, self._config),
            next_predicted_start=next_start or None,
        )


class ConfiguredCycleStrategy(CycleStrategy):
    """Cycle day from the configured last period start, modulo cycle length."""

    name = CycleStrategyName.configured

    def cycle_day(self, today: date | datetime) -> int | Untracked:
        return current_cycle_day(self._config, today)

    def predict_next_start(self, today: date | datetime) -> date | Untracked:
        return predict_next_start(self._config)


class InferredFromHistoryStrategy(CycleStrategy):
    """Cycle day as raw days elapsed since the most recent logged flow.

    Only logs dated on or before ``today`` are considered.  The day of the
    most recent flow itself is day 0, and there is no modulo: a long gap
    simply produces a large number.  The next start is predicted from the
    first day of that most recent run of consecutive flow days.
    """

    name = CycleStrategyName.inferred

    def __init__(self, logs: LogCollection, config: CycleConfig | None = None) -> None:
        super().__init__(config or CycleConfig())
        self._flow_days = [log.date for log in logged_days(logs) if log.is_period]

    def _flow_days_until(self, today: date | datetime) -> list[date]:
        cutoff = as_day(today)
        return [d for d in self._flow_days if d <= cutoff]

    def cycle_day(self, today: date | datetime) -> int | Untracked:
        flow_days = self._flow_days_until(today)
        if not flow_days:
            return UNTRACKED
        return whole_days_between(flow_days[-1], today)

    def predict_next_start(self, today: date | datetime) -> date | Untracked:
        flow_days = self._flow_days_until(today)
        if not flow_days:
            return UNTRACKED
        run_start = flow_days[-1]
        earlier = set(flow_days)
        while run_start - timedelta(days=1) in earlier:
            run_start -= timedelta(days=1)
        return run_start + timedelta(days=self._config.cycle_length_days)


def make_strategy(
    name: str | CycleStrategyName,
    config: CycleConfig,
    logs: LogCollection | None = None,
) -> CycleStrategy:
    """Build the strategy registered under ``name``.

    Raises:
        ValueError: If ``name`` is not a known strategy.
    """
    strategy_name = CycleStrategyName(name)
    logger.debug("Using %s cycle strategy", strategy_name.value)
    if strategy_name is CycleStrategyName.inferred:
        return InferredFromHistoryStrategy(logs or [], config)
    return ConfiguredCycleStrategy(config)

