"""Cycle day, phase, and next-start prediction from a cycle configuration.

Everything here is calendar arithmetic at whole-day granularity.  "Today"
is always passed in by the caller; nothing reads the system clock.

When no period start has been recorded the functions return ``UNTRACKED``
instead of raising, and callers render that as "Not tracked".
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from enum import Enum

from src.models.cycle import CycleConfig, CycleStatus, Phase
from src.saheli.logbook import as_day

logger = logging.getLogger("saheli.cycle")

# Phase boundaries are fixed cycle days, independent of the configured
# cycle length.
FOLLICULAR_LAST_DAY = 14
OVULATION_LAST_DAY = 16


class Untracked(Enum):
    """Returned when no period start has been recorded yet."""

    UNTRACKED = "untracked"

    def __bool__(self) -> bool:
        return False


UNTRACKED = Untracked.UNTRACKED


def whole_days_between(start: date | datetime, end: date | datetime) -> int:
    """Days from ``start`` to ``end``, ignoring any time of day."""
    return (as_day(end) - as_day(start)).days


def current_cycle_day(config: CycleConfig, today: date | datetime) -> int | Untracked:
    """Return the 1-based day within the current cycle.

    Wraps modulo ``cycle_length_days``, so the result is always in
    ``[1, cycle_length_days]``, including when ``today`` is before the
    recorded start.

    Args:
        config: Cycle settings.
        today:  Reference day supplied by the caller.

    Returns:
        Cycle day, or ``UNTRACKED`` if no period start is recorded.
    """
    if config.last_period_start_date is None:
        return UNTRACKED
    elapsed = whole_days_between(config.last_period_start_date, today)
    # Python's % is non-negative for a positive divisor.
    return elapsed % config.cycle_length_days + 1


def cycle_phase(cycle_day: int, config: CycleConfig) -> Phase:
    """Map a cycle day to its phase.

    Only ``period_length_days`` is consulted; the follicular and ovulation
    boundaries are the fixed days 14 and 16.
    """
    if cycle_day <= config.period_length_days:
        return Phase.menstruation
    if cycle_day <= FOLLICULAR_LAST_DAY:
        return Phase.follicular
    if cycle_day <= OVULATION_LAST_DAY:
        return Phase.ovulation
    return Phase.luteal


def predict_next_start(config: CycleConfig) -> date | Untracked:
    """Predict the next cycle start as last start + cycle length."""
    if config.last_period_start_date is None:
        return UNTRACKED
    return config.last_period_start_date + timedelta(days=config.cycle_length_days)


def record_period_start(config: CycleConfig, start: date | datetime) -> CycleConfig:
    """Return a copy of ``config`` with a newly logged period start."""
    updated = config.model_copy(update={"last_period_start_date": as_day(start)})
    logger.info(
        "Period start recorded: %s → %s",
        config.last_period_start_date,
        updated.last_period_start_date,
    )
    return updated


def cycle_status(config: CycleConfig, today: date | datetime) -> CycleStatus:
    """Bundle cycle day, phase and next start into one value."""
    day = current_cycle_day(config, today)
    if day is UNTRACKED:
        return CycleStatus()
    next_start = predict_next_start(config)
    return CycleStatus(
        cycle_day=day,
        phase=cycle_phase(day, config),
        next_predicted_start=next_start or None,
    )
