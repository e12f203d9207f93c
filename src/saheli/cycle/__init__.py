"""Cycle position and next-start prediction.

Modules:
    cycle_model: cycle day, phase and next start from a CycleConfig
    strategies:  configured vs. history-inferred cycle-day strategies
"""

from src.saheli.cycle.cycle_model import (
    UNTRACKED,
    Untracked,
    current_cycle_day,
    cycle_phase,
    cycle_status,
    predict_next_start,
    record_period_start,
)
from src.saheli.cycle.strategies import (
    ConfiguredCycleStrategy,
    CycleStrategy,
    InferredFromHistoryStrategy,
    make_strategy,
)

__all__ = [
    "UNTRACKED",
    "Untracked",
    "current_cycle_day",
    "cycle_phase",
    "cycle_status",
    "predict_next_start",
    "record_period_start",
    "CycleStrategy",
    "ConfiguredCycleStrategy",
    "InferredFromHistoryStrategy",
    "make_strategy",
]
