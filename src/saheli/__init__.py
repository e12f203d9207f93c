"""Saheli Cycle & Insight Engine.

Derives cycle position and rule-triggered health insights from a person's
daily logs.  The cycle and insight functions are pure: callers pass in the logs, the
cycle settings and "now", and get plain values back.

Subpackages:
    cycle/         cycle day, phase, next start; configured vs. inferred strategies
    insights/      trailing-window rule engine

Core modules:
    config_loader  Load/validate/hot-reload insight_config.yaml
    logbook        Date-keyed log collection helpers
    month_calendar Month calendar markers
"""

from src.saheli.config_loader import InsightConfig, get_insight_config
from src.saheli.cycle import UNTRACKED, current_cycle_day, cycle_phase, predict_next_start
from src.saheli.insights import InsightEngine, generate_insights

__all__ = [
    "InsightConfig",
    "get_insight_config",
    "UNTRACKED",
    "current_cycle_day",
    "cycle_phase",
    "predict_next_start",
    "InsightEngine",
    "generate_insights",
]
