"""Rule-triggered health insights.

Modules:
    rules:  metric extractors, rule definitions, preset → rule list
    engine: window selection, rule evaluation and fallbacks
"""

from src.saheli.insights.engine import InsightEngine, generate_insights
from src.saheli.insights.rules import MetricReading, Rule, build_rules

__all__ = [
    "InsightEngine",
    "generate_insights",
    "MetricReading",
    "Rule",
    "build_rules",
]
