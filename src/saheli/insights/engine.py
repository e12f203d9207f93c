"""Rule-driven health insight engine.

Selects a trailing window of logged days and runs every enabled rule of the
chosen preset over it, in a fixed order.  The output list is rebuilt from
scratch on every call; the engine keeps no state between calls, so the same
logs and the same "now" always produce the same insights.

Fallbacks:
- empty window  → a single info insight inviting the person to start logging
- no rule fired → a single success insight
Neither fallback appears alongside rule-triggered insights.

Usage::

    engine = InsightEngine()
    insights = engine.generate(logs, now=date(2026, 2, 23))
    for insight in insights:
        print(insight.kind, insight.message)
"""

from __future__ import annotations

import logging
from datetime import date, datetime

from src.models.insights import DEFAULT_SEVERITY, Insight, InsightKind
from src.models.tracking import DailyLog
from src.saheli.config_loader import InsightConfig, RulePreset, get_insight_config
from src.saheli.insights.rules import Rule, build_rules
from src.saheli.logbook import LogCollection, as_day, logged_days

logger = logging.getLogger("saheli.insights.engine")

EMPTY_STATE_INSIGHT = Insight(
    kind=InsightKind.info,
    severity=DEFAULT_SEVERITY[InsightKind.info],
    message="Start logging your days to see personalised health insights.",
    rule="empty_state",
)

ALL_CLEAR_INSIGHT = Insight(
    kind=InsightKind.success,
    severity=DEFAULT_SEVERITY[InsightKind.success],
    message="Your recent patterns look healthy. Keep tracking!",
    rule="all_clear",
)


class InsightEngine:
    """Evaluate a preset's rules over the most recent logged days.

    Args:
        config: Insight configuration; defaults to the global singleton.
        preset: Preset name; defaults to the config's active preset.

    Raises:
        KeyError: If ``preset`` is not defined in the config.
    """

    def __init__(self, config: InsightConfig | None = None, preset: str | None = None) -> None:
        self._config = config or get_insight_config()
        self._preset = self._config.preset(preset)
        self._rules = tuple(build_rules(self._preset))

    @property
    def preset(self) -> RulePreset:
        return self._preset

    @property
    def rules(self) -> tuple[Rule, ...]:
        return self._rules

    @property
    def window_size(self) -> int:
        return self._preset.window_size

    def select_window(self, logs: LogCollection, now: date | datetime) -> list[DailyLog]:
        """Return the most recent logged days on or before ``now``, newest first.

        Days without a log, and logs with nothing recorded, are not part of
        the window and do not count toward its size.
        """
        today = as_day(now)
        eligible = [log for log in logged_days(logs) if log.date <= today]
        eligible.sort(key=lambda log: log.date, reverse=True)
        return eligible[: self.window_size]

    def generate(self, logs: LogCollection, now: date | datetime) -> list[Insight]:
        """Recompute the full insight list.

        Args:
            logs: Date-keyed mapping or iterable of daily logs.
            now:  Reference time supplied by the caller; only its day is used.

        Returns:
            Triggered insights in rule order, or exactly one fallback insight.
        """
        window = self.select_window(logs, now)
        if not window:
            logger.info("No logged days up to %s; returning empty-state insight", as_day(now))
            return [EMPTY_STATE_INSIGHT]

        insights = [
            insight
            for insight in (rule.evaluate(window) for rule in self._rules)
            if insight is not None
        ]

        logger.info(
            "Evaluated %d rule(s) over %d day(s) (preset %s): %d fired",
            len(self._rules), len(window), self._preset.name, len(insights),
        )

        if not insights:
            return [ALL_CLEAR_INSIGHT]
        return insights


def generate_insights(
    logs: LogCollection,
    now: date | datetime,
    config: InsightConfig | None = None,
    preset: str | None = None,
) -> list[Insight]:
    """One-shot helper: build an engine and generate insights."""
    return InsightEngine(config, preset).generate(logs, now)
