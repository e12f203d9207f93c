"""Insight rules: metric extractors, thresholds and message templates.

A rule reads a window of daily logs, reduces it to a single metric,
compares that metric against a configured threshold and, when the
comparison holds, renders one ``Insight``.

Rules never raise on sparse data.  An extractor that finds nothing to
measure returns ``None`` and the rule is skipped, the same as when the
sample count falls below the rule's minimum.
"""

from __future__ import annotations

import logging
import operator
import statistics
from dataclasses import dataclass
from typing import Callable, Sequence

from src.models.insights import DEFAULT_SEVERITY, Insight, InsightKind, Severity
from src.models.tracking import DailyLog, Mood, PeriodFlow
from src.saheli.config_loader import RULE_DEFAULTS, RulePreset, RuleSettings

logger = logging.getLogger("saheli.insights.rules")

LOW_MOODS = frozenset({Mood.sad, Mood.anxious, Mood.irritable})

_COMPARISONS: dict[str, Callable[[float, float], bool]] = {
    "lt": operator.lt,
    "gt": operator.gt,
}


@dataclass(frozen=True)
class MetricReading:
    """A metric value and the number of logs it was computed from."""

    value: float
    samples: int


Extractor = Callable[[Sequence[DailyLog]], MetricReading | None]


# ---------------------------------------------------------------------------
# Metric extractors
# ---------------------------------------------------------------------------


def mean_water_cups(window: Sequence[DailyLog]) -> MetricReading | None:
    """Mean cups of water over logs that recorded water."""
    values = [log.water_cups for log in window if log.water_cups is not None]
    if not values:
        return None
    return MetricReading(value=statistics.fmean(values), samples=len(values))


def low_mood_count(window: Sequence[DailyLog]) -> MetricReading | None:
    """Number of logs with a sad, anxious or irritable mood."""
    count = sum(1 for log in window if log.mood in LOW_MOODS)
    return MetricReading(value=count, samples=len(window))


def low_mood_fraction(window: Sequence[DailyLog]) -> MetricReading | None:
    """Share of mood-bearing logs whose mood was low."""
    moods = [log.mood for log in window if log.mood is not None]
    if not moods:
        return None
    low = sum(1 for mood in moods if mood in LOW_MOODS)
    return MetricReading(value=low / len(moods), samples=len(moods))


def exercise_days(window: Sequence[DailyLog]) -> MetricReading | None:
    """Number of logs where exercise was recorded."""
    count = sum(1 for log in window if log.exercised)
    return MetricReading(value=count, samples=len(window))


def mean_total_calories(window: Sequence[DailyLog]) -> MetricReading | None:
    """Mean daily calories over logs with a positive meal total."""
    values = [log.total_calories for log in window if log.total_calories > 0]
    if not values:
        return None
    return MetricReading(value=statistics.fmean(values), samples=len(values))


def heavy_flow_days(window: Sequence[DailyLog]) -> MetricReading | None:
    """Number of logs with heavy period flow."""
    count = sum(1 for log in window if log.period_flow is PeriodFlow.heavy)
    return MetricReading(value=count, samples=len(window))


# ---------------------------------------------------------------------------
# Rule
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Rule:
    """One independently evaluated insight rule.

    Attributes:
        name:        Rule identifier, copied onto the insight.
        extract:     Window → metric reading (or None when nothing to measure).
        min_samples: Readings with fewer samples are skipped.
        comparison:  'lt' or 'gt'; the rule fires when ``value <cmp> threshold``.
        threshold:   Configured threshold.
        template:    ``str.format`` template; receives value, threshold,
                     samples and window.
        kind:        Insight kind.
        severity:    Insight severity.
    """

    name: str
    extract: Extractor
    min_samples: int
    comparison: str
    threshold: float
    template: str
    kind: InsightKind
    severity: Severity

    def evaluate(self, window: Sequence[DailyLog]) -> Insight | None:
        """Return an insight if the rule fires on ``window``, else None."""
        reading = self.extract(window)
        if reading is None or reading.samples < max(self.min_samples, 1):
            logger.debug(
                "Skipping rule %s: %d sample(s), need %d",
                self.name,
                reading.samples if reading else 0,
                self.min_samples,
            )
            return None

        if not _COMPARISONS[self.comparison](reading.value, self.threshold):
            return None

        return Insight(
            kind=self.kind,
            severity=self.severity,
            message=self.template.format(
                value=reading.value,
                threshold=self.threshold,
                samples=reading.samples,
                window=len(window),
            ),
            rule=self.name,
        )


# ---------------------------------------------------------------------------
# Rule definitions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class _RuleDefinition:
    extract: Extractor
    comparison: str
    template: str
    kind: InsightKind
    severity: Severity | None = None


# Keyed by (rule name, variant).  Variant is None for single-variant rules.
_DEFINITIONS: dict[tuple[str, str | None], _RuleDefinition] = {
    ("hydration", None): _RuleDefinition(
        extract=mean_water_cups,
        comparison="lt",
        template=(
            "Your water intake averages {value:.1f} cups a day, below the "
            "recommended {threshold:.1f}. Consider drinking more water."
        ),
        kind=InsightKind.warning,
    ),
    ("mood", "count"): _RuleDefinition(
        extract=low_mood_count,
        comparison="gt",
        template=(
            "Persistent low mood detected on {value:.0f} of your last {window} "
            "logged days. Consider consulting a healthcare provider."
        ),
        kind=InsightKind.alert,
    ),
    ("mood", "fraction"): _RuleDefinition(
        extract=low_mood_fraction,
        comparison="gt",
        template=(
            "Persistent low mood detected on {value:.0%} of the days you logged "
            "a mood. Consider consulting a healthcare provider."
        ),
        kind=InsightKind.alert,
    ),
    ("exercise", None): _RuleDefinition(
        extract=exercise_days,
        comparison="lt",
        template=(
            "Low physical activity: you exercised on {value:.0f} of your last "
            "{window} logged days. Regular exercise can help manage PMS symptoms."
        ),
        kind=InsightKind.info,
    ),
    ("calories", None): _RuleDefinition(
        extract=mean_total_calories,
        comparison="lt",
        template=(
            "Your meals average {value:.1f} calories a day, below {threshold:.0f}. "
            "Make sure you are eating enough, especially around your period."
        ),
        kind=InsightKind.warning,
    ),
    ("heavy_flow", None): _RuleDefinition(
        extract=heavy_flow_days,
        comparison="gt",
        template=(
            "Heavy flow was logged on {value:.0f} recent days. If this is unusual "
            "for you, consider talking to a healthcare provider."
        ),
        kind=InsightKind.alert,
    ),
}


def make_rule(settings: RuleSettings) -> Rule:
    """Combine a rule's fixed definition with its configured parameters.

    Raises:
        KeyError: If no definition exists for the rule name and variant.
    """
    definition = _DEFINITIONS[(settings.name, settings.variant)]
    return Rule(
        name=settings.name,
        extract=definition.extract,
        min_samples=settings.min_samples,
        comparison=definition.comparison,
        threshold=settings.threshold,
        template=definition.template,
        kind=definition.kind,
        severity=definition.severity or DEFAULT_SEVERITY[definition.kind],
    )


def build_rules(preset: RulePreset) -> list[Rule]:
    """Build the enabled rules of a preset in evaluation order."""
    rules = [
        make_rule(preset.rules[name])
        for name in RULE_DEFAULTS
        if name in preset.rules and preset.rules[name].enabled
    ]
    logger.debug(
        "Built %d rule(s) for preset %s: %s",
        len(rules), preset.name, ", ".join(r.name for r in rules),
    )
    return rules
