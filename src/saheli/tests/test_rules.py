"""Unit tests for insight metric extractors and rule evaluation."""

from __future__ import annotations

from datetime import date

import pytest

from src.models.insights import DEFAULT_SEVERITY, InsightKind, Severity
from src.saheli.config_loader import InsightConfig, RuleSettings
from src.saheli.insights.rules import (
    MetricReading,
    Rule,
    build_rules,
    exercise_days,
    heavy_flow_days,
    low_mood_count,
    low_mood_fraction,
    make_rule,
    mean_total_calories,
    mean_water_cups,
)
from src.saheli.tests.conftest import make_log

DAY = date(2024, 1, 15)


# ---------------------------------------------------------------------------
# Extractors
# ---------------------------------------------------------------------------


class TestExtractors:
    def test_mean_water_only_counts_present_values(self) -> None:
        window = [make_log(DAY, water_cups=4), make_log(DAY, water_cups=8), make_log(DAY, mood="calm")]
        assert mean_water_cups(window) == MetricReading(value=6.0, samples=2)

    def test_mean_water_counts_explicit_zero(self) -> None:
        window = [make_log(DAY, water_cups=0), make_log(DAY, water_cups=6)]
        assert mean_water_cups(window) == MetricReading(value=3.0, samples=2)

    def test_mean_water_none_without_data(self) -> None:
        assert mean_water_cups([make_log(DAY, mood="calm")]) is None
        assert mean_water_cups([]) is None

    def test_low_mood_count(self) -> None:
        window = [
            make_log(DAY, mood="sad"),
            make_log(DAY, mood="anxious"),
            make_log(DAY, mood="happy"),
            make_log(DAY, water_cups=3),
        ]
        assert low_mood_count(window) == MetricReading(value=2, samples=4)

    def test_low_mood_fraction_uses_mood_days_only(self) -> None:
        window = [
            make_log(DAY, mood="irritable"),
            make_log(DAY, mood="calm"),
            make_log(DAY, water_cups=3),
            make_log(DAY, water_cups=3),
        ]
        assert low_mood_fraction(window) == MetricReading(value=0.5, samples=2)

    def test_low_mood_fraction_none_without_moods(self) -> None:
        assert low_mood_fraction([make_log(DAY, water_cups=3)]) is None

    def test_exercise_days(self) -> None:
        window = [
            make_log(DAY, exercise=True),
            make_log(DAY, exercise="30 min walk"),
            make_log(DAY, exercise=False, water_cups=2),
        ]
        assert exercise_days(window) == MetricReading(value=2, samples=3)

    def test_mean_total_calories_skips_empty_days(self) -> None:
        window = [
            make_log(DAY, meals=[{"description": "a", "estimated_calories": 1000},
                                 {"description": "b", "estimated_calories": 600}]),
            make_log(DAY, meals=[{"description": "c", "estimated_calories": 1400}]),
            make_log(DAY, water_cups=5),
        ]
        assert mean_total_calories(window) == MetricReading(value=1500.0, samples=2)

    def test_mean_total_calories_none_without_meals(self) -> None:
        assert mean_total_calories([make_log(DAY, water_cups=5)]) is None

    def test_heavy_flow_days(self) -> None:
        window = [
            make_log(DAY, period_flow="heavy"),
            make_log(DAY, period_flow="medium"),
            make_log(DAY, period_flow="heavy"),
        ]
        assert heavy_flow_days(window) == MetricReading(value=2, samples=3)


# ---------------------------------------------------------------------------
# Rule evaluation
# ---------------------------------------------------------------------------


def _rule(**overrides) -> Rule:
    params = dict(
        name="hydration",
        extract=mean_water_cups,
        min_samples=3,
        comparison="lt",
        threshold=6.0,
        template="avg {value:.1f} vs {threshold:.1f} over {samples}/{window}",
        kind=InsightKind.warning,
        severity=Severity.medium,
    )
    params.update(overrides)
    return Rule(**params)


class TestRuleEvaluate:
    def test_fires_and_renders(self) -> None:
        window = [make_log(DAY, water_cups=w) for w in (2, 3, 4)] + [make_log(DAY, mood="sad")]
        insight = _rule().evaluate(window)
        assert insight is not None
        assert insight.message == "avg 3.0 vs 6.0 over 3/4"
        assert insight.rule == "hydration"
        assert insight.kind is InsightKind.warning
        assert insight.severity is Severity.medium

    def test_skipped_below_min_samples(self) -> None:
        window = [make_log(DAY, water_cups=1), make_log(DAY, water_cups=1)]
        assert _rule().evaluate(window) is None

    def test_no_fire_when_predicate_false(self) -> None:
        window = [make_log(DAY, water_cups=9)] * 3
        assert _rule().evaluate(window) is None

    def test_zero_min_samples_still_needs_data(self) -> None:
        # Nothing to average: no crash, no NaN, no insight
        assert _rule(min_samples=0).evaluate([make_log(DAY, mood="calm")]) is None

    def test_greater_than_comparison(self) -> None:
        rule = _rule(
            name="heavy_flow", extract=heavy_flow_days, comparison="gt",
            threshold=1, min_samples=1, template="{value:.0f}",
        )
        assert rule.evaluate([make_log(DAY, period_flow="heavy")]) is None
        insight = rule.evaluate([make_log(DAY, period_flow="heavy")] * 2)
        assert insight is not None and insight.message == "2"


class TestBuildRules:
    def test_standard_order(self, insight_config: InsightConfig) -> None:
        rules = build_rules(insight_config.preset("standard"))
        assert [r.name for r in rules] == ["hydration", "mood", "exercise", "calories", "heavy_flow"]

    def test_mood_variant_selects_extractor(self, insight_config: InsightConfig) -> None:
        standard = {r.name: r for r in build_rules(insight_config.preset("standard"))}
        short = {r.name: r for r in build_rules(insight_config.preset("short_window"))}
        assert standard["mood"].extract is low_mood_count
        assert short["mood"].extract is low_mood_fraction
        assert short["exercise"].threshold == 3

    def test_make_rule_unknown_variant(self) -> None:
        with pytest.raises(KeyError):
            make_rule(RuleSettings(name="hydration", threshold=6.0, variant="fraction"))

    def test_severity_follows_kind(self, insight_config: InsightConfig) -> None:
        for preset in ("standard", "short_window"):
            for rule in build_rules(insight_config.preset(preset)):
                assert rule.severity is DEFAULT_SEVERITY[rule.kind]
