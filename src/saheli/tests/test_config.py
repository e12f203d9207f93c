"""Tests for insight_config.yaml loading and validation."""

from __future__ import annotations

from pathlib import Path

import pytest

from src.saheli.config_loader import (
    ConfigValidationError,
    InsightConfig,
    _validate_and_build,
    get_insight_config,
    load_insight_config,
    reload_insight_config,
)


class TestConfigLoading:
    """Tests for loading insight_config.yaml."""

    def test_load_default_config(self, insight_config: InsightConfig) -> None:
        """The bundled insight_config.yaml loads without errors."""
        assert insight_config.version == "1.0"
        assert insight_config.window_size == 30
        assert insight_config.active_preset == "standard"
        assert insight_config.cycle_strategy == "configured"

    def test_presets_available(self, insight_config: InsightConfig) -> None:
        assert insight_config.preset_names == ["short_window", "standard"]

    def test_standard_preset(self, insight_config: InsightConfig) -> None:
        preset = insight_config.preset()
        assert preset.name == "standard"
        assert preset.window_size == 30
        assert preset.rule("hydration").threshold == 6.0
        assert preset.rule("mood").variant == "count"
        assert preset.rule("mood").threshold == 10
        assert preset.rule("exercise").threshold == 8
        assert preset.rule("calories").threshold == 1200
        assert preset.rule("calories").min_samples == 7
        assert preset.rule("heavy_flow").threshold == 2

    def test_short_window_preset(self, insight_config: InsightConfig) -> None:
        preset = insight_config.preset("short_window")
        assert preset.window_size == 14
        assert preset.rule("mood").variant == "fraction"
        assert preset.rule("mood").threshold == 0.5
        assert preset.rule("exercise").threshold == 3

    def test_rules_in_evaluation_order(self, insight_config: InsightConfig) -> None:
        assert list(insight_config.preset().rules) == [
            "hydration", "mood", "exercise", "calories", "heavy_flow",
        ]

    def test_unknown_preset_raises_key_error(self, insight_config: InsightConfig) -> None:
        with pytest.raises(KeyError, match="nope"):
            insight_config.preset("nope")


class TestConfigValidation:
    """Tests for config validation logic."""

    def test_valid_minimal_config(self) -> None:
        """A preset with no rules gets every rule with its defaults."""
        config = _validate_and_build({"presets": {"standard": {}}})
        preset = config.preset()
        assert config.version == "1.0"
        assert preset.window_size == 30
        assert preset.rule("hydration").threshold == 6.0
        assert preset.rule("mood").variant == "count"
        assert preset.rule("calories").min_samples == 7

    def test_preset_inherits_global_window(self) -> None:
        config = _validate_and_build({"window_size": 21, "presets": {"standard": {}}})
        assert config.preset().window_size == 21

    def test_partial_rule_override_keeps_defaults(self) -> None:
        config = _validate_and_build(
            {"presets": {"standard": {"rules": {"calories": {"threshold": 1500}}}}}
        )
        calories = config.preset().rule("calories")
        assert calories.threshold == 1500
        assert calories.min_samples == 7

    def test_missing_presets_raises(self) -> None:
        with pytest.raises(ConfigValidationError, match="presets"):
            _validate_and_build({"version": "1.0"})

    def test_unknown_rule_raises(self) -> None:
        raw = {"presets": {"standard": {"rules": {"sleep": {"threshold": 7}}}}}
        with pytest.raises(ConfigValidationError, match="sleep"):
            _validate_and_build(raw)

    def test_bad_mood_variant_raises(self) -> None:
        raw = {"presets": {"standard": {"rules": {"mood": {"variant": "median"}}}}}
        with pytest.raises(ConfigValidationError, match="variant"):
            _validate_and_build(raw)

    def test_fraction_threshold_out_of_range_raises(self) -> None:
        raw = {
            "presets": {
                "standard": {"rules": {"mood": {"variant": "fraction", "threshold": 50}}}
            }
        }
        with pytest.raises(ConfigValidationError, match="out of range"):
            _validate_and_build(raw)

    def test_variant_on_other_rule_raises(self) -> None:
        raw = {"presets": {"standard": {"rules": {"exercise": {"variant": "count"}}}}}
        with pytest.raises(ConfigValidationError, match="only supported for the mood rule"):
            _validate_and_build(raw)

    def test_non_numeric_threshold_raises(self) -> None:
        raw = {"presets": {"standard": {"rules": {"hydration": {"threshold": "lots"}}}}}
        with pytest.raises(ConfigValidationError, match="must be a number"):
            _validate_and_build(raw)

    def test_bad_window_raises(self) -> None:
        with pytest.raises(ConfigValidationError, match="window_size"):
            _validate_and_build({"window_size": 0, "presets": {"standard": {}}})

    def test_undefined_active_preset_raises(self) -> None:
        raw = {"active_preset": "weekly", "presets": {"standard": {}}}
        with pytest.raises(ConfigValidationError, match="weekly"):
            _validate_and_build(raw)

    def test_unknown_cycle_strategy_raises(self) -> None:
        raw = {"cycle": {"strategy": "lunar"}, "presets": {"standard": {}}}
        with pytest.raises(ConfigValidationError, match="cycle.strategy"):
            _validate_and_build(raw)

    @pytest.mark.parametrize(
        "raw, match",
        [
            (["standard"], "top level"),
            ({"cycle": "inferred", "presets": {"standard": {}}}, "cycle must be a mapping"),
            ({"presets": ["standard"]}, "'presets' must be a mapping"),
        ],
    )
    def test_non_mapping_sections_raise(self, raw, match: str) -> None:
        with pytest.raises(ConfigValidationError, match=match):
            _validate_and_build(raw)

    def test_enabled_must_be_boolean(self) -> None:
        raw = {"presets": {"standard": {"rules": {"hydration": {"enabled": "false"}}}}}
        with pytest.raises(ConfigValidationError, match="enabled must be true or false"):
            _validate_and_build(raw)

    def test_top_level_list_file_raises(self, tmp_path: Path) -> None:
        config_file = tmp_path / "insight_config.yaml"
        config_file.write_text("- standard\n- short_window\n")
        with pytest.raises(ConfigValidationError, match="top level"):
            load_insight_config(path=config_file)

    def test_all_errors_reported_together(self) -> None:
        raw = {
            "window_size": -1,
            "cycle": {"strategy": "lunar"},
            "presets": {"standard": {"window_size": 10, "rules": {"sleep": {}}}},
        }
        with pytest.raises(ConfigValidationError, match="3 validation error"):
            _validate_and_build(raw)

    def test_hot_reload(self, tmp_path: Path, restore_insight_config) -> None:
        """reload_insight_config() should replace the global singleton."""
        config_content = """
version: "2.0-test"
window_size: 7
active_preset: weekly
cycle:
  strategy: inferred
presets:
  weekly:
    description: "one week"
    rules:
      mood:
        variant: fraction
        threshold: 0.6
      exercise:
        threshold: 2
"""
        config_file = tmp_path / "insight_config.yaml"
        config_file.write_text(config_content.strip())

        new_config = reload_insight_config(path=config_file)
        assert new_config.version == "2.0-test"
        assert get_insight_config() is new_config
        assert new_config.cycle_strategy == "inferred"
        assert new_config.preset().window_size == 7

    def test_failed_reload_keeps_old_config(self, tmp_path: Path) -> None:
        before = get_insight_config()
        config_file = tmp_path / "insight_config.yaml"
        config_file.write_text("presets: {}\n")
        with pytest.raises(ConfigValidationError):
            reload_insight_config(path=config_file)
        assert get_insight_config() is before

    def test_malformed_yaml_raises(self, tmp_path: Path) -> None:
        config_file = tmp_path / "insight_config.yaml"
        config_file.write_text("presets: [unclosed\n")
        with pytest.raises(ConfigValidationError, match="YAML parse error"):
            load_insight_config(path=config_file)

    def test_load_nonexistent_file_raises(self) -> None:
        """Loading a nonexistent file should raise FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_insight_config(path=Path("/nonexistent/path/config.yaml"))
