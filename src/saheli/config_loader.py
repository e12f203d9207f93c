"""Load, validate, and hot-reload the Saheli insight configuration.

The config lives in ``insight_config.yaml`` alongside this module.  At
startup it is loaded once and cached.  Call ``reload_insight_config()`` to
re-read from disk after an admin update without a restart.

Usage::

    from src.saheli.config_loader import get_insight_config

    config = get_insight_config()
    preset = config.preset()                      # active preset
    preset.rule("hydration").threshold            # 6.0
    config.preset("short_window").rule("mood").variant   # 'fraction'
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger("saheli.config")

# Path to the YAML file sitting next to this module
_CONFIG_PATH = Path(__file__).parent / "insight_config.yaml"

# Rule names in evaluation order, with the parameters used when a preset
# leaves them out.
RULE_DEFAULTS: dict[str, dict[str, Any]] = {
    "hydration": {"threshold": 6.0, "min_samples": 1},
    "mood": {"threshold": 10, "min_samples": 1, "variant": "count"},
    "exercise": {"threshold": 8, "min_samples": 1},
    "calories": {"threshold": 1200, "min_samples": 7},
    "heavy_flow": {"threshold": 2, "min_samples": 1},
}

MOOD_VARIANTS = ("count", "fraction")
CYCLE_STRATEGIES = ("configured", "inferred")


# ---------------------------------------------------------------------------
# Typed config sections
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RuleSettings:
    """Tunable parameters for one insight rule."""

    name: str
    threshold: float
    min_samples: int = 1
    enabled: bool = True
    variant: str | None = None


@dataclass(frozen=True)
class RulePreset:
    """A named deployment profile: window size plus per-rule parameters.

    Attributes:
        name:        Preset key from the YAML file.
        description: Human-readable summary.
        window_size: Number of most recent logged days the rules see.
        rules:       Rule name → settings, in evaluation order.
    """

    name: str
    description: str
    window_size: int
    rules: dict[str, RuleSettings]

    def rule(self, name: str) -> RuleSettings:
        return self.rules[name]


@dataclass
class InsightConfig:
    """Complete, validated insight configuration.

    This is the single in-memory representation of insight_config.yaml.

    Attributes:
        version:        Config schema version string.
        window_size:    Default window size for presets that omit one.
        active_preset:  Preset used when callers do not name one.
        cycle_strategy: 'configured' or 'inferred'.
        presets:        Preset name → RulePreset.
    """

    version: str
    window_size: int
    active_preset: str
    cycle_strategy: str
    presets: dict[str, RulePreset]
    _raw: dict = field(default_factory=dict, repr=False)

    def preset(self, name: str | None = None) -> RulePreset:
        """Return a preset by name, or the active preset.

        Raises:
            KeyError: If no preset has that name.
        """
        key = name or self.active_preset
        try:
            return self.presets[key]
        except KeyError:
            raise KeyError(f"Unknown insight preset: {key!r}") from None

    @property
    def preset_names(self) -> list[str]:
        return sorted(self.presets)


# ---------------------------------------------------------------------------
# Loader / validation
# ---------------------------------------------------------------------------


class ConfigValidationError(ValueError):
    """Raised when insight_config.yaml fails validation."""


def _load_yaml(path: Path) -> dict:
    """Read and parse a YAML file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigValidationError: If the YAML is malformed.
    """
    if not path.exists():
        raise FileNotFoundError(f"Insight config not found: {path}")

    with path.open("r", encoding="utf-8") as fh:
        try:
            return yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise ConfigValidationError(f"YAML parse error in {path}: {exc}") from exc


def _build_rule(
    name: str, raw: Any, section: str, errors: list[str]
) -> RuleSettings | None:
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        errors.append(f"{section} must be a mapping")
        return None

    merged = {**RULE_DEFAULTS[name], **raw}

    try:
        threshold = float(merged["threshold"])
    except (TypeError, ValueError):
        errors.append(f"{section}.threshold must be a number, got {merged['threshold']!r}")
        return None

    try:
        min_samples = int(merged["min_samples"])
    except (TypeError, ValueError):
        errors.append(
            f"{section}.min_samples must be an integer, got {merged['min_samples']!r}"
        )
        return None
    if min_samples < 0:
        errors.append(f"{section}.min_samples = {min_samples} must not be negative")

    variant = merged.get("variant")
    if name == "mood":
        if variant not in MOOD_VARIANTS:
            errors.append(f"{section}.variant must be one of {MOOD_VARIANTS}, got {variant!r}")
        elif variant == "fraction" and not (0.0 <= threshold <= 1.0):
            errors.append(f"{section}.threshold = {threshold} is out of range [0.0, 1.0]")
    elif variant is not None:
        errors.append(f"{section}.variant is only supported for the mood rule")

    enabled = merged.get("enabled", True)
    if not isinstance(enabled, bool):
        errors.append(f"{section}.enabled must be true or false, got {enabled!r}")
        return None

    return RuleSettings(
        name=name,
        threshold=threshold,
        min_samples=min_samples,
        enabled=enabled,
        variant=variant,
    )


def _validate_and_build(raw: dict) -> InsightConfig:
    """Validate the raw YAML dict and construct an InsightConfig.

    Performs structural validation and applies defaults for optional fields.

    Raises:
        ConfigValidationError: If required fields are missing or invalid.
    """
    if not isinstance(raw, dict):
        raise ConfigValidationError(
            f"insight_config.yaml must be a mapping at the top level, got {type(raw).__name__}"
        )

    errors: list[str] = []

    version = str(raw.get("version", "1.0"))

    # ── Window ──
    try:
        window_size = int(raw.get("window_size", 30))
    except (TypeError, ValueError):
        errors.append(f"window_size must be an integer, got {raw.get('window_size')!r}")
        window_size = 30
    if window_size < 1:
        errors.append(f"window_size = {window_size} must be at least 1")

    # ── Cycle ──
    cycle_raw = raw.get("cycle") or {}
    if not isinstance(cycle_raw, dict):
        errors.append("cycle must be a mapping")
        cycle_raw = {}
    cycle_strategy = cycle_raw.get("strategy", "configured")
    if cycle_strategy not in CYCLE_STRATEGIES:
        errors.append(
            f"cycle.strategy must be one of {CYCLE_STRATEGIES}, got {cycle_strategy!r}"
        )

    # ── Presets ──
    presets_raw = raw.get("presets") or {}
    if not isinstance(presets_raw, dict):
        errors.append("'presets' must be a mapping of preset name to settings")
        presets_raw = {}
    elif not presets_raw:
        errors.append("'presets' section is missing or empty")

    presets: dict[str, RulePreset] = {}
    for preset_name, preset_raw in presets_raw.items():
        section = f"presets.{preset_name}"
        if not isinstance(preset_raw, dict):
            errors.append(f"{section} must be a mapping")
            continue

        try:
            preset_window = int(preset_raw.get("window_size", window_size))
        except (TypeError, ValueError):
            errors.append(f"{section}.window_size must be an integer")
            continue
        if preset_window < 1:
            errors.append(f"{section}.window_size = {preset_window} must be at least 1")

        rules_raw = preset_raw.get("rules") or {}
        if not isinstance(rules_raw, dict):
            errors.append(f"{section}.rules must be a mapping of rule→settings")
            continue
        for unknown in sorted(set(rules_raw) - set(RULE_DEFAULTS)):
            errors.append(f"{section}.rules.{unknown} is not a known rule")

        rules: dict[str, RuleSettings] = {}
        for rule_name in RULE_DEFAULTS:
            settings = _build_rule(
                rule_name, rules_raw.get(rule_name), f"{section}.rules.{rule_name}", errors
            )
            if settings is None:
                continue
            rules[rule_name] = settings
            if settings.enabled and settings.min_samples > preset_window:
                logger.warning(
                    "Rule %s in preset %s needs %d samples but the window holds %d; "
                    "it will never fire.",
                    rule_name, preset_name, settings.min_samples, preset_window,
                )

        presets[preset_name] = RulePreset(
            name=preset_name,
            description=str(preset_raw.get("description", "")),
            window_size=preset_window,
            rules=rules,
        )

    active_preset = raw.get("active_preset", "standard")
    if presets_raw and active_preset not in presets_raw:
        errors.append(f"active_preset {active_preset!r} is not defined under 'presets'")

    if errors:
        raise ConfigValidationError(
            f"insight_config.yaml has {len(errors)} validation error(s):\n"
            + "\n".join(f"  • {e}" for e in errors)
        )

    return InsightConfig(
        version=version,
        window_size=window_size,
        active_preset=active_preset,
        cycle_strategy=cycle_strategy,
        presets=presets,
        _raw=raw,
    )


def load_insight_config(path: Path | None = None) -> InsightConfig:
    """Load and validate the insight config from disk.

    Args:
        path: Override path to YAML. Uses the bundled insight_config.yaml by default.
    """
    target = path or _CONFIG_PATH
    raw = _load_yaml(target)
    config = _validate_and_build(raw)
    logger.info("Loaded insight config v%s from %s", config.version, target)
    return config


# ---------------------------------------------------------------------------
# Global singleton with hot-reload support
# ---------------------------------------------------------------------------

_config: InsightConfig | None = None
_config_lock = threading.Lock()


def get_insight_config() -> InsightConfig:
    """Return the global InsightConfig singleton, loading it on first call.

    Thread-safe.  Use ``reload_insight_config()`` to refresh after YAML changes.
    """
    global _config
    if _config is None:
        with _config_lock:
            if _config is None:  # double-checked locking
                _config = load_insight_config()
    return _config


def reload_insight_config(path: Path | None = None) -> InsightConfig:
    """Reload the insight config from disk and replace the global singleton.

    If validation fails, the old config is retained and the error is re-raised.

    Raises:
        ConfigValidationError: If the new config is invalid.
        FileNotFoundError:     If the config file is missing.
    """
    global _config
    new_config = load_insight_config(path)  # validate before acquiring lock
    with _config_lock:
        old_version = _config.version if _config else "none"
        _config = new_config
    logger.info(
        "Reloaded insight config: %s → %s",
        old_version,
        new_config.version,
    )
    return new_config
