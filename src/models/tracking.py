"""Pydantic models for daily tracking: mood, period flow, hydration,
exercise, meals, supplements and symptoms."""

from __future__ import annotations

import math
from datetime import date
from enum import Enum
from typing import Any

from pydantic import (
    AliasChoices,
    Field,
    computed_field,
    field_serializer,
    field_validator,
    model_validator,
)

from src.models.base import SaheliBase


# ---------- Enums ----------

class Mood(str, Enum):
    happy = "happy"
    calm = "calm"
    energetic = "energetic"
    tired = "tired"
    sad = "sad"
    anxious = "anxious"
    irritable = "irritable"
    stressed = "stressed"


class PeriodFlow(str, Enum):
    none = "none"
    spotting = "spotting"
    light = "light"
    medium = "medium"
    heavy = "heavy"


class PeriodProduct(str, Enum):
    pad = "pad"
    tampon = "tampon"
    cup = "cup"
    disc = "disc"
    period_underwear = "period-underwear"


class Symptom(str, Enum):
    cramps = "cramps"
    headache = "headache"
    bloating = "bloating"
    acne = "acne"
    fatigue = "fatigue"
    backache = "backache"
    breast_tenderness = "breast-tenderness"
    nausea = "nausea"


# Flow recorded for a legacy "on period" tick that carries no flow level.
UNSPECIFIED_PERIOD_FLOW = PeriodFlow.light

_FLOW_KEYS = ("period_flow", "periodFlow", "flow")
_PRODUCT_KEYS = ("period_product", "periodProduct", "product")


def _coerce_amount(value: Any) -> float | None:
    """Turn a persisted quantity into a finite non-negative float, or None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or number < 0:
        return None
    return number


def _coerce_count(value: Any) -> int | None:
    """Turn a persisted count into a non-negative int, or None if unusable."""
    number = _coerce_amount(value)
    if number is None or not number.is_integer():
        return None
    return int(number)


def _is_present(value: bool | str | None) -> bool:
    if isinstance(value, str):
        return bool(value.strip())
    return value is True


# ---------- Meals ----------

class Meal(SaheliBase):
    description: str = ""
    estimated_calories: float = Field(default=0.0, ge=0)

    @field_validator("estimated_calories", mode="before")
    @classmethod
    def _calories_or_zero(cls, value: Any) -> float:
        amount = _coerce_amount(value)
        return 0.0 if amount is None else amount


# ---------- Daily log ----------

class DailyLog(SaheliBase):
    """One day of observations.  The date is the natural key.

    ``total_calories`` is derived from ``meals`` on every access, so it can
    never drift from the meal list.  Legacy payloads that stored ``water``,
    ``flow`` and ``product`` are accepted under those names, and their
    ``isPeriod`` checkbox decides whether the flow counts.
    """

    date: date
    mood: Mood | None = None
    period_flow: PeriodFlow = Field(
        default=PeriodFlow.none,
        validation_alias=AliasChoices(*_FLOW_KEYS),
    )
    period_product: PeriodProduct | None = Field(
        default=None,
        validation_alias=AliasChoices(*_PRODUCT_KEYS),
    )
    water_cups: int | None = Field(
        default=None,
        ge=0,
        validation_alias=AliasChoices("water_cups", "waterCups", "water"),
    )
    exercise: bool | str | None = None
    meals: list[Meal] = Field(default_factory=list)
    supplements: bool | str | None = None
    symptoms: set[Symptom] = Field(default_factory=set)
    notes: str | None = None
    absent: bool = False

    @model_validator(mode="before")
    @classmethod
    def _legacy_period_toggle(cls, data: Any) -> Any:
        # Older payloads carry an ``isPeriod`` checkbox next to ``flow`` and
        # ``product``; unticking it leaves the stale selections behind.
        if not isinstance(data, dict) or "isPeriod" not in data:
            return data
        data = dict(data)
        on_period = data.pop("isPeriod")
        flow_keys = [k for k in _FLOW_KEYS if k in data]
        if not on_period:
            for key in flow_keys + [k for k in _PRODUCT_KEYS if k in data]:
                del data[key]
            data["period_flow"] = PeriodFlow.none
        elif not any(data[k] not in (None, "", PeriodFlow.none) for k in flow_keys):
            for key in flow_keys:
                del data[key]
            data["period_flow"] = UNSPECIFIED_PERIOD_FLOW
        return data

    @field_validator("water_cups", mode="before")
    @classmethod
    def _water_or_absent(cls, value: Any) -> int | None:
        return _coerce_count(value)

    @field_validator("period_flow", mode="before")
    @classmethod
    def _blank_flow_is_none(cls, value: Any) -> Any:
        if value is None or value == "":
            return PeriodFlow.none
        return value

    @field_validator("mood", "period_product", mode="before")
    @classmethod
    def _blank_is_absent(cls, value: Any) -> Any:
        return None if value == "" else value

    @field_validator("meals", mode="before")
    @classmethod
    def _free_text_meals(cls, value: Any) -> Any:
        # The first app revision stored meals as one free-text description.
        if value is None:
            return []
        if isinstance(value, str):
            return [{"description": value}] if value.strip() else []
        return value

    @field_serializer("symptoms")
    def _sorted_symptoms(self, symptoms: set[Symptom]) -> list[str]:
        return sorted(s.value for s in symptoms)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_calories(self) -> float:
        return sum(meal.estimated_calories for meal in self.meals)

    @property
    def exercised(self) -> bool:
        return _is_present(self.exercise)

    @property
    def took_supplements(self) -> bool:
        return _is_present(self.supplements)

    @property
    def is_period(self) -> bool:
        return self.period_flow is not PeriodFlow.none

    @property
    def is_empty(self) -> bool:
        """True when nothing was recorded, i.e. the same as no entry."""
        return not (
            self.mood is not None
            or self.is_period
            or self.period_product is not None
            or self.water_cups is not None
            or self.exercised
            or self.meals
            or self.took_supplements
            or self.symptoms
            or (self.notes or "").strip()
            or self.absent
        )


# ---------- Calendar ----------

class CalendarDay(SaheliBase):
    """Per-day markers shown on the month calendar."""

    date: date
    has_log: bool = False
    has_mood: bool = False
    has_water: bool = False
    has_exercise: bool = False
    is_period: bool = False


# ---------- Request / response bodies ----------

class SaveLogRequest(SaheliBase):
    logs: list[DailyLog] = Field(default_factory=list)
    log: DailyLog
    now: date


class CalendarRequest(SaheliBase):
    logs: list[DailyLog] = Field(default_factory=list)
    year: int = Field(ge=1900, le=2200)
    month: int = Field(ge=1, le=12)
