"""Pydantic models for rule-triggered health insights."""

from __future__ import annotations

from datetime import date
from enum import Enum

from pydantic import Field

from src.models.base import FrozenSaheliBase, SaheliBase
from src.models.tracking import DailyLog


class InsightKind(str, Enum):
    info = "info"
    warning = "warning"
    alert = "alert"
    success = "success"


class Severity(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"


# Default severity per kind; individual rules may override it.
DEFAULT_SEVERITY: dict[InsightKind, Severity] = {
    InsightKind.alert: Severity.high,
    InsightKind.warning: Severity.medium,
    InsightKind.info: Severity.low,
    InsightKind.success: Severity.low,
}


class Insight(FrozenSaheliBase):
    """A single rule-triggered or fallback observation.

    Attributes:
        kind:     Visual category of the insight.
        severity: Urgency, normally implied by ``kind``.
        message:  Rendered text, numbers already formatted.
        rule:     Name of the rule (or fallback) that produced it.
    """

    kind: InsightKind
    severity: Severity
    message: str
    rule: str


# ---------- Request / response bodies ----------

class InsightRequest(SaheliBase):
    logs: list[DailyLog] = Field(default_factory=list)
    now: date
    preset: str | None = None


class SaveLogResponse(SaheliBase):
    logs: list[DailyLog]
    insights: list[Insight]
