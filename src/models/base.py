"""Shared Pydantic base models and utilities."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class SaheliBase(BaseModel):
    """Base model with shared config for all Saheli schemas."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class FrozenSaheliBase(SaheliBase):
    """Immutable variant for derived values the engine hands back."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        str_strip_whitespace=True,
        frozen=True,
    )


class ErrorDetail(BaseModel):
    detail: str
