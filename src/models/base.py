"""Shared Pydantic base model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class HeriodBase(BaseModel):
    """Base model with shared config for all Heriod schemas."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        str_strip_whitespace=True,
    )
