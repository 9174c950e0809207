"""Pydantic schema for service configuration."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ServiceSettings(BaseModel):
    """Validated runtime configuration with defaults."""

    model_config = ConfigDict(extra="forbid")

    dataset_csv: str = Field(default="documents.csv", min_length=1)
    csv_encoding: str = Field(default="utf-8", min_length=1)
    max_values: int = Field(default=1024, gt=0)
