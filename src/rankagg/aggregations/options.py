"""Pydantic schemas for the per-method option objects."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from rankagg.errors import DocumentParseError

OptionsT = TypeVar("OptionsT", bound=BaseModel)


class TDigestOptions(BaseModel):
    """Body of a ``tdigest`` object. Range checks happen in the builder setter."""

    model_config = ConfigDict(extra="forbid")

    compression: float | None = None

    @field_validator("compression", mode="before")
    @classmethod
    def _reject_boolean(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("compression must be a number, not a boolean.")
        return value


class HDROptions(BaseModel):
    """Body of an ``hdr`` object. Range checks happen in the builder setter."""

    model_config = ConfigDict(extra="forbid")

    number_of_significant_value_digits: int | None = None

    @field_validator("number_of_significant_value_digits", mode="before")
    @classmethod
    def _reject_boolean(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("number_of_significant_value_digits must be an integer, not a boolean.")
        return value


def parse_options(model: type[OptionsT], document: Mapping[str, Any], field_name: str) -> OptionsT:
    """Validate an options object, reporting failures as document errors."""
    try:
        return model.model_validate(dict(document))
    except ValidationError as exc:
        details = "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or field_name}: {error['msg']}"
            for error in exc.errors()
        )
        raise DocumentParseError(f"[{field_name}] {details}") from exc
