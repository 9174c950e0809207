"""FastAPI app exposing aggregation request tooling."""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Any

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from rankagg.config.loader import load_settings
from rankagg.config.schema import ServiceSettings

from .service import AggregationService


class AggregationsRequest(BaseModel):
    """Request payload carrying aggregation definitions in document form."""

    aggs: dict[str, Any] = Field(min_length=1)


class WirePayloadRequest(BaseModel):
    """Request payload carrying base64 wire payloads keyed by aggregation name."""

    aggs: dict[str, str] = Field(min_length=1)


class AggregationsResponse(BaseModel):
    aggs: dict[str, Any]


app = FastAPI(title="rankagg", version="0.1.0")


@lru_cache(maxsize=1)
def get_service() -> AggregationService:
    """Return singleton aggregation service."""

    settings_path = os.getenv("RANKAGG_SETTINGS", "").strip()
    settings = load_settings(settings_path) if settings_path else ServiceSettings()
    dataset_csv = os.getenv("RANKAGG_DATASET_CSV", "").strip()
    if dataset_csv:
        settings = settings.model_copy(update={"dataset_csv": dataset_csv})
    return AggregationService(settings)


def _run(operation: Any, payload: dict[str, Any]) -> AggregationsResponse:
    try:
        return AggregationsResponse(aggs=operation(payload))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except FileNotFoundError as exc:
        raise HTTPException(status_code=500, detail=f"dataset not found: {exc}") from exc
    except Exception as exc:  # pragma: no cover - defensive fallback
        raise HTTPException(status_code=500, detail=f"aggregation request failed: {exc}") from exc


@app.post("/api/aggregations/_normalize", response_model=AggregationsResponse)
def normalize(payload: AggregationsRequest) -> AggregationsResponse:
    """Parse and re-emit aggregations in canonical document form."""

    return _run(get_service().normalize, payload.aggs)


@app.post("/api/aggregations/_encode", response_model=AggregationsResponse)
def encode(payload: AggregationsRequest) -> AggregationsResponse:
    """Encode aggregations to base64 wire payloads."""

    return _run(get_service().encode, payload.aggs)


@app.post("/api/aggregations/_decode", response_model=AggregationsResponse)
def decode(payload: WirePayloadRequest) -> AggregationsResponse:
    """Decode base64 wire payloads to document form."""

    return _run(get_service().decode, payload.aggs)


@app.post("/api/aggregations/_plan", response_model=AggregationsResponse)
def plan(payload: AggregationsRequest) -> AggregationsResponse:
    """Describe the execution factory each aggregation dispatches to."""

    return _run(get_service().plan, payload.aggs)
