"""Load aggregation requests and service settings from YAML or JSON."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from rankagg.aggregations.base import AggregationBuilder
from rankagg.aggregations.registry import parse_aggregations
from rankagg.errors import RankAggError

from .schema import ServiceSettings

logger = logging.getLogger(__name__)

AGGREGATION_ROOT_KEYS = ("aggs", "aggregations")


class ConfigLoadError(RankAggError, ValueError):
    """Raised when config cannot be loaded or parsed."""


def load_aggregations(path: str | Path) -> dict[str, AggregationBuilder]:
    """Load an aggregation request file and parse every named aggregation.

    The root is either the aggregations mapping itself or an object holding it
    under ``aggs`` or ``aggregations``.
    """
    data = _load_mapping(path)
    for key in AGGREGATION_ROOT_KEYS:
        if key in data:
            if len(data) != 1:
                raise ConfigLoadError(f"'{key}' must be the only top-level key of an aggregation request.")
            data = data[key]
            break

    aggregations = parse_aggregations(data)
    logger.debug("Loaded %d aggregation(s) from %s", len(aggregations), path)
    return aggregations


def load_settings(path: str | Path) -> ServiceSettings:
    """Load settings file from YAML/JSON and validate with Pydantic."""
    data = _load_mapping(path)
    return ServiceSettings.model_validate(data)


def _load_mapping(path: str | Path) -> dict[str, Any]:
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    suffix = config_path.suffix.lower()
    if suffix in {".yaml", ".yml"}:
        data = _load_yaml(config_path)
    elif suffix == ".json":
        data = _load_json(config_path)
    else:
        raise ConfigLoadError(
            f"Unsupported config format '{suffix}'. Use .yaml/.yml or .json."
        )

    if not isinstance(data, dict):
        raise ConfigLoadError("Config root must be a JSON/YAML object.")
    return data


def _load_yaml(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as file:
        parsed = yaml.safe_load(file)

    return parsed or {}


def _load_json(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as file:
        parsed = json.load(file)

    return parsed or {}
