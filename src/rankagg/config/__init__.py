"""Config loading and schema."""

from .loader import ConfigLoadError, load_aggregations, load_settings
from .schema import ServiceSettings

__all__ = ["ConfigLoadError", "ServiceSettings", "load_aggregations", "load_settings"]
