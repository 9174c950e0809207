"""Structured-document parsing and emission."""

from .builder import XContentBuilder
from .parser import ObjectParser, ValueType

__all__ = ["ObjectParser", "ValueType", "XContentBuilder"]
