"""Error types raised by aggregation builders and their codecs."""

from __future__ import annotations


class RankAggError(Exception):
    """Base class for all rankagg errors."""


class InvalidArgumentError(RankAggError, ValueError):
    """Raised when a builder setter receives a value that violates its invariant."""


class MalformedWireDataError(RankAggError, ValueError):
    """Raised when a binary payload is truncated or structurally invalid."""


class DocumentParseError(RankAggError, ValueError):
    """Raised when a structured document has unknown keys or wrongly typed values."""


class IllegalStateError(RankAggError, RuntimeError):
    """Raised when a builder holds a state that validated construction cannot produce."""
