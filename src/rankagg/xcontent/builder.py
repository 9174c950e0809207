"""Structured-document writer."""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any


class XContentBuilder:
    """Build a nested document with start/end object calls.

    The result is a plain ``dict`` whose key order follows the write order.
    """

    def __init__(self) -> None:
        self._root: dict[str, Any] = {}
        self._stack: list[dict[str, Any]] = [self._root]

    @property
    def _current(self) -> dict[str, Any]:
        return self._stack[-1]

    def start_object(self, name: str) -> XContentBuilder:
        child: dict[str, Any] = {}
        self._current[name] = child
        self._stack.append(child)
        return self

    def end_object(self) -> XContentBuilder:
        if len(self._stack) == 1:
            raise ValueError("end_object called without a matching start_object")
        self._stack.pop()
        return self

    def field(self, name: str, value: Any) -> XContentBuilder:
        self._current[name] = value
        return self

    def array(self, name: str, values: Sequence[Any]) -> XContentBuilder:
        self._current[name] = list(values)
        return self

    def to_dict(self) -> dict[str, Any]:
        if len(self._stack) != 1:
            raise ValueError(f"{len(self._stack) - 1} object(s) left open")
        return self._root

    def to_json(self, **kwargs: Any) -> str:
        """Serialize the finished document; NaN and infinities are rejected."""
        return json.dumps(self.to_dict(), allow_nan=False, **kwargs)
