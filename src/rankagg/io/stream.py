"""Big-endian binary stream primitives for the transport wire format."""

from __future__ import annotations

import struct
from collections.abc import Sequence

import numpy as np

from rankagg.errors import MalformedWireDataError

_DOUBLE = struct.Struct(">d")
_DOUBLE_DTYPE = np.dtype(">f8")
_MAX_VINT_BYTES = 5


class StreamOutput:
    """Append-only byte sink."""

    def __init__(self) -> None:
        self._buffer = bytearray()

    def write_byte(self, value: int) -> None:
        if not 0 <= value <= 0xFF:
            raise ValueError(f"byte value out of range: {value}")
        self._buffer.append(value)

    def write_bytes(self, data: bytes) -> None:
        self._buffer.extend(data)

    def write_boolean(self, value: bool) -> None:
        self.write_byte(1 if value else 0)

    def write_vint(self, value: int) -> None:
        """Write a non-negative int in 7-bit groups, low group first."""
        if value < 0:
            raise ValueError(f"vint value must be >= 0, got {value}")
        if value > 0xFFFFFFFF:
            raise ValueError(f"vint value does not fit in 32 bits: {value}")
        while value & ~0x7F:
            self._buffer.append((value & 0x7F) | 0x80)
            value >>= 7
        self._buffer.append(value)

    def write_double(self, value: float) -> None:
        self._buffer.extend(_DOUBLE.pack(float(value)))

    def write_double_array(self, values: Sequence[float]) -> None:
        array = np.asarray(values, dtype=np.float64)
        self.write_vint(int(array.size))
        self._buffer.extend(array.astype(_DOUBLE_DTYPE).tobytes())

    def write_string(self, value: str) -> None:
        encoded = value.encode("utf-8")
        self.write_vint(len(encoded))
        self._buffer.extend(encoded)

    def write_optional_string(self, value: str | None) -> None:
        self.write_boolean(value is not None)
        if value is not None:
            self.write_string(value)

    def write_optional_double(self, value: float | None) -> None:
        self.write_boolean(value is not None)
        if value is not None:
            self.write_double(value)

    def to_bytes(self) -> bytes:
        return bytes(self._buffer)

    def __len__(self) -> int:
        return len(self._buffer)


class StreamInput:
    """Sequential reader over an immutable byte payload.

    Every read either returns a complete value or raises MalformedWireDataError.
    """

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._position = 0

    @property
    def remaining(self) -> int:
        return len(self._data) - self._position

    def _take(self, size: int) -> bytes:
        if size < 0:
            raise MalformedWireDataError(f"negative read size: {size}")
        if self.remaining < size:
            raise MalformedWireDataError(
                f"unexpected end of stream: needed {size} bytes at offset {self._position}, "
                f"{self.remaining} available"
            )
        chunk = self._data[self._position : self._position + size]
        self._position += size
        return chunk

    def read_byte(self) -> int:
        return self._take(1)[0]

    def read_boolean(self) -> bool:
        value = self.read_byte()
        if value == 0:
            return False
        if value == 1:
            return True
        raise MalformedWireDataError(f"unexpected byte [{value:#04x}] for boolean")

    def read_vint(self) -> int:
        result = 0
        for index in range(_MAX_VINT_BYTES):
            byte = self.read_byte()
            result |= (byte & 0x7F) << (7 * index)
            if not byte & 0x80:
                return result
        raise MalformedWireDataError("vint is longer than 5 bytes")

    def read_double(self) -> float:
        return _DOUBLE.unpack(self._take(_DOUBLE.size))[0]

    def read_double_array(self) -> tuple[float, ...]:
        length = self.read_vint()
        raw = self._take(length * _DOUBLE_DTYPE.itemsize)
        return tuple(float(value) for value in np.frombuffer(raw, dtype=_DOUBLE_DTYPE))

    def read_string(self) -> str:
        raw = self._take(self.read_vint())
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MalformedWireDataError("string is not valid UTF-8") from exc

    def read_optional_string(self) -> str | None:
        return self.read_string() if self.read_boolean() else None

    def read_optional_double(self) -> float | None:
        return self.read_double() if self.read_boolean() else None

    def ensure_consumed(self) -> None:
        """Fail when bytes are left over after a complete read."""
        if self.remaining:
            raise MalformedWireDataError(f"{self.remaining} trailing bytes after payload")
