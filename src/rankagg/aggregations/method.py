"""Percentile computation methods."""

from __future__ import annotations

from enum import Enum

from rankagg.errors import InvalidArgumentError, MalformedWireDataError
from rankagg.io.stream import StreamInput, StreamOutput


class PercentilesMethod(Enum):
    """Algorithm used to compute percentiles and percentile ranks.

    The member value is the document key of the method's options object. The
    wire code is the member's declaration index, so members must never be
    reordered.
    """

    TDIGEST = "tdigest"
    HDR = "hdr"

    @property
    def parse_field(self) -> str:
        return self.value

    @property
    def ordinal(self) -> int:
        return _ORDINALS[self]

    @classmethod
    def from_name(cls, name: str) -> PercentilesMethod:
        try:
            return cls(name.strip().lower())
        except ValueError as exc:
            raise InvalidArgumentError(f"Unknown percentiles method [{name}]") from exc

    @classmethod
    def read_from(cls, stream: StreamInput) -> PercentilesMethod:
        ordinal = stream.read_vint()
        if ordinal >= len(_MEMBERS):
            raise MalformedWireDataError(f"Unknown PercentilesMethod ordinal [{ordinal}]")
        return _MEMBERS[ordinal]

    def write_to(self, stream: StreamOutput) -> None:
        stream.write_vint(self.ordinal)

    def __str__(self) -> str:
        return self.value


_MEMBERS: tuple[PercentilesMethod, ...] = tuple(PercentilesMethod)
_ORDINALS: dict[PercentilesMethod, int] = {member: index for index, member in enumerate(_MEMBERS)}
