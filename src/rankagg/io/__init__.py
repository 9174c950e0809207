"""Binary wire format primitives."""

from .stream import StreamInput, StreamOutput

__all__ = ["StreamInput", "StreamOutput"]
