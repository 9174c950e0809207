"""Document data loading utilities."""

from .loader import DocumentFrameLoader

__all__ = ["DocumentFrameLoader"]
