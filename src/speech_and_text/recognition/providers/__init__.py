"""Recognition provider implementations."""

from .base import RecognitionProvider
from .factory import build_provider
from .mock import MockRecognitionProvider

__all__ = [
    "RecognitionProvider",
    "MockRecognitionProvider",
    "build_provider",
]
