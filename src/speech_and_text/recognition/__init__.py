"""Recognition orchestration around the Speech-to-Text provider."""

from .config import build_batch_config, build_inline_config
from .credentials import CredentialMode
from .errors import (
    CredentialError,
    MarshalError,
    MissingParameterError,
    NoTranscriptError,
    ProviderError,
    RecognitionError,
    RecognitionTimeoutError,
)
from .service import RecognitionService
from .types import InlineBytes, RecognitionConfig, StorageReference

__all__ = [
    "CredentialMode",
    "CredentialError",
    "InlineBytes",
    "MarshalError",
    "MissingParameterError",
    "NoTranscriptError",
    "ProviderError",
    "RecognitionConfig",
    "RecognitionError",
    "RecognitionService",
    "RecognitionTimeoutError",
    "StorageReference",
    "build_batch_config",
    "build_inline_config",
]
