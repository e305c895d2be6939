from __future__ import annotations


class RecognitionError(Exception):
    """Base class for failures surfaced to HTTP callers."""

    status_code: int = 500


class MissingParameterError(RecognitionError):
    status_code = 400


class CredentialError(RecognitionError):
    """Provider credentials are absent, unreadable or malformed."""


class ProviderError(RecognitionError):
    """The remote recognition call failed."""


class RecognitionTimeoutError(RecognitionError):
    """The deadline expired before the provider completed."""


class NoTranscriptError(RecognitionError):
    """Inline recognition returned no usable alternative."""


class MarshalError(RecognitionError):
    """The response body could not be serialized."""


__all__ = [
    "RecognitionError",
    "MissingParameterError",
    "CredentialError",
    "ProviderError",
    "RecognitionTimeoutError",
    "NoTranscriptError",
    "MarshalError",
]
