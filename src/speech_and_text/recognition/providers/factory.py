from __future__ import annotations

from typing import Optional

from ..credentials import CredentialSource
from .base import RecognitionProvider
from .mock import MockRecognitionProvider

_ALIASES = {
    "mock": "mock",
    "fake": "mock",
    "google": "google",
    "gcloud": "google",
}


def resolve_provider_name(name: Optional[str]) -> str:
    """Map a configured provider name onto ``mock`` or ``google``."""

    lname = (name or "").strip().lower()
    try:
        return _ALIASES[lname]
    except KeyError:
        raise ValueError(f"Unsupported recognition provider: {name}") from None


def build_provider(name: str, *, credentials: Optional[CredentialSource] = None) -> RecognitionProvider:
    if resolve_provider_name(name) == "mock":
        return MockRecognitionProvider()
    # Deferred so the Speech SDK is only loaded when selected.
    from .google import GoogleSpeechProvider

    return GoogleSpeechProvider(credentials=credentials)
