from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Sequence

from .errors import MissingParameterError
from .types import RecognitionConfig

if TYPE_CHECKING:  # pragma: no cover
    from ..settings import RecognitionSettings

MISSING_BATCH_PARAMETERS = "Missing required parameters: bucket_name, audio_file_path, language_codes"


def split_language_codes(raw: str) -> list[str]:
    # Tokens are passed through untouched; the provider validates BCP-47 syntax.
    return raw.split(",")


def build_batch_config(
    settings: "RecognitionSettings",
    *,
    bucket_name: Optional[str],
    audio_file_path: Optional[str],
    language_codes: Optional[str],
) -> RecognitionConfig:
    """Assemble the config for a Cloud Storage batch request."""

    if not bucket_name or not audio_file_path or not language_codes:
        raise MissingParameterError(MISSING_BATCH_PARAMETERS)

    return RecognitionConfig(
        project_id=settings.project_id,
        bucket_name=bucket_name,
        audio_file_path=audio_file_path,
        language_codes=split_language_codes(language_codes),
        timeout_seconds=settings.timeout_seconds,
        credential_mode=settings.credential_mode,
    )


def build_inline_config(
    settings: "RecognitionSettings",
    *,
    language_codes: Optional[Sequence[str]] = None,
) -> RecognitionConfig:
    codes = list(language_codes or settings.inline_language_codes)
    if not codes:
        raise MissingParameterError("Missing required parameter: language_codes")

    return RecognitionConfig(
        project_id=settings.project_id,
        language_codes=codes,
        timeout_seconds=settings.timeout_seconds,
        credential_mode=settings.credential_mode,
    )


__all__ = ["build_batch_config", "build_inline_config", "split_language_codes", "MISSING_BATCH_PARAMETERS"]
