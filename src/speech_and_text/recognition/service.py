from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Callable, Optional

from .credentials import credential_source_for
from .config import MISSING_BATCH_PARAMETERS
from .errors import MissingParameterError, NoTranscriptError, RecognitionTimeoutError
from .providers.base import RecognitionProvider
from .providers.factory import build_provider, resolve_provider_name
from .types import (
    AudioPayload,
    BatchRecognitionResponse,
    InlineBytes,
    RecognitionConfig,
    RecognitionRequest,
    TranscriptResult,
)

if TYPE_CHECKING:  # pragma: no cover
    from ..settings import RecognitionSettings

logger = logging.getLogger(__name__)

ProviderFactory = Callable[[RecognitionConfig], RecognitionProvider]


def build_request(config: RecognitionConfig, audio: AudioPayload) -> RecognitionRequest:
    return RecognitionRequest(
        recognizer=config.recognizer,
        language_codes=list(config.language_codes),
        audio=audio,
    )


def extract_batch_transcripts(response: BatchRecognitionResponse) -> TranscriptResult:
    """Collect alternative 0 of every recognized segment, in provider order.

    Files without an inline transcript, without segments, or carrying a
    per-file error are skipped rather than failing the batch.
    """

    transcripts: TranscriptResult = []
    for file_result in response.files:
        if file_result.error:
            logger.warning("recognition.batch.file_skipped", extra={"uri": file_result.uri, "reason": file_result.error})
            continue
        if file_result.transcript is None:
            logger.warning("recognition.batch.file_skipped", extra={"uri": file_result.uri, "reason": "no inline result found"})
            continue
        if not file_result.transcript.segments:
            logger.warning("recognition.batch.file_skipped", extra={"uri": file_result.uri, "reason": "no transcript found"})
            continue
        for segment in file_result.transcript.segments:
            if not segment.alternatives:
                continue
            transcripts.append(segment.alternatives[0].transcript)
    return transcripts


class RecognitionService:
    """Runs batch and inline recognition against a per-request provider."""

    def __init__(self, *, provider_factory: ProviderFactory, provider_name: Optional[str] = None) -> None:
        self._provider_factory = provider_factory
        self._provider_name = provider_name

    @classmethod
    def from_settings(cls, cfg: "RecognitionSettings") -> "RecognitionService":
        try:
            provider_name = resolve_provider_name(cfg.provider or "google")
        except ValueError as exc:
            raise RuntimeError(f"unsupported recognition provider: {cfg.provider}") from exc

        def factory(config: RecognitionConfig) -> RecognitionProvider:
            if provider_name == "mock":
                return build_provider(provider_name)
            credentials = credential_source_for(config.credential_mode, cfg.credentials)
            return build_provider(provider_name, credentials=credentials)

        return cls(provider_factory=factory, provider_name=provider_name)

    @property
    def provider_name(self) -> Optional[str]:
        return self._provider_name

    async def _acquire(self, config: RecognitionConfig) -> RecognitionProvider:
        # Credential loading and channel setup block; keep them off the event loop.
        return await asyncio.to_thread(self._provider_factory, config)

    async def _release(self, provider: Optional[RecognitionProvider]) -> None:
        if provider is None:
            return
        try:
            await provider.close()
        except Exception:
            logger.exception("recognition.provider.close_failed", extra={"provider": provider.name})

    async def recognize_batch(self, config: RecognitionConfig) -> TranscriptResult:
        if not config.bucket_name or not config.audio_file_path or not config.language_codes:
            raise MissingParameterError(MISSING_BATCH_PARAMETERS)

        reference = config.storage_reference()
        request = build_request(config, reference)
        provider: Optional[RecognitionProvider] = None
        try:
            async with asyncio.timeout(config.timeout_seconds):
                provider = await self._acquire(config)
                logger.info(
                    "recognition.batch.start",
                    extra={"uri": reference.uri, "languages": config.language_codes, "provider": provider.name},
                )
                response = await provider.batch_recognize(request, timeout=config.timeout_seconds)
        except TimeoutError as exc:
            raise RecognitionTimeoutError(
                f"batch recognition did not finish within {config.timeout_seconds}s"
            ) from exc
        finally:
            await self._release(provider)

        transcripts = extract_batch_transcripts(response)
        logger.info("recognition.batch.done", extra={"uri": reference.uri, "transcripts": len(transcripts)})
        return transcripts

    async def recognize_inline(self, config: RecognitionConfig, audio: InlineBytes) -> TranscriptResult:
        request = build_request(config, audio)
        provider: Optional[RecognitionProvider] = None
        try:
            async with asyncio.timeout(config.timeout_seconds):
                provider = await self._acquire(config)
                response = await provider.recognize(request, timeout=config.timeout_seconds)
        except TimeoutError as exc:
            raise RecognitionTimeoutError(
                f"inline recognition did not finish within {config.timeout_seconds}s"
            ) from exc
        finally:
            await self._release(provider)

        if not response.segments or not response.segments[0].alternatives:
            raise NoTranscriptError("no transcription results")
        return [response.segments[0].alternatives[0].transcript]


__all__ = ["RecognitionService", "build_request", "extract_batch_transcripts"]
