from __future__ import annotations

"""Google Cloud Speech-to-Text v2 provider."""

import asyncio
import logging
from typing import Optional

from google.api_core import exceptions as google_exceptions
from google.auth import exceptions as auth_exceptions
from google.cloud.speech_v2 import SpeechClient
from google.cloud.speech_v2.types import cloud_speech

from ..credentials import CredentialSource
from ..errors import CredentialError, ProviderError, RecognitionTimeoutError
from ..types import (
    Alternative,
    BatchRecognitionResponse,
    FileResult,
    InlineBytes,
    InlineRecognitionResponse,
    RecognitionRequest,
    SegmentResult,
    StorageReference,
    TranscriptPayload,
)
from .base import RecognitionProvider

logger = logging.getLogger(__name__)


class GoogleSpeechProvider(RecognitionProvider):
    """Recognition backed by ``google.cloud.speech_v2.SpeechClient``."""

    name = "google"

    def __init__(self, *, credentials: Optional[CredentialSource] = None, client: Optional[SpeechClient] = None) -> None:
        if client is None:
            if credentials is None:
                raise CredentialError("no credentials configured for the Google provider")
            try:
                client = SpeechClient(credentials=credentials.load())
            except auth_exceptions.GoogleAuthError as exc:
                raise CredentialError(f"failed to create client: {exc}") from exc
        self._client = client

    async def batch_recognize(self, request: RecognitionRequest, *, timeout: float) -> BatchRecognitionResponse:
        wire_request = to_batch_request(request)
        try:
            operation = await asyncio.to_thread(self._client.batch_recognize, request=wire_request, timeout=timeout)
        except google_exceptions.DeadlineExceeded as exc:
            raise RecognitionTimeoutError(f"BatchRecognize deadline exceeded: {exc}") from exc
        except google_exceptions.GoogleAPIError as exc:
            raise ProviderError(f"failed to create BatchRecognize: {exc}") from exc

        logger.info("recognition.batch.submitted", extra={"operation": getattr(operation.operation, "name", None)})

        try:
            # The operation keeps running server-side if the wait times out.
            response = await asyncio.to_thread(operation.result, timeout=timeout)
        except TimeoutError as exc:
            raise RecognitionTimeoutError(f"BatchRecognize did not finish within {timeout}s") from exc
        except google_exceptions.GoogleAPIError as exc:
            raise ProviderError(f"failed to wait for BatchRecognize: {exc}") from exc

        return from_batch_response(response)

    async def recognize(self, request: RecognitionRequest, *, timeout: float) -> InlineRecognitionResponse:
        wire_request = to_recognize_request(request)
        try:
            response = await asyncio.to_thread(self._client.recognize, request=wire_request, timeout=timeout)
        except google_exceptions.DeadlineExceeded as exc:
            raise RecognitionTimeoutError(f"Recognize deadline exceeded: {exc}") from exc
        except google_exceptions.GoogleAPIError as exc:
            raise ProviderError(f"failed to recognize: {exc}") from exc
        return from_recognize_response(response)

    async def close(self) -> None:
        await asyncio.to_thread(self._client.transport.close)


def to_recognition_config(request: RecognitionRequest) -> cloud_speech.RecognitionConfig:
    features = request.features
    return cloud_speech.RecognitionConfig(
        auto_decoding_config=cloud_speech.AutoDetectDecodingConfig(),
        model=request.model,
        language_codes=list(request.language_codes),
        features=cloud_speech.RecognitionFeatures(
            profanity_filter=features.profanity_filter,
            enable_word_time_offsets=features.enable_word_time_offsets,
            enable_word_confidence=features.enable_word_confidence,
        ),
    )


def to_batch_request(request: RecognitionRequest) -> cloud_speech.BatchRecognizeRequest:
    if not isinstance(request.audio, StorageReference):
        raise TypeError("batch recognition requires a StorageReference payload")
    return cloud_speech.BatchRecognizeRequest(
        recognizer=request.recognizer,
        config=to_recognition_config(request),
        files=[cloud_speech.BatchRecognizeFileMetadata(uri=request.audio.uri)],
        recognition_output_config=cloud_speech.RecognitionOutputConfig(
            inline_response_config=cloud_speech.InlineOutputConfig(),
        ),
    )


def to_recognize_request(request: RecognitionRequest) -> cloud_speech.RecognizeRequest:
    if not isinstance(request.audio, InlineBytes):
        raise TypeError("inline recognition requires an InlineBytes payload")
    return cloud_speech.RecognizeRequest(
        recognizer=request.recognizer,
        config=to_recognition_config(request),
        content=request.audio.data,
    )


def _segment(result: cloud_speech.SpeechRecognitionResult) -> SegmentResult:
    return SegmentResult(
        alternatives=[
            Alternative(transcript=alternative.transcript, confidence=alternative.confidence)
            for alternative in result.alternatives
        ]
    )


def from_batch_response(response: cloud_speech.BatchRecognizeResponse) -> BatchRecognitionResponse:
    files: list[FileResult] = []
    for uri, file_result in response.results.items():
        error: Optional[str] = None
        if "error" in file_result and file_result.error.code:
            error = file_result.error.message or f"status code {file_result.error.code}"

        transcript: Optional[TranscriptPayload] = None
        if "inline_result" in file_result and "transcript" in file_result.inline_result:
            transcript = TranscriptPayload(
                segments=[_segment(result) for result in file_result.inline_result.transcript.results]
            )
        files.append(FileResult(uri=uri, transcript=transcript, error=error))
    return BatchRecognitionResponse(files=files)


def from_recognize_response(response: cloud_speech.RecognizeResponse) -> InlineRecognitionResponse:
    return InlineRecognitionResponse(segments=[_segment(result) for result in response.results])


__all__ = [
    "GoogleSpeechProvider",
    "from_batch_response",
    "from_recognize_response",
    "to_batch_request",
    "to_recognize_request",
    "to_recognition_config",
]
