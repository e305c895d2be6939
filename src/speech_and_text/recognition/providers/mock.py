from __future__ import annotations

from typing import Optional

from ..types import (
    Alternative,
    BatchRecognitionResponse,
    FileResult,
    InlineRecognitionResponse,
    RecognitionRequest,
    SegmentResult,
    StorageReference,
    TranscriptPayload,
)
from .base import RecognitionProvider


class MockRecognitionProvider(RecognitionProvider):
    """Deterministic provider for local runs and tests."""

    name = "mock"

    def __init__(
        self,
        *,
        text: str = "mock transcription",
        batch_response: Optional[BatchRecognitionResponse] = None,
        inline_response: Optional[InlineRecognitionResponse] = None,
    ) -> None:
        self._text = text
        self._batch_response = batch_response
        self._inline_response = inline_response
        self.requests: list[RecognitionRequest] = []
        self.closed = False

    async def batch_recognize(self, request: RecognitionRequest, *, timeout: float) -> BatchRecognitionResponse:
        self.requests.append(request)
        if self._batch_response is not None:
            return self._batch_response
        uri = request.audio.uri if isinstance(request.audio, StorageReference) else ""
        segment = SegmentResult(alternatives=[Alternative(transcript=self._text)])
        return BatchRecognitionResponse(
            files=[FileResult(uri=uri, transcript=TranscriptPayload(segments=[segment]))]
        )

    async def recognize(self, request: RecognitionRequest, *, timeout: float) -> InlineRecognitionResponse:
        self.requests.append(request)
        if self._inline_response is not None:
            return self._inline_response
        return InlineRecognitionResponse(segments=[SegmentResult(alternatives=[Alternative(transcript=self._text)])])

    async def close(self) -> None:
        self.closed = True
