from __future__ import annotations

import abc

from ..types import BatchRecognitionResponse, InlineRecognitionResponse, RecognitionRequest


class RecognitionProvider(abc.ABC):
    """Interface for speech recognition backends.

    A provider instance is acquired per request and closed once the request
    finishes, whatever the outcome.
    """

    name: str

    @abc.abstractmethod
    async def batch_recognize(self, request: RecognitionRequest, *, timeout: float) -> BatchRecognitionResponse:
        """Submit a batch request for stored audio and wait for it to complete."""
        raise NotImplementedError

    @abc.abstractmethod
    async def recognize(self, request: RecognitionRequest, *, timeout: float) -> InlineRecognitionResponse:
        """Recognize inline audio synchronously."""
        raise NotImplementedError

    async def close(self) -> None:
        return None
