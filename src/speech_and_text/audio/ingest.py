from __future__ import annotations

from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from ..recognition.types import InlineBytes


@dataclass(slots=True)
class IngestLimits:
    max_bytes: int


class AudioIngestor:
    """Turns uploaded audio into an inline recognition payload."""

    def __init__(self, *, limits: IngestLimits) -> None:
        self._limits = limits

    async def from_bytes(self, *, data: bytes) -> InlineBytes:
        self._enforce_size(len(data))
        if not data:
            raise ValueError("audio payload is empty")
        return InlineBytes(data=data)

    async def from_upload(self, *, file_reader: Callable[[Optional[int]], Awaitable[bytes]]) -> InlineBytes:
        # Read one byte past the ceiling so oversized uploads are detected without buffering them whole.
        data = await file_reader(self._limits.max_bytes + 1)
        return await self.from_bytes(data=data)

    def _enforce_size(self, size: int) -> None:
        if size > self._limits.max_bytes:
            raise ValueError("audio payload exceeds configured size limit")
