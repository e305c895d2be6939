from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class BatchTranscriptionResponse(BaseModel):
    transcripts: List[str] = Field(default_factory=list)


class InlineTranscriptionResponse(BaseModel):
    text: str


class HealthResponse(BaseModel):
    status: str = "ok"
    service: str = "speech-and-text"
    provider: Optional[str] = None
    credential_mode: Optional[str] = None
