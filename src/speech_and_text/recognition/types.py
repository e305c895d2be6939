from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Union

from .credentials import CredentialMode

DEFAULT_MODEL = "short"


@dataclass(slots=True)
class StorageReference:
    """Audio object stored in a Cloud Storage bucket."""

    bucket: str
    path: str

    @property
    def uri(self) -> str:
        return f"gs://{self.bucket}/{self.path}"


@dataclass(slots=True)
class InlineBytes:
    """Audio supplied directly in the request body."""

    data: bytes


AudioPayload = Union[StorageReference, InlineBytes]


@dataclass(slots=True)
class RecognitionConfig:
    project_id: str
    language_codes: List[str]
    timeout_seconds: int = 300
    credential_mode: CredentialMode = CredentialMode.SERVICE_ACCOUNT_JSON
    bucket_name: Optional[str] = None
    audio_file_path: Optional[str] = None

    @property
    def recognizer(self) -> str:
        return f"projects/{self.project_id}/locations/global/recognizers/_"

    def storage_reference(self) -> StorageReference:
        return StorageReference(bucket=self.bucket_name or "", path=self.audio_file_path or "")


@dataclass(slots=True)
class RecognitionFeatures:
    profanity_filter: bool = True
    enable_word_time_offsets: bool = True
    enable_word_confidence: bool = True


@dataclass(slots=True)
class RecognitionRequest:
    """Provider-neutral request; providers translate it to their wire format."""

    recognizer: str
    language_codes: List[str]
    audio: AudioPayload
    model: str = DEFAULT_MODEL
    features: RecognitionFeatures = field(default_factory=RecognitionFeatures)


@dataclass(slots=True)
class Alternative:
    transcript: str
    confidence: Optional[float] = None


@dataclass(slots=True)
class SegmentResult:
    alternatives: List[Alternative] = field(default_factory=list)


@dataclass(slots=True)
class TranscriptPayload:
    segments: List[SegmentResult] = field(default_factory=list)


@dataclass(slots=True)
class FileResult:
    uri: str
    transcript: Optional[TranscriptPayload] = None
    error: Optional[str] = None


@dataclass(slots=True)
class BatchRecognitionResponse:
    files: List[FileResult] = field(default_factory=list)


@dataclass(slots=True)
class InlineRecognitionResponse:
    segments: List[SegmentResult] = field(default_factory=list)


TranscriptResult = List[str]
