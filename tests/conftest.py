import pytest

from speech_and_text.recognition.credentials import CredentialMode
from speech_and_text.recognition.providers.mock import MockRecognitionProvider
from speech_and_text.recognition.service import RecognitionService
from speech_and_text.recognition.types import (
    Alternative,
    BatchRecognitionResponse,
    FileResult,
    InlineRecognitionResponse,
    SegmentResult,
    TranscriptPayload,
)
from speech_and_text.settings import RecognitionSettings, ServerSettings, Settings


def make_recognition_settings(**overrides) -> RecognitionSettings:
    values = dict(
        project_id="test-project",
        provider="mock",
        credential_mode=CredentialMode.SERVICE_ACCOUNT_JSON,
        credentials=None,
        timeout_seconds=300,
        inline_language_codes=("ja-JP",),
        upload_max_bytes=10 * 1024 * 1024,
    )
    values.update(overrides)
    return RecognitionSettings(**values)


def make_settings(**recognition_overrides) -> Settings:
    return Settings(
        environment=None,
        server=ServerSettings(host="127.0.0.1", port=8080, log_level="INFO"),
        recognition=make_recognition_settings(**recognition_overrides),
    )


def segment(*texts: str) -> SegmentResult:
    return SegmentResult(alternatives=[Alternative(transcript=text) for text in texts])


def file_result(uri: str, *segments: SegmentResult) -> FileResult:
    return FileResult(uri=uri, transcript=TranscriptPayload(segments=list(segments)))


class RecordingFactory:
    """Hands out one provider and counts acquisitions."""

    def __init__(self, provider):
        self.provider = provider
        self.calls = []

    def __call__(self, config):
        self.calls.append(config)
        return self.provider


@pytest.fixture
def recognition_settings():
    return make_recognition_settings()


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def hello_provider():
    return MockRecognitionProvider(
        batch_response=BatchRecognitionResponse(files=[file_result("gs://b1/a.wav", segment("hello"))]),
        inline_response=InlineRecognitionResponse(segments=[segment("こんにちは")]),
    )


@pytest.fixture
def provider_factory(hello_provider):
    return RecordingFactory(hello_provider)


@pytest.fixture
def recognition_service(provider_factory):
    return RecognitionService(provider_factory=provider_factory, provider_name="mock")
