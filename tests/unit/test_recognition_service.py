import asyncio
import threading
import time

import pytest

from conftest import RecordingFactory, file_result, make_recognition_settings, segment
from speech_and_text.recognition.config import build_batch_config, build_inline_config
from speech_and_text.recognition.errors import (
    CredentialError,
    MissingParameterError,
    NoTranscriptError,
    ProviderError,
    RecognitionTimeoutError,
)
from speech_and_text.recognition.providers.mock import MockRecognitionProvider
from speech_and_text.recognition.service import RecognitionService, extract_batch_transcripts
from speech_and_text.recognition.types import (
    BatchRecognitionResponse,
    FileResult,
    InlineBytes,
    InlineRecognitionResponse,
    RecognitionConfig,
    SegmentResult,
    StorageReference,
    TranscriptPayload,
)


def _batch_config(**overrides):
    return build_batch_config(
        make_recognition_settings(**overrides),
        bucket_name="b1",
        audio_file_path="a.wav",
        language_codes="en-US,ja-JP",
    )


def _service(provider) -> RecognitionService:
    return RecognitionService(provider_factory=RecordingFactory(provider), provider_name=provider.name)


class FailingProvider(MockRecognitionProvider):
    async def batch_recognize(self, request, *, timeout):
        raise ProviderError("failed to wait for BatchRecognize: boom")

    async def recognize(self, request, *, timeout):
        raise ProviderError("failed to recognize: boom")


class HangingProvider(MockRecognitionProvider):
    async def batch_recognize(self, request, *, timeout):
        await asyncio.sleep(10)

    async def recognize(self, request, *, timeout):
        await asyncio.sleep(10)


def test_extract_batch_transcripts_preserves_provider_order():
    response = BatchRecognitionResponse(
        files=[
            file_result("gs://b/1.wav", segment("first", "first-alt"), segment("second")),
            file_result("gs://b/2.wav", segment("third")),
        ]
    )

    assert extract_batch_transcripts(response) == ["first", "second", "third"]


def test_extract_batch_transcripts_skips_unusable_files(caplog):
    response = BatchRecognitionResponse(
        files=[
            FileResult(uri="gs://b/no-inline.wav"),
            FileResult(uri="gs://b/empty.wav", transcript=TranscriptPayload(segments=[])),
            FileResult(uri="gs://b/failed.wav", error="unsupported audio"),
            file_result("gs://b/ok.wav", SegmentResult(alternatives=[]), segment("kept")),
        ]
    )

    with caplog.at_level("WARNING"):
        transcripts = extract_batch_transcripts(response)

    assert transcripts == ["kept"]
    skipped = [record for record in caplog.records if record.getMessage() == "recognition.batch.file_skipped"]
    assert len(skipped) == 3


def test_extract_batch_transcripts_empty_response_is_not_an_error():
    assert extract_batch_transcripts(BatchRecognitionResponse(files=[])) == []


@pytest.mark.asyncio
async def test_recognize_batch_builds_request_and_closes_provider():
    provider = MockRecognitionProvider(
        batch_response=BatchRecognitionResponse(files=[file_result("gs://b1/a.wav", segment("hello"))])
    )

    transcripts = await _service(provider).recognize_batch(_batch_config())

    assert transcripts == ["hello"]
    assert provider.closed is True
    request = provider.requests[0]
    assert request.recognizer == "projects/test-project/locations/global/recognizers/_"
    assert request.audio == StorageReference(bucket="b1", path="a.wav")
    assert request.audio.uri == "gs://b1/a.wav"
    assert request.language_codes == ["en-US", "ja-JP"]
    assert request.model == "short"
    assert request.features.profanity_filter is True
    assert request.features.enable_word_time_offsets is True
    assert request.features.enable_word_confidence is True


@pytest.mark.asyncio
async def test_recognize_batch_propagates_provider_error_and_closes():
    provider = FailingProvider()

    with pytest.raises(ProviderError):
        await _service(provider).recognize_batch(_batch_config())

    assert provider.closed is True


@pytest.mark.asyncio
async def test_recognize_batch_times_out_and_closes():
    provider = HangingProvider()

    with pytest.raises(RecognitionTimeoutError):
        await _service(provider).recognize_batch(_batch_config(timeout_seconds=1))

    assert provider.closed is True


@pytest.mark.asyncio
async def test_recognize_inline_returns_first_alternative():
    provider = MockRecognitionProvider(
        inline_response=InlineRecognitionResponse(segments=[segment("こんにちは", "こんばんは"), segment("later")])
    )
    config = build_inline_config(make_recognition_settings())

    transcripts = await _service(provider).recognize_inline(config, InlineBytes(data=b"\x00" * 2048))

    assert transcripts == ["こんにちは"]
    assert provider.closed is True
    assert provider.requests[0].audio == InlineBytes(data=b"\x00" * 2048)
    assert provider.requests[0].language_codes == ["ja-JP"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        InlineRecognitionResponse(segments=[]),
        InlineRecognitionResponse(segments=[SegmentResult(alternatives=[])]),
    ],
)
async def test_recognize_inline_without_alternatives_raises(response):
    provider = MockRecognitionProvider(inline_response=response)
    config = build_inline_config(make_recognition_settings())

    with pytest.raises(NoTranscriptError):
        await _service(provider).recognize_inline(config, InlineBytes(data=b"abc"))

    assert provider.closed is True


@pytest.mark.asyncio
async def test_recognize_inline_times_out_and_closes():
    provider = HangingProvider()
    config = build_inline_config(make_recognition_settings(timeout_seconds=1))

    with pytest.raises(RecognitionTimeoutError):
        await _service(provider).recognize_inline(config, InlineBytes(data=b"abc"))

    assert provider.closed is True


def test_from_settings_rejects_unknown_provider():
    with pytest.raises(RuntimeError):
        RecognitionService.from_settings(make_recognition_settings(provider="unknown"))


@pytest.mark.asyncio
async def test_from_settings_mock_provider_runs_without_credentials():
    service = RecognitionService.from_settings(make_recognition_settings(provider="mock"))

    transcripts = await service.recognize_batch(_batch_config())

    assert service.provider_name == "mock"
    assert transcripts == ["mock transcription"]


@pytest.mark.asyncio
async def test_from_settings_google_without_credentials_raises_credential_error():
    service = RecognitionService.from_settings(make_recognition_settings(provider="google", credentials=None))

    with pytest.raises(CredentialError):
        await service.recognize_batch(_batch_config())


class CloseFailsProvider(FailingProvider):
    async def close(self) -> None:
        self.closed = True
        raise RuntimeError("channel already closed")


@pytest.mark.asyncio
async def test_recognize_inline_propagates_provider_error_and_closes():
    provider = FailingProvider()
    config = build_inline_config(make_recognition_settings())

    with pytest.raises(ProviderError):
        await _service(provider).recognize_inline(config, InlineBytes(data=b"abc"))

    assert provider.closed is True


@pytest.mark.asyncio
async def test_close_failure_does_not_mask_provider_error(caplog):
    provider = CloseFailsProvider()

    with caplog.at_level("ERROR"):
        with pytest.raises(ProviderError, match="boom"):
            await _service(provider).recognize_batch(_batch_config())
        with pytest.raises(ProviderError, match="boom"):
            await _service(provider).recognize_inline(
                build_inline_config(make_recognition_settings()), InlineBytes(data=b"abc")
            )

    failures = [r for r in caplog.records if r.getMessage() == "recognition.provider.close_failed"]
    assert len(failures) == 2


@pytest.mark.asyncio
async def test_provider_is_acquired_off_the_event_loop():
    loop_thread = threading.get_ident()
    acquired_on: list[int] = []
    provider = MockRecognitionProvider()

    def factory(config):
        acquired_on.append(threading.get_ident())
        return provider

    service = RecognitionService(provider_factory=factory, provider_name="mock")

    await service.recognize_batch(_batch_config())

    assert acquired_on and acquired_on[0] != loop_thread
    assert provider.closed is True


@pytest.mark.asyncio
async def test_slow_acquisition_counts_against_the_deadline():
    def factory(config):
        time.sleep(1.5)
        return MockRecognitionProvider()

    service = RecognitionService(provider_factory=factory, provider_name="mock")

    with pytest.raises(RecognitionTimeoutError):
        await service.recognize_batch(_batch_config(timeout_seconds=1))


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "bucket,path",
    [(None, "a.wav"), ("b1", None), ("", "a.wav")],
)
async def test_recognize_batch_requires_storage_reference(bucket, path):
    factory = RecordingFactory(MockRecognitionProvider())
    service = RecognitionService(provider_factory=factory, provider_name="mock")
    config = RecognitionConfig(project_id="p", language_codes=["en-US"], bucket_name=bucket, audio_file_path=path)

    with pytest.raises(MissingParameterError):
        await service.recognize_batch(config)

    assert factory.calls == []
