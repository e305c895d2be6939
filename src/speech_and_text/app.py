import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import APIRouter, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel
from starlette.datastructures import UploadFile

from .audio import AudioIngestor, IngestLimits
from .recognition import (
    MarshalError,
    MissingParameterError,
    RecognitionError,
    RecognitionService,
    build_batch_config,
    build_inline_config,
)
from .recognition.types import InlineBytes
from .schemas import BatchTranscriptionResponse, HealthResponse, InlineTranscriptionResponse
from .settings import Settings

logger = logging.getLogger(__name__)

AUDIO_FIELD = "audio"

router = APIRouter()


def _json_response(payload: BaseModel) -> Response:
    try:
        body = payload.model_dump_json()
    except (TypeError, ValueError) as exc:
        raise MarshalError("Failed to marshal JSON response") from exc
    return Response(content=body, media_type="application/json")


async def _read_upload(request: Request, ingestor: AudioIngestor) -> InlineBytes:
    try:
        form = await request.form()
    except Exception as exc:
        raise HTTPException(status_code=400, detail="Failed to parse multipart form") from exc

    try:
        upload = form.get(AUDIO_FIELD)
        if not isinstance(upload, UploadFile):
            raise HTTPException(status_code=400, detail=f"Failed to get file from form: {AUDIO_FIELD}")
        try:
            return await ingestor.from_upload(file_reader=upload.read)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
    finally:
        await form.close()


@router.get("/health")
async def health(request: Request) -> Response:
    settings: Settings = request.app.state.settings
    service: RecognitionService = request.app.state.recognition_service
    return _json_response(
        HealthResponse(
            provider=service.provider_name,
            credential_mode=settings.recognition.credential_mode.value,
        )
    )


@router.get("/")
async def transcribe_object(
    request: Request,
    bucket_name: Optional[str] = None,
    audio_file_path: Optional[str] = None,
    language_codes: Optional[str] = None,
) -> Response:
    settings: Settings = request.app.state.settings
    service: RecognitionService = request.app.state.recognition_service

    try:
        config = build_batch_config(
            settings.recognition,
            bucket_name=bucket_name,
            audio_file_path=audio_file_path,
            language_codes=language_codes,
        )
    except MissingParameterError as exc:
        raise HTTPException(status_code=exc.status_code, detail=str(exc)) from exc

    try:
        transcripts = await service.recognize_batch(config)
    except RecognitionError as exc:
        logger.exception("recognition.batch.failed", extra={"bucket": bucket_name, "path": audio_file_path})
        raise HTTPException(status_code=exc.status_code, detail=f"Speech-to-Text processing failed: {exc}") from exc

    return _json_response(BatchTranscriptionResponse(transcripts=transcripts))


@router.post("/api/speech-to-text")
async def speech_to_text(request: Request) -> Response:
    settings: Settings = request.app.state.settings
    service: RecognitionService = request.app.state.recognition_service
    ingestor: AudioIngestor = request.app.state.audio_ingestor

    audio = await _read_upload(request, ingestor)
    config = build_inline_config(settings.recognition)

    try:
        transcripts = await service.recognize_inline(config, audio)
    except RecognitionError as exc:
        logger.exception("recognition.inline.failed", extra={"audio_bytes": len(audio.data)})
        raise HTTPException(status_code=exc.status_code, detail=f"Speech-to-Text processing failed: {exc}") from exc

    return _json_response(InlineTranscriptionResponse(text=transcripts[0]))


async def _recognition_error_handler(request: Request, exc: Exception) -> JSONResponse:
    status_code = getattr(exc, "status_code", 500)
    return JSONResponse({"detail": str(exc)}, status_code=status_code)


def create_app(settings: Settings, *, service: Optional[RecognitionService] = None) -> FastAPI:
    """Build the HTTP application around an explicit settings value."""

    recognition_service = service or RecognitionService.from_settings(settings.recognition)
    ingestor = AudioIngestor(limits=IngestLimits(max_bytes=settings.recognition.upload_max_bytes))

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "speech-and-text started",
            extra={"project_id": settings.recognition.project_id, "provider": recognition_service.provider_name},
        )
        yield
        logger.info("speech-and-text shutdown")

    app = FastAPI(lifespan=lifespan)
    app.state.settings = settings
    app.state.recognition_service = recognition_service
    app.state.audio_ingestor = ingestor
    app.add_exception_handler(RecognitionError, _recognition_error_handler)
    app.include_router(router)
    return app


__all__ = ["create_app", "router"]
