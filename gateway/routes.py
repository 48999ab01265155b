from __future__ import annotations

import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from common.config import GeminiSettings, ServerSettings
from common.schemas import (
    ErrorResponse,
    ProcessingInfo,
    TranscribeData,
    TranscribeResponse,
)
from gateway.deps import get_gemini_client, get_gemini_settings, get_server_settings
from gateway.upload import FIELD_NAME, SUPPORTED_FORMATS, received_upload
from transcription.pipeline import ContentGenerator, transcribe_and_summarize

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/transcribe", tags=["transcribe"])


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.post(
    "",
    response_model=TranscribeResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def transcribe(
    request: Request,
    settings: ServerSettings = Depends(get_server_settings),
    client: ContentGenerator = Depends(get_gemini_client),
):
    """Upload an audio/video file under ``audio`` and get transcript + summary."""
    started = time.perf_counter()

    async with received_upload(request, settings) as asset:
        logger.info("Processing file: %s (%d bytes)", asset.filename, asset.size)
        result = await transcribe_and_summarize(asset.path, client)

        info = ProcessingInfo(
            file_name=asset.filename,
            file_size=asset.size,
            file_type=asset.mime_type,
            processing_time_ms=int((time.perf_counter() - started) * 1000),
            timestamp=utc_now(),
        )

        if not result.success:
            logger.error("Failed to process %s: %s", asset.filename, result.error)
            body = ErrorResponse(
                error=f"Failed to process audio file: {result.error}",
                code="PROCESSING_ERROR",
                processing_info=info,
            )
            return JSONResponse(status_code=500, content=body.model_dump())

        logger.info("Successfully processed %s in %dms", asset.filename, info.processing_time_ms)
        return TranscribeResponse(
            data=TranscribeData(**result.data.model_dump(), processing_info=info),
        )


@router.get("/health")
async def health(gemini: GeminiSettings = Depends(get_gemini_settings)):
    return {
        "success": True,
        "message": "Transcription service is healthy",
        "timestamp": utc_now(),
        "gemini_configured": gemini.configured,
    }


@router.get("/supported-formats")
async def supported_formats():
    return {
        "success": True,
        "data": {
            "supported_formats": [f.model_dump() for f in SUPPORTED_FORMATS],
            "max_file_size": "200MB",
            "field_name": FIELD_NAME,
        },
        "message": "Supported audio formats for transcription",
    }
