from __future__ import annotations

import logging
import time
from datetime import datetime, timezone

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from common.config import GeminiSettings
from gateway.deps import get_gemini_settings, get_server_settings
from gateway.routes import router as transcribe_router
from gateway.upload import UploadError

logger = logging.getLogger(__name__)

VERSION = "1.0.0"

AVAILABLE_ENDPOINTS = [
    "GET /",
    "GET /health",
    "GET /docs",
    "POST /api/transcribe",
    "GET /api/transcribe/health",
    "GET /api/transcribe/supported-formats",
]

settings = get_server_settings()
app = FastAPI(
    title="Audio Transcription API",
    version=VERSION,
    docs_url="/swagger",
    redoc_url=None,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(transcribe_router)

_started = time.monotonic()


@app.middleware("http")
async def log_requests(request: Request, call_next):
    logger.info("%s %s", request.method, request.url.path)
    return await call_next(request)


@app.exception_handler(UploadError)
async def upload_error_handler(request: Request, exc: UploadError):
    logger.warning("Upload rejected (%s): %s", exc.code, exc.message)
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": exc.message, "code": exc.code},
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # Unknown path or a known path with the wrong method: both are "not found".
    if exc.status_code in (404, 405):
        return JSONResponse(
            status_code=404,
            content={
                "success": False,
                "error": "Endpoint not found",
                "message": "The requested endpoint does not exist",
                "available_endpoints": AVAILABLE_ENDPOINTS,
            },
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": str(exc.detail), "code": "HTTP_ERROR"},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error("Unhandled error on %s", request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": f"Internal server error: {exc}",
            "code": "INTERNAL_ERROR",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    )


@app.get("/")
async def root():
    return {
        "success": True,
        "message": "Audio Transcription API",
        "version": VERSION,
        "endpoints": {
            "transcribe": "POST /api/transcribe",
            "health": "GET /api/transcribe/health",
            "supported_formats": "GET /api/transcribe/supported-formats",
        },
        "documentation": {
            "upload_field": "audio",
            "max_file_size": "200MB",
            "supported_formats": ["wav", "mp3", "mp4", "m4a"],
            "response_format": "JSON with transcript and summary",
        },
    }


@app.get("/health")
async def health(gemini: GeminiSettings = Depends(get_gemini_settings)):
    return {
        "success": True,
        "message": "Server is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(time.monotonic() - _started, 3),
        "environment": settings.environment,
        "gemini_api_configured": gemini.configured,
    }


@app.get("/docs")
async def docs():
    return {
        "title": "Audio Transcription API Documentation",
        "version": VERSION,
        "description": "API for transcribing and summarizing audio files using Google Gemini",
        "endpoints": [
            {
                "method": "POST",
                "path": "/api/transcribe",
                "description": "Upload audio file for transcription and summarization",
                "parameters": {
                    "audio": {
                        "type": "file",
                        "required": True,
                        "description": "Audio file (wav, mp3, mp4, m4a)",
                        "max_size": "200MB",
                    }
                },
            },
            {"method": "GET", "path": "/api/transcribe/health", "description": "Check transcription service health"},
            {"method": "GET", "path": "/api/transcribe/supported-formats", "description": "Get list of supported audio formats"},
            {"method": "GET", "path": "/health", "description": "Server health check"},
        ],
        "examples": {
            "curl_upload": 'curl -X POST -F "audio=@your-audio-file.wav" http://localhost:3000/api/transcribe',
        },
    }


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=settings.log_level)
    logger.info(
        "Starting Audio Transcription API on %s:%d (env=%s, gemini configured=%s)",
        settings.host,
        settings.port,
        settings.environment,
        get_gemini_settings().configured,
    )
    uvicorn.run(
        "gateway.main:app",
        host=settings.host,
        port=settings.port,
        workers=settings.workers,
        log_level=settings.log_level.lower(),
    )
