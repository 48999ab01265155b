"""Multipart upload intake: validation, temp-file storage and cleanup."""

from __future__ import annotations

import logging
import secrets
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import AsyncIterator

from fastapi import Request
from starlette.datastructures import FormData, UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.types import Message, Receive

from common.config import MAX_FILE_SIZE, ServerSettings
from common.schemas import SupportedFormat

logger = logging.getLogger(__name__)

FIELD_NAME = "audio"
CHUNK_SIZE = 1024 * 1024
MIB = 1024 * 1024
# Room for boundaries and part headers on top of the file cap.
MULTIPART_OVERHEAD = 64 * 1024

ALLOWED_MIME_TYPES = (
    "audio/wav",
    "audio/wave",
    "audio/x-wav",
    "audio/mpeg",
    "audio/mp3",
    "video/mp4",
    "audio/mp4",
    "audio/m4a",
)

SUPPORTED_FORMATS = [
    SupportedFormat(extension=".wav", mime_type="audio/wav", description="Waveform Audio File Format"),
    SupportedFormat(extension=".mp3", mime_type="audio/mpeg", description="MPEG Audio Layer III"),
    SupportedFormat(extension=".mp4", mime_type="video/mp4", description="MPEG-4 Part 14 (audio/video)"),
    SupportedFormat(extension=".m4a", mime_type="audio/mp4", description="MPEG-4 Audio"),
]


class UploadError(Exception):
    """A client-side upload problem, reported as HTTP 400 with ``code``."""

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    @classmethod
    def too_large(cls, max_size: int) -> UploadError:
        return cls("FILE_TOO_LARGE", f"File too large. Maximum size allowed is {format_size(max_size)}.")

    @classmethod
    def unsupported_type(cls, mime_type: str | None) -> UploadError:
        return cls(
            "UNSUPPORTED_FILE_TYPE",
            f"Unsupported file type: {mime_type}. Allowed types: wav, mp3, mp4, m4a",
        )


@dataclass
class UploadedAsset:
    path: Path
    mime_type: str
    size: int
    filename: str


def format_size(size: int) -> str:
    if size >= MIB and size % MIB == 0:
        return f"{size // MIB}MB"
    return f"{size} bytes"


def base_mime_type(mime_type: str | None) -> str:
    """Drop parameters such as ``; codecs=1`` and lowercase the type."""
    return (mime_type or "").split(";", 1)[0].strip().lower()


def is_supported_file_type(mime_type: str | None) -> bool:
    return base_mime_type(mime_type) in ALLOWED_MIME_TYPES


def is_valid_file_size(size: int, max_size: int = MAX_FILE_SIZE) -> bool:
    return size <= max_size


def validate_file(mime_type: str | None, size: int, max_size: int = MAX_FILE_SIZE) -> None:
    """Raise ``UploadError`` naming the first failed constraint."""
    if not is_supported_file_type(mime_type):
        raise UploadError.unsupported_type(mime_type)
    if not is_valid_file_size(size, max_size):
        raise UploadError.too_large(max_size)


def unique_filename(original: str) -> str:
    """``name-<ms>-<random><ext>``, keeping the original extension."""
    source = Path(original or "upload")
    suffix = f"{int(time.time() * 1000)}-{secrets.randbelow(10**9)}"
    return f"{source.stem}-{suffix}{source.suffix}"


def cleanup_file(path: Path | None) -> None:
    if path is None:
        return
    try:
        path.unlink(missing_ok=True)
        logger.info("Cleaned up file: %s", path)
    except OSError:
        logger.exception("Error cleaning up file %s", path)


def pick_upload(form: FormData) -> UploadFile:
    """Return the single ``audio`` file from a parsed multipart form."""
    for key, value in form.multi_items():
        if key != FIELD_NAME and isinstance(value, UploadFile):
            raise UploadError(
                "UNEXPECTED_FIELD",
                f'Unexpected field name. Please use "{FIELD_NAME}" as the field name.',
            )

    files = [v for v in form.getlist(FIELD_NAME) if isinstance(v, UploadFile)]
    if len(files) > 1:
        raise UploadError("TOO_MANY_FILES", "Too many files. Only one file is allowed per request.")
    if not files:
        raise UploadError("NO_FILE", "No file uploaded. Please select an audio file.")
    return files[0]


async def store_upload(upload: UploadFile, upload_dir: Path, max_size: int) -> UploadedAsset:
    """Validate and copy the upload to ``upload_dir``, enforcing the size cap."""
    validate_file(upload.content_type, upload.size or 0, max_size)

    upload_dir.mkdir(parents=True, exist_ok=True)
    path = upload_dir / unique_filename(upload.filename or "")
    written = 0
    try:
        with path.open("wb") as out:
            while chunk := await upload.read(CHUNK_SIZE):
                written += len(chunk)
                if written > max_size:
                    raise UploadError.too_large(max_size)
                out.write(chunk)
    except BaseException:
        cleanup_file(path)
        raise

    return UploadedAsset(
        path=path,
        mime_type=base_mime_type(upload.content_type),
        size=written,
        filename=upload.filename or path.name,
    )


def limit_body(receive: Receive, limit: int, max_size: int) -> Receive:
    """Wrap an ASGI ``receive`` so the request body stops being read past ``limit`` bytes."""
    received = 0

    async def bounded() -> Message:
        nonlocal received
        message = await receive()
        if message["type"] == "http.request":
            received += len(message.get("body", b""))
            if received > limit:
                raise UploadError.too_large(max_size)
        return message

    return bounded


@asynccontextmanager
async def received_upload(request: Request, settings: ServerSettings) -> AsyncIterator[UploadedAsset]:
    """Accept the ``audio`` upload and delete its temp file on exit, whatever happens."""
    max_size = settings.max_upload_bytes
    body_limit = max_size + MULTIPART_OVERHEAD
    declared = request.headers.get("content-length", "")
    if declared.isdigit() and int(declared) > body_limit:
        raise UploadError.too_large(max_size)

    bounded = Request(request.scope, receive=limit_body(request.receive, body_limit, max_size))
    try:
        form = await bounded.form(max_files=10)
    except StarletteHTTPException as exc:
        if str(exc.detail).startswith("Too many files"):
            raise UploadError("TOO_MANY_FILES", "Too many files. Only one file is allowed per request.") from exc
        raise UploadError("UPLOAD_ERROR", f"File upload error: {exc.detail}") from exc

    try:
        upload = pick_upload(form)
        asset = await store_upload(upload, Path(settings.upload_dir), max_size)
    finally:
        await form.close()

    try:
        yield asset
    finally:
        cleanup_file(asset.path)
