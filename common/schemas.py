from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

UNKNOWN = "Unknown"


# --- Transcription pipeline results ---

class TimestampedSegment(BaseModel):
    timestamp: str  # MM:SS
    speaker: str
    text: str

    model_config = {"frozen": True}


class TranscriptMetadata(BaseModel):
    estimated_duration: str = UNKNOWN
    language: str = UNKNOWN
    speakers: str = UNKNOWN
    audio_quality: str = UNKNOWN


class TranscriptResult(BaseModel):
    success: bool
    transcript: str
    transcript_with_timestamps: list[TimestampedSegment] = []
    metadata: TranscriptMetadata = TranscriptMetadata()
    raw_response: Optional[str] = None
    error: Optional[str] = None

    model_config = {"frozen": True}


class SummaryResult(BaseModel):
    success: bool
    summary: str
    key_points: list[str] = []
    main_topics: list[str] = []
    raw_response: Optional[str] = None
    error: Optional[str] = None


class FormattedTranscript(BaseModel):
    success: bool
    formatted_transcript: str
    original_transcript: str
    error: Optional[str] = None


class CombinedResult(BaseModel):
    transcript: str
    transcript_with_timestamps: list[TimestampedSegment]
    metadata: TranscriptMetadata
    summary: str
    key_points: list[str]
    main_topics: list[str]
    confidence_score: str = "high"
    formatted_transcript: str
    formatting_success: bool
    summary_success: bool


class PipelineResult(BaseModel):
    success: bool
    data: Optional[CombinedResult] = None
    error: Optional[str] = None
    raw_responses: dict[str, Optional[str]] = {}


# --- HTTP envelopes ---

class ProcessingInfo(BaseModel):
    file_name: Optional[str] = None
    file_size: Optional[int] = None
    file_type: Optional[str] = None
    processing_time_ms: int
    timestamp: str


class TranscribeData(CombinedResult):
    processing_info: ProcessingInfo


class TranscribeResponse(BaseModel):
    success: bool = True
    data: TranscribeData
    message: str = "Audio file successfully transcribed and summarized"


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    code: str
    processing_info: Optional[ProcessingInfo] = None


class SupportedFormat(BaseModel):
    extension: str
    mime_type: str
    description: str
