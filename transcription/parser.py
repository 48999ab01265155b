"""Best-effort extraction of labelled sections from free-text model replies.

The model is asked to answer in a fixed layout (``TRANSCRIPT:``,
``STRUCTURED_TIMESTAMPS:``, ``METADATA:`` for transcription and ``SUMMARY:``,
``KEY_POINTS:``, ``MAIN_TOPICS:`` for summaries) but nothing guarantees it
does. Every function here is pure and never raises on malformed input:
missing sections fall back to the defaults listed below.

Defaults:
    transcript      the whole reply when ``TRANSCRIPT:`` is absent
    segments        empty list
    metadata        every field ``"Unknown"``
    summary         the whole reply when ``SUMMARY:`` is absent
    key points      empty list
    main topics     empty list
"""

from __future__ import annotations

import re
from typing import Optional

from common.schemas import (
    SummaryResult,
    TimestampedSegment,
    TranscriptMetadata,
    TranscriptResult,
)

BULLET = "•"

_TRANSCRIPT_RE = re.compile(r"TRANSCRIPT:\s*(.*?)(?=STRUCTURED_TIMESTAMPS:|METADATA:|\Z)", re.S)
_STRUCTURED_RE = re.compile(r"STRUCTURED_TIMESTAMPS:\s*(.*?)(?=METADATA:|\Z)", re.S)
_METADATA_RE = re.compile(r"METADATA:\s*(.*)\Z", re.S)

_SUMMARY_RE = re.compile(r"SUMMARY:\s*(.*?)(?=KEY_POINTS:|MAIN_TOPICS:|\Z)", re.S)
_KEY_POINTS_RE = re.compile(r"KEY_POINTS:\s*(.*?)(?=MAIN_TOPICS:|\Z)", re.S)
_MAIN_TOPICS_RE = re.compile(r"MAIN_TOPICS:\s*(.*)\Z", re.S)

_SEGMENT_RE = re.compile(r"\[(\d{2}:\d{2})\]\s*([^:]+):\s*(.*)")

# metadata label -> TranscriptMetadata field
_METADATA_FIELDS = {
    "Duration": "estimated_duration",
    "Language": "language",
    "Speakers": "speakers",
    "Quality": "audio_quality",
}


def _section(pattern: re.Pattern[str], text: str) -> Optional[str]:
    match = pattern.search(text)
    return match.group(1) if match else None


def parse_segments(block: str) -> list[TimestampedSegment]:
    """Parse ``[MM:SS] speaker: text`` lines; anything else is skipped."""
    segments: list[TimestampedSegment] = []
    for line in block.splitlines():
        if not line.strip():
            continue
        match = _SEGMENT_RE.search(line)
        if match:
            segments.append(
                TimestampedSegment(
                    timestamp=match.group(1),
                    speaker=match.group(2).strip(),
                    text=match.group(3).strip(),
                )
            )
    return segments


def parse_metadata(block: str) -> TranscriptMetadata:
    values: dict[str, str] = {}
    for label, field in _METADATA_FIELDS.items():
        match = re.search(rf"{label}:\s*([^\n]+)", block)
        if match:
            values[field] = match.group(1).strip()
    return TranscriptMetadata(**values)


def parse_bullets(block: str) -> list[str]:
    return [item.strip() for item in block.split(BULLET) if item.strip()]


def parse_transcription_reply(text: str) -> TranscriptResult:
    result = text.strip()

    transcript = _section(_TRANSCRIPT_RE, result)
    structured = _section(_STRUCTURED_RE, result)
    metadata = _section(_METADATA_RE, result)

    return TranscriptResult(
        success=True,
        transcript=transcript.strip() if transcript is not None else result,
        transcript_with_timestamps=parse_segments(structured) if structured is not None else [],
        metadata=parse_metadata(metadata) if metadata is not None else TranscriptMetadata(),
        raw_response=result,
    )


def parse_summary_reply(text: str) -> SummaryResult:
    result = text.strip()

    summary = _section(_SUMMARY_RE, result)
    key_points = _section(_KEY_POINTS_RE, result)
    main_topics = _section(_MAIN_TOPICS_RE, result)

    return SummaryResult(
        success=True,
        summary=summary.strip() if summary is not None else result,
        key_points=parse_bullets(key_points) if key_points is not None else [],
        main_topics=parse_bullets(main_topics) if main_topics is not None else [],
        raw_response=result,
    )
