from __future__ import annotations

import asyncio
import base64
import logging
from pathlib import Path
from typing import Any, Protocol

from common.schemas import (
    CombinedResult,
    FormattedTranscript,
    PipelineResult,
    SummaryResult,
    TranscriptResult,
)
from transcription.gemini_client import generation_config, inline_data_part, text_part
from transcription.parser import parse_summary_reply, parse_transcription_reply
from transcription.prompts import (
    TRANSCRIBE_PROMPT,
    build_format_prompt,
    build_summary_prompt,
)

logger = logging.getLogger(__name__)

EXTENSION_MIME_TYPES = {
    ".wav": "audio/wav",
    ".mp3": "audio/mpeg",
    ".mp4": "video/mp4",
    ".m4a": "audio/mp4",
}

TRANSCRIPTION_FAILED = "Transcription failed"
SUMMARY_FAILED = "Summary generation failed"

TRANSCRIBE_CONFIG = generation_config(max_output_tokens=4096, temperature=0.1)
SUMMARY_CONFIG = generation_config(max_output_tokens=2048, temperature=0.2)
FORMAT_CONFIG = generation_config(max_output_tokens=4096, temperature=0.1)


class ContentGenerator(Protocol):
    async def generate_content(
        self, parts: list[dict[str, Any]], config: dict[str, Any]
    ) -> str: ...


class UnsupportedFileTypeError(ValueError):
    pass


def mime_type_for(path: str | Path) -> str:
    extension = Path(path).suffix.lower()
    try:
        return EXTENSION_MIME_TYPES[extension]
    except KeyError:
        raise UnsupportedFileTypeError(f"Unsupported file type: {extension or '(none)'}") from None


async def transcribe_file(path: str | Path, client: ContentGenerator) -> TranscriptResult:
    """Step 1: send the audio file inline and parse the transcription reply.

    Never raises; any failure comes back as ``success=False`` with the
    structured fields defaulted.
    """
    try:
        mime_type = mime_type_for(path)
        raw = await asyncio.to_thread(Path(path).read_bytes)
        encoded = base64.b64encode(raw).decode("ascii")

        reply = await client.generate_content(
            [text_part(TRANSCRIBE_PROMPT), inline_data_part(mime_type, encoded)],
            TRANSCRIBE_CONFIG,
        )
    except Exception as exc:
        logger.exception("Transcription failed for %s", path)
        return TranscriptResult(success=False, transcript=TRANSCRIPTION_FAILED, error=str(exc))

    return parse_transcription_reply(reply)


async def generate_summary(transcript: str, client: ContentGenerator) -> SummaryResult:
    try:
        reply = await client.generate_content(
            [text_part(build_summary_prompt(transcript))],
            SUMMARY_CONFIG,
        )
    except Exception as exc:
        logger.exception("Summary generation failed")
        return SummaryResult(success=False, summary=SUMMARY_FAILED, error=str(exc))

    return parse_summary_reply(reply)


async def format_transcript(result: TranscriptResult, client: ContentGenerator) -> FormattedTranscript:
    """Step 3: reformat for readability, falling back to the original text."""
    try:
        reply = await client.generate_content(
            [text_part(build_format_prompt(result.transcript, result.transcript_with_timestamps))],
            FORMAT_CONFIG,
        )
    except Exception as exc:
        logger.exception("Transcript formatting failed")
        return FormattedTranscript(
            success=False,
            formatted_transcript=result.transcript,
            original_transcript=result.transcript,
            error=str(exc),
        )

    return FormattedTranscript(
        success=True,
        formatted_transcript=reply.strip(),
        original_transcript=result.transcript,
    )


async def transcribe_and_summarize(path: str | Path, client: ContentGenerator) -> PipelineResult:
    """Run transcribe, then summarize and format concurrently, and merge.

    Only a transcription failure fails the whole result; summary and
    formatting failures surface as ``summary_success``/``formatting_success``.
    """
    logger.info("Step 1: transcribing %s", path)
    transcript = await transcribe_file(path, client)
    if not transcript.success:
        return PipelineResult(success=False, error=f"{TRANSCRIPTION_FAILED}: {transcript.error}")

    logger.info("Step 2/3: summarizing and formatting transcript (%d chars)", len(transcript.transcript))
    summary, formatted = await asyncio.gather(
        generate_summary(transcript.transcript, client),
        format_transcript(transcript, client),
    )

    data = CombinedResult(
        transcript=transcript.transcript,
        transcript_with_timestamps=transcript.transcript_with_timestamps,
        metadata=transcript.metadata,
        summary=summary.summary or SUMMARY_FAILED,
        key_points=summary.key_points,
        main_topics=summary.main_topics,
        formatted_transcript=formatted.formatted_transcript,
        formatting_success=formatted.success,
        summary_success=summary.success,
    )
    logger.info(
        "Pipeline complete: summary_success=%s formatting_success=%s",
        summary.success,
        formatted.success,
    )
    return PipelineResult(
        success=True,
        data=data,
        raw_responses={"transcript": transcript.raw_response, "summary": summary.raw_response},
    )
