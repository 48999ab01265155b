import json

from common.schemas import (
    CombinedResult,
    TimestampedSegment,
    TranscriptMetadata,
    TranscriptResult,
)
from transcription.prompts import (
    FORMAT_SYSTEM_PROMPT,
    NO_TIMESTAMPS,
    SUMMARY_SYSTEM_PROMPT,
    TRANSCRIBE_PROMPT,
    build_format_prompt,
    build_summary_prompt,
    format_segments,
)


class TestPrompts:
    def test_format_segments(self):
        segments = [
            TimestampedSegment(timestamp="00:00", speaker="Speaker 1", text="Hello"),
            TimestampedSegment(timestamp="00:15", speaker="Speaker 2", text="Hi there"),
        ]
        assert format_segments(segments) == "[00:00] Speaker 1: Hello\n[00:15] Speaker 2: Hi there"

    def test_format_segments_empty(self):
        assert format_segments([]) == NO_TIMESTAMPS

    def test_transcribe_prompt_asks_for_all_sections(self):
        for header in ("TRANSCRIPT:", "STRUCTURED_TIMESTAMPS:", "METADATA:"):
            assert header in TRANSCRIBE_PROMPT
        for label in ("Duration:", "Language:", "Speakers:", "Quality:"):
            assert label in TRANSCRIBE_PROMPT

    def test_summary_prompt_includes_transcript(self):
        prompt = build_summary_prompt("the quarterly numbers look good")
        assert prompt.startswith(SUMMARY_SYSTEM_PROMPT)
        assert "the quarterly numbers look good" in prompt
        for header in ("SUMMARY:", "KEY_POINTS:", "MAIN_TOPICS:"):
            assert header in prompt

    def test_format_prompt_includes_transcript_and_timestamps(self):
        segments = [TimestampedSegment(timestamp="01:05", speaker="Alice", text="sawasdee")]
        prompt = build_format_prompt("[01:05] sawasdee", segments)
        assert prompt.startswith(FORMAT_SYSTEM_PROMPT)
        assert "TRANSCRIPT:\n[01:05] sawasdee" in prompt
        assert "[01:05] Alice: sawasdee" in prompt
        assert "Thai" in prompt

    def test_format_prompt_without_segments(self):
        assert NO_TIMESTAMPS in build_format_prompt("text", [])


class TestSchemas:
    def test_metadata_defaults_unknown(self):
        meta = TranscriptMetadata()
        assert meta.model_dump() == {
            "estimated_duration": "Unknown",
            "language": "Unknown",
            "speakers": "Unknown",
            "audio_quality": "Unknown",
        }

    def test_failed_transcript_defaults(self):
        result = TranscriptResult(success=False, transcript="Transcription failed", error="boom")
        assert result.transcript_with_timestamps == []
        assert result.metadata.language == "Unknown"

    def test_combined_result_dump(self):
        combined = CombinedResult(
            transcript="t",
            transcript_with_timestamps=[TimestampedSegment(timestamp="00:00", speaker="A", text="t")],
            metadata=TranscriptMetadata(language="Thai"),
            summary="s",
            key_points=["k"],
            main_topics=["m"],
            formatted_transcript="f",
            formatting_success=True,
            summary_success=False,
        )
        data = json.loads(combined.model_dump_json())
        assert data["confidence_score"] == "high"
        assert data["metadata"]["language"] == "Thai"
        assert data["transcript_with_timestamps"][0]["speaker"] == "A"
