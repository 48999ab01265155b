from common.schemas import TimestampedSegment
from transcription.parser import (
    parse_bullets,
    parse_metadata,
    parse_segments,
    parse_summary_reply,
    parse_transcription_reply,
)


class TestTranscriptionReply:
    def test_full_reply(self, transcription_reply):
        result = parse_transcription_reply(transcription_reply)
        assert result.success
        assert result.transcript == "[00:00] Good morning everyone [00:12] let's review the launch plan"
        assert [s.speaker for s in result.transcript_with_timestamps] == ["Alice", "Bob"]
        assert result.metadata.estimated_duration == "1 minute"
        assert result.metadata.language == "English"
        assert result.metadata.speakers == "2"
        assert result.metadata.audio_quality == "clear"
        assert result.raw_response == transcription_reply.strip()

    def test_no_headers_returns_whole_text_and_defaults(self):
        reply = "  just some words the model said  \n"
        result = parse_transcription_reply(reply)
        assert result.transcript == "just some words the model said"
        assert result.transcript_with_timestamps == []
        assert result.metadata.language == "Unknown"
        assert result.metadata.estimated_duration == "Unknown"

    def test_missing_transcript_header_uses_full_text(self):
        reply = "STRUCTURED_TIMESTAMPS:\n[00:01] A: hi\nMETADATA:\nLanguage: French"
        result = parse_transcription_reply(reply)
        assert result.transcript == reply
        assert len(result.transcript_with_timestamps) == 1
        assert result.metadata.language == "French"

    def test_missing_structured_and_metadata(self):
        result = parse_transcription_reply("TRANSCRIPT:\n[00:00] hello")
        assert result.transcript == "[00:00] hello"
        assert result.transcript_with_timestamps == []
        assert result.metadata.speakers == "Unknown"

    def test_transcript_stops_at_metadata_when_structured_missing(self):
        result = parse_transcription_reply("TRANSCRIPT: words here\nMETADATA:\nQuality: poor")
        assert result.transcript == "words here"
        assert result.metadata.audio_quality == "poor"

    def test_empty_reply(self):
        result = parse_transcription_reply("")
        assert result.transcript == ""
        assert result.transcript_with_timestamps == []


class TestSegments:
    def test_single_line(self):
        assert parse_segments("[01:20] Alice: hello there") == [
            TimestampedSegment(timestamp="01:20", speaker="Alice", text="hello there")
        ]

    def test_malformed_lines_are_dropped(self):
        block = "\n".join([
            "[00:05] Speaker 1: first",
            "no timestamp here",
            "[5:00] Bad: single digit minutes",
            "[00:10] missing colon after speaker",
            "",
            "[00:15] Speaker 2: second: with colon",
        ])
        segments = parse_segments(block)
        assert [(s.timestamp, s.speaker, s.text) for s in segments] == [
            ("00:05", "Speaker 1", "first"),
            ("00:15", "Speaker 2", "second: with colon"),
        ]

    def test_order_and_duplicates_preserved(self):
        block = "[00:00] A: one\n[00:00] A: two\n[00:03] A: three"
        assert [s.text for s in parse_segments(block)] == ["one", "two", "three"]


class TestMetadata:
    def test_only_language(self):
        meta = parse_metadata("Language: Thai")
        assert meta.language == "Thai"
        assert meta.estimated_duration == "Unknown"
        assert meta.speakers == "Unknown"
        assert meta.audio_quality == "Unknown"

    def test_values_run_to_end_of_line(self):
        meta = parse_metadata("Duration: about 3 minutes\nSpeakers: 2 (male, female)\n")
        assert meta.estimated_duration == "about 3 minutes"
        assert meta.speakers == "2 (male, female)"


class TestSummaryReply:
    def test_full_reply(self, summary_reply):
        result = parse_summary_reply(summary_reply)
        assert result.summary == "Alice and Bob open a meeting to review the launch plan."
        assert result.key_points == ["Meeting opened by Alice", "Launch plan is on the agenda"]
        assert result.main_topics == ["Launch plan"]

    def test_missing_summary_header_uses_full_text(self):
        result = parse_summary_reply("A short paragraph without labels.")
        assert result.summary == "A short paragraph without labels."
        assert result.key_points == []
        assert result.main_topics == []

    def test_key_points_without_topics(self):
        result = parse_summary_reply("SUMMARY: s\nKEY_POINTS:\n• a\n• b")
        assert result.summary == "s"
        assert result.key_points == ["a", "b"]
        assert result.main_topics == []

    def test_empty_bullets_discarded(self):
        assert parse_bullets("• one\n•   \n••two ") == ["one", "two"]
